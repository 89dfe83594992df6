"""
core/markers.py — Level data model for Spot the Difference.

A Level is one puzzle: two images, a time limit, scoring rules, and the
markers (differences) the player has to find. Levels are built from a
descriptor by levels/schema.py and are otherwise plain data — the
session reads them, and only the editor replaces their markers, and only
while the session is idle.

ImageSurface describes one of the two displayed images in pixels. Both
surfaces share the same percent-based marker coordinates.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any

from core.geometry import Shape
from settings import (
    DEFAULT_TIME_LIMIT_S,
    DEFAULT_POINTS_PER_HIT, DEFAULT_PENALTY_PER_MISS, DEFAULT_BONUS_PER_SECOND,
)


@dataclass(frozen=True)
class ImageSurface:
    """One displayed image in pixel space.

    Attributes:
        name:   "original" or "modified".
        width:  Displayed width in pixels.
        height: Displayed height in pixels.
    """

    name: str
    width: float
    height: float

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def to_pixels(self, x_pct: float, y_pct: float) -> tuple[float, float]:
        """Convert a percent point to this surface's pixel space."""
        return (x_pct / 100.0 * self.width, y_pct / 100.0 * self.height)

    def to_percent(self, px: float, py: float) -> tuple[float, float]:
        """Convert a pixel point on this surface to percent coordinates."""
        return (px / self.width * 100.0, py / self.height * 100.0)


@dataclass(frozen=True)
class Marker:
    """One difference the player must find.

    Attributes:
        id:    Unique within its level.
        shape: Hit region in percent coordinates.
        label: Optional display name. See display_label.
    """

    id: int
    shape: Shape
    label: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or f"Difference {self.id}"

    def with_shape(self, shape: Shape) -> Marker:
        return replace(self, shape=shape)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to one entry of a descriptor's "differences" array."""
        data: dict[str, Any] = {"id": self.id, **self.shape.to_dict()}
        if self.label is not None:
            data["name"] = self.label
        return data


@dataclass(frozen=True)
class ScoringRules:
    """Per-level scoring. Unset descriptor fields fall back to defaults.

    penalty_per_miss is a magnitude: it is always subtracted, whichever
    sign the descriptor used.
    """

    points_per_hit: float = DEFAULT_POINTS_PER_HIT
    penalty_per_miss: float = DEFAULT_PENALTY_PER_MISS
    bonus_per_second: float = DEFAULT_BONUS_PER_SECOND

    @classmethod
    def from_values(
        cls,
        points_per_hit: float | None = None,
        penalty_per_miss: float | None = None,
        bonus_per_second: float | None = None,
    ) -> ScoringRules:
        return cls(
            points_per_hit=DEFAULT_POINTS_PER_HIT if points_per_hit is None else points_per_hit,
            penalty_per_miss=(DEFAULT_PENALTY_PER_MISS if penalty_per_miss is None
                              else abs(penalty_per_miss)),
            bonus_per_second=(DEFAULT_BONUS_PER_SECOND if bonus_per_second is None
                              else bonus_per_second),
        )


def next_marker_id(markers: list[Marker]) -> int:
    """Return max(existing ids) + 1, or 1 for an empty collection."""
    return max((m.id for m in markers), default=0) + 1


@dataclass
class Level:
    """One puzzle instance.

    Attributes:
        id:             Level identifier from the index.
        name:           Display name.
        difficulty:     "beginner", "intermediate", "advanced" or any custom tag.
        original_image: Resource locator for the unmodified image.
        modified_image: Resource locator for the image with differences.
        description:    Shown under the header and on the victory modal.
        time_limit:     Seconds allowed per run.
        scoring:        Points, penalty and bonus rules.
        markers:        Differences to find, in descriptor order.
        source:         The raw descriptor mapping, kept so an export can
                        merge the live markers back into everything else
                        the author wrote.
    """

    id: str
    name: str = ""
    difficulty: str = "custom"
    original_image: str = ""
    modified_image: str = ""
    description: str = ""
    time_limit: int = DEFAULT_TIME_LIMIT_S
    scoring: ScoringRules = field(default_factory=ScoringRules)
    markers: list[Marker] = field(default_factory=list)
    source: dict[str, Any] = field(default_factory=dict)

    def marker(self, marker_id: int) -> Marker | None:
        for m in self.markers:
            if m.id == marker_id:
                return m
        return None

    @property
    def marker_ids(self) -> set[int]:
        return {m.id for m in self.markers}

    def to_descriptor(self) -> dict[str, Any]:
        """Return the source descriptor merged with the live marker array."""
        return {**self.source, "differences": [m.to_dict() for m in self.markers]}
