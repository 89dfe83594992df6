"""
core/tracker.py — Found / missed bookkeeping and score for one run.

DifferenceTracker owns:
    - found      ids of markers the player has hit, in the order found
    - attempts   every registered click, hit or miss
    - score      never below zero
    - last_miss  transient wrong-click marker, cleared after MISS_DISPLAY_S
                 or on the next click

The tracker does NOT own the clock or the phase. session.py calls
register_click() only while playing and apply_bonus() exactly once, at
the moment the last marker is found.

Usage:
    tracker = DifferenceTracker(level)
    result = tracker.register_click(50.0, 50.0, surface)
    if result.matched and tracker.all_found:
        tracker.apply_bonus(seconds_left)

    # each frame:
    tracker.update(dt)
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass

from core.geometry import contains
from core.markers import ImageSurface, Level
from settings import MISS_DISPLAY_S

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HitResult:
    """Outcome of one registered click.

    Attributes:
        matched:   True if the click found a new marker.
        marker_id: The marker found, or None on a miss.
        delta:     Change applied to the score (after the zero floor).
    """

    matched: bool
    marker_id: int | None = None
    delta: int = 0


@dataclass(frozen=True)
class MissMark:
    """Where the last wrong click landed.

    Attributes:
        x:       Click X in percent.
        y:       Click Y in percent.
        surface: Name of the pane that was clicked.
    """

    x: float
    y: float
    surface: str


class DifferenceTracker:
    """Mutable hit/miss state for a single play-through.

    Attributes:
        found:     Marker ids found so far, insertion-ordered.
        attempts:  Number of clicks registered.
        score:     Current score, floored at 0.
        last_miss: MissMark of the latest wrong click, or None.
    """

    def __init__(self, level: Level) -> None:
        self._level = level
        self.found:     list[int]       = []
        self.attempts:  int             = 0
        self.score:     int             = 0
        self.last_miss: MissMark | None = None
        self._miss_timer:    float = 0.0
        self._bonus_applied: bool  = False

    def bind(self, level: Level) -> None:
        """Point the tracker at a different level and clear all state."""
        self._level = level
        self.reset()

    def reset(self) -> None:
        """Clear found, attempts, score and the miss marker. Markers are untouched."""
        self.found = []
        self.attempts = 0
        self.score = 0
        self.last_miss = None
        self._miss_timer = 0.0
        self._bonus_applied = False

    # ── Clicks ────────────────────────────────────────────────────────────────

    def register_click(self, x_pct: float, y_pct: float, surface: ImageSurface) -> HitResult:
        """Hit-test a click against every marker not yet found.

        Markers are scanned by ascending id so overlapping shapes resolve
        the same way every time.

        Args:
            x_pct:   Click X in percent of the surface width.
            y_pct:   Click Y in percent of the surface height.
            surface: The pane that was clicked, with its pixel size.

        Returns:
            HitResult describing the hit or miss.
        """
        point = surface.to_pixels(x_pct, y_pct)
        self.attempts += 1

        for marker in sorted(self._level.markers, key=lambda m: m.id):
            if marker.id in self.found:
                continue
            if contains(marker.shape, point, surface.size):
                self.found.append(marker.id)
                delta = self._add(self._level.scoring.points_per_hit)
                self.last_miss = None
                self._miss_timer = 0.0
                logger.debug("hit marker %d on %s (%.2f, %.2f)",
                             marker.id, surface.name, x_pct, y_pct)
                return HitResult(matched=True, marker_id=marker.id, delta=delta)

        delta = self._add(-self._level.scoring.penalty_per_miss)
        self.last_miss = MissMark(x_pct, y_pct, surface.name)
        self._miss_timer = MISS_DISPLAY_S
        logger.debug("miss on %s (%.2f, %.2f)", surface.name, x_pct, y_pct)
        return HitResult(matched=False, delta=delta)

    def apply_bonus(self, seconds_remaining: int) -> int:
        """Add the time bonus once per run.

        Args:
            seconds_remaining: Whole seconds left on the clock.

        Returns:
            Points actually added. 0 if the bonus was already applied.
        """
        if self._bonus_applied:
            logger.warning("time bonus already applied for this run; ignoring")
            return 0
        self._bonus_applied = True
        return self._add(seconds_remaining * self._level.scoring.bonus_per_second)

    def _add(self, points: float) -> int:
        """Apply a score change with the zero floor and return the real delta."""
        before = self.score
        self.score = max(0, int(round(before + points)))
        return self.score - before

    # ── Miss marker ───────────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Age the miss marker by dt seconds and clear it when it expires."""
        if self._miss_timer > 0.0:
            self._miss_timer = max(0.0, self._miss_timer - dt)
            if self._miss_timer == 0.0:
                self.last_miss = None

    # ── Convenience reads ─────────────────────────────────────────────────────

    @property
    def bonus_applied(self) -> bool:
        return self._bonus_applied

    @property
    def total(self) -> int:
        return len(self._level.markers)

    @property
    def all_found(self) -> bool:
        return self.total > 0 and len(self.found) >= self.total

    def accuracy(self) -> int:
        """Return found / attempts as a rounded percentage (0 before any click)."""
        if self.attempts == 0:
            return 0
        # Half-up: 5 of 8 reads 63, not 62
        return math.floor(100 * len(self.found) / self.attempts + 0.5)

    def progress(self) -> float:
        """Return the found fraction in [0.0, 1.0] (0 for a level with no markers)."""
        if self.total == 0:
            return 0.0
        return len(self.found) / self.total
