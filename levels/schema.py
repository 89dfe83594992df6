"""
levels/schema.py — Level descriptor validation for Spot the Difference.

Pydantic models for the two JSON documents the game reads:

    index.json     {"levels": [{"id", "name", "difficulty", "file"}]}
    <level>.json   {"id", "name", "difficulty", "originalImage",
                    "modifiedImage", "description", "timeLimit",
                    "pointsPerHit", "penaltyPerMiss", "bonusPerSecond",
                    "differences": [...]}

Each entry of "differences" is a marker with a "type" discriminator
("circle", "rect" or "polygon"; "circle" when absent). Unknown keys on a
level descriptor are allowed and carried through to exports.

NaN and Infinity are rejected wherever a number is expected.

The models convert into the plain core types (Level, Marker, Shape) via
to_level() / to_marker(); nothing outside levels/ touches pydantic.
"""

from __future__ import annotations
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.errors import InvalidShapeError
from core.geometry import Circle, Polygon, Rect, Shape
from core.markers import Level, Marker, ScoringRules
from settings import DEFAULT_RADIUS, DEFAULT_RECT_SIZE, DEFAULT_TIME_LIMIT_S


class MarkerSpec(BaseModel):
    """One entry of a descriptor's "differences" array.

    Attributes:
        id:     Unique marker id within the level.
        type:   Shape discriminator.
        x, y:   Anchor in percent (circle centre / rect top-left).
        radius: Circle radius in % of the shorter side.
        width:  Rect width in %.
        height: Rect height in %.
        points: Polygon vertices as [x, y] pairs in %.
        name:   Optional display label.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, allow_inf_nan=False)

    id: int
    type: Literal["circle", "rect", "polygon"] = "circle"
    x: float = Field(default=0.0, ge=0.0, le=100.0)
    y: float = Field(default=0.0, ge=0.0, le=100.0)
    radius: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    points: Optional[list[tuple[float, float]]] = None
    name: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        return "circle" if value is None else value

    def to_shape(self) -> Shape:
        """Build and validate the core Shape for this entry.

        Raises:
            InvalidShapeError: If the shape is degenerate.
        """
        if self.type == "rect":
            shape: Shape = Rect(
                x=self.x, y=self.y,
                width=DEFAULT_RECT_SIZE if self.width is None else self.width,
                height=DEFAULT_RECT_SIZE if self.height is None else self.height,
            )
        elif self.type == "polygon":
            shape = Polygon(points=tuple(tuple(p) for p in (self.points or [])))
        else:
            shape = Circle(
                x=self.x, y=self.y,
                radius=DEFAULT_RADIUS if self.radius is None else self.radius,
            )
        shape.validate()
        return shape

    @model_validator(mode="after")
    def _check_shape(self) -> MarkerSpec:
        try:
            self.to_shape()
        except InvalidShapeError as exc:
            raise ValueError(f"difference {self.id}: {exc}") from exc
        return self

    def to_marker(self) -> Marker:
        return Marker(id=self.id, shape=self.to_shape(), label=self.name)


class LevelDescriptor(BaseModel):
    """A full level descriptor file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, allow_inf_nan=False)

    id: str
    name: str = ""
    difficulty: str = "custom"
    original_image: str = Field(default="", alias="originalImage")
    modified_image: str = Field(default="", alias="modifiedImage")
    description: str = ""
    time_limit: int = Field(default=DEFAULT_TIME_LIMIT_S, gt=0, alias="timeLimit")
    points_per_hit: Optional[float] = Field(default=None, alias="pointsPerHit")
    penalty_per_miss: Optional[float] = Field(default=None, alias="penaltyPerMiss")
    bonus_per_second: Optional[float] = Field(default=None, alias="bonusPerSecond")
    differences: list[MarkerSpec] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("differences")
    @classmethod
    def _unique_ids(cls, value: list[MarkerSpec]) -> list[MarkerSpec]:
        seen: set[int] = set()
        for spec in value:
            if spec.id in seen:
                raise ValueError(f"duplicate difference id {spec.id}")
            seen.add(spec.id)
        return value

    def to_level(self, source: dict[str, Any] | None = None) -> Level:
        """Convert to a core Level.

        Args:
            source: The raw mapping this descriptor was parsed from. Kept
                    on the Level so exports preserve every authored key.
        """
        return Level(
            id=self.id,
            name=self.name,
            difficulty=self.difficulty,
            original_image=self.original_image,
            modified_image=self.modified_image,
            description=self.description,
            time_limit=self.time_limit,
            scoring=ScoringRules.from_values(
                self.points_per_hit, self.penalty_per_miss, self.bonus_per_second,
            ),
            markers=[spec.to_marker() for spec in self.differences],
            source=dict(source) if source is not None else self.model_dump(by_alias=True),
        )


class LevelIndexEntry(BaseModel):
    """One row of the level index."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str = ""
    difficulty: str = "custom"
    file: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class LevelIndex(BaseModel):
    """The level index document."""

    levels: list[LevelIndexEntry] = Field(default_factory=list)


def parse_markers(items: list[Any]) -> list[Marker]:
    """Validate a bare marker array (stored authoring state or import).

    Raises:
        pydantic.ValidationError: If any entry is invalid.
        ValueError:               If ids repeat.
    """
    specs = [MarkerSpec.model_validate(item) for item in items]
    ids = [s.id for s in specs]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate difference ids")
    return [s.to_marker() for s in specs]
