"""
core/geometry.py — Marker shapes and hit-testing for Spot the Difference.

Every difference marker carries one Shape. Shapes are stored in percent
coordinates so the same marker lines up on both images regardless of how
large each pane is drawn. Hit tests convert the shape to the pixel space
of the surface that was clicked.

Supported variants (descriptor "type" string in brackets):
    Circle  ["circle"]  — centre x/y in % of width/height, radius in %
                          of the surface's shorter side so the hit area
                          stays visually round on any aspect ratio.
    Rect    ["rect"]    — top-left x/y and width/height in %.
    Polygon ["polygon"] — three or more (x, y) % vertices.

All regions are closed: a point exactly on the boundary is inside.

Shapes are immutable. Editing operations (moved_to, resized, with_field)
return new instances with coordinates clamped to [0, 100] and rounded to
COORD_DECIMALS so exported JSON stays stable. A polygon is clamped as a
whole: its translation is bounded, its vertices are never moved apart.

Adding a new shape:
    1. Subclass Shape as a frozen dataclass
    2. Implement the abstract methods
    3. Register it in SHAPE_TYPES below
"""

from __future__ import annotations
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from core.errors import InvalidShapeError
from settings import COORD_DECIMALS, MIN_RADIUS, MIN_RECT_SIZE

Point = tuple[float, float]


def clamp_percent(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp a percent coordinate to [lo, hi]."""
    return min(max(value, lo), hi)


def round_coord(value: float) -> float:
    """Round a percent value to the exported precision."""
    return round(value, COORD_DECIMALS)


def _number(value: float) -> float | int:
    """Return ints for whole numbers so exported JSON reads 50, not 50.0."""
    if float(value).is_integer():
        return int(value)
    return value


def _check_coord(name: str, value: float) -> None:
    # NaN fails both comparisons
    if not 0.0 <= value <= 100.0:
        raise InvalidShapeError(f"{name}={value} is outside [0, 100]")


class Shape(ABC):
    """Abstract base for all marker shapes.

    Attributes:
        kind: Descriptor "type" string for this variant. Subclasses set it.
    """

    kind: str = ""

    @abstractmethod
    def contains(self, px: float, py: float, width: float, height: float) -> bool:
        """Return True if a pixel point lies inside the shape.

        Args:
            px:     Click X in surface pixels.
            py:     Click Y in surface pixels.
            width:  Surface width in pixels.
            height: Surface height in pixels.
        """
        ...

    @property
    @abstractmethod
    def anchor(self) -> Point:
        """The (x, y) percent point that drags and nudges move."""
        ...

    @property
    @abstractmethod
    def center(self) -> Point:
        """Visual centre in percent, where found / hint markers are drawn."""
        ...

    @abstractmethod
    def moved_to(self, x: float, y: float) -> Shape:
        """Return a copy whose anchor sits at (x, y), clamped and rounded."""
        ...

    @abstractmethod
    def resized(self, delta: float) -> Shape:
        """Return a copy grown (or shrunk, for negative delta) by delta percent."""
        ...

    @abstractmethod
    def with_field(self, name: str, value: float) -> Shape:
        """Return a copy with one numeric field replaced.

        Raises:
            KeyError: If the shape has no field called `name`.
        """
        ...

    @abstractmethod
    def validate(self) -> None:
        """Reject degenerate or out-of-range shapes.

        Raises:
            InvalidShapeError: If the shape cannot be hit-tested sensibly.
        """
        ...

    @abstractmethod
    def fields(self) -> dict:
        """Return the descriptor fields for this shape, without "type"."""
        ...

    def to_dict(self) -> dict:
        """Serialize to the level descriptor format."""
        return {"type": self.kind, **self.fields()}

    def moved_by(self, dx: float, dy: float) -> Shape:
        """Return a copy with the anchor shifted by (dx, dy) percent."""
        x, y = self.anchor
        return self.moved_to(x + dx, y + dy)


# ── Circle ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Circle(Shape):
    """Circular marker.

    Attributes:
        x:      Centre X in percent of surface width.
        y:      Centre Y in percent of surface height.
        radius: Radius in percent of min(width, height).
    """

    x: float
    y: float
    radius: float
    kind = "circle"

    def contains(self, px: float, py: float, width: float, height: float) -> bool:
        cx = self.x / 100.0 * width
        cy = self.y / 100.0 * height
        r  = self.radius / 100.0 * min(width, height)
        return math.hypot(px - cx, py - cy) <= r

    @property
    def anchor(self) -> Point:
        return (self.x, self.y)

    @property
    def center(self) -> Point:
        return (self.x, self.y)

    def moved_to(self, x: float, y: float) -> Circle:
        return replace(self, x=round_coord(clamp_percent(x)), y=round_coord(clamp_percent(y)))

    def resized(self, delta: float) -> Circle:
        return replace(self, radius=round_coord(max(MIN_RADIUS, self.radius + delta)))

    def with_field(self, name: str, value: float) -> Circle:
        if name not in ("x", "y", "radius"):
            raise KeyError(name)
        return replace(self, **{name: value})

    def validate(self) -> None:
        _check_coord("x", self.x)
        _check_coord("y", self.y)
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise InvalidShapeError(f"circle radius must be positive, got {self.radius}")

    def fields(self) -> dict:
        return {"x": _number(self.x), "y": _number(self.y), "radius": _number(self.radius)}


# ── Rectangle ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Rect(Shape):
    """Axis-aligned rectangular marker.

    Attributes:
        x:      Left edge in percent of surface width.
        y:      Top edge in percent of surface height.
        width:  Width in percent of surface width.
        height: Height in percent of surface height.
    """

    x: float
    y: float
    width: float
    height: float
    kind = "rect"

    def contains(self, px: float, py: float, width: float, height: float) -> bool:
        left   = self.x / 100.0 * width
        top    = self.y / 100.0 * height
        right  = (self.x + self.width) / 100.0 * width
        bottom = (self.y + self.height) / 100.0 * height
        return left <= px <= right and top <= py <= bottom

    @property
    def anchor(self) -> Point:
        return (self.x, self.y)

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def moved_to(self, x: float, y: float) -> Rect:
        return replace(self, x=round_coord(clamp_percent(x)), y=round_coord(clamp_percent(y)))

    def resized(self, delta: float) -> Rect:
        return replace(
            self,
            width=round_coord(max(MIN_RECT_SIZE, self.width + delta)),
            height=round_coord(max(MIN_RECT_SIZE, self.height + delta)),
        )

    def with_field(self, name: str, value: float) -> Rect:
        if name not in ("x", "y", "width", "height"):
            raise KeyError(name)
        return replace(self, **{name: value})

    def validate(self) -> None:
        _check_coord("x", self.x)
        _check_coord("y", self.y)
        if not (math.isfinite(self.width) and math.isfinite(self.height)) \
                or self.width <= 0 or self.height <= 0:
            raise InvalidShapeError(
                f"rect size must be positive, got {self.width}x{self.height}"
            )

    def fields(self) -> dict:
        return {
            "x":      _number(self.x),
            "y":      _number(self.y),
            "width":  _number(self.width),
            "height": _number(self.height),
        }


# ── Polygon ───────────────────────────────────────────────────────────────────

def _on_segment(p: Point, a: Point, b: Point, eps: float = 1e-9) -> bool:
    """Return True if p lies on the closed segment a→b."""
    cross = (b[0] - a[0]) * (p[1] - a[1]) - (b[1] - a[1]) * (p[0] - a[0])
    if abs(cross) > eps * max(1.0, math.dist(a, b)):
        return False
    return (min(a[0], b[0]) - eps <= p[0] <= max(a[0], b[0]) + eps
            and min(a[1], b[1]) - eps <= p[1] <= max(a[1], b[1]) + eps)


@dataclass(frozen=True)
class Polygon(Shape):
    """Free-form polygon marker.

    Polygons are authored by import only; the editor can move them and
    resized() scales them about their anchor.

    Attributes:
        points: Ordered (x, y) vertices in percent.
    """

    points: tuple[Point, ...]
    kind = "polygon"

    def contains(self, px: float, py: float, width: float, height: float) -> bool:
        verts = [(x / 100.0 * width, y / 100.0 * height) for x, y in self.points]
        p = (px, py)
        n = len(verts)

        for i in range(n):
            if _on_segment(p, verts[i], verts[(i + 1) % n]):
                return True

        # Ray casting towards +x
        inside = False
        j = n - 1
        for i in range(n):
            xi, yi = verts[i]
            xj, yj = verts[j]
            if (yi > py) != (yj > py):
                x_cross = xi + (py - yi) * (xj - xi) / (yj - yi)
                if px < x_cross:
                    inside = not inside
            j = i
        return inside

    @property
    def anchor(self) -> Point:
        return (min(x for x, _ in self.points), min(y for _, y in self.points))

    @property
    def center(self) -> Point:
        n = len(self.points)
        return (sum(x for x, _ in self.points) / n, sum(y for _, y in self.points) / n)

    def moved_to(self, x: float, y: float) -> Polygon:
        ax, ay = self.anchor
        return self.moved_by(x - ax, y - ay)

    def moved_by(self, dx: float, dy: float) -> Polygon:
        """Translate as a whole; the offset is bounded so the bounding box
        stays inside [0, 100] and the outline is never squashed."""
        xs = [x for x, _ in self.points]
        ys = [y for _, y in self.points]
        dx = round_coord(clamp_percent(dx, -min(xs), 100.0 - max(xs)))
        dy = round_coord(clamp_percent(dy, -min(ys), 100.0 - max(ys)))
        moved = tuple((round_coord(px + dx), round_coord(py + dy)) for px, py in self.points)
        return replace(self, points=moved)

    def resized(self, delta: float) -> Polygon:
        """Scale about the anchor so the longer bounding-box side grows by delta."""
        ax, ay = self.anchor
        span_x = max(x for x, _ in self.points) - ax
        span_y = max(y for _, y in self.points) - ay
        side = max(span_x, span_y)
        if side <= 0:
            return self
        factor = max(MIN_RECT_SIZE, side + delta) / side
        # Stop growing at the far edges instead of flattening vertices there
        if span_x > 0:
            factor = min(factor, (100.0 - ax) / span_x)
        if span_y > 0:
            factor = min(factor, (100.0 - ay) / span_y)
        scaled = tuple(
            (round_coord(clamp_percent(ax + (px - ax) * factor)),
             round_coord(clamp_percent(ay + (py - ay) * factor)))
            for px, py in self.points
        )
        return replace(self, points=scaled)

    def with_field(self, name: str, value: float) -> Polygon:
        ax, ay = self.anchor
        if name == "x":
            return self.moved_to(value, ay)
        if name == "y":
            return self.moved_to(ax, value)
        raise KeyError(name)

    def area(self) -> float:
        """Shoelace area in percent² units."""
        total = 0.0
        n = len(self.points)
        for i in range(n):
            x1, y1 = self.points[i]
            x2, y2 = self.points[(i + 1) % n]
            total += x1 * y2 - x2 * y1
        return abs(total) / 2.0

    def validate(self) -> None:
        if len(self.points) < 3:
            raise InvalidShapeError(
                f"polygon needs at least 3 points, got {len(self.points)}"
            )
        for x, y in self.points:
            _check_coord("x", x)
            _check_coord("y", y)
        if self.area() == 0.0:
            raise InvalidShapeError("polygon has zero area")

    def fields(self) -> dict:
        return {"points": [[_number(x), _number(y)] for x, y in self.points]}


# ── Registry & dispatch ───────────────────────────────────────────────────────
# Format: "descriptor type": ShapeClass
SHAPE_TYPES: dict[str, type[Shape]] = {
    Circle.kind:  Circle,
    Rect.kind:    Rect,
    Polygon.kind: Polygon,
}


def contains(shape: Shape, point: Point, surface_size: tuple[float, float]) -> bool:
    """Return True if a pixel point falls inside a shape drawn on a surface.

    This is the single hit-test entry point the tracker and editor use.

    Args:
        shape:        Any registered Shape.
        point:        (px, py) in surface pixels.
        surface_size: (width, height) of the surface in pixels.
    """
    width, height = surface_size
    return shape.contains(point[0], point[1], width, height)
