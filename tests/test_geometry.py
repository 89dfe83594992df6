"""
Geometry Tests

Hit-testing and editing behaviour of the three marker shapes.

Run with: pytest tests/test_geometry.py -v
"""

import pytest

from core.errors import InvalidShapeError
from core.geometry import SHAPE_TYPES, Circle, Polygon, Rect, contains
from settings import MIN_RADIUS, MIN_RECT_SIZE


class TestCircleContains:
    """Circle radius is a percent of the shorter surface side."""

    def test_centre_hit_on_wide_surface(self, surface):
        """Centre of a 200x100 surface is inside a 10% circle."""
        shape = Circle(x=50, y=50, radius=10)
        assert contains(shape, surface.to_pixels(50, 50), surface.size)

    def test_boundary_is_inside(self, surface):
        """A point exactly one radius away counts as a hit."""
        shape = Circle(x=50, y=50, radius=10)
        # radius = 10% of 100px = 10px; 55% of 200px = 110px
        assert contains(shape, (110, 50), surface.size)

    def test_just_outside(self, surface):
        """A point past the radius misses."""
        shape = Circle(x=50, y=50, radius=10)
        assert not contains(shape, (111, 50), surface.size)

    def test_radius_uses_shorter_side(self, surface):
        """Horizontal reach is the same pixel distance as vertical reach."""
        shape = Circle(x=50, y=50, radius=10)
        assert contains(shape, (100, 60), surface.size)
        assert not contains(shape, (100, 61), surface.size)


class TestRectContains:
    """Rectangles are closed boxes in percent."""

    def test_interior(self, square):
        shape = Rect(x=10, y=10, width=20, height=20)
        assert contains(shape, (20, 20), square.size)

    def test_edges_are_inside(self, square):
        """Both corners of the box are hits."""
        shape = Rect(x=10, y=10, width=20, height=20)
        assert contains(shape, (10, 10), square.size)
        assert contains(shape, (30, 30), square.size)

    def test_outside(self, square):
        shape = Rect(x=10, y=10, width=20, height=20)
        assert not contains(shape, (31, 20), square.size)

    def test_scales_with_surface(self, surface):
        """Percent widths follow the surface width."""
        shape = Rect(x=50, y=0, width=10, height=10)
        # 50%..60% of 200px is 100..120px
        assert contains(shape, (119, 5), surface.size)
        assert not contains(shape, (121, 5), surface.size)


class TestPolygonContains:
    """Polygons use ray casting with the boundary counted as inside."""

    TRIANGLE = Polygon(points=((0, 0), (100, 0), (0, 100)))

    def test_interior(self, square):
        assert contains(self.TRIANGLE, (10, 10), square.size)

    def test_outside(self, square):
        assert not contains(self.TRIANGLE, (60, 60), square.size)

    def test_point_on_edge(self, square):
        """The hypotenuse midpoint is on the boundary and therefore a hit."""
        assert contains(self.TRIANGLE, (50, 50), square.size)

    def test_vertex(self, square):
        assert contains(self.TRIANGLE, (100, 0), square.size)

    def test_concave(self, square):
        """The notch of an L-shape is outside."""
        shape = Polygon(points=((0, 0), (50, 0), (50, 50), (100, 50), (100, 100), (0, 100)))
        assert contains(shape, (25, 25), square.size)
        assert contains(shape, (75, 75), square.size)
        assert not contains(shape, (75, 25), square.size)


class TestEditing:
    """moved_to / resized / with_field return clamped, rounded copies."""

    def test_moved_to_clamps(self):
        moved = Circle(x=5, y=5, radius=3).moved_to(-10, 120)
        assert (moved.x, moved.y) == (0, 100)

    def test_moved_to_rounds(self):
        moved = Circle(x=5, y=5, radius=3).moved_to(12.3456, 7.891)
        assert (moved.x, moved.y) == (12.35, 7.89)

    def test_shapes_are_immutable(self):
        """Editing returns a new shape and leaves the original alone."""
        shape = Rect(x=1, y=1, width=5, height=5)
        shape.moved_by(3, 3)
        assert shape == Rect(x=1, y=1, width=5, height=5)

    def test_circle_resize_has_floor(self):
        assert Circle(x=50, y=50, radius=1.5).resized(-5).radius == MIN_RADIUS

    def test_rect_resize_both_sides(self):
        grown = Rect(x=10, y=10, width=5, height=8).resized(1)
        assert (grown.width, grown.height) == (6, 9)
        shrunk = Rect(x=10, y=10, width=5, height=8).resized(-20)
        assert (shrunk.width, shrunk.height) == (MIN_RECT_SIZE, MIN_RECT_SIZE)

    def test_polygon_scales_about_anchor(self):
        """Growing by 5 turns a 10-wide triangle into a 15-wide one."""
        shape = Polygon(points=((10, 10), (20, 10), (15, 20)))
        assert shape.resized(5).points == ((10, 10), (25, 10), (17.5, 25))

    def test_polygon_moves_as_a_whole(self):
        """Setting x moves every vertex by the same offset."""
        shape = Polygon(points=((10, 10), (20, 10), (15, 20)))
        moved = shape.with_field("x", 30)
        assert moved.points == ((30, 10), (40, 10), (35, 20))

    def test_polygon_translation_stops_at_edge(self):
        """Pushing a polygon past the edge keeps its outline intact."""
        shape = Polygon(points=((80, 10), (95, 10), (90, 20)))
        assert shape.moved_by(20, 0).points == ((85, 10), (100, 10), (95, 20))
        assert shape.moved_to(-10, 0).points == ((0, 0), (15, 0), (10, 10))

    def test_polygon_growth_stops_at_edge(self):
        shape = Polygon(points=((80, 10), (90, 10), (85, 20)))
        assert shape.resized(40).points == ((80, 10), (100, 10), (90, 30))

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            Circle(x=50, y=50, radius=5).with_field("width", 3)

    def test_anchor_and_center(self):
        rect = Rect(x=10, y=20, width=10, height=4)
        assert rect.anchor == (10, 20)
        assert rect.center == (15, 22)


class TestValidate:
    """Degenerate shapes are rejected up front."""

    def test_polygon_needs_three_points(self):
        with pytest.raises(InvalidShapeError):
            Polygon(points=((0, 0), (10, 10))).validate()

    def test_polygon_zero_area(self):
        with pytest.raises(InvalidShapeError):
            Polygon(points=((0, 0), (10, 10), (20, 20))).validate()

    def test_coordinates_in_range(self):
        with pytest.raises(InvalidShapeError):
            Circle(x=101, y=50, radius=5).validate()

    def test_positive_size(self):
        with pytest.raises(InvalidShapeError):
            Rect(x=10, y=10, width=0, height=5).validate()
        with pytest.raises(InvalidShapeError):
            Circle(x=10, y=10, radius=0).validate()

    @pytest.mark.parametrize("shape", [
        Circle(x=50, y=50, radius=float("nan")),
        Circle(x=50, y=50, radius=float("inf")),
        Circle(x=float("nan"), y=50, radius=5),
        Rect(x=10, y=10, width=float("inf"), height=5),
        Rect(x=10, y=10, width=5, height=float("nan")),
    ])
    def test_non_finite_values(self, shape):
        with pytest.raises(InvalidShapeError):
            shape.validate()

    def test_invalid_shape_is_a_value_error(self):
        """Callers that only know ValueError still catch it."""
        with pytest.raises(ValueError):
            Circle(x=-1, y=0, radius=1).validate()


class TestSerialization:
    """to_dict matches the descriptor format."""

    def test_circle(self):
        assert Circle(x=50, y=50, radius=10).to_dict() == {
            "type": "circle", "x": 50, "y": 50, "radius": 10,
        }

    def test_whole_numbers_export_as_ints(self):
        data = Circle(x=50.0, y=12.5, radius=10.0).to_dict()
        assert isinstance(data["x"], int)
        assert data["y"] == 12.5

    def test_polygon(self):
        data = Polygon(points=((10, 10), (20, 10), (15, 20.5))).to_dict()
        assert data == {"type": "polygon", "points": [[10, 10], [20, 10], [15, 20.5]]}

    def test_registry(self):
        """Every registered kind maps to its class."""
        assert {k: cls.kind for k, cls in SHAPE_TYPES.items()} == {
            "circle": "circle", "rect": "rect", "polygon": "polygon",
        }
