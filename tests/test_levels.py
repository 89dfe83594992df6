"""
Level Loading Tests

Descriptor validation, the level index and catalog rotation.

Run with: pytest tests/test_levels.py -v
"""

import json

import pytest
from pydantic import ValidationError

from core.errors import LevelLoadError
from core.geometry import Circle, Polygon, Rect
from core.markers import Marker
from levels.loader import LevelCatalog
from levels.schema import LevelDescriptor, MarkerSpec, parse_markers
from levels.store import JsonFileStore
from settings import DEFAULT_BONUS_PER_SECOND, DEFAULT_RADIUS, DEFAULT_TIME_LIMIT_S


def _write(path, payload):
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload,
                    encoding="utf-8")


class TestMarkerSpec:
    """Single "differences" entries."""

    def test_type_defaults_to_circle(self):
        marker = MarkerSpec.model_validate({"id": 1, "x": 10, "y": 20}).to_marker()
        assert marker.shape == Circle(x=10, y=20, radius=DEFAULT_RADIUS)

    def test_null_type_is_circle(self):
        spec = MarkerSpec.model_validate({"id": 1, "type": None, "x": 10, "y": 20, "radius": 4})
        assert spec.type == "circle"

    def test_rect(self):
        marker = MarkerSpec.model_validate(
            {"id": 2, "type": "rect", "x": 1, "y": 2, "width": 3, "height": 4, "name": "Lamp"}
        ).to_marker()
        assert marker == Marker(id=2, shape=Rect(x=1, y=2, width=3, height=4), label="Lamp")

    def test_polygon(self):
        marker = MarkerSpec.model_validate(
            {"id": 3, "type": "polygon", "points": [[0, 0], [10, 0], [5, 10]]}
        ).to_marker()
        assert marker.shape == Polygon(points=((0, 0), (10, 0), (5, 10)))

    @pytest.mark.parametrize("payload", [
        {"id": 1, "type": "star", "x": 1, "y": 1},
        {"id": 1, "x": 150, "y": 1},
        {"id": 1, "x": 10, "y": 10, "radius": 0},
        {"id": 1, "x": 10, "y": 10, "radius": float("nan")},
        {"id": 1, "type": "rect", "x": 10, "y": 10, "width": float("inf"), "height": 5},
        {"id": 1, "type": "polygon", "points": [[0, 0], [10, 0], [5, float("nan")]]},
        {"id": 1, "type": "polygon", "points": [[0, 0], [10, 10]]},
        {"id": 1, "type": "polygon", "points": [[0, 0], [5, 5], [10, 10]]},
        {"x": 10, "y": 10},
    ])
    def test_invalid(self, payload):
        """Unknown types, out-of-range values and degenerate shapes are rejected."""
        with pytest.raises(ValidationError):
            MarkerSpec.model_validate(payload)

    def test_nan_in_json_descriptor(self):
        """JSON NaN literals do not sneak an unhittable marker into a level."""
        payload = json.loads('{"id": "x", "differences": [{"id": 1, "x": 50, "y": 50, "radius": NaN}]}')
        with pytest.raises(ValidationError):
            LevelDescriptor.model_validate(payload)

    def test_parse_markers_rejects_duplicate_ids(self):
        with pytest.raises(ValueError):
            parse_markers([{"id": 1, "x": 1, "y": 1}, {"id": 1, "x": 2, "y": 2}])


class TestLevelDescriptor:
    """Whole descriptor files."""

    def test_defaults(self):
        level = LevelDescriptor.model_validate({"id": 7, "differences": []}).to_level()
        assert level.id == "7"
        assert level.difficulty == "custom"
        assert level.time_limit == DEFAULT_TIME_LIMIT_S
        assert level.scoring.bonus_per_second == DEFAULT_BONUS_PER_SECOND

    def test_duplicate_difference_ids(self):
        with pytest.raises(ValidationError):
            LevelDescriptor.model_validate({"id": "x", "differences": [
                {"id": 1, "x": 1, "y": 1}, {"id": 1, "x": 5, "y": 5},
            ]})

    def test_time_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            LevelDescriptor.model_validate({"id": "x", "timeLimit": 0})

    def test_unknown_keys_survive_in_source(self):
        payload = {"id": "x", "author": "someone", "differences": []}
        level = LevelDescriptor.model_validate(payload).to_level(source=payload)
        assert level.to_descriptor()["author"] == "someone"


class TestCatalog:
    """Index reading and rotation."""

    def test_from_index(self, levels_dir):
        catalog = LevelCatalog.from_index(levels_dir / "index.json")
        assert [e.id for e in catalog.entries] == ["alpha", "beta"]
        assert len(catalog) == 2
        assert catalog.index_of("beta") == 1
        assert catalog.index_of("missing") == -1

    def test_next_after_wraps(self, levels_dir):
        catalog = LevelCatalog.from_index(levels_dir / "index.json")
        assert catalog.next_after("alpha") == "beta"
        assert catalog.next_after("beta") == "alpha"
        assert catalog.next_after("missing") == "alpha"

    def test_single_level_rotation(self, tmp_path):
        _write(tmp_path / "index.json", {"levels": [{"id": "solo", "file": "solo.json"}]})
        assert LevelCatalog.from_index(tmp_path / "index.json").next_after("solo") == "solo"

    def test_empty_catalog(self, tmp_path):
        _write(tmp_path / "index.json", {"levels": []})
        with pytest.raises(LevelLoadError):
            LevelCatalog.from_index(tmp_path / "index.json").next_after("any")

    def test_missing_index(self, tmp_path):
        with pytest.raises(LevelLoadError):
            LevelCatalog.from_index(tmp_path / "index.json")

    def test_invalid_index(self, tmp_path):
        _write(tmp_path / "index.json", {"levels": [{"name": "no id or file"}]})
        with pytest.raises(LevelLoadError):
            LevelCatalog.from_index(tmp_path / "index.json")


class TestLoad:
    """Loading descriptors through the catalog."""

    def test_load_full_descriptor(self, levels_dir):
        level = LevelCatalog.from_index(levels_dir / "index.json").load("alpha")
        assert level.name == "Alpha"
        assert level.time_limit == 90
        assert level.scoring.points_per_hit == 150
        assert level.scoring.penalty_per_miss == 25
        assert level.original_image == str(levels_dir / "images" / "a1.png")
        assert [type(m.shape) for m in level.markers] == [Circle, Rect]

    def test_load_fills_defaults(self, levels_dir):
        """beta.json has no id, difficulty or timeLimit."""
        level = LevelCatalog.from_index(levels_dir / "index.json").load("beta")
        assert level.id == "beta"
        assert level.difficulty == "custom"
        assert level.time_limit == DEFAULT_TIME_LIMIT_S
        assert level.markers[0].shape.radius == DEFAULT_RADIUS
        assert isinstance(level.markers[1].shape, Polygon)

    def test_unknown_level(self, levels_dir):
        with pytest.raises(LevelLoadError):
            LevelCatalog.from_index(levels_dir / "index.json").load("gamma")

    def test_missing_descriptor(self, levels_dir):
        (levels_dir / "beta.json").unlink()
        with pytest.raises(LevelLoadError):
            LevelCatalog.from_index(levels_dir / "index.json").load("beta")

    @pytest.mark.parametrize("content", [
        "{not json",
        "[]",
        json.dumps({"id": "beta", "timeLimit": -5}),
        json.dumps({"id": "beta", "differences": [{"id": 1, "x": 500, "y": 1}]}),
    ])
    def test_invalid_descriptor(self, levels_dir, content):
        """Broken JSON or schema violations surface as LevelLoadError."""
        _write(levels_dir / "beta.json", content)
        with pytest.raises(LevelLoadError):
            LevelCatalog.from_index(levels_dir / "index.json").load("beta")

    def test_stored_markers_override(self, levels_dir, tmp_path):
        store = JsonFileStore(tmp_path / "store")
        authored = [Marker(id=9, shape=Circle(x=5, y=5, radius=2), label="Moved")]
        store.save("alpha", authored)
        level = LevelCatalog.from_index(levels_dir / "index.json").load("alpha", store=store)
        assert level.markers == authored

    def test_empty_store_keeps_descriptor(self, levels_dir, tmp_path):
        store = JsonFileStore(tmp_path / "store")
        level = LevelCatalog.from_index(levels_dir / "index.json").load("alpha", store=store)
        assert [m.id for m in level.markers] == [1, 2]

    def test_shipped_levels_load(self):
        """Every level in the bundled index validates."""
        from settings import LEVELS_DIR, LEVEL_INDEX_FILE

        catalog = LevelCatalog.from_index(LEVELS_DIR / LEVEL_INDEX_FILE)
        for entry in catalog.entries:
            level = catalog.load(entry.id)
            assert level.markers
