"""Shared fixtures for the Spot the Difference test suite.

Provides image surfaces, small hand-built levels and on-disk level
folders. Nothing here needs a pygame display.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.geometry import Circle, Polygon, Rect
from core.markers import ImageSurface, Level, Marker, ScoringRules
from core.session import GameSession


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------


@pytest.fixture
def surface() -> ImageSurface:
    """A 200x100 pane, wide enough that circle radii use the height."""
    return ImageSurface(name="original", width=200, height=100)


@pytest.fixture
def square() -> ImageSurface:
    """A 100x100 pane where percent and pixels coincide."""
    return ImageSurface(name="modified", width=100, height=100)


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


def make_level(markers=None, time_limit: int = 60, **scoring) -> Level:
    """Build a Level without touching the filesystem."""
    if markers is None:
        markers = [Marker(id=1, shape=Circle(x=50, y=50, radius=10))]
    return Level(
        id="test",
        name="Test Level",
        difficulty="beginner",
        time_limit=time_limit,
        scoring=ScoringRules.from_values(**scoring),
        markers=list(markers),
        source={"id": "test", "name": "Test Level", "difficulty": "beginner",
                "timeLimit": time_limit},
    )


@pytest.fixture
def level_factory():
    """The make_level builder, for tests that need custom markers or scoring."""
    return make_level


@pytest.fixture
def single_level() -> Level:
    """One circle at the centre, radius 10%."""
    return make_level()


@pytest.fixture
def three_level() -> Level:
    """Three well separated markers, one of each shape."""
    return make_level([
        Marker(id=1, shape=Circle(x=20, y=20, radius=5)),
        Marker(id=2, shape=Rect(x=60, y=10, width=10, height=10)),
        Marker(id=3, shape=Polygon(points=((40, 70), (60, 70), (50, 90)))),
    ])


@pytest.fixture
def session(three_level: Level) -> GameSession:
    return GameSession(three_level)


# ---------------------------------------------------------------------------
# Level folders
# ---------------------------------------------------------------------------


def write_json(path: Path, payload) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def levels_dir(tmp_path: Path) -> Path:
    """A level folder with an index and two valid descriptors."""
    write_json(tmp_path / "index.json", {"levels": [
        {"id": "alpha", "name": "Alpha", "difficulty": "beginner", "file": "alpha.json"},
        {"id": "beta", "name": "Beta", "difficulty": "advanced", "file": "beta.json"},
    ]})
    write_json(tmp_path / "alpha.json", {
        "id": "alpha",
        "name": "Alpha",
        "difficulty": "beginner",
        "originalImage": "images/a1.png",
        "modifiedImage": "images/a2.png",
        "description": "First level",
        "timeLimit": 90,
        "pointsPerHit": 150,
        "penaltyPerMiss": -25,
        "differences": [
            {"id": 1, "type": "circle", "x": 50, "y": 50, "radius": 10},
            {"id": 2, "type": "rect", "x": 10, "y": 10, "width": 5, "height": 5},
        ],
    })
    write_json(tmp_path / "beta.json", {
        "name": "Beta",
        "originalImage": "b1.png",
        "modifiedImage": "b2.png",
        "differences": [
            {"id": 1, "x": 30, "y": 30},
            {"id": 2, "type": "polygon", "points": [[10, 10], [20, 10], [15, 20]]},
        ],
    })
    return tmp_path
