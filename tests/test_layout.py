"""
Layout Tests

Window letterboxing, pane placement and colour helpers. Uses pygame.Rect
only; no display is opened.

Run with: pytest tests/test_layout.py -v
"""

import pygame
import pytest

from settings import SCREEN_H, SCREEN_W
from utils.color import difficulty_colors, lerp_color, timer_color, with_alpha
from utils.scaler import PaneLayout, Scaler, fit_rect


class TestScaler:

    def test_native_size_is_identity(self):
        scaler = Scaler(SCREEN_W, SCREEN_H)
        assert scaler.to_game(100, 200) == (100, 200)

    def test_letterbox(self):
        """A double-width window centres the game with side bars."""
        scaler = Scaler(SCREEN_W * 2, SCREEN_H)
        assert scaler.offset_x == SCREEN_W // 2
        assert scaler.to_game(SCREEN_W // 2, 0) == (0, 0)
        assert not scaler.in_bounds(10, 10)


class TestPaneLayout:

    @pytest.fixture
    def layout(self):
        return PaneLayout.side_by_side((800, 600), (800, 600))

    def test_fit_keeps_aspect(self):
        rect = fit_rect((800, 400), pygame.Rect(0, 0, 400, 400))
        assert rect.size == (400, 200)
        assert rect.y == 100

    def test_panes_side_by_side(self, layout):
        left, right = layout.rects["original"], layout.rects["modified"]
        assert left.right < right.left
        assert left.size == right.size

    def test_locate(self, layout):
        rect = layout.rects["modified"]
        assert layout.locate(rect.x + 5, rect.y + 7) == ("modified", 5, 7)
        assert layout.locate(0, 0) is None

    def test_percent_round_trip(self, layout):
        x, y = layout.to_screen("original", 50, 50)
        name, lx, ly = layout.locate(x, y)
        px, py = layout.to_percent(name, lx, ly)
        assert px == pytest.approx(50, abs=0.5)
        assert py == pytest.approx(50, abs=0.5)

    def test_percent_is_clamped(self, layout):
        assert layout.to_percent("original", -10, 100000) == (0.0, 100.0)

    def test_surface(self, layout):
        surface = layout.surface("original")
        assert surface.name == "original"
        assert surface.size == layout.rects["original"].size


class TestColors:

    def test_known_difficulty(self):
        assert difficulty_colors("Beginner") == difficulty_colors("beginner")

    def test_unknown_difficulty_falls_back(self):
        assert difficulty_colors("custom") == difficulty_colors("whatever")

    def test_timer_color_calm_until_last_quarter(self):
        assert timer_color(0.8, (0, 0, 0), (255, 0, 0)) == (0, 0, 0)
        assert timer_color(0.0, (0, 0, 0), (255, 0, 0)) == (255, 0, 0)

    def test_lerp_and_alpha(self):
        assert lerp_color((0, 0, 0), (100, 200, 50), 0.5) == (50, 100, 25)
        assert with_alpha((1, 2, 3), 300) == (1, 2, 3, 255)
