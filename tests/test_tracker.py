"""
Tracker Tests

Found / attempts / score bookkeeping for a single run.

Run with: pytest tests/test_tracker.py -v
"""

import pytest

from core.geometry import Circle
from core.markers import Marker
from core.tracker import DifferenceTracker, HitResult
from settings import MISS_DISPLAY_S


class TestRegisterClick:
    """Hits, misses and the score floor."""

    def test_hit_scores_points(self, single_level, surface):
        """Centre click on a 200x100 surface finds the circle for 200 points."""
        tracker = DifferenceTracker(single_level)
        result = tracker.register_click(50, 50, surface)
        assert result == HitResult(matched=True, marker_id=1, delta=200)
        assert tracker.found == [1]
        assert tracker.score == 200
        assert tracker.attempts == 1

    def test_miss_at_zero_stays_zero(self, single_level, surface):
        """The penalty cannot push the score below zero."""
        tracker = DifferenceTracker(single_level)
        result = tracker.register_click(0, 0, surface)
        assert result == HitResult(matched=False, marker_id=None, delta=0)
        assert tracker.score == 0
        assert tracker.attempts == 1

    def test_miss_after_hit(self, three_level, surface):
        tracker = DifferenceTracker(three_level)
        tracker.register_click(20, 20, surface)
        result = tracker.register_click(95, 95, surface)
        assert result.delta == -50
        assert tracker.score == 150

    def test_found_marker_cannot_be_found_twice(self, single_level, surface):
        """A second click on a found marker is a miss."""
        tracker = DifferenceTracker(single_level)
        tracker.register_click(50, 50, surface)
        result = tracker.register_click(50, 50, surface)
        assert not result.matched
        assert tracker.found == [1]
        assert tracker.attempts == 2
        assert tracker.score == 150

    def test_overlap_resolves_by_ascending_id(self, level_factory, surface):
        """With two identical regions the lower id is found first."""
        level = level_factory([
            Marker(id=2, shape=Circle(x=50, y=50, radius=10)),
            Marker(id=1, shape=Circle(x=50, y=50, radius=10)),
        ])
        tracker = DifferenceTracker(level)
        assert tracker.register_click(50, 50, surface).marker_id == 1
        assert tracker.register_click(50, 50, surface).marker_id == 2

    def test_negative_penalty_is_a_magnitude(self, level_factory, surface):
        """penaltyPerMiss of -25 still subtracts 25."""
        tracker = DifferenceTracker(level_factory(penalty_per_miss=-25))
        tracker.register_click(50, 50, surface)
        tracker.register_click(0, 0, surface)
        assert tracker.score == 175

    def test_either_pane_finds_the_marker(self, single_level, surface, square):
        """Markers are shared between the two panes."""
        tracker = DifferenceTracker(single_level)
        assert tracker.register_click(50, 50, square).matched


class TestBonus:
    """The time bonus is applied once per run."""

    def test_bonus_from_remaining_seconds(self, single_level):
        tracker = DifferenceTracker(single_level)
        assert tracker.apply_bonus(30) == 300
        assert tracker.score == 300
        assert tracker.bonus_applied

    def test_second_bonus_is_ignored(self, single_level):
        tracker = DifferenceTracker(single_level)
        tracker.apply_bonus(30)
        assert tracker.apply_bonus(30) == 0
        assert tracker.score == 300

    def test_reset_allows_a_new_bonus(self, single_level):
        tracker = DifferenceTracker(single_level)
        tracker.apply_bonus(5)
        tracker.reset()
        assert tracker.apply_bonus(5) == 50


class TestMissMarker:
    """The wrong-click marker is transient."""

    def test_miss_marker_expires(self, single_level, surface):
        tracker = DifferenceTracker(single_level)
        tracker.register_click(5, 5, surface)
        assert tracker.last_miss is not None
        assert tracker.last_miss.surface == "original"
        tracker.update(MISS_DISPLAY_S / 2)
        assert tracker.last_miss is not None
        tracker.update(MISS_DISPLAY_S)
        assert tracker.last_miss is None

    def test_hit_clears_miss_marker(self, single_level, surface):
        tracker = DifferenceTracker(single_level)
        tracker.register_click(5, 5, surface)
        tracker.register_click(50, 50, surface)
        assert tracker.last_miss is None


class TestDerived:
    """Accuracy and progress."""

    def test_accuracy_before_any_click(self, single_level):
        assert DifferenceTracker(single_level).accuracy() == 0

    def test_three_of_four(self, three_level, surface):
        """Three hits and one miss read 75%."""
        tracker = DifferenceTracker(three_level)
        tracker.register_click(20, 20, surface)
        tracker.register_click(65, 15, surface)
        tracker.register_click(95, 95, surface)
        tracker.register_click(50, 80, surface)
        assert tracker.found == [1, 2, 3]
        assert tracker.accuracy() == 75
        assert tracker.all_found

    def test_accuracy_rounds_half_up(self, single_level, surface):
        """1 of 8 is 12.5%, shown as 13."""
        tracker = DifferenceTracker(single_level)
        tracker.register_click(50, 50, surface)
        for _ in range(7):
            tracker.register_click(1, 1, surface)
        assert tracker.accuracy() == 13

    def test_progress(self, three_level, surface):
        tracker = DifferenceTracker(three_level)
        assert tracker.progress() == 0.0
        tracker.register_click(20, 20, surface)
        assert tracker.progress() == pytest.approx(1 / 3)

    def test_empty_level(self, level_factory):
        tracker = DifferenceTracker(level_factory([]))
        assert tracker.progress() == 0.0
        assert not tracker.all_found
