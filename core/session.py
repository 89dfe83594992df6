"""
core/session.py — Play-through state machine for Spot the Difference.

GameSession coordinates the DifferenceTracker and the GameClock for the
active level and exposes the derived numbers the HUD needs.

Phases:
    IDLE       — level loaded, clock armed but stopped; editor may run
    PLAYING    — clicks are hit-tested, clock counts down
    WON        — every marker found; bonus applied, clock stopped
    TIMED_OUT  — clock reached zero first

Transitions:
    IDLE      → PLAYING   : start()   (needs markers, editor inactive)
    PLAYING   → WON       : click() finds the last marker
    PLAYING   → TIMED_OUT : tick() / update() expires the clock
    any       → IDLE      : restart() or load_level()

The win check runs inside click(), before it returns, so no later click
can slip in between the last hit and the victory. The front-end handles
input before advancing the clock each frame, which resolves a win in the
same frame as the final second in favour of WON.

dispatch() is the reducer-style single entry point: game.py builds one
event value per input and hands it over, and the session applies it
and returns the routed result.

Usage:
    session = GameSession(level)
    session.start()
    result = session.click(50.0, 50.0, surface)
    session.update(dt)
    if session.phase is Phase.WON: ...
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from core.clock import GameClock
from core.errors import PhaseError
from core.markers import ImageSurface, Level
from core.tracker import DifferenceTracker, HitResult, MissMark

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Coarse session phases."""
    IDLE      = auto()
    PLAYING   = auto()
    WON       = auto()
    TIMED_OUT = auto()


# ── Events ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class PointerClick:
    x_pct: float
    y_pct: float
    surface: ImageSurface


@dataclass(frozen=True)
class ClockTick:
    """One whole second elapsed."""


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class LoadLevel:
    level: Level


SessionEvent = Union[StartGame, PointerClick, ClockTick, Restart, LoadLevel]


class GameSession:
    """One play-through of one level.

    Attributes:
        level:   The active Level. Its markers are read-only while playing.
        phase:   Current Phase.
        tracker: DifferenceTracker for found / attempts / score.
        clock:   GameClock for the countdown.
        editing: True while the level editor is active. Set by the editor.
    """

    def __init__(self, level: Level) -> None:
        """Initialise an idle session for a level."""
        self.level:   Level             = level
        self.phase:   Phase             = Phase.IDLE
        self.tracker: DifferenceTracker = DifferenceTracker(level)
        self.clock:   GameClock         = GameClock()
        self.editing: bool              = False
        self.bonus:   int               = 0
        self.clock.arm(level.time_limit)

    # ── Transitions ───────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin a run: reset tracking and start the clock.

        Raises:
            PhaseError: If not idle, the level has no markers, or the
                        editor is active.
        """
        if self.phase != Phase.IDLE:
            raise PhaseError(f"cannot start from {self.phase.name}")
        if self.editing:
            raise PhaseError("leave edit mode before starting a run")
        if not self.level.markers:
            raise PhaseError(f"level {self.level.id!r} has no differences to find")
        self.bonus = 0
        self.tracker.reset()
        self.clock.start(self.level.time_limit)
        self.phase = Phase.PLAYING
        logger.info("run started on %r: %d differences, %ds",
                    self.level.id, len(self.level.markers), self.level.time_limit)

    def click(self, x_pct: float, y_pct: float, surface: ImageSurface) -> HitResult:
        """Register a click and evaluate victory.

        Args:
            x_pct:   Click X in percent of the surface width.
            y_pct:   Click Y in percent of the surface height.
            surface: The pane that was clicked.

        Raises:
            PhaseError: If the session is not playing. Callers should
                        check accepts_clicks first.
        """
        if self.phase != Phase.PLAYING:
            raise PhaseError(f"clicks are not accepted while {self.phase.name}")
        result = self.tracker.register_click(x_pct, y_pct, surface)
        if result.matched and self.tracker.all_found:
            self._win()
        return result

    def _win(self) -> None:
        bonus = self.tracker.apply_bonus(self.clock.remaining)
        self.bonus = bonus
        self.clock.stop()
        self.phase = Phase.WON
        logger.info("level %r cleared with %ds left: bonus %d, score %d",
                    self.level.id, self.clock.remaining, bonus, self.tracker.score)

    def tick(self) -> bool:
        """Apply one clock second. Discarded unless playing.

        Returns:
            True if this tick timed the run out.
        """
        if self.phase != Phase.PLAYING:
            return False
        if self.clock.tick():
            self._time_out()
            return True
        return False

    def update(self, dt: float) -> None:
        """Advance real time: miss-marker expiry and, while playing, the clock."""
        self.tracker.update(dt)
        if self.phase == Phase.PLAYING and self.clock.update(dt):
            self._time_out()

    def _time_out(self) -> None:
        self.phase = Phase.TIMED_OUT
        logger.info("level %r timed out: %d/%d found, score %d",
                    self.level.id, len(self.tracker.found),
                    self.tracker.total, self.tracker.score)

    def restart(self) -> None:
        """Return to IDLE on the same level: tracker cleared, clock re-armed."""
        self.clock.stop()
        self.tracker.reset()
        self.bonus = 0
        self.clock.arm(self.level.time_limit)
        self.phase = Phase.IDLE

    def load_level(self, level: Level) -> None:
        """Swap in a different level and return to IDLE."""
        self.clock.stop()
        self.level = level
        self.tracker.bind(level)
        self.bonus = 0
        self.clock.arm(level.time_limit)
        self.phase = Phase.IDLE
        logger.info("loaded level %r (%s)", level.id, level.name)

    def dispatch(self, event: SessionEvent):
        """Apply one event and return the routed operation's result.

        Args:
            event: StartGame, PointerClick, ClockTick, Restart or LoadLevel.

        Raises:
            PhaseError: Propagated from start() / click().
            TypeError:  For an unknown event value.
        """
        if isinstance(event, PointerClick):
            return self.click(event.x_pct, event.y_pct, event.surface)
        if isinstance(event, ClockTick):
            return self.tick()
        if isinstance(event, StartGame):
            return self.start()
        if isinstance(event, Restart):
            return self.restart()
        if isinstance(event, LoadLevel):
            return self.load_level(event.level)
        raise TypeError(f"unknown session event: {event!r}")

    # ── Convenience reads ─────────────────────────────────────────────────────

    @property
    def accepts_clicks(self) -> bool:
        return self.phase == Phase.PLAYING

    @property
    def is_over(self) -> bool:
        return self.phase in (Phase.WON, Phase.TIMED_OUT)

    @property
    def score(self) -> int:
        return self.tracker.score

    @property
    def attempts(self) -> int:
        return self.tracker.attempts

    @property
    def found(self) -> list[int]:
        return self.tracker.found

    @property
    def found_count(self) -> int:
        return len(self.tracker.found)

    @property
    def total(self) -> int:
        return len(self.level.markers)

    @property
    def last_miss(self) -> MissMark | None:
        return self.tracker.last_miss

    @property
    def time_remaining(self) -> int:
        return self.clock.remaining

    def accuracy(self) -> int:
        return self.tracker.accuracy()

    def progress(self) -> float:
        return self.tracker.progress()
