"""
core/clock.py — Countdown clock for Spot the Difference.

One clock per session, counting whole seconds down from the level's time
limit. The clock owns only its own state — it does not touch the
tracker or the session phase. session.py reacts to the expiry report.

States:
    STOPPED  — frozen; ticks are discarded
    RUNNING  — remaining drops by exactly 1 per tick
    EXPIRED  — reached 0 while running; reported once

Usage:
    clock = GameClock()
    clock.start(120)

    # each frame:
    if clock.update(dt):
        # expired this frame: handle timeout in session.py
    fill = clock.fill()       # float 0.0–1.0 for the timer bar
"""

from enum import Enum, auto


class ClockState(Enum):
    """Countdown clock states."""
    STOPPED = auto()
    RUNNING = auto()
    EXPIRED = auto()


class GameClock:
    """Whole-second countdown driven by the frame loop.

    Attributes:
        _limit:     Seconds the current run started with.
        _remaining: Whole seconds left.
        _carry:     Real time accumulated towards the next tick.
        _state:     Current ClockState.
    """

    def __init__(self) -> None:
        """Initialise a stopped clock with nothing on it."""
        self._limit:     int        = 0
        self._remaining: int        = 0
        self._carry:     float      = 0.0
        self._state:     ClockState = ClockState.STOPPED

    def start(self, limit_s: int) -> None:
        """Set remaining to limit_s and begin counting down.

        Args:
            limit_s: Time limit in whole seconds. Must be positive.
        """
        if limit_s <= 0:
            raise ValueError(f"time limit must be positive, got {limit_s}")
        self._limit     = int(limit_s)
        self._remaining = int(limit_s)
        self._carry     = 0.0
        self._state     = ClockState.RUNNING

    def arm(self, limit_s: int) -> None:
        """Load a time limit without starting, so the HUD shows the full time."""
        self._limit     = int(limit_s)
        self._remaining = int(limit_s)
        self._carry     = 0.0
        self._state     = ClockState.STOPPED

    def stop(self) -> None:
        """Freeze remaining time.

        Used on victory, on restart, and whenever the session leaves
        the playing phase. Any tick that arrives afterwards is dropped.
        """
        if self._state == ClockState.RUNNING:
            self._state = ClockState.STOPPED
        self._carry = 0.0

    def tick(self) -> bool:
        """Advance the countdown by one second.

        No-op unless running, so a stale tick after victory or reset
        can never decrement a stopped clock.

        Returns:
            True exactly once: on the tick that reaches zero.
        """
        if self._state != ClockState.RUNNING:
            return False
        self._remaining = max(0, self._remaining - 1)
        if self._remaining == 0:
            self._state = ClockState.EXPIRED
            return True
        return False

    def update(self, dt: float) -> bool:
        """Feed real time into the clock, ticking once per whole second.

        Args:
            dt: Delta time in seconds since the last frame.

        Returns:
            True if the clock expired during this update.
        """
        if self._state != ClockState.RUNNING:
            self._carry = 0.0
            return False
        self._carry += dt
        while self._carry >= 1.0 and self._state == ClockState.RUNNING:
            self._carry -= 1.0
            if self.tick():
                return True
        return False

    # ── Convenience reads ─────────────────────────────────────────────────────

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == ClockState.RUNNING

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def limit(self) -> int:
        return self._limit

    def fill(self) -> float:
        """Return the remaining time as a fraction of the limit.

        Returns:
            Float in [0.0, 1.0]. 1.0 = full time left, 0.0 = expired.
        """
        if self._limit <= 0:
            return 0.0
        return max(0.0, min(1.0, self._remaining / self._limit))
