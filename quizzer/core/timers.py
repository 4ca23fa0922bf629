"""Cancellable one-second tickers used for question timers and lead-in countdowns.

Both units run on an injected :class:`Scheduler`. The desktop client backs it with
``QTimer`` and the tests with a manual clock, so nothing here sleeps or spawns
threads. Every start returns a :class:`TickHandle`; cancelling the handle drops
the pending wake-up, and a stale wake-up that still arrives is ignored.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum, auto
from typing import Protocol

from quizzer.constants.quiz_constants import COUNTDOWN_START, TICK_INTERVAL_SECONDS


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Minimal event-loop interface: run ``callback`` once after ``delay_seconds``."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall: ...


class TickState(Enum):
    RUNNING = auto()
    FINISHED = auto()
    CANCELLED = auto()


class TickHandle:
    """A running count from ``start_value`` down to zero, one step per interval."""

    def __init__(
        self,
        scheduler: Scheduler,
        start_value: int,
        on_tick: Callable[[int], None] | None,
        on_finished: Callable[[], None],
        interval_seconds: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self._scheduler = scheduler
        self._remaining = start_value
        self._on_tick = on_tick
        self._on_finished = on_finished
        self._interval = interval_seconds
        self._state = TickState.RUNNING
        self._pending: ScheduledCall | None = None
        self._arm()

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def state(self) -> TickState:
        return self._state

    def is_running(self) -> bool:
        return self._state is TickState.RUNNING

    def cancel(self) -> None:
        """Stop without firing the finish callback. Safe to call more than once."""
        if self._state is not TickState.RUNNING:
            return
        self._state = TickState.CANCELLED
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _arm(self) -> None:
        self._pending = self._scheduler.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        if self._state is not TickState.RUNNING:
            return
        self._pending = None
        self._remaining -= 1
        if self._on_tick is not None:
            self._on_tick(self._remaining)
        # on_tick may have cancelled us.
        if self._state is not TickState.RUNNING:
            return
        if self._remaining <= 0:
            self._remaining = 0
            self._state = TickState.FINISHED
            self._on_finished()
            return
        self._arm()


class QuestionTimer:
    """Per-question time limit. Fires ``on_expired`` exactly once unless cancelled."""

    def __init__(
        self,
        scheduler: Scheduler,
        on_expired: Callable[[], None],
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_expired = on_expired
        self._on_tick = on_tick
        self._handle: TickHandle | None = None

    def start(self, duration_seconds: int) -> TickHandle:
        if duration_seconds <= 0:
            raise ValueError("Timer duration must be a positive number of seconds.")
        self.cancel()
        self._handle = TickHandle(self._scheduler, duration_seconds, self._on_tick, self._on_expired)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()

    @property
    def remaining(self) -> int | None:
        return None if self._handle is None else self._handle.remaining

    def is_running(self) -> bool:
        return self._handle is not None and self._handle.is_running()


class Countdown:
    """Fixed 3-2-1 lead-in before a question. Cannot be restarted while running."""

    def __init__(
        self,
        scheduler: Scheduler,
        on_done: Callable[[], None],
        on_tick: Callable[[int], None] | None = None,
        start_value: int = COUNTDOWN_START,
    ) -> None:
        self._scheduler = scheduler
        self._on_done = on_done
        self._on_tick = on_tick
        self._start_value = start_value
        self._handle: TickHandle | None = None

    def start(self) -> TickHandle:
        if self.is_running():
            raise RuntimeError("Countdown is already running.")
        self._handle = TickHandle(self._scheduler, self._start_value, self._on_tick, self._on_done)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()

    @property
    def remaining(self) -> int | None:
        return None if self._handle is None else self._handle.remaining

    def is_running(self) -> bool:
        return self._handle is not None and self._handle.is_running()
