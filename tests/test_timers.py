from __future__ import annotations

import pytest

from quizzer.core.timers import Countdown, QuestionTimer, TickState


def test_question_timer_ticks_down_and_expires_once(scheduler):
    ticks: list[int] = []
    expired: list[bool] = []
    timer = QuestionTimer(scheduler, on_expired=lambda: expired.append(True), on_tick=ticks.append)

    timer.start(3)
    assert timer.remaining == 3
    assert timer.is_running()

    scheduler.advance(2)
    assert ticks == [2, 1]
    assert expired == []

    scheduler.advance(1)
    assert ticks == [2, 1, 0]
    assert expired == [True]
    assert not timer.is_running()

    scheduler.advance(10)
    assert expired == [True]
    assert scheduler.pending() == []


def test_cancel_prevents_expiry(scheduler):
    expired: list[bool] = []
    timer = QuestionTimer(scheduler, on_expired=lambda: expired.append(True))
    handle = timer.start(5)

    scheduler.advance(2)
    timer.cancel()
    timer.cancel()
    scheduler.advance(10)

    assert expired == []
    assert handle.state is TickState.CANCELLED
    assert timer.remaining == 3


def test_stale_wakeup_after_cancel_is_ignored(scheduler):
    ticks: list[int] = []
    expired: list[bool] = []
    timer = QuestionTimer(scheduler, on_expired=lambda: expired.append(True), on_tick=ticks.append)
    timer.start(1)
    stale = scheduler.pending()[0]

    timer.cancel()
    # Simulate an event loop delivering the wake-up anyway.
    stale.callback()

    assert ticks == []
    assert expired == []


def test_restart_replaces_previous_run(scheduler):
    expired: list[int] = []
    timer = QuestionTimer(scheduler, on_expired=lambda: expired.append(int(scheduler.now)))
    first = timer.start(5)
    scheduler.advance(2)

    timer.start(2)
    scheduler.advance(10)

    assert first.state is TickState.CANCELLED
    assert expired == [4]


@pytest.mark.parametrize("duration", [0, -5])
def test_non_positive_duration_rejected(scheduler, duration):
    timer = QuestionTimer(scheduler, on_expired=lambda: None)
    with pytest.raises(ValueError):
        timer.start(duration)
    assert not timer.is_running()
    assert scheduler.pending() == []


def test_countdown_runs_three_two_one(scheduler):
    values: list[int] = []
    done: list[float] = []
    countdown = Countdown(scheduler, on_done=lambda: done.append(scheduler.now), on_tick=values.append)

    countdown.start()
    assert countdown.remaining == 3
    scheduler.advance(5)

    assert values == [2, 1, 0]
    assert done == [3.0]


def test_countdown_cannot_restart_while_running(scheduler):
    countdown = Countdown(scheduler, on_done=lambda: None)
    countdown.start()
    with pytest.raises(RuntimeError):
        countdown.start()


def test_countdown_can_start_again_after_finishing(scheduler):
    done: list[bool] = []
    countdown = Countdown(scheduler, on_done=lambda: done.append(True))
    countdown.start()
    scheduler.advance(3)
    countdown.start()
    scheduler.advance(3)
    assert done == [True, True]


def test_cancel_from_tick_callback_stops_run(scheduler):
    done: list[bool] = []
    countdown: Countdown

    def on_tick(value: int) -> None:
        if value == 1:
            countdown.cancel()

    countdown = Countdown(scheduler, on_done=lambda: done.append(True), on_tick=on_tick)
    countdown.start()
    scheduler.advance(10)

    assert done == []
    assert countdown.remaining == 1
