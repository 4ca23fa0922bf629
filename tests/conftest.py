from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from quizzer.core.models import OptionLayout, OptionSet, QuizQuestion


class ManualCall:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler: time only moves when a test calls ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.calls: list[ManualCall] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(self.now + delay_seconds, callback)
        self.calls.append(call)
        return call

    def pending(self) -> list[ManualCall]:
        return [call for call in self.calls if not call.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [call for call in self.pending() if call.due <= target + 1e-9]
            if not due:
                break
            call = min(due, key=lambda item: item.due)
            self.calls.remove(call)
            self.now = call.due
            call.callback()
        self.now = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


def make_question(
    text: str = "Capital of France?",
    options: tuple[str, ...] = ("Paris", "Rome", "Berlin", "Madrid"),
    *,
    correct_index: int | None = 0,
    answer: str | None = None,
    lettered: bool = False,
    time_limit: int | None = None,
    explanation: str | None = None,
) -> QuizQuestion:
    layout = OptionLayout.LETTERED if lettered else OptionLayout.INDEXED
    return QuizQuestion(
        text=text,
        options=OptionSet(layout, options),
        answer=answer,
        correct_index=correct_index,
        time_limit=time_limit,
        explanation=explanation,
    )


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db" / "quizzer.db"
