"""State machine for playing a single quiz: countdown, timed question, reveal, completion."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
import logging
from typing import Protocol

from quizzer.constants.quiz_constants import TIME_UP_ANSWER
from quizzer.core.evaluator import Selection, is_correct
from quizzer.core.models import QuizQuestion
from quizzer.core.timers import Countdown, QuestionTimer, Scheduler

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    LOADING = "loading"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    REVEALED = "revealed"
    COMPLETED = "completed"
    FAILED = "failed"


class ScoreReporter(Protocol):
    def report(self, score: int, total_questions: int) -> object: ...


SessionListener = Callable[["QuizSession"], None]


class QuizSession:
    """Drives one play-through of a quiz.

    Phases run ``LOADING -> COUNTDOWN -> ACTIVE -> REVEALED`` and then either back
    to ``COUNTDOWN`` for the next question or on to ``COMPLETED``. A load error
    ends in ``FAILED`` instead. All transitions happen on the scheduler's thread;
    every handler checks the current phase first so a late timer wake-up or a
    second click is a no-op.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        reporter: ScoreReporter | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._reporter = reporter
        self._countdown = Countdown(
            scheduler,
            on_done=self._handle_countdown_done,
            on_tick=lambda _value: self._notify(),
        )
        self._timer = QuestionTimer(
            scheduler,
            on_expired=self._handle_time_up,
            on_tick=lambda _value: self._notify(),
        )
        self._listeners: list[SessionListener] = []

        self._phase = SessionPhase.LOADING
        self._questions: tuple[QuizQuestion, ...] = ()
        self._current_index: int = 0
        self._score: int = 0
        self._selected_answer: Selection | None = None
        self._last_answer_correct: bool | None = None
        self._error_message: str | None = None
        self._completion_reported: bool = False
        self._closed: bool = False

    # --- Observers ---

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- Inputs ---

    def load(self, questions: Sequence[QuizQuestion]) -> None:
        """Start the session with a fixed list of questions."""
        if self._closed or self._phase is not SessionPhase.LOADING:
            return
        if not questions:
            self.fail("This quiz has no questions.")
            return
        self._questions = tuple(questions)
        self._begin_countdown()

    def fail(self, message: str) -> None:
        """Enter the terminal error state; used when quiz data cannot be loaded."""
        if self._closed or self._phase is not SessionPhase.LOADING:
            return
        self._phase = SessionPhase.FAILED
        self._error_message = message
        logger.warning("Quiz session failed to load: %s", message)
        self._notify()

    def select(self, selected: Selection) -> bool:
        """Answer the active question. Returns False if the answer was not accepted."""
        if self._closed or self._phase is not SessionPhase.ACTIVE:
            return False
        self._timer.cancel()
        question = self._questions[self._current_index]
        correct = is_correct(question, selected)
        self._selected_answer = selected
        self._last_answer_correct = correct
        if correct:
            self._score += 1
        self._phase = SessionPhase.REVEALED
        self._notify()
        return True

    def advance(self) -> None:
        """Leave the reveal screen: next question's countdown, or completion."""
        if self._closed or self._phase is not SessionPhase.REVEALED:
            return
        if self.is_last_question():
            self._phase = SessionPhase.COMPLETED
            self._notify()
            self._schedule_report()
            return
        self._current_index += 1
        self._selected_answer = None
        self._last_answer_correct = None
        self._begin_countdown()

    def close(self) -> None:
        """Stop all timers; the session ignores every later event."""
        self._closed = True
        self._countdown.cancel()
        self._timer.cancel()

    # --- Timer callbacks ---

    def _begin_countdown(self) -> None:
        self._phase = SessionPhase.COUNTDOWN
        self._countdown.start()
        self._notify()

    def _handle_countdown_done(self) -> None:
        if self._closed or self._phase is not SessionPhase.COUNTDOWN:
            return
        self._phase = SessionPhase.ACTIVE
        self._timer.start(self._questions[self._current_index].effective_time_limit)
        self._notify()

    def _handle_time_up(self) -> None:
        if self._closed or self._phase is not SessionPhase.ACTIVE:
            return
        self._selected_answer = TIME_UP_ANSWER
        self._last_answer_correct = False
        self._phase = SessionPhase.REVEALED
        self._notify()

    def _schedule_report(self) -> None:
        if self._completion_reported:
            return
        self._completion_reported = True
        if self._reporter is None:
            return
        # The reporter may block on the network; listeners render COMPLETED first.
        self._scheduler.call_later(0, self._deliver_report)

    def _deliver_report(self) -> None:
        try:
            self._reporter.report(self._score, len(self._questions))
        except Exception:
            # Completion stands even when reporting blows up.
            logger.exception("Completion reporter raised; score %s was not recorded", self._score)

    # --- Queries ---

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def score(self) -> int:
        return self._score

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> tuple[QuizQuestion, ...]:
        return self._questions

    @property
    def current_question(self) -> QuizQuestion | None:
        if not self._questions:
            return None
        return self._questions[self._current_index]

    @property
    def selected_answer(self) -> Selection | None:
        return self._selected_answer

    @property
    def last_answer_correct(self) -> bool | None:
        return self._last_answer_correct

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def time_left(self) -> int | None:
        return self._timer.remaining

    @property
    def countdown_value(self) -> int | None:
        return self._countdown.remaining

    def is_last_question(self) -> bool:
        return self._current_index >= len(self._questions) - 1

    def timed_out(self) -> bool:
        return self._selected_answer == TIME_UP_ANSWER

    def is_closed(self) -> bool:
        return self._closed
