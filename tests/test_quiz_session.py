from __future__ import annotations

from conftest import make_question
from quizzer.constants.quiz_constants import TIME_UP_ANSWER
from quizzer.core.services.quiz_session import QuizSession, SessionPhase


class RecordingReporter:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[int, int]] = []
        self.error = error

    def report(self, score: int, total_questions: int) -> None:
        self.calls.append((score, total_questions))
        if self.error is not None:
            raise self.error


def _three_questions():
    return [
        make_question("Capital of France?", correct_index=0),
        make_question("2 + 2?", ("3", "4", "5", "22"), correct_index=None, answer="4"),
        make_question("Largest planet?", ("Mars", "Venus", "Jupiter", "Earth"), correct_index=None, answer="C", lettered=True),
    ]


def _start(scheduler, questions=None, reporter=None) -> QuizSession:
    session = QuizSession(scheduler, reporter=reporter)
    session.load(_three_questions() if questions is None else questions)
    return session


def test_starts_with_countdown_before_first_question(scheduler):
    session = _start(scheduler)
    assert session.phase is SessionPhase.COUNTDOWN
    assert session.countdown_value == 3

    scheduler.advance(2)
    assert session.phase is SessionPhase.COUNTDOWN
    assert session.countdown_value == 1

    scheduler.advance(1)
    assert session.phase is SessionPhase.ACTIVE
    assert session.current_index == 0
    assert session.time_left == 30


def test_full_run_with_timeout_in_the_middle(scheduler):
    reporter = RecordingReporter()
    session = _start(scheduler, reporter=reporter)

    scheduler.advance(3)
    assert session.select(0) is True
    assert session.phase is SessionPhase.REVEALED
    assert session.last_answer_correct is True
    session.advance()

    scheduler.advance(3)
    assert session.phase is SessionPhase.ACTIVE
    scheduler.advance(30)
    assert session.phase is SessionPhase.REVEALED
    assert session.selected_answer == TIME_UP_ANSWER
    assert session.timed_out()
    assert session.last_answer_correct is False
    session.advance()

    scheduler.advance(3)
    assert session.select("C") is True
    assert session.is_last_question()
    session.advance()
    scheduler.advance(0)

    assert session.phase is SessionPhase.COMPLETED
    assert session.score == 2
    assert reporter.calls == [(2, 3)]


def test_uses_question_time_limit(scheduler):
    session = _start(scheduler, questions=[make_question(time_limit=10)])
    scheduler.advance(3)
    assert session.time_left == 10
    scheduler.advance(9)
    assert session.phase is SessionPhase.ACTIVE
    scheduler.advance(1)
    assert session.phase is SessionPhase.REVEALED


def test_answer_and_timeout_race_first_wins(scheduler):
    session = _start(scheduler, questions=[make_question(time_limit=5)])
    scheduler.advance(3)
    stale_tick = scheduler.pending()[0]

    assert session.select(0) is True
    # The timer wake-up arrives anyway; the answer already counted.
    stale_tick.callback()
    scheduler.advance(10)

    assert session.phase is SessionPhase.REVEALED
    assert session.selected_answer == 0
    assert session.score == 1


def test_answer_after_timeout_is_ignored(scheduler):
    session = _start(scheduler, questions=[make_question(time_limit=5)])
    scheduler.advance(8)
    assert session.phase is SessionPhase.REVEALED

    assert session.select(0) is False
    assert session.selected_answer == TIME_UP_ANSWER
    assert session.score == 0


def test_second_answer_is_ignored(scheduler):
    session = _start(scheduler)
    scheduler.advance(3)
    assert session.select(1) is True
    assert session.select(0) is False
    assert session.score == 0
    assert session.selected_answer == 1


def test_select_outside_active_phase_is_ignored(scheduler):
    session = QuizSession(scheduler)
    assert session.select(0) is False
    session.load(_three_questions())
    assert session.select(0) is False
    assert session.phase is SessionPhase.COUNTDOWN


def test_advance_is_idempotent(scheduler):
    reporter = RecordingReporter()
    session = _start(scheduler, questions=[make_question()], reporter=reporter)
    scheduler.advance(3)
    session.select(0)

    session.advance()
    session.advance()
    scheduler.advance(0)

    assert session.phase is SessionPhase.COMPLETED
    assert reporter.calls == [(1, 1)]


def test_advance_during_countdown_does_nothing(scheduler):
    session = _start(scheduler)
    session.advance()
    assert session.phase is SessionPhase.COUNTDOWN
    assert session.current_index == 0


def test_score_never_exceeds_answered_questions(scheduler):
    session = _start(scheduler)
    for index in range(3):
        scheduler.advance(3)
        session.select(session.current_question.correct_index or 0)
        session.select(0)
        assert session.score <= index + 1
        session.advance()
    assert session.phase is SessionPhase.COMPLETED


def test_empty_quiz_fails(scheduler):
    reporter = RecordingReporter()
    session = QuizSession(scheduler, reporter=reporter)
    session.load([])
    assert session.phase is SessionPhase.FAILED
    assert session.error_message == "This quiz has no questions."
    assert reporter.calls == []
    assert scheduler.pending() == []


def test_fail_only_from_loading(scheduler):
    session = QuizSession(scheduler)
    session.fail("Quiz not found")
    assert session.phase is SessionPhase.FAILED
    assert session.error_message == "Quiz not found"

    session.load(_three_questions())
    assert session.phase is SessionPhase.FAILED

    running = _start(scheduler)
    running.fail("late error")
    assert running.phase is SessionPhase.COUNTDOWN


def test_close_stops_timers_and_ignores_input(scheduler):
    reporter = RecordingReporter()
    session = _start(scheduler, questions=[make_question()], reporter=reporter)
    scheduler.advance(3)
    session.close()

    assert scheduler.pending() == []
    assert session.select(0) is False
    scheduler.advance(60)
    assert session.phase is SessionPhase.ACTIVE
    assert session.is_closed()
    assert reporter.calls == []


def test_reporter_error_does_not_undo_completion(scheduler):
    reporter = RecordingReporter(error=RuntimeError("boom"))
    session = _start(scheduler, questions=[make_question()], reporter=reporter)
    scheduler.advance(3)
    session.select(0)
    session.advance()
    scheduler.advance(0)

    assert session.phase is SessionPhase.COMPLETED
    assert session.score == 1
    assert reporter.calls == [(1, 1)]


def test_listeners_see_every_transition(scheduler):
    phases: list[SessionPhase] = []
    session = QuizSession(scheduler)
    session.add_listener(lambda s: phases.append(s.phase))
    session.load([make_question(time_limit=5)])
    scheduler.advance(3)
    session.select(0)
    session.advance()

    assert phases[0] is SessionPhase.COUNTDOWN
    assert SessionPhase.ACTIVE in phases
    assert phases[-2:] == [SessionPhase.REVEALED, SessionPhase.COMPLETED]


def test_completed_is_shown_before_the_score_is_reported(scheduler):
    events: list[str] = []

    class OrderedReporter:
        def report(self, score: int, total_questions: int) -> None:
            events.append(f"report {score}/{total_questions}")

    session = _start(scheduler, questions=[make_question()], reporter=OrderedReporter())
    session.add_listener(lambda s: events.append(s.phase.value))
    scheduler.advance(3)
    session.select(0)
    session.advance()

    assert session.phase is SessionPhase.COMPLETED
    assert events[-1] == "completed"
    assert not any(event.startswith("report") for event in events)

    scheduler.advance(0)
    assert events[-1] == "report 1/1"
    assert events.count("report 1/1") == 1
