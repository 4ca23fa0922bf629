from __future__ import annotations

import pytest

from quizzer.core.errors import QuestionFormatError, QuizValidationError
from quizzer.core.models import OptionLayout
from quizzer.core.question_codec import (
    parse_question,
    parse_questions,
    question_to_dict,
    to_indexed_question,
    validate_authored_quiz,
    validate_quiz_form,
)

MANUAL = {"text": "Capital of France?", "options": ["Paris", "Rome", "Berlin", "Madrid"], "correctIndex": 0}
GENERATED = {
    "question": "Capital of Italy?",
    "options": ["Paris", "Rome", "Berlin", "Madrid"],
    "correctAnswer": "Rome",
    "explanation": "Rome has been the capital since 1871.",
}
LEGACY = {
    "question": "Capital of Spain?",
    "options": {"A": "Paris", "B": "Rome", "C": "Berlin", "D": "Madrid"},
    "answer": "D",
}


def test_parses_manual_shape():
    question = parse_question(MANUAL)
    assert question.text == "Capital of France?"
    assert question.options.layout is OptionLayout.INDEXED
    assert question.correct_index == 0
    assert question.answer is None


def test_parses_generated_shape():
    question = parse_question(GENERATED)
    assert question.text_key == "question"
    assert question.answer == "Rome"
    assert question.answer_key == "correctAnswer"
    assert question.explanation.startswith("Rome")


def test_parses_lettered_shape():
    question = parse_question(LEGACY)
    assert question.options.layout is OptionLayout.LETTERED
    assert question.options.texts == ("Paris", "Rome", "Berlin", "Madrid")
    assert question.answer == "D"
    assert question.answer_key == "answer"


@pytest.mark.parametrize("raw", [MANUAL, GENERATED, LEGACY])
def test_serialises_in_the_shape_it_arrived(raw):
    assert question_to_dict(parse_question(raw)) == raw


@pytest.mark.parametrize(
    "raw, message",
    [
        ("not a dict", "object"),
        ({"options": ["a", "b", "c", "d"], "correctIndex": 0}, "text missing"),
        ({"text": "Q", "options": ["a", "b", "c"], "correctIndex": 0}, "exactly 4 options"),
        ({"text": "Q", "options": {"A": "a", "B": "b"}, "answer": "A"}, "keys A, B, C and D"),
        ({"text": "Q", "options": "abcd", "correctIndex": 0}, "list or an A-D mapping"),
        ({"text": "Q", "options": ["a", "b", "c", "d"]}, "no correct answer"),
        ({"text": "Q", "options": ["a", "b", "c", "d"], "correctIndex": 4}, "between 0 and 3"),
        ({"text": "Q", "options": ["a", "b", "c", "d"], "correctIndex": True}, "integer"),
        ({"text": "Q", "options": ["a", "b", "c", "d"], "correctIndex": 0, "time_limit": 1}, "between 5 and 300"),
    ],
)
def test_rejects_malformed_questions(raw, message):
    with pytest.raises(QuestionFormatError, match=message):
        parse_question(raw)


def test_parse_questions_reports_position():
    with pytest.raises(QuestionFormatError, match="Question 2:"):
        parse_questions([MANUAL, {"text": "broken"}])


def test_time_limit_parsed_from_string():
    question = parse_question({**MANUAL, "time_limit": "45"})
    assert question.time_limit == 45
    assert question.effective_time_limit == 45
    assert parse_question(MANUAL).effective_time_limit == 30


def test_to_indexed_question_converts_lettered_and_literal():
    lettered = to_indexed_question(parse_question(LEGACY))
    assert lettered.options.layout is OptionLayout.INDEXED
    assert lettered.correct_index == 3
    assert question_to_dict(lettered) == {
        "text": "Capital of Spain?",
        "options": ["Paris", "Rome", "Berlin", "Madrid"],
        "correctIndex": 3,
    }

    literal = to_indexed_question(parse_question(GENERATED))
    assert literal.correct_index == 1
    assert literal.explanation == GENERATED["explanation"]


def test_to_indexed_question_requires_resolvable_answer():
    question = parse_question({**GENERATED, "correctAnswer": "Lisbon"})
    with pytest.raises(QuestionFormatError):
        to_indexed_question(question)


@pytest.mark.parametrize(
    "topic, count, expected",
    [
        ("History", 5, {}),
        ("", 5, {"topic": "Topic is required"}),
        ("ab", 5, {"topic": "Topic must be at least 3 characters long"}),
        ("x" * 101, 5, {"topic": "Topic must be less than 100 characters"}),
        ("History", None, {"questionCount": "Number of questions is required"}),
        ("History", 0, {"questionCount": "Must have at least 1 question"}),
        ("History", 21, {"questionCount": "Cannot have more than 20 questions"}),
    ],
)
def test_validate_quiz_form(topic, count, expected):
    assert validate_quiz_form(topic, count) == expected


def test_validate_authored_quiz():
    validate_authored_quiz("Capitals", [parse_question(MANUAL)])

    with pytest.raises(QuizValidationError, match="topic is required"):
        validate_authored_quiz("  ", [parse_question(MANUAL)])
    with pytest.raises(QuizValidationError, match="at least one question"):
        validate_authored_quiz("Capitals", [])
    with pytest.raises(QuizValidationError, match="All 4 options are required for question 1"):
        validate_authored_quiz("Capitals", [parse_question({**MANUAL, "options": ["Paris", "", "Berlin", "Madrid"]})])
    with pytest.raises(QuizValidationError, match="correct answer for question 1"):
        validate_authored_quiz("Capitals", [parse_question({**GENERATED, "correctAnswer": "Lisbon"})])
