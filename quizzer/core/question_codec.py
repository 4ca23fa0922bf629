"""Conversion between raw question dicts and :class:`QuizQuestion`.

Questions reach the application in three shapes:

    manual entry    {"text": ..., "options": [4 strings], "correctIndex": 0-3}
    AI generation   {"question": ..., "options": [4 strings], "correctAnswer": "<option text>"}
    legacy storage  {"question": ..., "options": {"A": ..., "D": ...}, "answer": "A"}

All three are parsed here, once, at the boundary. Serialisation writes a question
back in the shape it arrived in so stored quizzes never need a migration.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from quizzer.constants.quiz_constants import (
    MAX_GENERATED_QUESTIONS,
    MAX_TIME_LIMIT_SECONDS,
    MIN_GENERATED_QUESTIONS,
    MIN_TIME_LIMIT_SECONDS,
    OPTION_COUNT,
    OPTION_LETTERS,
    TOPIC_MAX_LENGTH,
    TOPIC_MIN_LENGTH,
)
from quizzer.core.errors import QuestionFormatError, QuizValidationError
from quizzer.core.evaluator import resolve_correct_index
from quizzer.core.models import OptionLayout, OptionSet, QuizQuestion


def parse_question(raw: Mapping[str, Any]) -> QuizQuestion:
    if not isinstance(raw, Mapping):
        raise QuestionFormatError("Question must be an object.")

    text_key = "text" if "text" in raw else "question"
    text = raw.get(text_key)
    if not isinstance(text, str):
        raise QuestionFormatError("Question text missing.")

    options = _parse_options(raw.get("options"))

    answer_key = "correctAnswer" if "correctAnswer" in raw else "answer"
    answer = raw.get(answer_key)
    if answer is not None:
        answer = str(answer).strip()

    correct_index = _parse_correct_index(raw.get("correctIndex"))
    if answer is None and correct_index is None:
        raise QuestionFormatError("Question has no correct answer.")

    return QuizQuestion(
        text=text.strip(),
        options=options,
        answer=answer,
        correct_index=correct_index,
        explanation=_optional_text(raw.get("explanation")),
        image_url=_optional_text(raw.get("image_url")),
        time_limit=_parse_time_limit(raw.get("time_limit")),
        text_key=text_key,
        answer_key=answer_key,
    )


def parse_questions(raw_questions: Iterable[Mapping[str, Any]]) -> list[QuizQuestion]:
    questions: list[QuizQuestion] = []
    for number, raw in enumerate(raw_questions, start=1):
        try:
            questions.append(parse_question(raw))
        except QuestionFormatError as exc:
            raise QuestionFormatError(f"Question {number}: {exc}") from exc
    return questions


def question_to_dict(question: QuizQuestion) -> dict[str, Any]:
    """Serialise a question using the same keys and encodings it was parsed from."""
    data: dict[str, Any] = {question.text_key: question.text}
    if question.options.layout is OptionLayout.LETTERED:
        data["options"] = dict(question.options.labelled())
    else:
        data["options"] = list(question.options.texts)

    if question.correct_index is not None:
        data["correctIndex"] = question.correct_index
    if question.answer is not None:
        data[question.answer_key] = question.answer
    if question.explanation:
        data["explanation"] = question.explanation
    if question.image_url is not None:
        data["image_url"] = question.image_url
    if question.time_limit is not None:
        data["time_limit"] = question.time_limit
    return data


def to_indexed_question(question: QuizQuestion) -> QuizQuestion:
    """Convert any question shape into the editor's list + ``correctIndex`` form."""
    correct_index = resolve_correct_index(question)
    if correct_index is None:
        raise QuestionFormatError(f"Cannot locate the correct option for '{question.text}'.")
    return QuizQuestion(
        text=question.text,
        options=OptionSet(OptionLayout.INDEXED, question.options.texts),
        correct_index=correct_index,
        explanation=question.explanation,
        image_url=question.image_url,
        time_limit=question.time_limit,
        text_key="text",
    )


def validate_quiz_form(topic: str, question_count: int | None) -> dict[str, str]:
    """Return field errors for the quiz generation form; empty when valid."""
    errors: dict[str, str] = {}

    stripped = (topic or "").strip()
    if not stripped:
        errors["topic"] = "Topic is required"
    elif len(stripped) < TOPIC_MIN_LENGTH:
        errors["topic"] = f"Topic must be at least {TOPIC_MIN_LENGTH} characters long"
    elif len(stripped) > TOPIC_MAX_LENGTH:
        errors["topic"] = f"Topic must be less than {TOPIC_MAX_LENGTH} characters"

    if question_count is None:
        errors["questionCount"] = "Number of questions is required"
    elif question_count < MIN_GENERATED_QUESTIONS:
        errors["questionCount"] = f"Must have at least {MIN_GENERATED_QUESTIONS} question"
    elif question_count > MAX_GENERATED_QUESTIONS:
        errors["questionCount"] = f"Cannot have more than {MAX_GENERATED_QUESTIONS} questions"

    return errors


def validate_authored_quiz(topic: str, questions: list[QuizQuestion]) -> None:
    """Check a quiz before saving it; raise with the first problem found."""
    if not (topic or "").strip():
        raise QuizValidationError("Quiz topic is required.")
    if not questions:
        raise QuizValidationError("Quiz must contain at least one question.")
    for number, question in enumerate(questions, start=1):
        if not question.text.strip():
            raise QuizValidationError(f"Question {number} text is required.")
        if any(not option.strip() for option in question.options.texts):
            raise QuizValidationError(f"All {OPTION_COUNT} options are required for question {number}.")
        if resolve_correct_index(question) is None:
            raise QuizValidationError(f"Select a correct answer for question {number}.")


def _parse_options(raw_options: Any) -> OptionSet:
    if isinstance(raw_options, Mapping):
        keys = sorted(str(key).strip().upper() for key in raw_options)
        if keys != list(OPTION_LETTERS):
            raise QuestionFormatError("Lettered options must use exactly the keys A, B, C and D.")
        normalized = {str(key).strip().upper(): value for key, value in raw_options.items()}
        texts = tuple(_option_text(normalized[letter]) for letter in OPTION_LETTERS)
        return OptionSet(OptionLayout.LETTERED, texts)

    if isinstance(raw_options, (list, tuple)):
        if len(raw_options) != OPTION_COUNT:
            raise QuestionFormatError(f"Each question must have exactly {OPTION_COUNT} options.")
        return OptionSet(OptionLayout.INDEXED, tuple(_option_text(value) for value in raw_options))

    raise QuestionFormatError("Options must be a list or an A-D mapping.")


def _option_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _parse_correct_index(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise QuestionFormatError("correctIndex must be an integer.")
    try:
        index = int(value)
    except (TypeError, ValueError) as exc:
        raise QuestionFormatError("correctIndex must be an integer.") from exc
    if not 0 <= index < OPTION_COUNT:
        raise QuestionFormatError(f"correctIndex must be between 0 and {OPTION_COUNT - 1}.")
    return index


def _parse_time_limit(value: Any) -> int | None:
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise QuestionFormatError("time_limit must be an integer number of seconds.")
    try:
        seconds = int(value)
    except (TypeError, ValueError) as exc:
        raise QuestionFormatError("time_limit must be an integer number of seconds.") from exc
    if not MIN_TIME_LIMIT_SECONDS <= seconds <= MAX_TIME_LIMIT_SECONDS:
        raise QuestionFormatError(
            f"time_limit must be between {MIN_TIME_LIMIT_SECONDS} and {MAX_TIME_LIMIT_SECONDS} seconds."
        )
    return seconds


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
