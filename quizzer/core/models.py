"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from quizzer.constants.quiz_constants import DEFAULT_TIME_LIMIT_SECONDS, OPTION_LETTERS


class OptionLayout(Enum):
    """How a question's options arrived: a plain list or an A-D mapping."""

    INDEXED = "indexed"
    LETTERED = "lettered"


@dataclass(frozen=True, slots=True)
class OptionSet:
    """Four answer options together with the encoding they came in."""

    layout: OptionLayout
    texts: tuple[str, ...]

    @property
    def keys(self) -> tuple[str, ...]:
        if self.layout is OptionLayout.LETTERED:
            return OPTION_LETTERS[: len(self.texts)]
        return tuple(str(index) for index in range(len(self.texts)))

    def labelled(self) -> list[tuple[str, str]]:
        """Return ``(letter, text)`` pairs in display order."""
        return list(zip(OPTION_LETTERS, self.texts))

    def __len__(self) -> int:
        return len(self.texts)


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question with four options and one correct answer.

    ``answer`` holds either literal option text or a letter key, ``correct_index``
    the 0-based index form. Either (or both) may be present depending on where
    the question was authored.
    """

    text: str
    options: OptionSet
    answer: str | None = None
    correct_index: int | None = None
    explanation: str | None = None
    image_url: str | None = None
    time_limit: int | None = None
    # Raw keys the text and answer were read from, kept for round-trips.
    text_key: str = "text"
    answer_key: str = "correctAnswer"

    @property
    def effective_time_limit(self) -> int:
        return self.time_limit or DEFAULT_TIME_LIMIT_SECONDS


@dataclass(slots=True)
class UserAccount:
    """Registered user as stored by the repository."""

    id: int
    name: str
    email: str
    password_hash: str = field(repr=False, default="")
    created_at: datetime | None = None


@dataclass(slots=True)
class CompletionRecord:
    """Final score submitted once per completed session."""

    quiz_id: int
    user_id: int | None
    score: int
    total_questions: int
    is_public_attempt: bool = False


@dataclass(slots=True)
class QuizRecord:
    """Stored quiz. ``questions`` keeps the raw dicts exactly as they were saved."""

    id: int
    user_id: int | None
    topic: str
    question_count: int
    questions: list[dict]
    public: bool = False
    score: int | None = None
    completed: bool = False
    created_at: datetime | None = None


@dataclass(slots=True)
class QuizSummary:
    """Row of a quiz listing (library, history, public quizzes)."""

    id: int
    topic: str
    question_count: int
    created_at: datetime | None = None
    score: int | None = None
    completed: bool = False
    is_public_attempt: bool = False
