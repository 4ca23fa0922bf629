"""Request and response bodies of the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from quizzer.constants.quiz_constants import MAX_GENERATED_QUESTIONS, MIN_GENERATED_QUESTIONS


class RegisterPayload(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginPayload(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    token: str
    user: UserOut


class GenerateQuizPayload(BaseModel):
    """Accepts the camelCase keys the clients send."""

    model_config = ConfigDict(populate_by_name=True)

    topic: str
    question_count: int = Field(
        alias="questionCount",
        ge=MIN_GENERATED_QUESTIONS,
        le=MAX_GENERATED_QUESTIONS,
    )
    existing_questions: list[str] = Field(default_factory=list, alias="existingQuestions")
    language: str | None = None


class GenerateQuizResponse(BaseModel):
    questions: list[dict[str, Any]]


class QuizPayload(BaseModel):
    topic: str
    questions: list[dict[str, Any]]
    # Accepted for compatibility; the stored count always follows ``questions``.
    question_count: int | None = None
    public: bool = False


class QuizOut(BaseModel):
    id: int
    user_id: int | None
    topic: str
    question_count: int
    questions: list[dict[str, Any]]
    public: bool
    score: int | None = None
    completed: bool = False
    created_at: datetime | None = None


class QuizSummaryOut(BaseModel):
    id: int
    topic: str
    question_count: int
    created_at: datetime | None = None
    score: int | None = None
    completed: bool = False
    is_public_attempt: bool = False


class SharePayload(BaseModel):
    email: str


class ScorePayload(BaseModel):
    score: int = Field(ge=0)


class CompletionOut(BaseModel):
    quiz_id: int
    user_id: int | None
    score: int
    total_questions: int
    is_public_attempt: bool


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    url: str
