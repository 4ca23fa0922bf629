"""Exception hierarchy shared by the client, the server, and the core."""

from __future__ import annotations


class QuizzerError(Exception):
    """Base class for all application errors."""


class LoadFailure(QuizzerError):
    """Raised when a quiz cannot be fetched or contains no playable questions."""


class GenerationFailure(QuizzerError):
    """Raised when the AI question generator fails or returns unusable output."""

    def __init__(self, message: str, raw_output: str | None = None) -> None:
        super().__init__(message)
        self.raw_output = raw_output


class SubmitFailure(QuizzerError):
    """Raised when a completion report cannot be delivered."""


class AuthError(QuizzerError):
    """Raised for invalid credentials or an invalid/expired token."""


class NotFoundError(QuizzerError):
    """Raised when a record does not exist or is not owned by the caller."""


class ConflictError(QuizzerError):
    """Raised when a record would violate a uniqueness rule."""


class QuizValidationError(QuizzerError, ValueError):
    """Raised when a quiz form or payload violates the authoring rules."""


class QuestionFormatError(QuizValidationError):
    """Raised when a raw question cannot be parsed into a playable question."""


class ApiError(QuizzerError):
    """Raised by the API client for transport errors and unexpected responses."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
