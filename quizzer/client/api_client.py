"""HTTP client the desktop application uses to talk to the quiz server."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
from typing import Any

import httpx

from quizzer.constants.network_constants import API_REQUEST_TIMEOUT_SECONDS
from quizzer.core.client_session import ClientSession, SignedInUser
from quizzer.core.errors import ApiError, GenerationFailure, LoadFailure, QuestionFormatError, SubmitFailure
from quizzer.core.models import CompletionRecord, QuizQuestion, QuizSummary
from quizzer.core.question_codec import parse_questions

logger = logging.getLogger(__name__)

# AI generation waits on the model, so it gets more time than plain requests.
GENERATION_TIMEOUT_SECONDS = 120.0


@dataclass(slots=True)
class LoadedQuiz:
    """A quiz fetched for playing or editing."""

    id: int
    topic: str
    questions: list[QuizQuestion]
    public: bool = False
    user_id: int | None = None
    raw_questions: list[dict[str, Any]] = field(default_factory=list)


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _to_summary(data: dict[str, Any]) -> QuizSummary:
    return QuizSummary(
        id=int(data["id"]),
        topic=str(data.get("topic", "")),
        question_count=int(data.get("question_count", 0)),
        created_at=_parse_datetime(data.get("created_at")),
        score=data.get("score"),
        completed=bool(data.get("completed", False)),
        is_public_attempt=bool(data.get("is_public_attempt", False)),
    )


def _to_user(data: dict[str, Any]) -> SignedInUser:
    return SignedInUser(id=int(data["id"]), name=str(data.get("name", "")), email=str(data.get("email", "")))


class QuizApiClient:
    """Synchronous wrapper around the REST API.

    Every call reads the bearer token from the shared :class:`ClientSession`, so
    signing in or out is immediately visible to all callers.
    """

    def __init__(
        self,
        session: ClientSession,
        transport: httpx.BaseTransport | None = None,
        timeout: float = API_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._session = session
        self._client = httpx.Client(base_url=session.api_base_url, timeout=timeout, transport=transport)

    @property
    def session(self) -> ClientSession:
        return self._session

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = self._session.auth_headers()
        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"Could not reach the server: {exc}") from exc

        if response.is_error:
            raise ApiError(self._error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("Server returned an invalid response", status_code=response.status_code) from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Request failed with status {response.status_code}"
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or body.get("detail")
            if isinstance(message, str):
                return message
        return f"Request failed with status {response.status_code}"

    # --- Accounts ---

    def register(self, name: str, email: str, password: str) -> SignedInUser:
        data = self._request("POST", "/api/auth/register", json={"name": name, "email": email, "password": password})
        return self._sign_in(data)

    def login(self, email: str, password: str) -> SignedInUser:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        return self._sign_in(data)

    def _sign_in(self, data: dict[str, Any]) -> SignedInUser:
        user = _to_user(data["user"])
        self._session.sign_in(data["token"], user)
        logger.info("Signed in as %s", user.email)
        return user

    def logout(self) -> None:
        self._session.sign_out()

    def get_user(self) -> SignedInUser:
        return _to_user(self._request("GET", "/api/user"))

    # --- Quizzes ---

    def get_quiz(self, quiz_id: int) -> LoadedQuiz:
        """Fetch a quiz ready to play; any problem surfaces as :class:`LoadFailure`."""
        try:
            data = self._request("GET", f"/api/quiz/{quiz_id}")
        except ApiError as exc:
            raise LoadFailure(str(exc)) from exc

        raw_questions = data.get("questions") or []
        try:
            questions = parse_questions(raw_questions)
        except QuestionFormatError as exc:
            raise LoadFailure(f"Quiz {quiz_id} has an invalid question. {exc}") from exc
        if not questions:
            raise LoadFailure("This quiz has no questions.")
        return LoadedQuiz(
            id=int(data["id"]),
            topic=str(data.get("topic", "")),
            questions=questions,
            public=bool(data.get("public", False)),
            user_id=data.get("user_id"),
            raw_questions=list(raw_questions),
        )

    def list_quizzes(self, exclude_public_attempts: bool = False) -> list[QuizSummary]:
        params = {"excludePublicAttempts": "true"} if exclude_public_attempts else None
        return [_to_summary(item) for item in self._request("GET", "/api/quizzes", params=params)]

    def list_public_quizzes(self) -> list[QuizSummary]:
        return [_to_summary(item) for item in self._request("GET", "/api/public-quizzes")]

    def create_quiz(self, topic: str, questions: list[dict[str, Any]], public: bool = False) -> int:
        payload = {"topic": topic, "questions": questions, "question_count": len(questions), "public": public}
        return int(self._request("POST", "/api/quizzes", json=payload)["id"])

    def update_quiz(self, quiz_id: int, topic: str, questions: list[dict[str, Any]], public: bool = False) -> int:
        payload = {"topic": topic, "questions": questions, "question_count": len(questions), "public": public}
        return int(self._request("PUT", f"/api/quizzes/{quiz_id}", json=payload)["id"])

    def delete_quiz(self, quiz_id: int) -> None:
        self._request("DELETE", f"/api/quizzes/{quiz_id}")

    def share_quiz(self, quiz_id: int, email: str) -> None:
        self._request("POST", f"/api/quizzes/{quiz_id}/share", json={"email": email})

    # --- Results ---

    def report_completion(self, quiz_id: int, score: int) -> CompletionRecord:
        try:
            data = self._request("PUT", f"/api/quizzes/{quiz_id}/complete", json={"score": score})
        except ApiError as exc:
            raise SubmitFailure(str(exc)) from exc
        return CompletionRecord(
            quiz_id=int(data["quiz_id"]),
            user_id=data.get("user_id"),
            score=int(data["score"]),
            total_questions=int(data["total_questions"]),
            is_public_attempt=bool(data.get("is_public_attempt", False)),
        )

    def record_attempt(self, quiz_id: int, score: int) -> None:
        self._request("POST", f"/api/quizzes/{quiz_id}/attempt", json={"score": score})

    # --- Generation and uploads ---

    def generate_questions(
        self,
        topic: str,
        question_count: int,
        language: str | None = None,
        existing_questions: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {
            "topic": topic,
            "questionCount": question_count,
            "existingQuestions": existing_questions or [],
        }
        if language:
            payload["language"] = language
        try:
            data = self._request("POST", "/api/generate-quiz", json=payload, timeout=GENERATION_TIMEOUT_SECONDS)
        except ApiError as exc:
            raise GenerationFailure(str(exc)) from exc
        questions = data.get("questions")
        if not isinstance(questions, list) or not questions:
            raise GenerationFailure("The generator returned no questions.")
        return questions

    def upload_image(self, path: Path) -> str:
        with path.open("rb") as handle:
            data = self._request("POST", "/api/upload", files={"image": (path.name, handle)})
        return str(data["url"])
