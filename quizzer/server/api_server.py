"""FastAPI server exposing accounts, quiz storage, AI generation and uploads."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.staticfiles import StaticFiles
import uvicorn

from quizzer.constants.about import APP_NAME, APP_VERSION
from quizzer.core.errors import (
    AuthError,
    ConflictError,
    GenerationFailure,
    NotFoundError,
    QuizValidationError,
    QuizzerError,
)
from quizzer.core.question_codec import parse_questions, question_to_dict, validate_authored_quiz
from quizzer.core.services.auth_service import AuthService
from quizzer.core.services.question_generator import QuestionGenerator
from quizzer.core.services.quiz_repository import QuizRepository
from quizzer.core.services.upload_store import UploadStore
from quizzer.core.settings import Settings, get_settings
from quizzer.server.rate_limit import RateLimitMiddleware
from quizzer.server.schemas import (
    AuthResponse,
    CompletionOut,
    GenerateQuizPayload,
    GenerateQuizResponse,
    LoginPayload,
    MessageResponse,
    QuizOut,
    QuizPayload,
    QuizSummaryOut,
    RegisterPayload,
    ScorePayload,
    SharePayload,
    UploadResponse,
    UserOut,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[QuizzerError], int], ...] = (
    (AuthError, 401),
    (NotFoundError, 404),
    (ConflictError, 400),
    (QuizValidationError, 400),
    (GenerationFailure, 500),
)

_bearer = HTTPBearer(auto_error=False)


def _status_for(exc: QuizzerError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _normalize_questions(topic: str, raw_questions: list[dict]) -> list[dict]:
    """Validate an authored quiz and return its questions ready for storage."""
    questions = parse_questions(raw_questions)
    validate_authored_quiz(topic, questions)
    return [question_to_dict(question) for question in questions]


def create_api_app(
    repository: QuizRepository,
    auth: AuthService,
    generator: QuestionGenerator,
    upload_store: UploadStore,
    settings: Settings | None = None,
) -> FastAPI:
    """Create a FastAPI application wired to the provided services."""
    settings = settings or get_settings()
    repository.initialize()

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    static_dir = upload_store.uploads_dir.parent
    upload_store.uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    # --- Error handling ---

    @app.exception_handler(QuizzerError)
    async def quizzer_error_handler(request: Request, exc: QuizzerError) -> JSONResponse:
        status_code = _status_for(exc)
        content: dict[str, object] = {"message": str(exc)}
        if isinstance(exc, GenerationFailure) and exc.raw_output:
            content["raw"] = exc.raw_output
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    # --- Dependencies ---

    def require_user_id(
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    ) -> int:
        if credentials is None:
            raise AuthError("No token provided")
        return auth.decode_token(credentials.credentials)

    def optional_user_id(
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    ) -> int | None:
        if credentials is None:
            return None
        try:
            return auth.decode_token(credentials.credentials)
        except AuthError:
            return None

    # --- Accounts ---

    @app.post("/api/auth/register", response_model=AuthResponse)
    def register(payload: RegisterPayload) -> AuthResponse:
        if repository.get_user_by_email(payload.email) is not None:
            raise ConflictError("User already exists")
        user = repository.create_user(payload.name, payload.email, auth.hash_password(payload.password))
        logger.info("Registered user %s", user.id)
        return AuthResponse(
            token=auth.issue_token(user.id),
            user=UserOut.model_validate(user, from_attributes=True),
        )

    @app.post("/api/auth/login", response_model=AuthResponse)
    def login(payload: LoginPayload) -> AuthResponse:
        user = repository.get_user_by_email(payload.email)
        if user is None or not auth.verify_password(payload.password, user.password_hash):
            raise AuthError("Invalid credentials")
        return AuthResponse(
            token=auth.issue_token(user.id),
            user=UserOut.model_validate(user, from_attributes=True),
        )

    @app.get("/api/user", response_model=UserOut)
    def current_user(user_id: int = Depends(require_user_id)) -> UserOut:
        return UserOut.model_validate(repository.get_user(user_id), from_attributes=True)

    # --- Generation ---

    @app.post("/api/generate-quiz", response_model=GenerateQuizResponse)
    async def generate_quiz(
        payload: GenerateQuizPayload,
        user_id: int = Depends(require_user_id),
    ) -> GenerateQuizResponse:
        questions = await generator.generate(
            payload.topic,
            payload.question_count,
            language=payload.language,
            existing_questions=payload.existing_questions,
        )
        return GenerateQuizResponse(questions=questions)

    # --- Quizzes ---

    @app.get("/api/quiz/{quiz_id}", response_model=QuizOut)
    def get_quiz(quiz_id: int) -> QuizOut:
        return QuizOut.model_validate(repository.get_quiz(quiz_id), from_attributes=True)

    @app.get("/api/quizzes", response_model=list[QuizSummaryOut])
    def list_quizzes(
        exclude_public_attempts: bool = Query(False, alias="excludePublicAttempts"),
        user_id: int = Depends(require_user_id),
    ) -> list[QuizSummaryOut]:
        summaries = repository.list_user_quizzes(
            user_id, include_public_attempts=not exclude_public_attempts
        )
        return [QuizSummaryOut.model_validate(item, from_attributes=True) for item in summaries]

    @app.post("/api/quizzes", response_model=QuizOut, status_code=201)
    def create_quiz(payload: QuizPayload, user_id: int = Depends(require_user_id)) -> QuizOut:
        questions = _normalize_questions(payload.topic, payload.questions)
        record = repository.create_quiz(user_id, payload.topic.strip(), questions, public=payload.public)
        return QuizOut.model_validate(record, from_attributes=True)

    @app.put("/api/quizzes/{quiz_id}", response_model=QuizOut)
    def update_quiz(
        quiz_id: int,
        payload: QuizPayload,
        user_id: int = Depends(require_user_id),
    ) -> QuizOut:
        questions = _normalize_questions(payload.topic, payload.questions)
        record = repository.update_quiz(
            quiz_id, user_id, payload.topic.strip(), questions, public=payload.public
        )
        return QuizOut.model_validate(record, from_attributes=True)

    @app.delete("/api/quizzes/{quiz_id}", response_model=MessageResponse)
    def delete_quiz(quiz_id: int, user_id: int = Depends(require_user_id)) -> MessageResponse:
        repository.delete_quiz(quiz_id, user_id)
        return MessageResponse(message="Quiz deleted successfully")

    @app.post("/api/quizzes/{quiz_id}/share", response_model=MessageResponse)
    def share_quiz(
        quiz_id: int,
        payload: SharePayload,
        user_id: int = Depends(require_user_id),
    ) -> MessageResponse:
        repository.share_quiz(quiz_id, user_id, payload.email)
        return MessageResponse(message="Quiz shared successfully")

    @app.put("/api/quizzes/{quiz_id}/complete", response_model=CompletionOut)
    def complete_quiz(
        quiz_id: int,
        payload: ScorePayload,
        user_id: int = Depends(require_user_id),
    ) -> CompletionOut:
        record = repository.complete_quiz(quiz_id, user_id, payload.score)
        logger.info("User %s completed quiz %s with score %s", user_id, quiz_id, payload.score)
        return CompletionOut.model_validate(record, from_attributes=True)

    @app.post("/api/quizzes/{quiz_id}/attempt", response_model=CompletionOut)
    def record_attempt(
        quiz_id: int,
        payload: ScorePayload,
        user_id: int = Depends(require_user_id),
    ) -> CompletionOut:
        record = repository.record_attempt(quiz_id, user_id, payload.score)
        return CompletionOut.model_validate(record, from_attributes=True)

    @app.get("/api/public-quizzes", response_model=list[QuizSummaryOut])
    def list_public_quizzes(user_id: int | None = Depends(optional_user_id)) -> list[QuizSummaryOut]:
        summaries = repository.list_public_quizzes(user_id)
        return [QuizSummaryOut.model_validate(item, from_attributes=True) for item in summaries]

    # --- Uploads ---

    @app.post("/api/upload", response_model=UploadResponse)
    async def upload_image(
        image: UploadFile | None = File(None),
        user_id: int = Depends(require_user_id),
    ) -> UploadResponse:
        if image is None:
            raise QuizValidationError("No file uploaded")
        content = await image.read()
        return UploadResponse(url=upload_store.save(image.filename or "image", content))

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def build_default_app(settings: Settings | None = None) -> FastAPI:
    """Wire the production services from ``settings``."""
    settings = settings or get_settings()
    return create_api_app(
        repository=QuizRepository(settings.database_path),
        auth=AuthService(settings.jwt_secret, settings.jwt_algorithm, settings.token_ttl_hours),
        generator=QuestionGenerator(api_key=settings.openai_api_key, model=settings.openai_model),
        upload_store=UploadStore(settings.uploads_dir, url_prefix=f"/static/{settings.uploads_subdir}"),
        settings=settings,
    )


def start_api_server(settings: Settings | None = None) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    settings = settings or get_settings()
    app = build_default_app(settings)
    config = uvicorn.Config(app=app, host=settings.host, port=settings.port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread
