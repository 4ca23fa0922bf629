"""SQLite persistence for users, quizzes, public-quiz attempts, and shares."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import sqlite3

from quizzer.core.errors import ConflictError, NotFoundError, QuizValidationError
from quizzer.core.models import CompletionRecord, QuizRecord, QuizSummary, UserAccount

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS quizzes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
    topic TEXT NOT NULL,
    question_count INTEGER NOT NULL,
    questions TEXT NOT NULL,
    public INTEGER NOT NULL DEFAULT 0,
    score INTEGER,
    completed INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS quiz_attempts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    quiz_id INTEGER NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    score INTEGER NOT NULL,
    completed_at TEXT NOT NULL,
    UNIQUE (user_id, quiz_id)
);
CREATE TABLE IF NOT EXISTS shared_quizzes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    quiz_id INTEGER NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    shared_by INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    shared_with INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    created_at TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _check_score(score: int, question_count: int) -> None:
    if not 0 <= score <= question_count:
        raise QuizValidationError(f"Score must be between 0 and {question_count}.")


class QuizRepository:
    """Stores quizzes and everything attached to them.

    A new connection is opened per operation, so one instance can be shared by
    every request handler.
    """

    def __init__(self, database_path: Path) -> None:
        self._database_path = database_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._database_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create the database file and tables if they do not exist yet."""
        self._database_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(_SCHEMA)
        logger.info("Quiz database ready at %s", self._database_path)

    # --- Users ---

    def create_user(self, name: str, email: str, password_hash: str) -> UserAccount:
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (name, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (name, email, password_hash, _now()),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            raise ConflictError("User already exists") from exc
        return self.get_user(user_id)

    def get_user(self, user_id: int) -> UserAccount:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            raise NotFoundError(f"User {user_id} not found")
        return self._row_to_user(row)

    def get_user_by_email(self, email: str) -> UserAccount | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return None if row is None else self._row_to_user(row)

    # --- Quizzes ---

    def create_quiz(
        self,
        user_id: int,
        topic: str,
        questions: list[dict],
        public: bool = False,
    ) -> QuizRecord:
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO quizzes (user_id, topic, question_count, questions, public, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (user_id, topic, len(questions), json.dumps(questions), int(public), _now()),
            )
            quiz_id = cursor.lastrowid
        logger.info("User %s created quiz %s (%s questions)", user_id, quiz_id, len(questions))
        return self.get_quiz(quiz_id)

    def update_quiz(
        self,
        quiz_id: int,
        user_id: int,
        topic: str,
        questions: list[dict],
        public: bool = False,
    ) -> QuizRecord:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE quizzes SET topic = ?, questions = ?, question_count = ?, public = ? "
                "WHERE id = ? AND user_id = ?",
                (topic, json.dumps(questions), len(questions), int(public), quiz_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Quiz not found or unauthorized")
        return self.get_quiz(quiz_id)

    def get_quiz(self, quiz_id: int) -> QuizRecord:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM quizzes WHERE id = ?", (quiz_id,)).fetchone()
        if row is None:
            raise NotFoundError("Quiz not found")
        return self._row_to_quiz(row)

    def delete_quiz(self, quiz_id: int, user_id: int) -> None:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM quizzes WHERE id = ? AND user_id = ?", (quiz_id, user_id)
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Quiz not found or unauthorized")
        logger.info("User %s deleted quiz %s", user_id, quiz_id)

    def list_user_quizzes(self, user_id: int, include_public_attempts: bool = True) -> list[QuizSummary]:
        """Own quizzes plus, unless excluded, public quizzes the user has played."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, topic, question_count, created_at, score, completed, "
                "0 AS is_public_attempt, created_at AS sort_key "
                "FROM quizzes WHERE user_id = ?",
                (user_id,),
            ).fetchall()
            if include_public_attempts:
                rows += conn.execute(
                    "SELECT q.id, q.topic, q.question_count, q.created_at, qa.score, 1 AS completed, "
                    "1 AS is_public_attempt, qa.completed_at AS sort_key "
                    "FROM quiz_attempts qa JOIN quizzes q ON qa.quiz_id = q.id "
                    "WHERE qa.user_id = ? AND q.public = 1",
                    (user_id,),
                ).fetchall()
        rows.sort(key=lambda row: row["sort_key"], reverse=True)
        return [self._row_to_summary(row) for row in rows]

    def list_public_quizzes(self, user_id: int | None = None) -> list[QuizSummary]:
        """Public quizzes, newest first; with a user, marked with that user's attempt."""
        with self._connect() as conn:
            if user_id is None:
                rows = conn.execute(
                    "SELECT id, topic, question_count, created_at, NULL AS score, 0 AS completed "
                    "FROM quizzes WHERE public = 1 ORDER BY created_at DESC, id DESC"
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT q.id, q.topic, q.question_count, q.created_at, qa.score, "
                    "CASE WHEN qa.user_id IS NOT NULL THEN 1 ELSE 0 END AS completed "
                    "FROM quizzes q "
                    "LEFT JOIN quiz_attempts qa ON q.id = qa.quiz_id AND qa.user_id = ? "
                    "WHERE q.public = 1 ORDER BY q.created_at DESC, q.id DESC",
                    (user_id,),
                ).fetchall()
        return [self._row_to_summary(row) for row in rows]

    # --- Completion ---

    def complete_quiz(self, quiz_id: int, user_id: int, score: int) -> CompletionRecord:
        """Record a finished play: an attempt for public quizzes, the owner's score otherwise."""
        quiz = self.get_quiz(quiz_id)
        _check_score(score, quiz.question_count)
        if quiz.public:
            return self.record_attempt(quiz_id, user_id, score)

        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE quizzes SET score = ?, completed = 1 WHERE id = ? AND user_id = ?",
                (score, quiz_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Quiz not found or unauthorized")
        return CompletionRecord(
            quiz_id=quiz_id,
            user_id=user_id,
            score=score,
            total_questions=quiz.question_count,
            is_public_attempt=False,
        )

    def record_attempt(self, quiz_id: int, user_id: int, score: int) -> CompletionRecord:
        quiz = self.get_quiz(quiz_id)
        _check_score(score, quiz.question_count)
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO quiz_attempts (user_id, quiz_id, score, completed_at) VALUES (?, ?, ?, ?) "
                "ON CONFLICT (user_id, quiz_id) DO UPDATE SET score = excluded.score, "
                "completed_at = excluded.completed_at",
                (user_id, quiz_id, score, _now()),
            )
        return CompletionRecord(
            quiz_id=quiz_id,
            user_id=user_id,
            score=score,
            total_questions=quiz.question_count,
            is_public_attempt=True,
        )

    # --- Sharing ---

    def share_quiz(self, quiz_id: int, owner_id: int, recipient_email: str) -> None:
        with self._connect() as conn:
            owned = conn.execute(
                "SELECT id FROM quizzes WHERE id = ? AND user_id = ?", (quiz_id, owner_id)
            ).fetchone()
            if owned is None:
                raise NotFoundError("Quiz not found or unauthorized")
            recipient = conn.execute(
                "SELECT id FROM users WHERE email = ?", (recipient_email,)
            ).fetchone()
            if recipient is None:
                raise NotFoundError("Recipient not found")
            conn.execute(
                "INSERT INTO shared_quizzes (quiz_id, shared_by, shared_with, created_at) VALUES (?, ?, ?, ?)",
                (quiz_id, owner_id, recipient["id"], _now()),
            )
        logger.info("Quiz %s shared by user %s with %s", quiz_id, owner_id, recipient_email)

    # --- Row mapping ---

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserAccount:
        return UserAccount(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=_parse_timestamp(row["created_at"]),
        )

    @staticmethod
    def _row_to_quiz(row: sqlite3.Row) -> QuizRecord:
        return QuizRecord(
            id=row["id"],
            user_id=row["user_id"],
            topic=row["topic"],
            question_count=row["question_count"],
            questions=json.loads(row["questions"]),
            public=bool(row["public"]),
            score=row["score"],
            completed=bool(row["completed"]),
            created_at=_parse_timestamp(row["created_at"]),
        )

    @staticmethod
    def _row_to_summary(row: sqlite3.Row) -> QuizSummary:
        keys = row.keys()
        return QuizSummary(
            id=row["id"],
            topic=row["topic"],
            question_count=row["question_count"],
            created_at=_parse_timestamp(row["created_at"]),
            score=row["score"],
            completed=bool(row["completed"]),
            is_public_attempt=bool(row["is_public_attempt"]) if "is_public_attempt" in keys else False,
        )
