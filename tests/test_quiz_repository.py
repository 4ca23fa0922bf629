from __future__ import annotations

import pytest

from quizzer.core.errors import ConflictError, NotFoundError, QuizValidationError
from quizzer.core.services.quiz_repository import QuizRepository

QUESTIONS = [
    {"text": "Capital of France?", "options": ["Paris", "Rome", "Berlin", "Madrid"], "correctIndex": 0},
    {"text": "2 + 2?", "options": ["3", "4", "5", "22"], "correctIndex": 1},
]


@pytest.fixture
def repo(db_path) -> QuizRepository:
    repository = QuizRepository(db_path)
    repository.initialize()
    return repository


@pytest.fixture
def users(repo):
    owner = repo.create_user("Ana", "ana@example.com", "hash-a")
    player = repo.create_user("Ben", "ben@example.com", "hash-b")
    return owner, player


def test_initialize_creates_parent_directory(db_path):
    QuizRepository(db_path).initialize()
    assert db_path.exists()


def test_initialize_is_repeatable(repo):
    repo.initialize()


def test_users(repo):
    user = repo.create_user("Ana", "ana@example.com", "hash")
    assert user.id > 0
    assert user.created_at is not None
    assert repo.get_user(user.id).email == "ana@example.com"
    assert repo.get_user_by_email("ana@example.com").id == user.id
    assert repo.get_user_by_email("nobody@example.com") is None

    with pytest.raises(ConflictError):
        repo.create_user("Ana again", "ana@example.com", "hash")
    with pytest.raises(NotFoundError):
        repo.get_user(999)


def test_create_and_get_quiz_keeps_questions_verbatim(repo, users):
    owner, _ = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)
    assert quiz.question_count == 2
    assert quiz.public is False
    assert quiz.completed is False
    assert repo.get_quiz(quiz.id).questions == QUESTIONS

    with pytest.raises(NotFoundError, match="Quiz not found"):
        repo.get_quiz(quiz.id + 100)


def test_update_quiz_requires_owner(repo, users):
    owner, player = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)

    updated = repo.update_quiz(quiz.id, owner.id, "Basics v2", QUESTIONS[:1], public=True)
    assert updated.topic == "Basics v2"
    assert updated.question_count == 1
    assert updated.public is True

    with pytest.raises(NotFoundError, match="unauthorized"):
        repo.update_quiz(quiz.id, player.id, "Hijack", QUESTIONS)


def test_delete_quiz(repo, users):
    owner, player = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)
    with pytest.raises(NotFoundError):
        repo.delete_quiz(quiz.id, player.id)
    repo.delete_quiz(quiz.id, owner.id)
    with pytest.raises(NotFoundError):
        repo.get_quiz(quiz.id)


def test_complete_private_quiz_updates_owner_record(repo, users):
    owner, _ = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)

    record = repo.complete_quiz(quiz.id, owner.id, 2)

    assert record.is_public_attempt is False
    assert record.total_questions == 2
    stored = repo.get_quiz(quiz.id)
    assert stored.completed is True
    assert stored.score == 2


def test_complete_private_quiz_of_someone_else_fails(repo, users):
    owner, player = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)
    with pytest.raises(NotFoundError):
        repo.complete_quiz(quiz.id, player.id, 1)


def test_complete_public_quiz_records_attempt(repo, users):
    owner, player = users
    quiz = repo.create_quiz(owner.id, "Shared", QUESTIONS, public=True)

    record = repo.complete_quiz(quiz.id, player.id, 1)
    assert record.is_public_attempt is True
    # A replay overwrites the earlier attempt.
    repo.complete_quiz(quiz.id, player.id, 2)

    assert repo.get_quiz(quiz.id).completed is False
    history = repo.list_user_quizzes(player.id)
    assert len(history) == 1
    assert history[0].id == quiz.id
    assert history[0].score == 2
    assert history[0].is_public_attempt is True
    assert repo.list_user_quizzes(player.id, include_public_attempts=False) == []


@pytest.mark.parametrize("score", [-1, 3])
def test_score_out_of_range(repo, users, score):
    owner, _ = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)
    with pytest.raises(QuizValidationError, match="between 0 and 2"):
        repo.complete_quiz(quiz.id, owner.id, score)


def test_list_public_quizzes(repo, users):
    owner, player = users
    private = repo.create_quiz(owner.id, "Private", QUESTIONS)
    first = repo.create_quiz(owner.id, "First", QUESTIONS, public=True)
    second = repo.create_quiz(owner.id, "Second", QUESTIONS, public=True)
    repo.record_attempt(first.id, player.id, 1)

    anonymous = repo.list_public_quizzes()
    assert [item.id for item in anonymous] == [second.id, first.id]
    assert private.id not in {item.id for item in anonymous}
    assert not any(item.completed for item in anonymous)

    mine = {item.id: item for item in repo.list_public_quizzes(player.id)}
    assert mine[first.id].completed is True
    assert mine[first.id].score == 1
    assert mine[second.id].completed is False
    assert mine[second.id].score is None


def test_list_user_quizzes_only_own(repo, users):
    owner, player = users
    repo.create_quiz(owner.id, "Mine", QUESTIONS)
    repo.create_quiz(player.id, "Theirs", QUESTIONS)
    assert [item.topic for item in repo.list_user_quizzes(owner.id)] == ["Mine"]


def test_share_quiz(repo, users):
    owner, player = users
    quiz = repo.create_quiz(owner.id, "Basics", QUESTIONS)

    repo.share_quiz(quiz.id, owner.id, player.email)

    with pytest.raises(NotFoundError, match="Recipient not found"):
        repo.share_quiz(quiz.id, owner.id, "nobody@example.com")
    with pytest.raises(NotFoundError, match="unauthorized"):
        repo.share_quiz(quiz.id, player.id, owner.email)
