from __future__ import annotations

import json

from quizzer.constants.network_constants import DEFAULT_API_BASE_URL
from quizzer.core.client_session import ClientSession, SignedInUser


def test_sign_in_and_out():
    session = ClientSession()
    assert not session.is_authenticated()
    assert session.auth_headers() == {}

    session.sign_in("tok", SignedInUser(id=1, name="Ana", email="ana@example.com"))
    assert session.is_authenticated()
    assert session.auth_headers() == {"Authorization": "Bearer tok"}

    session.sign_out()
    assert session.user is None
    assert session.auth_headers() == {}


def test_toggle_dark_mode():
    session = ClientSession()
    assert session.toggle_dark_mode() is True
    assert session.toggle_dark_mode() is False


def test_save_and_load(tmp_path):
    path = tmp_path / "config" / "session.json"
    session = ClientSession(api_base_url="http://quiz.local", dark_mode=True)
    session.sign_in("tok", SignedInUser(id=4, name="Ana", email="ana@example.com"))
    session.save(path)

    restored = ClientSession.load(path)
    assert restored == session


def test_load_overrides_base_url(tmp_path):
    path = tmp_path / "session.json"
    ClientSession(api_base_url="http://old.local").save(path)
    assert ClientSession.load(path, api_base_url="http://new.local").api_base_url == "http://new.local"


def test_missing_or_broken_file_gives_fresh_session(tmp_path):
    assert ClientSession.load(tmp_path / "absent.json").api_base_url == DEFAULT_API_BASE_URL

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert not ClientSession.load(broken).is_authenticated()


def test_malformed_user_entry_is_dropped(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"auth_token": "tok", "user": {"id": 1}}), encoding="utf-8")
    restored = ClientSession.load(path)
    assert restored.auth_token == "tok"
    assert restored.user is None
