"""Explicit per-user client state: API location, auth token, display preferences."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
import logging
from pathlib import Path
from typing import Any

from quizzer.constants.network_constants import DEFAULT_API_BASE_URL

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SignedInUser:
    id: int
    name: str
    email: str


@dataclass(slots=True)
class ClientSession:
    """State the desktop client passes to every component that needs it.

    Created once at start-up (optionally restored from disk) and cleared on logout.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    auth_token: str | None = field(default=None, repr=False)
    user: SignedInUser | None = None
    dark_mode: bool = False

    def is_authenticated(self) -> bool:
        return bool(self.auth_token)

    def sign_in(self, token: str, user: SignedInUser) -> None:
        self.auth_token = token
        self.user = user

    def sign_out(self) -> None:
        self.auth_token = None
        self.user = None

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        return self.dark_mode

    def auth_headers(self) -> dict[str, str]:
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}

    # --- Persistence ---

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path, api_base_url: str | None = None) -> "ClientSession":
        """Restore a saved session; a missing or unreadable file yields a fresh one."""
        if not path.exists():
            return cls(api_base_url=api_base_url or DEFAULT_API_BASE_URL)
        try:
            data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", path, exc)
            return cls(api_base_url=api_base_url or DEFAULT_API_BASE_URL)

        user = None
        user_data = data.get("user")
        if isinstance(user_data, dict):
            try:
                user = SignedInUser(**user_data)
            except TypeError:
                logger.warning("Ignoring malformed user entry in %s", path)
        return cls(
            api_base_url=api_base_url or data.get("api_base_url") or DEFAULT_API_BASE_URL,
            auth_token=data.get("auth_token"),
            user=user,
            dark_mode=bool(data.get("dark_mode", False)),
        )
