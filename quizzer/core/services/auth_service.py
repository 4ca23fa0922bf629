"""Password hashing and bearer-token handling."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

import bcrypt
import jwt

from quizzer.constants.network_constants import TOKEN_TTL_HOURS
from quizzer.core.errors import AuthError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10


class AuthService:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        token_ttl_hours: int = TOKEN_TTL_HOURS,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._token_ttl = timedelta(hours=token_ttl_hours)

    # --- Passwords ---

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    # --- Tokens ---

    def issue_token(self, user_id: int) -> str:
        expires_at = datetime.now(timezone.utc) + self._token_ttl
        return jwt.encode({"id": user_id, "exp": expires_at}, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> int:
        """Return the user id carried by ``token``.

        Older tokens store the id under ``userId``; both are accepted.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid token") from exc

        user_id = payload.get("id", payload.get("userId"))
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise AuthError("Invalid token")
        return user_id
