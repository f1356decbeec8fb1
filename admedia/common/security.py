"""
Password hashing (bcrypt) and access tokens (PyJWT, HS256).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from admedia.common.config import AuthSettings, get_settings
from admedia.common.exceptions import AuthenticationError
from admedia.common.logger import get_logger

logger = get_logger(__name__)


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with a fresh bcrypt salt."""
    if rounds is None:
        rounds = get_settings().auth.bcrypt_rounds
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        # Malformed stored hash or over-long password
        logger.warning("Password verification failed", error=str(e))
        return False


class JWTHandler:
    """Creates and validates access tokens."""

    def __init__(self, settings: AuthSettings | None = None) -> None:
        self._settings = settings or get_settings().auth

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._settings.access_token_expire_minutes * 60

    def create_access_token(self, user_id: int, email: str, role: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "type": "access",
            "iat": now,
            "exp": now + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(
            payload,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm,
        )

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate an access token.

        Raises:
            AuthenticationError: Token is expired, malformed, badly signed,
                or not an access token.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm],
            )
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token expired") from e
        except InvalidTokenError as e:
            logger.warning("Invalid token", error=str(e))
            raise AuthenticationError("Invalid token") from e

        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthenticationError("Invalid token")
        return payload
