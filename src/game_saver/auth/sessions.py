"""JWT session tokens identifying the requester."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

import jwt
from structlog import get_logger

from game_saver.exceptions import AuthenticationError


logger = get_logger(__name__)

ISSUER = "game-saver"


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Requester:
    """Authenticated caller extracted from a session token."""

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class SessionTokenHandler:
    """Issues and validates signed session tokens."""

    ALGORITHM = "HS256"

    def __init__(self, secret_key: str, ttl_days: int = 7) -> None:
        """Initialize with the signing secret.

        Args:
            secret_key: Secret key for signing tokens (min 32 chars recommended)
            ttl_days: Default lifetime of issued tokens

        """
        if len(secret_key) < 32:
            logger.warning("session_secret_key_short", length=len(secret_key))
        self.secret_key = secret_key
        self.ttl_days = ttl_days

    def issue(
        self,
        user_id: str,
        role: Role = Role.USER,
        expires_days: int | None = None,
    ) -> str:
        """Generate a signed session token for `user_id`."""
        now = datetime.now(UTC)
        days = self.ttl_days if expires_days is None else expires_days
        payload = {
            "sub": user_id,
            "role": str(role),
            "iat": now,
            "exp": now + timedelta(days=days),
            "iss": ISSUER,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def validate(self, token: str) -> Requester:
        """Decode a session token into a `Requester`.

        Raises:
            AuthenticationError: If the token is expired, tampered with or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=ISSUER,
                options={"require": ["sub", "exp", "iss"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Session has expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid session token: {e}") from e

        try:
            role = Role(payload.get("role", Role.USER))
        except ValueError as e:
            raise AuthenticationError("Invalid session role") from e
        return Requester(user_id=str(payload["sub"]), role=role)
