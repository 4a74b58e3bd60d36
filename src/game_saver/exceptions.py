"""Exception hierarchy for Game Saver.

All exceptions use proper exception chaining with the `from` keyword.
Error types use StrEnum for type safety and autocompletion.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from starlette import status


class ErrorType(StrEnum):
    """Error type codes for API responses."""

    INVALID_ARGUMENT = "invalid_argument_error"
    AUTHENTICATION = "authentication_error"
    FORBIDDEN = "forbidden_error"
    NOT_FOUND = "not_found_error"
    CONFLICT = "conflict_error"
    STORE = "store_error"
    CLIENT = "client_error"
    INTERNAL_SERVER = "internal_server_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class GameSaverError(Exception):
    """Base exception for all Game Saver errors.

    Carries an HTTP status code and structured details so the API layer can
    render any subclass without knowing about it.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | str = ErrorType.INTERNAL_SERVER,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if isinstance(error_type, str) and not isinstance(error_type, ErrorType):
            try:
                self.error_type = ErrorType(error_type)
            except ValueError:
                self.error_type = error_type  # type: ignore[assignment]
        else:
            self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


# ============================================================================
# Domain Errors (Client-facing)
# ============================================================================


class InvalidArgumentError(GameSaverError):
    """Malformed input or an operation that does not apply (400)."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.INVALID_ARGUMENT,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class AuthenticationError(GameSaverError):
    """Missing or invalid requester identity (401)."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(
            message,
            error_type=ErrorType.AUTHENTICATION,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class ForbiddenError(GameSaverError):
    """Requester is known but not allowed to do this (403)."""

    def __init__(
        self, message: str = "Forbidden", *, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            message,
            error_type=ErrorType.FORBIDDEN,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class NotFoundError(GameSaverError):
    """Not found error (404)."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(
            message,
            error_type=ErrorType.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class AccountNotFoundError(NotFoundError):
    """Account id does not resolve to a stored account."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id
        self.details = {"account_id": account_id}


class ConflictError(GameSaverError):
    """Conflict error (409)."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.CONFLICT,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
        )


class LeaseConflictError(ConflictError):
    """An online account is currently leased by someone."""

    def __init__(
        self,
        account_id: str,
        *,
        holder_id: str | None = None,
        expires_at: datetime | None = None,
        time_remaining: int | None = None,
    ) -> None:
        super().__init__(
            "Account is currently in use",
            details={
                "account_id": account_id,
                "holder_id": holder_id,
                "expires_at": expires_at.isoformat() if expires_at else None,
                "time_remaining": time_remaining,
            },
        )
        self.account_id = account_id
        self.holder_id = holder_id
        self.expires_at = expires_at
        self.time_remaining = time_remaining


class DuplicateAccountError(ConflictError):
    """An account with the same username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(
            f'Steam account with username "{username}" already exists',
            details={"username": username},
        )
        self.username = username


# ============================================================================
# Infrastructure Errors
# ============================================================================


class StoreError(GameSaverError):
    """Underlying persistence failure (500). Never retried by the engine."""

    def __init__(self, message: str = "Account store failure") -> None:
        super().__init__(
            message,
            error_type=ErrorType.STORE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class ClientError(GameSaverError):
    """The API client could not reach the server or parse its answer."""

    def __init__(self, message: str = "Server unreachable") -> None:
        super().__init__(
            message,
            error_type=ErrorType.CLIENT,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


__all__ = [
    "AccountNotFoundError",
    "AuthenticationError",
    "ClientError",
    "ConflictError",
    "DuplicateAccountError",
    "ErrorType",
    "ForbiddenError",
    "GameSaverError",
    "InvalidArgumentError",
    "LeaseConflictError",
    "NotFoundError",
    "StoreError",
]
