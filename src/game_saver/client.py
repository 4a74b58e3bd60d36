"""HTTP client for a running Game Saver server."""

from datetime import datetime
from types import TracebackType
from typing import Any

import httpx
import orjson

from game_saver.exceptions import (
    AuthenticationError,
    ClientError,
    ConflictError,
    ForbiddenError,
    GameSaverError,
    InvalidArgumentError,
    LeaseConflictError,
    NotFoundError,
)


def _parse_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _error_from_response(response: httpx.Response) -> GameSaverError:
    """Map an error response back onto the exception hierarchy."""
    try:
        body = orjson.loads(response.content)
    except orjson.JSONDecodeError:
        body = {}
    error = (body.get("error") if isinstance(body, dict) else None) or {}
    message = error.get("message") or f"HTTP {response.status_code}"
    details = error.get("details") or {}

    if response.status_code == 400:
        return InvalidArgumentError(message, details=details)
    if response.status_code == 401:
        return AuthenticationError(message)
    if response.status_code == 403:
        return ForbiddenError(message, details=details)
    if response.status_code == 404:
        return NotFoundError(message)
    if response.status_code == 409:
        if "holder_id" in details:
            return LeaseConflictError(
                details.get("account_id", ""),
                holder_id=details.get("holder_id"),
                expires_at=_parse_time(details.get("expires_at")),
                time_remaining=details.get("time_remaining"),
            )
        return ConflictError(message, details=details)
    return GameSaverError(
        message,
        error_type=error.get("type", "http_error"),
        status_code=response.status_code,
        details=details,
    )


class GameSaverClient:
    """Synchronous client for the Game Saver HTTP API.

    Args:
        base_url: Server URL, e.g. http://127.0.0.1:8000
        token: Session token sent as a bearer token
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests use `httpx.MockTransport`)
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {token}"} if token else {},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GameSaverClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise ClientError(f"Cannot reach {self.base_url}: {e}") from e

        if response.status_code >= 400:
            raise _error_from_response(response)

        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ClientError(f"Unexpected response from {self.base_url}") from e
        if isinstance(body, dict) and "success" in body:
            return body.get("data")
        return body

    def health(self) -> dict[str, Any]:
        result: dict[str, Any] = self._request("GET", "/health")
        return result

    def get_account(self, account_id: str) -> dict[str, Any]:
        result: dict[str, Any] = self._request("GET", f"/api/accounts/{account_id}")
        return result

    def status(self, account_id: str) -> dict[str, Any]:
        result: dict[str, Any] = self._request(
            "GET", f"/api/accounts/{account_id}/status"
        )
        return result

    def list_game_accounts(self, game_id: str) -> list[dict[str, Any]]:
        result: list[dict[str, Any]] = self._request(
            "GET", f"/api/games/{game_id}/accounts"
        )
        return result

    def assign(self, account_id: str, hours: int) -> dict[str, Any]:
        """Lease an online account.

        Raises:
            LeaseConflictError: Account currently in use
            InvalidArgumentError: Hours out of range or offline account
        """
        result: dict[str, Any] = self._request(
            "POST", f"/api/accounts/{account_id}/assign", json={"hours": hours}
        )
        return result

    def release(self, account_id: str) -> dict[str, Any]:
        result: dict[str, Any] = self._request(
            "POST", f"/api/accounts/{account_id}/release"
        )
        return result

    def active_accounts(self, user_id: str) -> list[dict[str, Any]]:
        result: list[dict[str, Any]] = self._request(
            "GET", f"/api/users/{user_id}/active-accounts"
        )
        return result
