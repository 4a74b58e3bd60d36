"""Tests for the HTTP client."""

import httpx
import pytest

from game_saver.client import GameSaverClient
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


def error_body(type_: str, message: str, details: dict | None = None) -> dict:
    return {
        "success": False,
        "error": {"type": type_, "message": message, "details": details or {}},
    }


def make_client(handler, token: str | None = "tok") -> GameSaverClient:
    return GameSaverClient(
        "http://testserver/", token, transport=httpx.MockTransport(handler)
    )


class TestRequests:
    def test_assign_sends_hours_and_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = request.content
            return httpx.Response(
                200, json={"success": True, "data": {"id": "a1"}, "message": "ok"}
            )

        with make_client(handler) as client:
            assert client.assign("a1", 3) == {"id": "a1"}

        assert seen["path"] == "/api/accounts/a1/assign"
        assert seen["auth"] == "Bearer tok"
        assert b'"hours"' in seen["body"]

    def test_no_token_no_header(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "authorization" not in request.headers
            return httpx.Response(200, json={"status": "ok", "version": "1"})

        with make_client(handler, token=None) as client:
            assert client.health()["status"] == "ok"

    def test_list_game_accounts(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/games/g1/accounts"
            return httpx.Response(200, json={"success": True, "data": [{"id": "a"}]})

        with make_client(handler) as client:
            assert client.list_game_accounts("g1") == [{"id": "a"}]


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("status_code", "exc_type"),
        [
            (400, InvalidArgumentError),
            (401, AuthenticationError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (409, ConflictError),
        ],
    )
    def test_status_codes(self, status_code, exc_type):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=error_body("x", "boom"))

        with make_client(handler) as client, pytest.raises(exc_type, match="boom"):
            client.status("a1")

    def test_lease_conflict_details(self):
        details = {
            "account_id": "a1",
            "holder_id": "alice",
            "expires_at": "2026-03-01T13:00:00+00:00",
            "time_remaining": 1800,
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                409,
                json=error_body("conflict_error", "Account is currently in use", details),
            )

        with make_client(handler) as client, pytest.raises(LeaseConflictError) as exc:
            client.assign("a1", 1)

        assert exc.value.holder_id == "alice"
        assert exc.value.time_remaining == 1800
        assert exc.value.expires_at is not None

    def test_non_json_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad gateway")

        with make_client(handler) as client, pytest.raises(GameSaverError) as exc:
            client.release("a1")
        assert exc.value.status_code == 502

    def test_unreachable_server(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with make_client(handler) as client, pytest.raises(ClientError):
            client.health()
