"""Session authentication middleware.

Resolves the requester from `Authorization: Bearer <token>` or the session
cookie and stores it on `request.state.requester`. Non-public routes are
rejected with 401 when no valid session is present.
"""

from dataclasses import dataclass, field

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from game_saver.auth import SessionTokenHandler
from game_saver.exceptions import AuthenticationError, ErrorType


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PublicRoutesConfig:
    """Paths reachable without a session."""

    exact: frozenset[str] = field(
        default_factory=lambda: frozenset(
            {"/health", "/docs", "/redoc", "/openapi.json"}
        )
    )
    prefixes: tuple[str, ...] = ("/docs/",)

    def is_public(self, path: str) -> bool:
        return path in self.exact or path.startswith(self.prefixes)


DEFAULT_PUBLIC_ROUTES = PublicRoutesConfig()


def unauthorized_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "success": False,
            "error": {
                "type": ErrorType.AUTHENTICATION.value,
                "message": message,
                "details": {},
            },
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


class SessionAuthMiddleware(BaseHTTPMiddleware):
    """Middleware for session token authentication on all non-public routes."""

    def __init__(
        self,
        app: ASGIApp,
        token_handler: SessionTokenHandler,
        cookie_name: str,
        public_routes: PublicRoutesConfig | None = None,
    ):
        super().__init__(app)
        self.token_handler = token_handler
        self.cookie_name = cookie_name
        self.public_routes = public_routes or DEFAULT_PUBLIC_ROUTES

    def _extract_token(self, request: Request) -> str | None:
        """Bearer token from the Authorization header, else the session cookie."""
        auth_header = request.headers.get("authorization")
        if auth_header:
            parts = auth_header.split()
            if len(parts) == 2 and parts[0].lower() == "bearer":
                return parts[1]
            return None
        return request.cookies.get(self.cookie_name)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if self.public_routes.is_public(path):
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            logger.warning("session_auth_missing", path=path, method=request.method)
            return unauthorized_response("Unauthorized: login required")

        try:
            requester = self.token_handler.validate(token)
        except AuthenticationError as e:
            logger.warning(
                "session_auth_invalid",
                path=path,
                method=request.method,
                reason=e.message,
            )
            return unauthorized_response(e.message)

        request.state.requester = requester
        structlog.contextvars.bind_contextvars(user_id=requester.user_id)
        return await call_next(request)
