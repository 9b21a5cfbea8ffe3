"""Request guards for the HTTP transport."""

from __future__ import annotations

import hmac
import logging
from collections.abc import Awaitable, Callable

from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

SECRET_HEADER = "x-mcp-secret"
PUBLIC_PATHS = frozenset({"/mcp/health"})

logger = logging.getLogger(__name__)


class SharedSecretMiddleware(BaseHTTPMiddleware):
    """Reject requests that do not carry the configured shared secret."""

    def __init__(self, app: ASGIApp, secret: str) -> None:
        super().__init__(app)
        if not secret:
            raise ValueError("Shared secret must be configured")
        self._secret = secret.encode("utf-8")

    def _authorized(self, request: Request) -> bool:
        provided = request.headers.get(SECRET_HEADER)
        if not provided:
            return False
        return hmac.compare_digest(provided.encode("utf-8"), self._secret)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in PUBLIC_PATHS or self._authorized(request):
            return await call_next(request)

        logger.warning("Rejected unauthenticated request to %s", request.url.path)
        return JSONResponse({"detail": "Unauthorized"}, status_code=401)


def build_security_middleware(secret: str | None) -> list[Middleware]:
    """Create the middleware stack for the HTTP app.

    CORS is always installed; the shared secret check only when *secret* is set.
    """

    middleware: list[Middleware] = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["POST"],
            allow_headers=["*"],
        )
    ]

    if secret:
        middleware.insert(0, Middleware(SharedSecretMiddleware, secret=secret))

    return middleware
