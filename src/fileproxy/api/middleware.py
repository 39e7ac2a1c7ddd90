"""HTTP middleware wrapping every route: correlation, CORS and guards."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Final

from fastapi import Request, status
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from fileproxy.api.responses import build_error_response
from fileproxy.core.config import Settings
from fileproxy.core.request_context import normalize_request_id, request_id_scope

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
CORS_HEADERS: Final[dict[str, str]] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": (
        "Content-Type, Authorization, X-Telegram-Bot-Api-Secret-Token"
    ),
}


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the logging context and echo it back."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = normalize_request_id(request.headers.get(REQUEST_ID_HEADER))
        with request_id_scope(request_id):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Answer preflight requests directly and stamp permissive CORS headers on the rest."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


class ConfigurationGuardMiddleware(BaseHTTPMiddleware):
    """Fail fast with a 500 when BOT_TOKEN is missing, before any route runs."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        settings: Settings,
        exempt_paths: Iterable[str] = ("/debug",),
    ) -> None:
        super().__init__(app)
        self._settings = settings
        self._exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next) -> Response:
        if self._settings.bot_token is not None or request.url.path in self._exempt_paths:
            return await call_next(request)

        logger.error("BOT_TOKEN is not configured; refusing %s %s", request.method, request.url.path)
        return build_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Server configuration error: BOT_TOKEN is not set.",
        )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Last-resort conversion of uncaught handler exceptions into a generic 500."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error serving %s %s", request.method, request.url.path)
            return build_error_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="Internal server error",
            )
