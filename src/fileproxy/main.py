import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fileproxy.api.middleware import (
    ConfigurationGuardMiddleware,
    CorsHeadersMiddleware,
    RequestCorrelationMiddleware,
    UnhandledErrorMiddleware,
)
from fileproxy.api.responses import build_error_response, file_proxy_error_handler
from fileproxy.api.router import api_router
from fileproxy.api.routes.system import unmatched_route_handler
from fileproxy.core.config import Settings, get_settings
from fileproxy.core.errors import FileProxyError
from fileproxy.core.logging import configure_logging
from fileproxy.telegram.client import TelegramBotApi

logger = logging.getLogger(__name__)


async def _request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed query/path parameters in the shared error shape."""
    fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
    return build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=f"Invalid request parameters: {fields}",
    )


def create_app(
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level, secrets=settings.redacted_values())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the shared Bot API client and close it on shutdown."""
        app.state.settings = settings
        app.state.http_client = httpx.AsyncClient(transport=transport)
        app.state.bot_api = None
        if settings.bot_token is not None:
            app.state.bot_api = TelegramBotApi(
                token=settings.bot_token.get_secret_value(),
                http_client=app.state.http_client,
                base_url=settings.telegram_api_base_url,
            )
        else:
            logger.error("BOT_TOKEN is not configured; only /debug will be served")
        if settings.secret_token is None:
            logger.warning("SECRET_TOKEN is not configured; webhook requests are not authenticated")
        yield
        app.state.bot_api = None
        http_client = getattr(app.state, "http_client", None)
        if http_client is not None:
            try:
                await http_client.aclose()
            except (RuntimeError, OSError):
                logger.exception("Failed to close Telegram HTTP client")
        app.state.http_client = None

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_local_environment else None,
        redoc_url="/redoc" if settings.is_local_environment else None,
        openapi_url="/openapi.json" if settings.is_local_environment else None,
    )
    app.state.settings = settings
    # Added innermost first: correlation wraps CORS, which wraps the guards.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(ConfigurationGuardMiddleware, settings=settings)
    app.add_middleware(CorsHeadersMiddleware)
    app.add_middleware(RequestCorrelationMiddleware)
    app.add_exception_handler(FileProxyError, file_proxy_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, unmatched_route_handler)
    app.include_router(api_router)
    return app


def run() -> None:
    """Serve the application with uvicorn using HOST/PORT from settings."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


app = create_app()
