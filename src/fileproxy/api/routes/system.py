from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fileproxy.api.dependencies import (
    AppSettings,
    PublicBaseUrl,
    get_app_settings,
    request_host,
    resolve_public_base_url,
)
from fileproxy.api.responses import build_error_response
from fileproxy.api.schemas.responses import DebugEnv, DebugResponse
from fileproxy.core.config import Settings
from fileproxy.core.logging import REDACTED

router = APIRouter(tags=["system"])

NOT_SET = "Not Set"
ENDPOINTS = {
    "webhook": "POST /webhook",
    "file_proxy": "GET /file/{file_id}",
    "file_info": "GET /file/{file_id}?json=true",
    "set_webhook": "GET /setWebhook",
    "delete_webhook": "GET /deleteWebhook",
    "webhook_info": "GET /info",
    "bot_info": "GET /me",
    "debug": "GET /debug",
}
LIVENESS_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]
# Routing misses; any other method on any other path still reports liveness.
_UNMATCHED_STATUSES = frozenset({status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED})


@router.get("/debug", response_model=DebugResponse)
def debug_env(request: Request, settings: AppSettings) -> DebugResponse:
    """Report which secrets are configured without revealing them."""
    return DebugResponse(
        message=f"{settings.app_name} is running.",
        env=DebugEnv(
            bot_token=REDACTED if settings.bot_token is not None else NOT_SET,
            secret_token=REDACTED if settings.secret_token is not None else NOT_SET,
            worker_url=settings.worker_url
            or f"Not Set (using request host: {request_host(request)})",
        ),
    )


def liveness_payload(settings: Settings, public_base_url: str) -> dict[str, Any]:
    return {
        "status": "success",
        "message": f"{settings.app_name} is running",
        "worker_url": public_base_url,
        "timestamp": datetime.now(UTC).isoformat(),
        "endpoints": ENDPOINTS,
    }


@router.api_route("/{path:path}", methods=LIVENESS_METHODS, include_in_schema=False)
def liveness(settings: AppSettings, public_base_url: PublicBaseUrl) -> dict[str, Any]:
    """Fallthrough for every unmatched route: the service is alive."""
    return liveness_payload(settings, public_base_url)


async def unmatched_route_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Answer routing misses with liveness and other HTTP errors in the shared error shape."""
    if exc.status_code in _UNMATCHED_STATUSES:
        settings = get_app_settings(request)
        return JSONResponse(
            content=liveness_payload(settings, resolve_public_base_url(settings, request))
        )
    return build_error_response(status_code=exc.status_code, message=str(exc.detail))
