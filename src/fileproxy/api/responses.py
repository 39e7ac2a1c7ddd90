from fastapi import Request
from fastapi.responses import JSONResponse

from fileproxy.api.schemas.responses import ErrorResponse
from fileproxy.core.errors import FileProxyError


def build_error_response(*, status_code: int, message: str) -> JSONResponse:
    """Build a strongly typed API error payload."""
    payload = ErrorResponse(message=message)
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))


async def file_proxy_error_handler(request: Request, exc: FileProxyError) -> JSONResponse:
    """Render any `FileProxyError` raised out of a route or dependency."""
    return build_error_response(status_code=exc.status_code, message=exc.message)
