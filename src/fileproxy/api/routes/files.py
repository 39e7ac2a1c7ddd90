"""Stable proxy links for Telegram files."""

import logging
from pathlib import PurePosixPath
from typing import Annotated

import httpx
from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse, RedirectResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from fileproxy.api.dependencies import BotApi
from fileproxy.api.responses import build_error_response
from fileproxy.api.schemas.responses import ErrorResponse, FileInfo, FileInfoResponse
from fileproxy.core.errors import FileProxyError, FilePathUnavailableError, MissingParameterError
from fileproxy.core.observability import log_event
from fileproxy.telegram.client import TelegramBotApi

router = APIRouter(tags=["files"])
logger = logging.getLogger(__name__)

_PASSTHROUGH_HEADERS = ("content-type", "last-modified", "etag")
FILE_METHODS = ["GET", "HEAD"]


def _flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() == "true"


def _stream_response(upstream: httpx.Response, file_path: str) -> StreamingResponse:
    """Relay an open upstream download without buffering it."""
    headers = {
        name: upstream.headers[name] for name in _PASSTHROUGH_HEADERS if name in upstream.headers
    }
    # aiter_bytes() decodes content encodings, so the upstream length only holds without one.
    if "content-length" in upstream.headers and "content-encoding" not in upstream.headers:
        headers["content-length"] = upstream.headers["content-length"]
    headers["content-disposition"] = f'inline; filename="{PurePosixPath(file_path).name}"'
    return StreamingResponse(
        upstream.aiter_bytes(),
        status_code=status.HTTP_200_OK,
        headers=headers,
        background=BackgroundTask(upstream.aclose),
    )


async def _resolve_file(bot_api: TelegramBotApi, file_id: str) -> tuple[FileInfo, str]:
    telegram_file = await bot_api.get_file(file_id)
    if not telegram_file.file_path:
        raise FilePathUnavailableError(file_id)
    download_url = bot_api.file_download_url(telegram_file.file_path)
    file_info = FileInfo(**telegram_file.model_dump(), download_url=download_url)
    return file_info, download_url


@router.api_route("/file", methods=FILE_METHODS, include_in_schema=False)
@router.api_route("/file/", methods=FILE_METHODS, include_in_schema=False)
def missing_file_id() -> None:
    raise MissingParameterError("File ID is missing.")


@router.api_route(
    "/file/{file_id:path}",
    methods=FILE_METHODS,
    response_model=None,
    responses={
        302: {"description": "Redirect to the temporary Telegram download URL"},
        200: {"model": FileInfoResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def proxy_file(
    file_id: str,
    bot_api: BotApi,
    as_json: Annotated[str | None, Query(alias="json")] = None,
    proxy: Annotated[str | None, Query()] = None,
) -> Response:
    """Redirect to, describe, or stream the Telegram file behind `file_id`."""
    file_id = file_id.strip()
    if not file_id:
        raise MissingParameterError("File ID is missing.")

    try:
        file_info, download_url = await _resolve_file(bot_api, file_id)
        if _flag(proxy):
            upstream = await bot_api.open_file_stream(file_info.file_path)
            log_event(logger, event="file_proxy.stream", file_id=file_id, file_size=file_info.file_size)
            return _stream_response(upstream, file_info.file_path)
    except FileProxyError as exc:
        message = bot_api.redact(exc.message)
        log_event(
            logger,
            level=logging.ERROR,
            event="file_proxy.failed",
            file_id=file_id,
            error=message,
        )
        return build_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=f"Proxy failed: {message}",
        )

    if _flag(as_json):
        log_event(logger, event="file_proxy.info", file_id=file_id)
        payload = FileInfoResponse(file_info=file_info)
        return JSONResponse(content=payload.model_dump(mode="json", exclude_none=True))

    log_event(logger, event="file_proxy.redirect", file_id=file_id)
    return RedirectResponse(download_url, status_code=status.HTTP_302_FOUND)
