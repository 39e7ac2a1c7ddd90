"""Webhook lifecycle endpoints: register, clear and inspect."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from fileproxy.api.dependencies import AppSettings, BotApi, PublicBaseUrl
from fileproxy.api.responses import build_error_response
from fileproxy.api.schemas.responses import (
    BotInfoResponse,
    ErrorResponse,
    StatusResponse,
    WebhookInfoResponse,
)
from fileproxy.core.observability import log_event
from fileproxy.telegram.client import TelegramApiError, TelegramBotApi

router = APIRouter(tags=["webhook-admin"])
logger = logging.getLogger(__name__)
UPSTREAM_ERROR_RESPONSES = {500: {"model": ErrorResponse}}


def _upstream_failure(bot_api: TelegramBotApi, action: str, exc: TelegramApiError) -> JSONResponse:
    message = bot_api.redact(exc.message)
    log_event(
        logger,
        level=logging.ERROR,
        event=f"webhook_admin.{action}_failed",
        upstream_status=exc.upstream_status,
        error=message,
    )
    return build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
    )


@router.get("/setWebhook", response_model=StatusResponse, responses=UPSTREAM_ERROR_RESPONSES)
async def set_webhook(
    settings: AppSettings,
    bot_api: BotApi,
    public_base_url: PublicBaseUrl,
) -> StatusResponse | JSONResponse:
    """Point the bot's webhook at this service's `/webhook` route."""
    webhook_url = f"{public_base_url}/webhook"
    secret_token = settings.secret_token.get_secret_value() if settings.secret_token else None
    try:
        await bot_api.set_webhook(webhook_url, secret_token=secret_token)
    except TelegramApiError as exc:
        return _upstream_failure(bot_api, "set", exc)

    log_event(
        logger,
        event="webhook_admin.set",
        webhook_url=webhook_url,
        authenticated=secret_token is not None,
    )
    return StatusResponse(status="success", message=f"Webhook set successfully to: {webhook_url}")


@router.get("/deleteWebhook", response_model=StatusResponse, responses=UPSTREAM_ERROR_RESPONSES)
async def delete_webhook(
    bot_api: BotApi,
    drop_pending_updates: Annotated[bool, Query()] = False,
) -> StatusResponse | JSONResponse:
    """Clear the webhook URL; repeating the call is harmless."""
    try:
        await bot_api.set_webhook("", drop_pending_updates=drop_pending_updates)
    except TelegramApiError as exc:
        return _upstream_failure(bot_api, "delete", exc)

    log_event(logger, event="webhook_admin.deleted", drop_pending_updates=drop_pending_updates)
    return StatusResponse(status="success", message="Webhook deleted successfully.")


@router.get("/info", response_model=WebhookInfoResponse, responses=UPSTREAM_ERROR_RESPONSES)
@router.get("/getWebhookInfo", response_model=WebhookInfoResponse, responses=UPSTREAM_ERROR_RESPONSES)
async def get_webhook_info(bot_api: BotApi) -> WebhookInfoResponse | JSONResponse:
    try:
        info = await bot_api.get_webhook_info()
    except TelegramApiError as exc:
        return _upstream_failure(bot_api, "info", exc)
    return WebhookInfoResponse(webhook_info=info)


@router.get("/me", response_model=BotInfoResponse, responses=UPSTREAM_ERROR_RESPONSES)
async def get_bot_identity(bot_api: BotApi) -> BotInfoResponse | JSONResponse:
    """Return the bot's own `getMe` profile."""
    try:
        bot = await bot_api.get_me()
    except TelegramApiError as exc:
        return _upstream_failure(bot_api, "me", exc)
    return BotInfoResponse(bot=bot)
