"""Telegram webhook ingress route."""

import logging
from dataclasses import dataclass
from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from fileproxy.api.dependencies import AppSettings, BotApi, PublicBaseUrl, verify_webhook_secret
from fileproxy.api.responses import build_error_response
from fileproxy.api.schemas.responses import ErrorResponse, StatusResponse
from fileproxy.api.schemas.telegram import TelegramMessage, TelegramUpdate
from fileproxy.core.observability import log_event
from fileproxy.telegram.client import TelegramApiError, TelegramBotApi
from fileproxy.telegram.media import select_media
from fileproxy.telegram.messages import (
    CONFIRMATION_PARSE_MODE,
    HELP_PARSE_MODE,
    HELP_TEXT,
    parse_command,
    proxy_link_text,
    status_text,
)

router = APIRouter(tags=["telegram"])
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutgoingReply:
    """One message to send back to the chat that produced an update."""

    chat_id: int
    text: str
    parse_mode: str | None
    kind: str
    proxy_url: str | None = None


def proxy_url_for(public_base_url: str, file_id: str) -> str:
    return f"{public_base_url}/file/{quote(file_id)}"


def build_reply(message: TelegramMessage, public_base_url: str) -> OutgoingReply:
    """Decide what to answer: a proxy link for media, otherwise command or help text."""
    chat_id = message.chat.id
    media = select_media(message)
    if media is not None:
        proxy_url = proxy_url_for(public_base_url, media.file_id)
        return OutgoingReply(
            chat_id=chat_id,
            text=proxy_link_text(media, proxy_url),
            parse_mode=CONFIRMATION_PARSE_MODE,
            kind=f"proxy_link.{media.kind}",
            proxy_url=proxy_url,
        )

    if parse_command(message.text) == "/status":
        return OutgoingReply(chat_id=chat_id, text=status_text(message), parse_mode=None, kind="status")
    return OutgoingReply(chat_id=chat_id, text=HELP_TEXT, parse_mode=HELP_PARSE_MODE, kind="help")


async def deliver_reply(bot_api: TelegramBotApi, reply: OutgoingReply, *, update_id: int) -> None:
    """Send a reply; failures are logged and never reach the webhook response."""
    try:
        await bot_api.send_message(reply.chat_id, reply.text, parse_mode=reply.parse_mode)
    except TelegramApiError as exc:
        log_event(
            logger,
            level=logging.ERROR,
            event="telegram.webhook.reply_failed",
            update_id=update_id,
            chat_id=reply.chat_id,
            reply=reply.kind,
            error=bot_api.redact(exc.message),
        )
        return
    except Exception:
        logger.exception(
            "Unexpected failure sending %s reply for update %s to chat %s",
            reply.kind,
            update_id,
            reply.chat_id,
        )
        return

    log_event(
        logger,
        event="telegram.webhook.reply_sent",
        update_id=update_id,
        chat_id=reply.chat_id,
        reply=reply.kind,
    )


@router.post(
    "/webhook",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_webhook_secret)],
    responses={
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def telegram_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: AppSettings,
    bot_api: BotApi,
    public_base_url: PublicBaseUrl,
) -> StatusResponse | JSONResponse:
    """Acknowledge a Telegram update and answer its chat with a proxy link or help."""
    try:
        update = TelegramUpdate.model_validate(await request.json())
    except (ValueError, ValidationError):
        logger.exception("Could not decode Telegram webhook update")
        return build_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Internal error processing webhook.",
        )

    message = update.message
    if message is None:
        log_event(logger, event="telegram.webhook.ignored", update_id=update.update_id)
        return StatusResponse(status="ok", message="Update received, but no message to process.")

    reply = build_reply(message, public_base_url)
    log_event(
        logger,
        event="telegram.webhook.accepted",
        update_id=update.update_id,
        chat_id=reply.chat_id,
        reply=reply.kind,
        proxy_url=reply.proxy_url,
    )
    if settings.notify_in_background:
        background_tasks.add_task(deliver_reply, bot_api, reply, update_id=update.update_id)
    else:
        await deliver_reply(bot_api, reply, update_id=update.update_id)
    return StatusResponse(status="success")
