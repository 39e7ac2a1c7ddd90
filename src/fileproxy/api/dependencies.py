"""Shared FastAPI dependencies."""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header, Request

from fileproxy.core.config import Settings, get_settings
from fileproxy.core.errors import ConfigurationError, WebhookAuthenticationError
from fileproxy.telegram.client import TelegramBotApi

logger = logging.getLogger(__name__)
WEBHOOK_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def get_app_settings(request: Request) -> Settings:
    """Return the immutable settings the application was built with."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        settings = get_settings()
    return settings


def get_bot_api(request: Request) -> TelegramBotApi:
    """Return the Bot API client created during application startup."""
    bot_api: TelegramBotApi | None = getattr(request.app.state, "bot_api", None)
    if bot_api is None:
        raise ConfigurationError("Server configuration error: BOT_TOKEN is not set.")
    return bot_api


AppSettings = Annotated[Settings, Depends(get_app_settings)]
BotApi = Annotated[TelegramBotApi, Depends(get_bot_api)]


def request_host(request: Request) -> str:
    return request.url.netloc


def resolve_public_base_url(settings: Settings, request: Request) -> str:
    """Externally visible base URL: WORKER_URL when set, else the inbound host."""
    if settings.worker_url:
        configured = settings.worker_url.strip().rstrip("/")
        if "://" in configured:
            return configured
        return f"https://{configured}"
    return f"https://{request_host(request)}"


def get_public_base_url(request: Request, settings: AppSettings) -> str:
    return resolve_public_base_url(settings, request)


PublicBaseUrl = Annotated[str, Depends(get_public_base_url)]


def verify_webhook_secret(
    settings: AppSettings,
    webhook_secret: Annotated[str | None, Header(alias=WEBHOOK_SECRET_HEADER)] = None,
) -> None:
    """Reject webhook calls that do not carry the configured shared secret."""
    expected_secret = settings.secret_token
    if expected_secret is None:
        logger.warning(
            "SECRET_TOKEN is not configured; /webhook requests are accepted without "
            "authentication"
        )
        return
    if not hmac.compare_digest(
        (webhook_secret or "").encode("utf-8"),
        expected_secret.get_secret_value().encode("utf-8"),
    ):
        logger.warning("Rejected webhook request with a missing or wrong secret token")
        raise WebhookAuthenticationError("Unauthorized webhook request")
