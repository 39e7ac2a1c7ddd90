"""Telegram Bot API access and message helpers."""

from fileproxy.telegram.client import TelegramApiError, TelegramBotApi
from fileproxy.telegram.media import MediaKind, MediaRef, select_media

__all__ = [
    "MediaKind",
    "MediaRef",
    "TelegramApiError",
    "TelegramBotApi",
    "select_media",
]
