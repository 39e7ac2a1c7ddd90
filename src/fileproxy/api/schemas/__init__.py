"""API schema models."""

from .responses import (
    BotInfoResponse,
    DebugEnv,
    DebugResponse,
    ErrorResponse,
    FileInfo,
    FileInfoResponse,
    StatusResponse,
    WebhookInfoResponse,
)
from .telegram import TelegramFile, TelegramMessage, TelegramUpdate

__all__ = [
    "BotInfoResponse",
    "DebugEnv",
    "DebugResponse",
    "ErrorResponse",
    "FileInfo",
    "FileInfoResponse",
    "StatusResponse",
    "TelegramFile",
    "TelegramMessage",
    "TelegramUpdate",
    "WebhookInfoResponse",
]
