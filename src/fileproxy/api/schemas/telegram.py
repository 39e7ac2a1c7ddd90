"""Telegram Bot API payload contracts used by the relay."""

from pydantic import BaseModel, Field


class TelegramUser(BaseModel):
    """Subset of Telegram user data required by the webhook."""

    id: int
    is_bot: bool = False
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None


class TelegramChat(BaseModel):
    id: int
    type: str = "private"
    title: str | None = None
    username: str | None = None


class TelegramPhotoSize(BaseModel):
    """One resolution variant of a photo."""

    file_id: str
    file_unique_id: str
    width: int | None = None
    height: int | None = None
    file_size: int | None = None


class TelegramDocument(BaseModel):
    file_id: str
    file_unique_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class TelegramVideo(TelegramDocument):
    width: int | None = None
    height: int | None = None
    duration: int | None = None


class TelegramAudio(TelegramDocument):
    duration: int | None = None
    performer: str | None = None
    title: str | None = None


class TelegramVoice(BaseModel):
    file_id: str
    file_unique_id: str
    duration: int | None = None
    mime_type: str | None = None
    file_size: int | None = None


class TelegramMessage(BaseModel):
    """Subset of Telegram message data required by the webhook."""

    message_id: int
    from_user: TelegramUser | None = Field(default=None, alias="from")
    chat: TelegramChat
    date: int
    text: str | None = None
    caption: str | None = None
    photo: list[TelegramPhotoSize] | None = None
    document: TelegramDocument | None = None
    video: TelegramVideo | None = None
    audio: TelegramAudio | None = None
    voice: TelegramVoice | None = None


class TelegramUpdate(BaseModel):
    """Top-level Telegram update."""

    update_id: int
    message: TelegramMessage | None = None


class TelegramFile(BaseModel):
    """Result of `getFile`; `file_path` is short-lived and must not be cached."""

    file_id: str
    file_unique_id: str
    file_size: int | None = None
    file_path: str | None = None
