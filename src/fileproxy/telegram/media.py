"""Attachment resolution for incoming messages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from fileproxy.api.schemas.telegram import TelegramMessage, TelegramPhotoSize


class MediaKind(StrEnum):
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    VOICE = "voice"
    PHOTO = "photo"


# Checked in order; the first populated field wins.
MEDIA_PRIORITY: tuple[MediaKind, ...] = (
    MediaKind.DOCUMENT,
    MediaKind.VIDEO,
    MediaKind.AUDIO,
    MediaKind.VOICE,
    MediaKind.PHOTO,
)


@dataclass(frozen=True)
class MediaRef:
    """The single attachment a message resolves to."""

    kind: MediaKind
    file_id: str
    file_unique_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


def largest_photo(sizes: Sequence[TelegramPhotoSize]) -> TelegramPhotoSize | None:
    """Pick the variant with the largest `file_size`, or the last one when none is sized."""
    if not sizes:
        return None
    sized = [size for size in sizes if size.file_size is not None]
    if not sized:
        return sizes[-1]
    return max(sized, key=lambda size: size.file_size)


def select_media(message: TelegramMessage) -> MediaRef | None:
    """Resolve a message to at most one attachment using `MEDIA_PRIORITY`."""
    for kind in MEDIA_PRIORITY:
        if kind is MediaKind.PHOTO:
            photo = largest_photo(message.photo or [])
            if photo is not None:
                return MediaRef(
                    kind=kind,
                    file_id=photo.file_id,
                    file_unique_id=photo.file_unique_id,
                    file_size=photo.file_size,
                )
            continue

        attachment = getattr(message, kind.value)
        if attachment is None:
            continue
        return MediaRef(
            kind=kind,
            file_id=attachment.file_id,
            file_unique_id=attachment.file_unique_id,
            file_name=getattr(attachment, "file_name", None),
            mime_type=attachment.mime_type,
            file_size=attachment.file_size,
        )
    return None
