"""Reply texts sent back to Telegram chats."""

from html import escape

from fileproxy.api.schemas.telegram import TelegramMessage
from fileproxy.telegram.media import MediaRef

DEFAULT_FILE_NAME = "telegram_file"

HELP_TEXT = (
    "Hi! Send me a file, photo, video, audio or voice message and I will reply "
    "with a public download link.\n"
    "\n"
    "Admin endpoints you can open in a browser:\n"
    "- `/setWebhook`: register the webhook\n"
    "- `/deleteWebhook`: remove the webhook\n"
    "- `/info`: show webhook info\n"
    "- `/debug`: show service status"
)
HELP_PARSE_MODE = "Markdown"
CONFIRMATION_PARSE_MODE = "HTML"


def proxy_link_text(media: MediaRef, proxy_url: str) -> str:
    """Confirmation sent after a file is received, escaped for HTML parse mode."""
    file_name = media.file_name or DEFAULT_FILE_NAME
    return (
        f"File received: <b>{escape(file_name)}</b>\n"
        f"Download link: {escape(proxy_url)}"
    )


def status_text(message: TelegramMessage) -> str:
    sender = message.from_user
    lines = ["Bot is up and running.", ""]
    if sender is not None:
        lines.append(f"User ID: {sender.id}")
        lines.append(f"Username: {sender.username or 'not set'}")
        lines.append(f"First name: {sender.first_name or 'not set'}")
    lines.append(f"Chat type: {message.chat.type}")
    return "\n".join(lines)


def parse_command(text: str | None) -> str | None:
    """Return the lowercased leading `/command`, without any `@botname` suffix."""
    if not text:
        return None
    trimmed = text.strip()
    if not trimmed.startswith("/"):
        return None
    command = trimmed.split(maxsplit=1)[0]
    return command.split("@", 1)[0].lower()
