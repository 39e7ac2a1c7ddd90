import logging
import logging.config
from collections.abc import Iterable

from fileproxy.core.request_context import get_request_id

_ALLOWED_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
REDACTED = "[REDACTED]"

# These libraries log full request URLs, and Bot API URLs embed the token.
_NOISY_URL_LOGGERS = ("httpx", "httpcore")


class RequestIdFilter(logging.Filter):
    """Inject request correlation identifier into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        record.request_id = request_id if request_id else "-"
        return True


class SecretRedactionFilter(logging.Filter):
    """Replace configured secret values in rendered log records."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets = tuple(secret for secret in secrets if secret)

    def redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True

        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None

        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)
        return True


def configure_logging(level: str, *, secrets: Iterable[str] = ()) -> None:
    """Configure process-wide logging for the proxy service."""
    normalized_level = level.upper()
    if normalized_level not in _ALLOWED_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LEVELS))
        raise ValueError(f"Invalid LOG_LEVEL '{level}'. Expected one of: {allowed}")

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": (
                        "%(asctime)s %(levelname)s %(name)s "
                        "[request_id=%(request_id)s]: %(message)s"
                    ),
                }
            },
            "filters": {
                "request_id": {"()": "fileproxy.core.logging.RequestIdFilter"},
                "redact_secrets": {
                    "()": "fileproxy.core.logging.SecretRedactionFilter",
                    "secrets": tuple(secrets),
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                    "filters": ["request_id", "redact_secrets"],
                }
            },
            "loggers": {
                name: {"level": "WARNING"} for name in _NOISY_URL_LOGGERS
            },
            "root": {
                "level": normalized_level,
                "handlers": ["console"],
            },
        }
    )
