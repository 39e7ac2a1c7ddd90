"""Error taxonomy shared by routes and middleware."""

from fastapi import status


class FileProxyError(Exception):
    """Base error rendered as a `{status: "error", message}` JSON body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(FileProxyError):
    """Required configuration is missing."""


class WebhookAuthenticationError(FileProxyError):
    """Webhook request did not present the configured shared secret."""

    status_code = status.HTTP_403_FORBIDDEN


class MissingParameterError(FileProxyError):
    """A required path or query parameter was not supplied."""

    status_code = status.HTTP_400_BAD_REQUEST


class FilePathUnavailableError(FileProxyError):
    """Telegram resolved a file but returned no downloadable path."""

    def __init__(self, file_id: str) -> None:
        super().__init__("file_path not available in file info.")
        self.file_id = file_id
