"""Thin async wrapper over the Telegram Bot API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from fileproxy.api.schemas.telegram import TelegramFile
from fileproxy.core.errors import FileProxyError
from fileproxy.core.logging import REDACTED

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.telegram.org"
UNPARSABLE_ERROR_DESCRIPTION = "Failed to parse error response"


class TelegramApiError(FileProxyError):
    """Bot API call failed at the transport, HTTP or envelope level."""

    def __init__(self, description: str, *, upstream_status: int | None = None) -> None:
        if upstream_status is None:
            message = f"Telegram API error: {description}"
        else:
            message = f"Telegram API error ({upstream_status}): {description}"
        super().__init__(message)
        self.description = description
        self.upstream_status = upstream_status


class TelegramBotApi:
    """Bot API client bound to one bot token and a shared httpx client."""

    def __init__(
        self,
        *,
        token: str,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        self._token = token
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._token}/{method}"

    def file_download_url(self, file_path: str) -> str:
        """Build the temporary download URL for a resolved `file_path`, percent-encoded."""
        return f"{self._base_url}/file/bot{self._token}/{quote(file_path.lstrip('/'))}"

    def redact(self, text: str) -> str:
        """Strip the bot token from text that may reach a client or a log."""
        return text.replace(self._token, REDACTED)

    def _transport_error(self, exc: httpx.HTTPError) -> TelegramApiError:
        description = self.redact(str(exc)) or type(exc).__name__
        return TelegramApiError(description)

    async def call(self, method: str, payload: dict[str, Any] | None = None) -> Any:
        """Invoke one Bot API method and unwrap the `{ok, result, description}` envelope."""
        url = self._method_url(method)
        try:
            if payload is None:
                response = await self._http.get(url)
            else:
                response = await self._http.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Telegram %s request failed: %s", method, type(exc).__name__)
            raise self._transport_error(exc) from exc

        if not response.is_success:
            description = _error_description(response)
            raise TelegramApiError(description, upstream_status=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise TelegramApiError(
                "Response body is not valid JSON",
                upstream_status=response.status_code,
            ) from exc

        if not isinstance(data, dict) or not data.get("ok", False):
            description = data.get("description") if isinstance(data, dict) else None
            raise TelegramApiError(str(description or "Unknown error"))
        return data.get("result")

    async def get_file(self, file_id: str) -> TelegramFile:
        result = await self.call("getFile", {"file_id": file_id})
        return TelegramFile.model_validate(result)

    async def send_message(
        self,
        chat_id: int | str,
        text: str,
        *,
        parse_mode: str | None = None,
        disable_web_page_preview: bool = True,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": disable_web_page_preview,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode
        return await self.call("sendMessage", payload)

    async def set_webhook(
        self,
        url: str,
        *,
        secret_token: str | None = None,
        drop_pending_updates: bool = False,
    ) -> bool:
        """Register `url` as the webhook; an empty url clears it."""
        payload: dict[str, Any] = {"url": url}
        if secret_token is not None:
            payload["secret_token"] = secret_token
        if drop_pending_updates:
            payload["drop_pending_updates"] = True
        return bool(await self.call("setWebhook", payload))

    async def get_webhook_info(self) -> dict[str, Any]:
        return await self.call("getWebhookInfo")

    async def get_me(self) -> dict[str, Any]:
        return await self.call("getMe")

    async def open_file_stream(self, file_path: str) -> httpx.Response:
        """Open a streaming download of a resolved file; the caller must close it."""
        request = self._http.build_request("GET", self.file_download_url(file_path))
        try:
            response = await self._http.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise self._transport_error(exc) from exc

        if not response.is_success:
            await response.aclose()
            raise TelegramApiError(
                "File download failed",
                upstream_status=response.status_code,
            )
        return response


def _error_description(response: httpx.Response) -> str:
    """Extract the Bot API error description from a non-2xx response."""
    try:
        data = response.json()
    except ValueError:
        return UNPARSABLE_ERROR_DESCRIPTION
    if isinstance(data, dict) and data.get("description"):
        return str(data["description"])
    return UNPARSABLE_ERROR_DESCRIPTION
