"""Response contracts returned by the relay endpoints."""

from typing import Any, Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error payload shared by every endpoint."""

    status: Literal["error"] = "error"
    message: str


class StatusResponse(BaseModel):
    status: str
    message: str | None = None


class FileInfo(BaseModel):
    """`getFile` result enriched with the constructed download URL."""

    file_id: str
    file_unique_id: str
    file_size: int | None = None
    file_path: str
    download_url: str


class FileInfoResponse(BaseModel):
    status: Literal["success"] = "success"
    file_info: FileInfo


class WebhookInfoResponse(BaseModel):
    status: Literal["success"] = "success"
    webhook_info: dict[str, Any]


class BotInfoResponse(BaseModel):
    status: Literal["success"] = "success"
    bot: dict[str, Any]


class DebugEnv(BaseModel):
    """Redacted view of configuration; never holds secret values."""

    bot_token: str
    secret_token: str
    worker_url: str


class DebugResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    env: DebugEnv
