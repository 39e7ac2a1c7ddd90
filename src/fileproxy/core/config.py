from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENTS = frozenset({"development", "dev", "local", "test"})
_ALLOWED_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        frozen=True,
    )

    app_name: str = Field(default="Telegram File Proxy", validation_alias="APP_NAME")
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    bot_token: SecretStr | None = Field(default=None, validation_alias="BOT_TOKEN")
    secret_token: SecretStr | None = Field(default=None, validation_alias="SECRET_TOKEN")
    worker_url: str | None = Field(default=None, validation_alias="WORKER_URL")
    telegram_api_base_url: str = Field(
        default="https://api.telegram.org",
        validation_alias="TELEGRAM_API_BASE_URL",
    )
    notify_in_background: bool = Field(
        default=True,
        validation_alias="NOTIFY_IN_BACKGROUND",
    )

    @field_validator("bot_token", "secret_token", "worker_url", mode="before")
    @classmethod
    def blank_as_unset(cls, value: object) -> object:
        """Treat empty or whitespace-only values as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Normalize LOG_LEVEL and reject unknown levels early."""
        normalized = str(value).strip().upper()
        if normalized not in _ALLOWED_LOG_LEVELS:
            allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return normalized

    @field_validator("telegram_api_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Keep the API base URL joinable with method paths."""
        return value.rstrip("/")

    @property
    def is_local_environment(self) -> bool:
        return self.environment.strip().lower() in LOCAL_ENVIRONMENTS

    def redacted_values(self) -> tuple[str, ...]:
        """Return configured secret values that must never appear in output."""
        secrets = (self.bot_token, self.secret_token)
        return tuple(secret.get_secret_value() for secret in secrets if secret is not None)


@lru_cache
def get_settings() -> Settings:
    """Build settings from environment variables."""
    return Settings()
