import httpx
from fastapi.testclient import TestClient

from fileproxy.core.config import get_settings
from fileproxy.main import create_app
from fileproxy.telegram.client import TelegramBotApi
from tests.telegram_fakes import make_settings


def test_startup_builds_bot_client_and_closes_it_on_shutdown() -> None:
    """Lifespan should own the shared httpx client."""
    app = create_app(settings=make_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    with TestClient(app):
        http_client = app.state.http_client
        assert isinstance(app.state.bot_api, TelegramBotApi)
        assert not http_client.is_closed

    assert http_client.is_closed
    assert app.state.bot_api is None
    assert app.state.http_client is None


def test_startup_without_bot_token_skips_bot_client() -> None:
    app = create_app(settings=make_settings(BOT_TOKEN=""))

    with TestClient(app):
        assert app.state.bot_api is None


def test_create_app_reads_environment_when_no_settings_given(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "987:env-token")
    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()

    app = create_app()

    assert app.state.settings.bot_token.get_secret_value() == "987:env-token"
    assert app.openapi_url is None
