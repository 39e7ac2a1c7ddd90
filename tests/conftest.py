import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

# Keep the module-level app in fileproxy.main from picking up a developer's real bot.
os.environ["ENVIRONMENT"] = "test"
os.environ["BOT_TOKEN"] = ""
os.environ["SECRET_TOKEN"] = ""
os.environ["WORKER_URL"] = ""

from fileproxy.core.config import get_settings  # noqa: E402
from fileproxy.main import create_app  # noqa: E402
from tests.telegram_fakes import TEST_HOST, FakeTelegram, make_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch) -> Iterator[None]:
    for name in ("BOT_TOKEN", "SECRET_TOKEN", "WORKER_URL", "NOTIFY_IN_BACKGROUND"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_telegram() -> FakeTelegram:
    return FakeTelegram()


@pytest.fixture
def client_factory(fake_telegram: FakeTelegram) -> Callable[..., Any]:
    """Build a started TestClient; keyword overrides use environment variable names."""

    @contextmanager
    def _factory(
        *,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        **overrides: Any,
    ) -> Iterator[TestClient]:
        app = create_app(
            settings=make_settings(**overrides),
            transport=httpx.MockTransport(handler or fake_telegram.handler),
        )
        with TestClient(app, base_url=f"https://{TEST_HOST}", follow_redirects=False) as client:
            yield client

    return _factory


@pytest.fixture
def client(client_factory) -> Iterator[TestClient]:
    with client_factory() as test_client:
        yield test_client
