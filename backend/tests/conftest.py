from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from app.config import Settings, get_settings
from app.main import app
from services.store import sessions

TEST_IPN_URL = "https://ipn.test/cgi-bin/webscr"
TEST_STORE_URL = "https://scores.test"
TEST_STORE_TOKEN = "test-token"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings(tmp_path) -> Settings:
    (tmp_path / "index.html").write_text("<html>game</html>")
    return Settings(
        pocketbase_url=TEST_STORE_URL,
        pocketbase_token=TEST_STORE_TOKEN,
        paypal_ipn_url=TEST_IPN_URL,
        session_ttl_seconds=0,
        game_dir=tmp_path,
    )


@pytest.fixture(autouse=True)
def isolate_app(settings: Settings) -> Iterator[None]:
    """Clear the in-memory session store and route overrides around every test."""
    sessions.clear()
    sessions.ttl_seconds = 0
    app.dependency_overrides[get_settings] = lambda: settings
    yield
    app.dependency_overrides.clear()
    sessions.clear()


@pytest.fixture
def api_client() -> Callable[[], httpx.AsyncClient]:
    def _make() -> httpx.AsyncClient:
        transport = httpx.ASGITransport(app=app)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    return _make
