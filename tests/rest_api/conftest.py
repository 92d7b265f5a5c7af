"""HTTP test configuration.

Provides:
- ``relay_app``: the real ``signal_relay.main.app`` with a fresh hub on ``app.state``
- ``client``: httpx.AsyncClient over ASGITransport (lifespan not run)
"""

from __future__ import annotations

import os

# Pin CORS origins before the app module reads settings.
os.environ["CORS_ORIGINS"] = "http://localhost:3000"

from signal_relay.config import get_settings  # noqa: E402

get_settings.cache_clear()

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from signal_relay.main import app  # noqa: E402
from signal_relay.services.connection_manager import ConnectionManager  # noqa: E402
from signal_relay.services.lifecycle import SignalingHub  # noqa: E402


@pytest.fixture
def relay_app():
    app.state.hub = SignalingHub()
    app.state.connection_manager = ConnectionManager()
    yield app
    del app.state.hub
    del app.state.connection_manager


@pytest_asyncio.fixture
async def client(relay_app):
    transport = ASGITransport(app=relay_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
