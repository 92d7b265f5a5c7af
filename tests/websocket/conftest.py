"""WebSocket test configuration.

Creates a minimal FastAPI test app that only mounts the WebSocket router,
with fresh relay state on ``app.state``.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from signal_relay.routers.websocket import router as ws_router
from signal_relay.services.connection_manager import ConnectionManager
from signal_relay.services.lifecycle import SignalingHub


def create_test_app() -> FastAPI:
    """Build a minimal FastAPI app with only the WebSocket router."""
    test_app = FastAPI()
    test_app.include_router(ws_router)
    test_app.state.hub = SignalingHub()
    test_app.state.connection_manager = ConnectionManager()
    return test_app


@pytest.fixture
def ws_app():
    return create_test_app()


@pytest.fixture
def client(ws_app):
    """TestClient sharing one event loop across all WebSocket sessions."""
    with TestClient(ws_app) as c:
        yield c
