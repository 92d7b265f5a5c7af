"""Shared pytest fixtures for relay tests.

Provides:
- ``hub``: a fresh ``SignalingHub`` with empty registries
- ``route``: helper that decodes a factory frame and feeds it to ``hub``
"""

from __future__ import annotations

import json

import pytest

from signal_relay.routers.websocket import decode_frame
from signal_relay.services.lifecycle import SignalingHub


@pytest.fixture
def hub() -> SignalingHub:
    return SignalingHub()


@pytest.fixture
def route(hub):
    """Return ``route(connection_id, frame) -> list[Delivery]``."""

    def _route(connection_id: str, frame: dict):
        event, payload = decode_frame(json.dumps(frame))
        return hub.handle(connection_id, event, payload)

    return _route
