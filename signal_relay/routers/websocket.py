"""WebSocket endpoint carrying signaling events.

Provides:
- ``WS /ws``: one connection per client. Frames are JSON objects of the form
  ``{"event": <name>, "data": <payload>}`` in both directions.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from signal_relay.exceptions import InvalidEventError
from signal_relay.models import INBOUND_EVENTS

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Frame decoding
# ---------------------------------------------------------------------------


def decode_frame(raw: str) -> tuple[str, BaseModel]:
    """Parse one text frame into ``(event_name, payload_model)``.

    ``register`` accepts either a bare user-id string or ``{"userId": ...}``.
    Raises :class:`InvalidEventError` for anything that is not a known,
    well-formed event.
    """
    try:
        frame = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidEventError(f"Frame is not valid JSON: {exc.msg}") from exc

    if not isinstance(frame, dict):
        raise InvalidEventError("Frame must be a JSON object")

    event = frame.get("event")
    if not isinstance(event, str):
        raise InvalidEventError("Frame is missing an 'event' name")

    model = INBOUND_EVENTS.get(event)
    if model is None:
        raise InvalidEventError(f"Unknown event '{event}'", event=event)

    data = frame.get("data")
    if event == "register" and isinstance(data, str):
        data = {"userId": data}
    if not isinstance(data, dict):
        raise InvalidEventError(f"Payload for '{event}' must be an object", event=event)

    try:
        return event, model.model_validate(data)
    except ValidationError as exc:
        raise InvalidEventError(
            f"Invalid payload for '{event}': {exc.error_count()} error(s)", event=event
        ) from exc


# ---------------------------------------------------------------------------
# WS /ws
# ---------------------------------------------------------------------------


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Accept, register with the hub, run the receive loop, clean up.

    Flow:
    1. Accept and obtain a connection id from the connection manager
    2. Open an anonymous session on the hub
    3. Decode each frame, route it, deliver the results
    4. On disconnect: drop the socket, then announce the cleanup
    """
    hub = websocket.app.state.hub
    connection_manager = websocket.app.state.connection_manager

    await websocket.accept()
    connection_id = await connection_manager.connect(websocket)
    hub.connect(connection_id)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                event, payload = decode_frame(raw)
            except InvalidEventError as exc:
                logger.warning("Ignoring frame from %s: %s", connection_id, exc.message)
                continue
            await connection_manager.deliver(hub.handle(connection_id, event, payload))
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Connection %s failed", connection_id)
    finally:
        await connection_manager.disconnect(connection_id)
        await connection_manager.deliver(hub.disconnect(connection_id))
