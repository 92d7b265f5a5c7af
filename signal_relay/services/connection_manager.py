"""WebSocket connection manager.

Instantiated once in ``main.py`` lifespan and stored on ``app.state``.
Owns the live sockets, hands out connection handles, keeps track of which
connections have joined which room group, and executes the deliveries the
signaling hub produces.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import uuid4

from starlette.websockets import WebSocket

from signal_relay.services.signaling_router import Delivery, DeliveryKind

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks active WebSocket connections and room groups."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        # room_id -> connection ids (dict keys keep join order)
        self._groups: dict[str, dict[str, None]] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Register *websocket* and return its new connection id."""
        connection_id = uuid4().hex
        self._connections[connection_id] = websocket
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        """Forget *connection_id* and drop it from every group.

        Safe to call for a connection that is not tracked.
        """
        self._connections.pop(connection_id, None)
        for room_id in list(self._groups):
            self._discard_member(room_id, connection_id)

    def join_group(self, room_id: str, connection_id: str) -> None:
        if connection_id not in self._connections:
            return
        self._groups.setdefault(room_id, {})[connection_id] = None

    def leave_group(self, room_id: str, connection_id: str) -> None:
        self._discard_member(room_id, connection_id)

    def group_members(self, room_id: str) -> list[str]:
        return list(self._groups.get(room_id, {}))

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    # -- sending ------------------------------------------------------------

    async def send_to_connection(self, connection_id: str, message: dict) -> None:
        """Send *message* as JSON to one connection, if it is still open."""
        await self._send_many([connection_id], message)

    async def broadcast(self, message: dict, *, exclude: str | None = None) -> None:
        """Send *message* to every connection except *exclude*."""
        await self._send_many(
            [cid for cid in list(self._connections) if cid != exclude],
            message,
        )

    async def send_to_group(self, room_id: str, message: dict, *, exclude: str | None = None) -> None:
        """Send *message* to every member of *room_id* except *exclude*."""
        await self._send_many(
            [cid for cid in self.group_members(room_id) if cid != exclude],
            message,
        )

    async def deliver(self, deliveries: Iterable[Delivery]) -> None:
        """Execute routing output in order."""
        for delivery in deliveries:
            if delivery.kind is DeliveryKind.SEND:
                await self.send_to_connection(delivery.connection_id, delivery.frame)
            elif delivery.kind is DeliveryKind.BROADCAST:
                await self.broadcast(delivery.frame, exclude=delivery.connection_id)
            elif delivery.kind is DeliveryKind.GROUP_SEND:
                await self.send_to_group(
                    delivery.room_id, delivery.frame, exclude=delivery.connection_id
                )
            elif delivery.kind is DeliveryKind.GROUP_JOIN:
                self.join_group(delivery.room_id, delivery.connection_id)
            elif delivery.kind is DeliveryKind.GROUP_LEAVE:
                self.leave_group(delivery.room_id, delivery.connection_id)

    async def _send_many(self, connection_ids: list[str], message: dict) -> None:
        """Send to each connection; a failing socket is dropped, not fatal.

        The failed connection's own receive loop observes the close and
        runs the regular disconnect path.
        """
        dead: list[str] = []
        for connection_id in connection_ids:
            ws = self._connections.get(connection_id)
            if ws is None:
                continue
            try:
                await ws.send_json(message)
            except Exception:
                logger.warning(
                    "Failed to send %s to connection %s",
                    message.get("event"),
                    connection_id,
                    exc_info=True,
                )
                dead.append(connection_id)

        for connection_id in dead:
            await self.disconnect(connection_id)

    def _discard_member(self, room_id: str, connection_id: str) -> None:
        members = self._groups.get(room_id)
        if members is None:
            return
        members.pop(connection_id, None)
        # Clean up empty group
        if not members:
            del self._groups[room_id]
