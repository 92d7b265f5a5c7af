"""Connection lifecycle handling and the hub that owns relay state.

``SignalingHub`` is the single owner of the presence and room registries.
One instance is created in the application lifespan; the WebSocket
endpoint feeds it connect, event and disconnect notifications and executes
the deliveries it returns. Every hub method runs to completion without
awaiting, which keeps both registries consistent across event boundaries
on a single event loop.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from pydantic import BaseModel

from signal_relay.models import RegisterEvent
from signal_relay.services import signal_messages
from signal_relay.services.presence_registry import PresenceRegistry
from signal_relay.services.room_registry import Room, RoomRegistry
from signal_relay.services.signaling_router import Delivery, SignalingRouter

logger = logging.getLogger(__name__)


class ConnectionState(str, enum.Enum):
    ANONYMOUS = "anonymous"
    IDENTIFIED = "identified"
    CLOSED = "closed"


@dataclass
class Session:
    """Per-connection lifecycle record."""

    connection_id: str
    state: ConnectionState = ConnectionState.ANONYMOUS
    user_id: str | None = None


class SignalingHub:
    """Owns relay state and applies connection lifecycle transitions."""

    def __init__(self) -> None:
        self.presence = PresenceRegistry()
        self.rooms = RoomRegistry()
        self.router = SignalingRouter(self.presence, self.rooms)
        self._sessions: dict[str, Session] = {}

    # -- lifecycle ----------------------------------------------------------

    def connect(self, connection_id: str) -> Session:
        """Start tracking a freshly opened connection."""
        logger.info("Connection opened: %s", connection_id)
        session = Session(connection_id=connection_id)
        self._sessions[connection_id] = session
        return session

    def handle(self, connection_id: str, event: str, payload: BaseModel) -> list[Delivery]:
        """Route one inbound event and return the resulting deliveries.

        Events from unknown or closed connections are ignored.
        """
        session = self._sessions.get(connection_id)
        if session is None or session.state is ConnectionState.CLOSED:
            logger.warning("Ignoring %s from inactive connection %s", event, connection_id)
            return []

        deliveries = self.router.route(connection_id, event, payload)

        if isinstance(payload, RegisterEvent):
            session.state = ConnectionState.IDENTIFIED
            session.user_id = payload.user_id
        return deliveries

    def disconnect(self, connection_id: str) -> list[Delivery]:
        """Tear down a closed connection's presence and room memberships.

        For every identity still bound to the connection, returns the
        ``user-offline`` broadcast followed by one ``user-left`` per room
        that still has members. Nothing is announced when the connection
        never registered or every identity it held was superseded by a
        newer registration elsewhere.
        """
        logger.info("Connection closed: %s", connection_id)
        session = self._sessions.pop(connection_id, None)
        if session is not None:
            session.state = ConnectionState.CLOSED

        deliveries: list[Delivery] = []
        for user_id in self.presence.unregister_by_connection(connection_id):
            deliveries.append(
                Delivery.broadcast(connection_id, signal_messages.user_offline(user_id=user_id))
            )
            for room_id, room_deleted in self.rooms.leave_all(user_id):
                if room_deleted:
                    continue
                deliveries.append(
                    Delivery.group_send(
                        room_id,
                        connection_id,
                        signal_messages.user_left(user_id=user_id, room_id=room_id),
                    )
                )
        return deliveries

    # -- status snapshots ---------------------------------------------------

    def session(self, connection_id: str) -> Session | None:
        return self._sessions.get(connection_id)

    def active_users(self) -> list[str]:
        return self.presence.list_users()

    def active_rooms(self) -> dict[str, Room]:
        return self.rooms.snapshot()
