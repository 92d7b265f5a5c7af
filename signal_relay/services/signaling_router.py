"""Signaling router: turns one inbound event into outbound deliveries.

The router mutates the presence and room registries when an event implies
a state change and returns a list of :class:`Delivery` instructions. It
performs no I/O itself; the connection manager executes the deliveries
after routing has finished, so registry updates for one event are never
interleaved with another event's.

Delivery to a specific user is best-effort: if the user is not registered
at the moment of routing, the event is dropped. The only exception is
``call-user``, which answers the caller with ``call-failed``.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from signal_relay.models import (
    CallAcceptedEvent,
    CallDeclinedEvent,
    CallUserEvent,
    EndCallEvent,
    JoinRoomEvent,
    LeaveRoomEvent,
    RegisterEvent,
    RoomSignalEvent,
)
from signal_relay.services import signal_messages
from signal_relay.services.presence_registry import PresenceRegistry
from signal_relay.services.room_registry import RoomRegistry

logger = logging.getLogger(__name__)

OFFLINE_REASON = "User is offline"


class DeliveryKind(str, enum.Enum):
    SEND = "send"  # one connection
    BROADCAST = "broadcast"  # every connection except ``connection_id``
    GROUP_SEND = "group_send"  # members of ``room_id`` except ``connection_id``
    GROUP_JOIN = "group_join"
    GROUP_LEAVE = "group_leave"


@dataclass(frozen=True)
class Delivery:
    """A single transport action produced by routing."""

    kind: DeliveryKind
    connection_id: str
    frame: dict | None = None
    room_id: str | None = None

    @classmethod
    def send(cls, connection_id: str, frame: dict) -> Delivery:
        return cls(DeliveryKind.SEND, connection_id, frame)

    @classmethod
    def broadcast(cls, sender_id: str, frame: dict) -> Delivery:
        return cls(DeliveryKind.BROADCAST, sender_id, frame)

    @classmethod
    def group_send(cls, room_id: str, sender_id: str, frame: dict) -> Delivery:
        return cls(DeliveryKind.GROUP_SEND, sender_id, frame, room_id)

    @classmethod
    def group_join(cls, room_id: str, connection_id: str) -> Delivery:
        return cls(DeliveryKind.GROUP_JOIN, connection_id, None, room_id)

    @classmethod
    def group_leave(cls, room_id: str, connection_id: str) -> Delivery:
        return cls(DeliveryKind.GROUP_LEAVE, connection_id, None, room_id)


class SignalingRouter:
    """Routing rules keyed by inbound event name."""

    def __init__(self, presence: PresenceRegistry, rooms: RoomRegistry) -> None:
        self.presence = presence
        self.rooms = rooms
        self._handlers: dict[str, Callable[[str, BaseModel], list[Delivery]]] = {
            "register": self._register,
            "call-user": self._call_user,
            "call-accepted": self._call_accepted,
            "call-declined": self._call_declined,
            "end-call": self._end_call,
            "join-room": self._join_room,
            "send-signal": self._send_signal,
            "return-signal": self._return_signal,
            "leave-room": self._leave_room,
        }

    @property
    def events(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def route(self, connection_id: str, event: str, payload: BaseModel) -> list[Delivery]:
        """Apply *event* from *connection_id* and return the resulting deliveries.

        Raises ``KeyError`` for an event name the router does not handle.
        """
        handler = self._handlers[event]
        return handler(connection_id, payload)

    # -- helpers ------------------------------------------------------------

    def _relay(self, to_user: str, event: str, frame: dict) -> list[Delivery]:
        """Deliver *frame* to *to_user* if reachable, otherwise drop it."""
        target = self.presence.lookup(to_user)
        if target is None:
            logger.debug("Dropping %s for offline user %s", event, to_user)
            return []
        return [Delivery.send(target, frame)]

    # -- presence -----------------------------------------------------------

    def _register(self, connection_id: str, payload: RegisterEvent) -> list[Delivery]:
        logger.info("User %s registered with connection %s", payload.user_id, connection_id)
        self.presence.register(payload.user_id, connection_id)
        return [
            Delivery.broadcast(connection_id, signal_messages.user_online(user_id=payload.user_id)),
            Delivery.send(
                connection_id,
                signal_messages.active_users(user_ids=self.presence.list_users()),
            ),
        ]

    # -- one-to-one calls ---------------------------------------------------

    def _call_user(self, connection_id: str, payload: CallUserEvent) -> list[Delivery]:
        logger.info("Call from %s to %s", payload.from_, payload.to)
        target = self.presence.lookup(payload.to)
        if target is None:
            return [
                Delivery.send(
                    connection_id,
                    signal_messages.call_failed(to_user=payload.to, reason=OFFLINE_REASON),
                )
            ]
        frame = signal_messages.call_incoming(
            from_user=payload.from_,
            signal_data=payload.signal_data,
            call_type=payload.call_type,
        )
        return [Delivery.send(target, frame)]

    def _call_accepted(self, connection_id: str, payload: CallAcceptedEvent) -> list[Delivery]:
        logger.info("Call accepted from %s to %s", payload.from_, payload.to)
        frame = signal_messages.call_accepted(from_user=payload.from_, signal_data=payload.signal_data)
        return self._relay(payload.to, "call-accepted", frame)

    def _call_declined(self, connection_id: str, payload: CallDeclinedEvent) -> list[Delivery]:
        logger.info("Call declined from %s to %s: %s", payload.from_, payload.to, payload.reason)
        frame = signal_messages.call_declined(from_user=payload.from_, reason=payload.reason)
        return self._relay(payload.to, "call-declined", frame)

    def _end_call(self, connection_id: str, payload: EndCallEvent) -> list[Delivery]:
        logger.info("Call ended from %s to %s", payload.from_, payload.to)
        return self._relay(payload.to, "call-ended", signal_messages.call_ended(from_user=payload.from_))

    # -- rooms --------------------------------------------------------------

    def _join_room(self, connection_id: str, payload: JoinRoomEvent) -> list[Delivery]:
        logger.info("User %s joining room %s", payload.user_id, payload.room_id)
        participants = self.rooms.join(payload.room_id, payload.user_id)
        return [
            Delivery.group_join(payload.room_id, connection_id),
            Delivery.group_send(
                payload.room_id,
                connection_id,
                signal_messages.user_joined(user_id=payload.user_id, room_id=payload.room_id),
            ),
            Delivery.send(
                connection_id,
                signal_messages.room_participants(room_id=payload.room_id, participants=participants),
            ),
        ]

    def _send_signal(self, connection_id: str, payload: RoomSignalEvent) -> list[Delivery]:
        logger.info("Signal from %s to %s in room %s", payload.from_, payload.to, payload.room_id)
        frame = signal_messages.user_signal(
            from_user=payload.from_,
            signal_data=payload.signal_data,
            room_id=payload.room_id,
        )
        return self._relay(payload.to, "send-signal", frame)

    def _return_signal(self, connection_id: str, payload: RoomSignalEvent) -> list[Delivery]:
        logger.info(
            "Return signal from %s to %s in room %s", payload.from_, payload.to, payload.room_id
        )
        frame = signal_messages.receiving_returned_signal(
            from_user=payload.from_,
            signal_data=payload.signal_data,
            room_id=payload.room_id,
        )
        return self._relay(payload.to, "return-signal", frame)

    def _leave_room(self, connection_id: str, payload: LeaveRoomEvent) -> list[Delivery]:
        logger.info("User %s leaving room %s", payload.user_id, payload.room_id)
        self.rooms.leave(payload.room_id, payload.user_id)
        deliveries: list[Delivery] = []
        # members remain exactly when the room is still registered
        if payload.room_id in self.rooms:
            deliveries.append(
                Delivery.group_send(
                    payload.room_id,
                    connection_id,
                    signal_messages.user_left(user_id=payload.user_id, room_id=payload.room_id),
                )
            )
        deliveries.append(Delivery.group_leave(payload.room_id, connection_id))
        return deliveries
