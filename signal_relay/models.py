"""Pydantic models for inbound WebSocket events and HTTP status responses.

Inbound payloads use the camelCase field names clients send on the wire;
the models expose them as snake_case attributes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Inbound event payloads
# ---------------------------------------------------------------------------


class _InboundEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterEvent(_InboundEvent):
    """``register``: bind the sending connection to a user identity."""

    user_id: str = Field(..., alias="userId")


class CallUserEvent(_InboundEvent):
    """``call-user``: ring ``to`` on behalf of ``from``."""

    to: str
    from_: str = Field(..., alias="from")
    signal_data: Any = Field(default=None, alias="signalData")
    call_type: Any = Field(default=None, alias="callType")


class CallAcceptedEvent(_InboundEvent):
    """``call-accepted``"""

    to: str
    from_: str = Field(..., alias="from")
    signal_data: Any = Field(default=None, alias="signalData")


class CallDeclinedEvent(_InboundEvent):
    """``call-declined``"""

    to: str
    from_: str = Field(..., alias="from")
    reason: Any = None


class EndCallEvent(_InboundEvent):
    """``end-call``"""

    to: str
    from_: str = Field(..., alias="from")


class JoinRoomEvent(_InboundEvent):
    """``join-room``"""

    room_id: str = Field(..., alias="roomId")
    user_id: str = Field(..., alias="userId")


class LeaveRoomEvent(_InboundEvent):
    """``leave-room``"""

    room_id: str = Field(..., alias="roomId")
    user_id: str = Field(..., alias="userId")


class RoomSignalEvent(_InboundEvent):
    """``send-signal`` / ``return-signal``: relay negotiation data inside a room."""

    to: str
    from_: str = Field(..., alias="from")
    room_id: str = Field(..., alias="roomId")
    signal_data: Any = Field(default=None, alias="signalData")


INBOUND_EVENTS: dict[str, type[BaseModel]] = {
    "register": RegisterEvent,
    "call-user": CallUserEvent,
    "call-accepted": CallAcceptedEvent,
    "call-declined": CallDeclinedEvent,
    "end-call": EndCallEvent,
    "join-room": JoinRoomEvent,
    "send-signal": RoomSignalEvent,
    "return-signal": RoomSignalEvent,
    "leave-room": LeaveRoomEvent,
}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response for ``GET /health``."""

    status: str = "ok"


class ActiveUsersResponse(BaseModel):
    """Response for ``GET /active-users``."""

    users: list[str]


class RoomInfo(BaseModel):
    """One entry of ``GET /active-rooms``."""

    model_config = ConfigDict(populate_by_name=True)

    participants: list[str]
    created_by: str = Field(..., alias="createdBy")
    created_at: datetime = Field(..., alias="createdAt")


class ActiveRoomsResponse(BaseModel):
    """Response for ``GET /active-rooms``."""

    rooms: dict[str, RoomInfo]
