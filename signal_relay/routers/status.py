"""Read-only status snapshots of presence and rooms.

Provides:
- ``GET /active-users``: user ids currently registered.
- ``GET /active-rooms``: every active room with participants and metadata.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from signal_relay.dependencies import get_hub
from signal_relay.models import ActiveRoomsResponse, ActiveUsersResponse, RoomInfo
from signal_relay.services.lifecycle import SignalingHub

router = APIRouter()


@router.get("/active-users", response_model=ActiveUsersResponse)
async def active_users(hub: SignalingHub = Depends(get_hub)) -> ActiveUsersResponse:
    return ActiveUsersResponse(users=hub.active_users())


@router.get("/active-rooms", response_model=ActiveRoomsResponse)
async def active_rooms(hub: SignalingHub = Depends(get_hub)) -> ActiveRoomsResponse:
    """Snapshot of all rooms; ``createdAt`` is ISO 8601 in UTC."""
    rooms = {
        room_id: RoomInfo(
            participants=room.participants,
            created_by=room.created_by,
            created_at=room.created_at,
        )
        for room_id, room in hub.active_rooms().items()
    }
    return ActiveRoomsResponse(rooms=rooms)
