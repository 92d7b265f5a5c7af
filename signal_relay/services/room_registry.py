"""Room registry: multi-party call rooms and their participants.

A room is created by the first ``join`` and closed when its last
participant leaves. The registry holds only active rooms; a closed room is
dropped immediately and the next ``join`` on the same id starts a fresh
room with new metadata.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import NamedTuple

logger = logging.getLogger(__name__)


class RoomState(str, enum.Enum):
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass
class Room:
    """A named group of users sharing a multi-party call."""

    room_id: str
    created_by: str
    created_at: datetime
    state: RoomState = RoomState.ACTIVE
    # dict keys double as an insertion-ordered set
    _participants: dict[str, None] = field(default_factory=dict, repr=False)

    @property
    def participants(self) -> list[str]:
        return list(self._participants)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._participants

    def add(self, user_id: str) -> bool:
        """Add *user_id*; return ``False`` if already present."""
        if self.state is RoomState.CLOSED:
            raise RuntimeError(f"Room {self.room_id} is closed")
        if user_id in self._participants:
            return False
        self._participants[user_id] = None
        return True

    def remove(self, user_id: str) -> bool:
        """Remove *user_id*, closing the room when it empties.

        Returns ``True`` if the user was a participant.
        """
        if user_id not in self._participants:
            return False
        del self._participants[user_id]
        if not self._participants:
            self.state = RoomState.CLOSED
        return True


class LeaveResult(NamedTuple):
    removed: bool
    room_deleted: bool


class RoomRegistry:
    """Maps room ids to active rooms. Every registered room is non-empty."""

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}

    def join(self, room_id: str, user_id: str) -> list[str]:
        """Add *user_id* to *room_id*, creating the room on first use.

        Joining a room twice is a no-op. Returns the room's participants in
        join order, including *user_id*.
        """
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(
                room_id=room_id,
                created_by=user_id,
                created_at=datetime.now(timezone.utc),
            )
            self._rooms[room_id] = room
            logger.info("Room %s created by %s", room_id, user_id)
        room.add(user_id)
        return room.participants

    def leave(self, room_id: str, user_id: str) -> LeaveResult:
        """Remove *user_id* from *room_id*; delete the room if it empties.

        An unknown room or a user who is not a participant counts as
        already left.
        """
        room = self._rooms.get(room_id)
        if room is None:
            return LeaveResult(removed=False, room_deleted=False)
        removed = room.remove(user_id)
        room_deleted = self._discard_if_closed(room)
        return LeaveResult(removed=removed, room_deleted=room_deleted)

    def leave_all(self, user_id: str) -> list[tuple[str, bool]]:
        """Remove *user_id* from every room it participates in.

        Returns one ``(room_id, room_deleted)`` pair per affected room.
        """
        affected: list[tuple[str, bool]] = []
        # snapshot: rooms may be deleted while iterating
        for room in list(self._rooms.values()):
            if room.remove(user_id):
                affected.append((room.room_id, self._discard_if_closed(room)))
        return affected

    def get(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def snapshot(self) -> dict[str, Room]:
        """Shallow copy of the active rooms, keyed by room id."""
        return dict(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def _discard_if_closed(self, room: Room) -> bool:
        if room.state is not RoomState.CLOSED:
            return False
        del self._rooms[room.room_id]
        logger.info("Room %s closed", room.room_id)
        return True
