"""Outbound signaling frame factories.

Each function returns a plain dict ``{"event": <name>, "data": <payload>}``.
The router wraps the result in a delivery instruction and the connection
manager sends it with ``send_json``. Payload shapes are what existing
clients of the relay expect: presence events carry a bare user id,
``active-users`` a bare list, everything else a camelCase object.
"""

from __future__ import annotations

from typing import Any


def _frame(event: str, data: Any) -> dict:
    return {"event": event, "data": data}


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def user_online(*, user_id: str) -> dict:
    """A user registered and is now reachable."""
    return _frame("user-online", user_id)


def user_offline(*, user_id: str) -> dict:
    """A registered user's connection closed."""
    return _frame("user-offline", user_id)


def active_users(*, user_ids: list[str]) -> dict:
    """Everyone currently online, sent to a connection right after it registers."""
    return _frame("active-users", list(user_ids))


# ---------------------------------------------------------------------------
# One-to-one calls
# ---------------------------------------------------------------------------


def call_incoming(*, from_user: str, signal_data: Any, call_type: Any) -> dict:
    return _frame(
        "call-incoming",
        {"from": from_user, "signalData": signal_data, "callType": call_type},
    )


def call_failed(*, to_user: str, reason: str) -> dict:
    """The callee could not be reached."""
    return _frame("call-failed", {"to": to_user, "reason": reason})


def call_accepted(*, from_user: str, signal_data: Any) -> dict:
    return _frame("call-accepted", {"from": from_user, "signalData": signal_data})


def call_declined(*, from_user: str, reason: Any) -> dict:
    return _frame("call-declined", {"from": from_user, "reason": reason})


def call_ended(*, from_user: str) -> dict:
    return _frame("call-ended", {"from": from_user})


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


def user_joined(*, user_id: str, room_id: str) -> dict:
    return _frame("user-joined", {"userId": user_id, "roomId": room_id})


def room_participants(*, room_id: str, participants: list[str]) -> dict:
    """Full participant list, sent to a connection after it joins."""
    return _frame(
        "room-participants",
        {"roomId": room_id, "participants": list(participants)},
    )


def user_signal(*, from_user: str, signal_data: Any, room_id: str) -> dict:
    return _frame(
        "user-signal",
        {"from": from_user, "signalData": signal_data, "roomId": room_id},
    )


def receiving_returned_signal(*, from_user: str, signal_data: Any, room_id: str) -> dict:
    return _frame(
        "receiving-returned-signal",
        {"from": from_user, "signalData": signal_data, "roomId": room_id},
    )


def user_left(*, user_id: str, room_id: str) -> dict:
    return _frame("user-left", {"userId": user_id, "roomId": room_id})
