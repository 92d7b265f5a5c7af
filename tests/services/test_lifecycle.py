"""Tests for SignalingHub connection lifecycle.

Covers:
- anonymous -> identified -> closed transitions
- disconnect cleanup of presence and rooms with the right notifications
- disconnect of unregistered / superseded connections
- events from closed connections are ignored
"""

from __future__ import annotations

from signal_relay.services.lifecycle import ConnectionState
from signal_relay.services.signaling_router import Delivery
from tests.factories import make_call_user, make_join_room, make_register


class TestStateMachine:
    def test_connect_starts_anonymous(self, hub):
        session = hub.connect("c1")
        assert session.state is ConnectionState.ANONYMOUS
        assert session.user_id is None

    def test_register_identifies(self, hub, route):
        hub.connect("c1")
        route("c1", make_register("alice"))
        session = hub.session("c1")
        assert session.state is ConnectionState.IDENTIFIED
        assert session.user_id == "alice"

    def test_re_register_stays_identified(self, hub, route):
        hub.connect("c1")
        route("c1", make_register("alice"))
        route("c1", make_register("alice-laptop"))
        session = hub.session("c1")
        assert session.state is ConnectionState.IDENTIFIED
        assert session.user_id == "alice-laptop"

    def test_other_events_keep_anonymous(self, hub, route):
        hub.connect("c1")
        route("c1", make_join_room("r1", "alice"))
        assert hub.session("c1").state is ConnectionState.ANONYMOUS

    def test_disconnect_closes_session(self, hub):
        session = hub.connect("c1")
        hub.disconnect("c1")
        assert session.state is ConnectionState.CLOSED
        assert hub.session("c1") is None

    def test_events_after_close_are_ignored(self, hub, route):
        hub.connect("c1")
        hub.disconnect("c1")
        assert route("c1", make_register("alice")) == []
        assert hub.presence.lookup("alice") is None

    def test_events_from_unknown_connection_are_ignored(self, hub, route):
        assert route("never-connected", make_call_user(to="bob")) == []


class TestDisconnectCleanup:
    def test_anonymous_disconnect_announces_nothing(self, hub):
        hub.connect("c1")
        assert hub.disconnect("c1") == []

    def test_registered_disconnect_broadcasts_offline(self, hub, route):
        hub.connect("c-alice")
        route("c-alice", make_register("alice"))

        deliveries = hub.disconnect("c-alice")

        assert deliveries == [
            Delivery.broadcast("c-alice", {"event": "user-offline", "data": "alice"}),
        ]
        assert hub.presence.lookup("alice") is None

    def test_disconnect_leaves_every_room(self, hub, route):
        for user in ("alice", "bob"):
            hub.connect(f"c-{user}")
            route(f"c-{user}", make_register(user))
        route("c-alice", make_join_room("r1", "alice"))
        route("c-bob", make_join_room("r1", "bob"))
        route("c-bob", make_join_room("r2", "bob"))

        deliveries = hub.disconnect("c-bob")

        assert deliveries == [
            Delivery.broadcast("c-bob", {"event": "user-offline", "data": "bob"}),
            Delivery.group_send(
                "r1", "c-bob", {"event": "user-left", "data": {"userId": "bob", "roomId": "r1"}}
            ),
        ]
        assert hub.presence.lookup("bob") is None
        assert hub.rooms.get("r1").participants == ["alice"]
        assert "r2" not in hub.rooms

    def test_superseded_connection_disconnect_is_silent(self, hub, route):
        """Last registration wins; closing the orphaned connection changes nothing."""
        hub.connect("c-old")
        route("c-old", make_register("alice"))
        route("c-old", make_join_room("r1", "alice"))
        hub.connect("c-new")
        route("c-new", make_register("alice"))

        assert hub.disconnect("c-old") == []
        assert hub.presence.lookup("alice") == "c-new"
        assert hub.rooms.get("r1").participants == ["alice"]

    def test_second_identity_keeps_first_reachable(self, hub, route):
        hub.connect("c1")
        route("c1", make_register("alice"))
        route("c1", make_register("bob"))
        assert hub.presence.lookup("alice") == "c1"
        assert hub.presence.lookup("bob") == "c1"

    def test_disconnect_cleans_up_every_identity_on_connection(self, hub, route):
        hub.connect("c1")
        route("c1", make_register("alice"))
        route("c1", make_join_room("r1", "alice"))
        route("c1", make_register("bob"))
        route("c1", make_join_room("r2", "bob"))

        deliveries = hub.disconnect("c1")

        assert deliveries == [
            Delivery.broadcast("c1", {"event": "user-offline", "data": "alice"}),
            Delivery.broadcast("c1", {"event": "user-offline", "data": "bob"}),
        ]
        assert hub.presence.lookup("alice") is None
        assert hub.presence.lookup("bob") is None
        assert "r1" not in hub.rooms
        assert "r2" not in hub.rooms

    def test_second_identity_disconnect_notifies_remaining_members(self, hub, route):
        hub.connect("c1")
        route("c1", make_register("alice"))
        route("c1", make_join_room("r1", "alice"))
        route("c1", make_register("bob"))
        hub.connect("c-carol")
        route("c-carol", make_register("carol"))
        route("c-carol", make_join_room("r1", "carol"))

        deliveries = hub.disconnect("c1")

        assert deliveries == [
            Delivery.broadcast("c1", {"event": "user-offline", "data": "alice"}),
            Delivery.group_send(
                "r1", "c1", {"event": "user-left", "data": {"userId": "alice", "roomId": "r1"}}
            ),
            Delivery.broadcast("c1", {"event": "user-offline", "data": "bob"}),
        ]
        assert hub.rooms.get("r1").participants == ["carol"]

    def test_rooms_joined_without_registration_survive_disconnect(self, hub, route):
        hub.connect("c1")
        route("c1", make_join_room("r1", "alice"))
        assert hub.disconnect("c1") == []
        assert hub.rooms.get("r1").participants == ["alice"]

    def test_snapshots(self, hub, route):
        hub.connect("c-alice")
        route("c-alice", make_register("alice"))
        route("c-alice", make_join_room("r1", "alice"))
        assert hub.active_users() == ["alice"]
        assert list(hub.active_rooms()) == ["r1"]
