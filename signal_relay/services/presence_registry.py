"""Presence registry: which connection currently answers for which user.

Single source of truth for "is user X reachable right now". Keeps a
secondary ``connection -> users`` index in lockstep with the primary map so
disconnect cleanup does not scan every registered user.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """Maps user identities to their active connection handle."""

    def __init__(self) -> None:
        self._by_user: dict[str, str] = {}
        # connection -> users it currently answers for (dict keys keep order)
        self._by_connection: dict[str, dict[str, None]] = {}

    def register(self, user_id: str, connection_id: str) -> None:
        """Bind *user_id* to *connection_id*, overwriting any earlier binding.

        The last registration wins. A superseded connection loses its
        reverse entry for *user_id*, so its eventual disconnect leaves the
        newer binding alone. Identities the connection registered earlier
        stay bound to it.
        """
        previous_connection = self._by_user.get(user_id)
        if previous_connection is not None and previous_connection != connection_id:
            logger.info(
                "User %s re-registered; connection %s superseded by %s",
                user_id,
                previous_connection,
                connection_id,
            )
            self._discard_reverse(previous_connection, user_id)

        self._by_user[user_id] = connection_id
        self._by_connection.setdefault(connection_id, {})[user_id] = None

    def lookup(self, user_id: str) -> str | None:
        """Return the connection for *user_id*, or ``None`` if unreachable."""
        return self._by_user.get(user_id)

    def unregister_by_connection(self, connection_id: str) -> list[str]:
        """Remove and return every user still bound to *connection_id*.

        Users come back in the order the connection registered them. The
        list is empty when the connection never registered or every
        identity it held was superseded by a later registration.
        """
        users = list(self._by_connection.pop(connection_id, {}))
        for user_id in users:
            del self._by_user[user_id]
        return users

    def users_for(self, connection_id: str) -> list[str]:
        return list(self._by_connection.get(connection_id, {}))

    def list_users(self) -> list[str]:
        """Snapshot of registered users in registration order."""
        return list(self._by_user)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._by_user

    def __len__(self) -> int:
        return len(self._by_user)

    def _discard_reverse(self, connection_id: str, user_id: str) -> None:
        users = self._by_connection.get(connection_id)
        if users is None:
            return
        users.pop(user_id, None)
        if not users:
            del self._by_connection[connection_id]
