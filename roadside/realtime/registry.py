"""In-memory bookkeeping of live Socket.IO connections.

A connection starts unauthenticated. Authenticating stores the user id on the
connection and adds the connection to that user's channel; a user may have any
number of connections at once. State lives for the lifetime of the process.
"""

from __future__ import annotations

from collections import defaultdict


class ConnectionRegistry:
    def __init__(self) -> None:
        self._identity: dict[str, int | None] = {}
        self._channels: dict[int, set[str]] = defaultdict(set)

    def __len__(self) -> int:
        return len(self._identity)

    def __contains__(self, sid: object) -> bool:
        return sid in self._identity

    def connect(self, sid: str) -> None:
        self._identity.setdefault(sid, None)

    def authenticate(self, sid: str, user_id: int) -> None:
        previous = self._identity.get(sid)
        if previous is not None and previous != user_id:
            self._leave(sid, previous)
        self._identity[sid] = user_id
        self._channels[user_id].add(sid)

    def connections_for(self, user_id: int) -> set[str]:
        return set(self._channels.get(user_id, ()))

    def user_for(self, sid: str) -> int | None:
        return self._identity.get(sid)

    def all_connections(self) -> list[str]:
        return list(self._identity)

    def disconnect(self, sid: str) -> int | None:
        """Forget ``sid`` and return the user it was authenticated as, if any."""
        user_id = self._identity.pop(sid, None)
        if user_id is not None:
            self._leave(sid, user_id)
        return user_id

    def _leave(self, sid: str, user_id: int) -> None:
        channel = self._channels.get(user_id)
        if channel is None:
            return
        channel.discard(sid)
        if not channel:
            del self._channels[user_id]
