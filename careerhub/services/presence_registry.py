"""Who is reachable right now (in-memory, single process)."""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional, Set

from fastapi.encoders import jsonable_encoder


class Connection:
    """
    One live realtime channel from one client.

    `user_id` stays None until the client sends its `setup` frame; the
    transport itself carries no identity.
    """

    def __init__(self, websocket: Any, connection_id: Optional[str] = None) -> None:
        self.websocket = websocket
        self.connection_id = connection_id or uuid.uuid4().hex
        self.user_id: Optional[str] = None
        self.rooms: Set[str] = set()

    async def emit(self, event: str, data: Any = None) -> None:
        await self.websocket.send_json({"event": event, "data": jsonable_encoder(data)})

    def __repr__(self) -> str:
        return f"<Connection {self.connection_id} user={self.user_id}>"


class PresenceRegistry:
    """
    Maps user ids to their current connection.

    At most one connection is tracked per user: binding a second one
    replaces the first for routing, while the first stays attached and
    keeps receiving broadcasts. None of the methods await, so a mutation
    is never interleaved with another handler on the event loop.
    """

    def __init__(self) -> None:
        self._connections: Dict[str, Connection] = {}
        self._users: Dict[str, str] = {}

    def attach(self, connection: Connection) -> None:
        self._connections[connection.connection_id] = connection

    def detach(self, connection: Connection) -> None:
        self._connections.pop(connection.connection_id, None)

    def bind(self, connection: Connection, user_id: str) -> Optional[Connection]:
        """Bind user_id to connection; returns the connection it replaced."""
        stale_user = connection.user_id
        if stale_user is not None and stale_user != user_id:
            if self._users.get(stale_user) == connection.connection_id:
                del self._users[stale_user]
        previous_id = self._users.get(user_id)
        connection.user_id = user_id
        self._users[user_id] = connection.connection_id
        if previous_id and previous_id != connection.connection_id:
            return self._connections.get(previous_id)
        return None

    def release(self, connection: Connection) -> Optional[str]:
        """
        Drop the user mapping owned by connection.

        Returns the freed user id, or None when the connection never
        completed its handshake or was already replaced by a newer one.
        """
        user_id = connection.user_id
        if user_id is None:
            return None
        if self._users.get(user_id) != connection.connection_id:
            return None
        del self._users[user_id]
        return user_id

    def connection_for(self, user_id: str) -> Optional[Connection]:
        connection_id = self._users.get(user_id)
        if connection_id is None:
            return None
        return self._connections.get(connection_id)

    def is_online(self, user_id: str) -> bool:
        return self.connection_for(user_id) is not None

    def online_user_ids(self) -> List[str]:
        return list(self._users)

    def connections(self) -> List[Connection]:
        return list(self._connections.values())

    def clear(self) -> None:
        self._users.clear()
        self._connections.clear()

    def __len__(self) -> int:
        return len(self._connections)
