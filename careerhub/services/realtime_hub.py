"""
Realtime Hub - best-effort event delivery over WebSockets.

Every event goes out as one JSON frame: {"event": <name>, "data": <payload>}.

Delivery is fire-and-forget: if the recipient has no live connection the
event is dropped, and a failed send is logged and forgotten. Durable
writes (messages, notifications) happen before the hub is involved, so
the database stays the source of truth and clients catch up by polling.

Usage:
    registry = PresenceRegistry()
    hub = RealtimeHub(registry, on_offline=profiles.touch_last_seen)

    connection = await hub.connect(websocket)
    await hub.register(connection, user_id)
    await hub.route_to(user_id, "notification:new", notification)
    await hub.unregister(connection)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from careerhub.services.presence_registry import Connection, PresenceRegistry

logger = logging.getLogger(__name__)

# Event names on the wire
EVENT_CONNECTED = "connected"
EVENT_USER_STATUS = "user:status"
EVENT_MESSAGE_NEW = "message:new"
EVENT_MESSAGES_READ = "messagesRead"
EVENT_NOTIFICATION_NEW = "notification:new"
EVENT_TYPING = "typing"
EVENT_STOP_TYPING = "stopTyping"
EVENT_ERROR = "error"


class RealtimeHub:
    def __init__(
        self,
        registry: PresenceRegistry,
        on_offline: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.registry = registry
        self._on_offline = on_offline

    async def connect(self, websocket: Any) -> Connection:
        """Accept the transport and start tracking it (no identity yet)."""
        await websocket.accept()
        connection = Connection(websocket)
        self.registry.attach(connection)
        logger.debug("Realtime client connected: %s (total %d)", connection.connection_id, len(self.registry))
        return connection

    async def register(self, connection: Connection, user_id: str) -> None:
        """Bind user_id to connection and announce the user as online."""
        replaced = self.registry.bind(connection, user_id)
        if replaced is not None:
            logger.info("User %s reconnected; routing moved from %s to %s",
                        user_id, replaced.connection_id, connection.connection_id)
        await self.emit(connection, EVENT_CONNECTED)
        await self.broadcast_all(EVENT_USER_STATUS, {"userId": user_id, "isOnline": True})

    async def unregister(self, connection: Connection) -> None:
        """Transport teardown: forget the connection and announce offline."""
        self.registry.detach(connection)
        user_id = self.registry.release(connection)
        logger.debug("Realtime client disconnected: %s (total %d)", connection.connection_id, len(self.registry))
        if user_id is None:
            return

        if self._on_offline is not None:
            try:
                self._on_offline(user_id)
            except Exception:
                logger.warning("Failed to record last seen for user %s", user_id, exc_info=True)

        await self.broadcast_all(EVENT_USER_STATUS, {"userId": user_id, "isOnline": False})

    async def route_to(self, user_id: str, event: str, payload: Any = None) -> bool:
        """
        Deliver an event to user_id if reachable.
        Returns whether delivery was attempted, not whether it was received.
        """
        connection = self.registry.connection_for(user_id)
        if connection is None:
            logger.debug("Dropping %s for offline user %s", event, user_id)
            return False
        await self.emit(connection, event, payload)
        return True

    async def broadcast_all(self, event: str, payload: Any = None) -> None:
        for connection in self.registry.connections():
            await self.emit(connection, event, payload)

    async def relay_typing(self, receiver_id: str, sender_id: str) -> bool:
        return await self.route_to(receiver_id, EVENT_TYPING, sender_id)

    async def relay_stop_typing(self, receiver_id: str, sender_id: str) -> bool:
        return await self.route_to(receiver_id, EVENT_STOP_TYPING, sender_id)

    def is_online(self, user_id: str) -> bool:
        return self.registry.is_online(user_id)

    async def close(self) -> None:
        """Shutdown: presence does not survive the process."""
        logger.info("Closing realtime hub with %d live connection(s)", len(self.registry))
        self.registry.clear()

    async def emit(self, connection: Connection, event: str, payload: Any = None) -> None:
        try:
            await connection.emit(event, payload)
        except Exception as e:
            logger.warning("Failed to deliver %s on %s: %s", event, connection.connection_id, e)
