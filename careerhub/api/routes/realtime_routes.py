"""
Realtime Routes

WS /ws - one bidirectional channel per client session

Client frames are {"event": <name>, "data": <payload>}:
- setup             userId                  bind this socket to a user
- joinChat          chatId                  remember a room (no routing effect yet)
- typing            {receiverId}            relayed to receiver as `typing`
- stopTyping        {receiverId}            relayed to receiver as `stopTyping`
- markMessagesRead  {senderId, receiverId}  bulk read update + `messagesRead` to sender

A frame that fails is answered with an `error` event; the socket stays open.
"""

import logging
from typing import Any, Awaitable, Callable, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from careerhub.api.deps import get_hub, get_message_service
from careerhub.core.errors import CareerHubError, InvalidRequestError
from careerhub.schemas.schemas import RealtimeFrame
from careerhub.services.message_service import MessageService
from careerhub.services.presence_registry import Connection
from careerhub.services.realtime_hub import RealtimeHub, EVENT_ERROR

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


def _field(data: Any, name: str) -> str:
    if isinstance(data, dict) and data.get(name):
        return str(data[name])
    raise InvalidRequestError(f"{name} is required")


async def on_setup(hub: RealtimeHub, messages: MessageService, connection: Connection, data: Any) -> None:
    user_id = data if isinstance(data, str) and data else _field(data, "userId")
    await hub.register(connection, user_id)


async def on_join_chat(hub: RealtimeHub, messages: MessageService, connection: Connection, data: Any) -> None:
    chat_id = data if isinstance(data, str) and data else _field(data, "chatId")
    connection.rooms.add(chat_id)
    logger.debug("%r joined chat %s", connection, chat_id)


async def on_typing(hub: RealtimeHub, messages: MessageService, connection: Connection, data: Any) -> None:
    if connection.user_id is None:
        logger.debug("Ignoring typing from %r before setup", connection)
        return
    await hub.relay_typing(_field(data, "receiverId"), connection.user_id)


async def on_stop_typing(hub: RealtimeHub, messages: MessageService, connection: Connection, data: Any) -> None:
    if connection.user_id is None:
        logger.debug("Ignoring stopTyping from %r before setup", connection)
        return
    await hub.relay_stop_typing(_field(data, "receiverId"), connection.user_id)


async def on_mark_messages_read(hub: RealtimeHub, messages: MessageService, connection: Connection, data: Any) -> None:
    await messages.acknowledge_read(_field(data, "senderId"), _field(data, "receiverId"))


Handler = Callable[[RealtimeHub, MessageService, Connection, Any], Awaitable[None]]

HANDLERS: Dict[str, Handler] = {
    "setup": on_setup,
    "joinChat": on_join_chat,
    "typing": on_typing,
    "stopTyping": on_stop_typing,
    "markMessagesRead": on_mark_messages_read,
}


async def handle_frame(hub: RealtimeHub, messages: MessageService, connection: Connection, raw: str) -> None:
    """Parse and dispatch one client frame. Never raises."""
    try:
        frame = RealtimeFrame.model_validate_json(raw)
    except ValidationError:
        logger.warning("Malformed realtime frame on %r", connection)
        await hub.emit(connection, EVENT_ERROR, {"detail": "Malformed frame"})
        return

    handler = HANDLERS.get(frame.event)
    if handler is None:
        logger.warning("Unknown realtime event %r on %r", frame.event, connection)
        await hub.emit(connection, EVENT_ERROR, {"detail": f"Unknown event: {frame.event}"})
        return

    try:
        await handler(hub, messages, connection, frame.data)
    except CareerHubError as e:
        logger.warning("Rejected %s on %r: %s", frame.event, connection, e.detail)
        await hub.emit(connection, EVENT_ERROR, {"event": frame.event, "detail": e.detail})
    except Exception:
        logger.exception("Error handling %s on %r", frame.event, connection)
        await hub.emit(connection, EVENT_ERROR, {"event": frame.event, "detail": f"Failed to handle {frame.event}"})


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    hub: RealtimeHub = Depends(get_hub),
    messages: MessageService = Depends(get_message_service)
):
    connection = await hub.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            await handle_frame(hub, messages, connection, raw)
    except WebSocketDisconnect:
        pass
    finally:
        await hub.unregister(connection)
