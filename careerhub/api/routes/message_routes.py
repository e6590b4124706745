"""
Direct Message Routes

POST /v1/message/send/{receiver_id} - Send a message
GET /v1/message/latest-per-user - Latest message with every counterparty
GET /v1/message/unread-counts - Unread incoming messages per counterparty
GET /v1/message/{counterparty_id} - Thread history (marks incoming messages read)

The fixed paths are declared before /{counterparty_id} so they are not
swallowed by it.
"""

from fastapi import APIRouter, Depends

from careerhub.api.deps import get_message_service
from careerhub.core.auth import get_current_user
from careerhub.schemas.schemas import (
    ChatMessageCreate, SendMessageResponse, ThreadResponse,
    LatestMessagesResponse, UnreadCountsResponse
)
from careerhub.services.message_service import MessageService

router = APIRouter(prefix="/v1/message", tags=["Messages"])


@router.post("/send/{receiver_id}", response_model=SendMessageResponse, status_code=201)
async def send_message(
    receiver_id: str,
    data: ChatMessageCreate,
    user: dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Send a direct message. Delivered live to the receiver if online."""
    message = await service.send(user["user_id"], receiver_id, data.message)
    return SendMessageResponse(new_message=message)


@router.get("/latest-per-user", response_model=LatestMessagesResponse)
async def latest_per_user(
    user: dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Conversation list preview: counterparty id -> latest message."""
    return LatestMessagesResponse(latest_messages=service.get_latest_per_counterparty(user["user_id"]))


@router.get("/unread-counts", response_model=UnreadCountsResponse)
async def unread_counts(
    user: dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    return UnreadCountsResponse(unread=service.count_unread(user["user_id"]))


@router.get("/{counterparty_id}", response_model=ThreadResponse)
async def get_thread(
    counterparty_id: str,
    user: dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Messages between the caller and counterparty, oldest first."""
    return ThreadResponse(messages=service.get_thread(user["user_id"], counterparty_id))
