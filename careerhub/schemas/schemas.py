"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Documents come back from MongoDB with "_id" as a string, so response
models read and write that key through an alias.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, Dict, Any, Union
from datetime import datetime
from enum import Enum

from careerhub.models import UserKind


# ============================================================
# ENUMS
# ============================================================

class StudentStatus(str, Enum):
    fresher = "fresher"
    experienced = "experienced"


class NotificationKind(str, Enum):
    follow = "follow"
    job_posted = "job-posted"
    application = "application"
    system = "system"


class DocumentModel(BaseModel):
    """Base for responses built from MongoDB documents."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    role: UserKind
    name: str = Field(..., min_length=2, max_length=200, description="Full name for students, company name for recruiters")
    email: EmailStr
    password: str = Field(..., min_length=8)
    phone_number: Optional[str] = None
    status: Optional[StudentStatus] = None
    cin_number: Optional[str] = None
    company_address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must contain at least 2 characters")
        return v

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    role: UserKind

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(BaseModel):
    user_id: str
    role: str
    name: str
    email: Optional[str] = None
    last_seen: Optional[datetime] = None
    is_online: bool = False


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileCard(DocumentModel):
    kind: UserKind
    name: str
    profile_photo: Optional[str] = None
    last_seen: Optional[datetime] = None


# ============================================================
# DIRECT MESSAGE SCHEMAS
# ============================================================

class ChatMessageCreate(BaseModel):
    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v

class ChatMessageResponse(DocumentModel):
    sender_id: str
    receiver_id: str
    message: str
    read: bool = False
    created_at: datetime

class SendMessageResponse(BaseModel):
    success: bool = True
    message: str = "Message sent successfully"
    new_message: ChatMessageResponse

class ThreadResponse(BaseModel):
    success: bool = True
    messages: List[ChatMessageResponse]

class LatestMessagesResponse(BaseModel):
    success: bool = True
    latest_messages: Dict[str, ChatMessageResponse]

class UnreadCountsResponse(BaseModel):
    success: bool = True
    unread: Dict[str, int]


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(DocumentModel):
    recipient_id: str
    sender_id: str
    # kinds are passed through as stored
    sender_kind: Optional[str] = None
    sender: Optional[ProfileCard] = None
    kind: str
    title: str
    body: str
    read: bool = False
    created_at: datetime

class NotificationListResponse(BaseModel):
    success: bool = True
    data: List[NotificationResponse]
    unread: int = 0
    message: str = "Notifications retrieved successfully"

class ClearNotificationsResponse(BaseModel):
    success: bool = True
    message: str = "All notifications cleared"
    deleted: int = 0


# ============================================================
# FOLLOW SCHEMAS
# ============================================================

class FollowRequest(BaseModel):
    following_id: str
    following_kind: UserKind

class FollowResponse(BaseModel):
    success: bool = True
    message: str
    user_name: str
    notification: Optional[NotificationResponse] = None

class FollowListResponse(BaseModel):
    success: bool = True
    data: List[ProfileCard]


# ============================================================
# REALTIME FRAMES
# ============================================================

class RealtimeFrame(BaseModel):
    """Client -> server frame on /ws."""
    event: str = Field(..., min_length=1)
    data: Union[Dict[str, Any], str, None] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    success: bool = False
    error: Any
