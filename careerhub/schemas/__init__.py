"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Internal data structures (careerhub.models)
- Schemas: API contract (what client sends/receives)
"""

from careerhub.schemas.schemas import (
    ChatMessageResponse,
    NotificationKind,
    NotificationResponse,
    RealtimeFrame,
)

__all__ = [
    "ChatMessageResponse",
    "NotificationKind",
    "NotificationResponse",
    "RealtimeFrame",
]
