"""
Models module - internal domain types shared by services.

Request/response contracts live in careerhub.schemas; the types here
never leave the process as-is.
"""

from careerhub.models.sender import (
    UserKind,
    StudentSender,
    RecruiterSender,
    Sender,
    sender_from,
)

__all__ = [
    "UserKind",
    "StudentSender",
    "RecruiterSender",
    "Sender",
    "sender_from",
]
