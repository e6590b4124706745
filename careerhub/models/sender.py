"""
Identity kinds and the polymorphic notification sender.

A user id alone does not say which collection the profile lives in, so
every reference that can point at either a student or a recruiter carries
its kind alongside the id.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class UserKind(str, Enum):
    student = "student"
    recruiter = "recruiter"


@dataclass(frozen=True)
class StudentSender:
    id: str
    kind: ClassVar[UserKind] = UserKind.student


@dataclass(frozen=True)
class RecruiterSender:
    id: str
    kind: ClassVar[UserKind] = UserKind.recruiter


Sender = Union[StudentSender, RecruiterSender]

_SENDER_TYPES = {
    UserKind.student: StudentSender,
    UserKind.recruiter: RecruiterSender,
}


def sender_from(kind, user_id: str) -> Sender:
    """Build the sender variant for a stored (kind, id) pair."""
    return _SENDER_TYPES[UserKind(kind)](id=str(user_id))
