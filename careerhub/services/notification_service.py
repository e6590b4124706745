"""
Notification Service - per-recipient notification feed.

A notification is written first and pushed second: the push goes through
the realtime hub and is dropped when the recipient is offline, in which
case the client picks it up on its next GET /notifications.

The sender may be a student or a recruiter. The stored `sender_kind`
selects the resolver used to turn `sender_id` back into a profile card.
"""

import logging
from typing import Callable, Dict, List, Optional
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from careerhub.core.errors import InvalidRequestError, NotFoundError
from careerhub.db.mongodb import get_collection, COLLECTIONS
from careerhub.models import Sender, UserKind, sender_from
from careerhub.schemas.schemas import NotificationKind
from careerhub.services.mongo_service import ProfileService, serialize_doc, to_object_id, utcnow
from careerhub.services.realtime_hub import RealtimeHub, EVENT_NOTIFICATION_NEW

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, hub: RealtimeHub, profiles: ProfileService, db: Database = None):
        self.hub = hub
        self.profiles = profiles
        self.collection: Collection = get_collection(COLLECTIONS["notifications"], db)
        self._resolvers: Dict[UserKind, Callable[[str], Optional[dict]]] = {
            UserKind.student: lambda user_id: profiles.get_public(UserKind.student, user_id),
            UserKind.recruiter: lambda user_id: profiles.get_public(UserKind.recruiter, user_id),
        }

    async def create(
        self,
        recipient_id: str,
        sender: Sender,
        kind: NotificationKind,
        title: str,
        body: str
    ) -> dict:
        """
        Insert an unread notification and push it to the recipient if online.

        Returns the stored notification with its sender resolved.
        """
        try:
            kind = NotificationKind(kind)
        except ValueError:
            raise InvalidRequestError(f"Unknown notification kind: {kind}")
        if not title or not body:
            raise InvalidRequestError("Notification title and body are required")

        doc = {
            "recipient_id": str(recipient_id),
            "sender_id": sender.id,
            "sender_kind": sender.kind.value,
            "kind": kind.value,
            "title": title,
            "body": body,
            "read": False,
            "created_at": utcnow()
        }
        self.collection.insert_one(doc)
        notification = self._with_sender(serialize_doc(doc))

        await self.hub.route_to(notification["recipient_id"], EVENT_NOTIFICATION_NEW, notification)
        logger.info("Notification %s (%s) created for %s", notification["_id"], kind.value, recipient_id)
        return notification

    def list_for_user(self, user_id: str) -> List[dict]:
        """
        Every notification of user_id, newest first, with senders resolved.
        A sender that no longer exists comes back as None; one bad row
        never fails the whole listing.
        """
        cursor = self.collection.find({"recipient_id": str(user_id)}).sort([
            ("created_at", DESCENDING), ("_id", DESCENDING)
        ])
        return [self._with_sender(serialize_doc(doc)) for doc in cursor]

    def mark_read(self, notification_id: str, user_id: str = None) -> dict:
        """Set read=True. Idempotent; unknown ids are reported, not ignored."""
        oid = to_object_id(notification_id)
        if oid is None:
            raise InvalidRequestError("Invalid notification id")

        query = {"_id": oid}
        if user_id is not None:
            query["recipient_id"] = str(user_id)

        doc = self.collection.find_one_and_update(
            query,
            {"$set": {"read": True}},
            return_document=ReturnDocument.AFTER
        )
        if doc is None:
            raise NotFoundError("Notification not found")
        return self._with_sender(serialize_doc(doc))

    def clear_all(self, user_id: str) -> int:
        """Delete every notification of user_id. There is no undo."""
        result = self.collection.delete_many({"recipient_id": str(user_id)})
        logger.info("Cleared %d notification(s) for %s", result.deleted_count, user_id)
        return result.deleted_count

    def _with_sender(self, notification: dict) -> dict:
        notification["sender"] = self._resolve_sender(notification)
        return notification

    def _resolve_sender(self, notification: dict) -> Optional[dict]:
        try:
            sender = sender_from(notification.get("sender_kind"), notification.get("sender_id"))
            return self._resolvers[sender.kind](sender.id)
        except Exception:
            logger.warning("Could not resolve sender of notification %s", notification.get("_id"), exc_info=True)
            return None
