"""
Messaging Service - direct messages between two users.

Collections:
1. messages      - one document per message, immutable except `read`
2. conversations - one document per unordered pair of users, holding
                   the ordered list of message ids

WHY a pair_key?
- (A, B) and (B, A) must land on the same conversation
- The ids are sorted and joined, and a unique index on the result turns
  "find or create" into a single atomic upsert
- Indexing the participants array directly would not work: a unique
  multikey index constrains each element, not the pair
"""

import logging
from typing import Optional, List, Dict, Tuple
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from careerhub.core.errors import InvalidRequestError
from careerhub.db.mongodb import get_collection, COLLECTIONS
from careerhub.services.mongo_service import serialize_doc, serialize_docs, utcnow
from careerhub.services.realtime_hub import RealtimeHub, EVENT_MESSAGE_NEW, EVENT_MESSAGES_READ

logger = logging.getLogger(__name__)


def canonical_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    """Order two user ids so (A, B) and (B, A) give the same pair."""
    user_a, user_b = str(user_a), str(user_b)
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def pair_key(user_a: str, user_b: str) -> str:
    return ":".join(canonical_pair(user_a, user_b))


class MessageService:
    """
    Stores messages, keeps the per-pair conversation document, and hands
    new messages / read receipts to the realtime hub.
    """

    def __init__(self, hub: RealtimeHub, db: Database = None):
        self.hub = hub
        self.messages: Collection = get_collection(COLLECTIONS["messages"], db)
        self.conversations: Collection = get_collection(COLLECTIONS["conversations"], db)

    async def send(self, sender_id: str, receiver_id: str, body: str) -> dict:
        """
        Persist a message, attach it to the pair's conversation and try to
        deliver it live. The receiver is not checked for existence.
        """
        if not sender_id or not receiver_id:
            raise InvalidRequestError("Message content and both users are required")
        if not isinstance(body, str) or not body.strip():
            raise InvalidRequestError("Message content and both users are required")

        doc = {
            "sender_id": str(sender_id),
            "receiver_id": str(receiver_id),
            "message": body,
            "read": False,
            "created_at": utcnow()
        }
        result = self.messages.insert_one(doc)
        self._attach_to_conversation(doc["sender_id"], doc["receiver_id"], result.inserted_id)

        message = serialize_doc(doc)
        await self.hub.route_to(message["receiver_id"], EVENT_MESSAGE_NEW, message)
        logger.debug("Message %s sent from %s to %s", message["_id"], sender_id, receiver_id)
        return message

    def _attach_to_conversation(self, sender_id: str, receiver_id: str, message_id: ObjectId) -> dict:
        """
        Upsert the conversation for the pair and append the message id.

        Two first messages racing on the same pair can both miss the find
        and try to insert; the unique pair_key index rejects the loser,
        which then lands as a plain update on the winner's document.
        """
        key = pair_key(sender_id, receiver_id)
        now = utcnow()
        update = {
            "$setOnInsert": {"participants": list(canonical_pair(sender_id, receiver_id)), "created_at": now},
            "$addToSet": {"messages": message_id},
            "$set": {"updated_at": now}
        }
        try:
            return self.conversations.find_one_and_update(
                {"pair_key": key}, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            logger.debug("Conversation %s created concurrently, retrying as update", key)
            return self.conversations.find_one_and_update(
                {"pair_key": key}, update, upsert=False, return_document=ReturnDocument.AFTER
            )

    def get_conversation(self, user_a: str, user_b: str) -> Optional[dict]:
        return serialize_doc(self.conversations.find_one({"pair_key": pair_key(user_a, user_b)}))

    def get_thread(self, requester_id: str, counterparty_id: str) -> List[dict]:
        """
        All messages between the two users, oldest first.

        Opening a thread acknowledges it: every unread message the
        counterparty sent to the requester is flagged read afterwards.
        The returned list shows the messages as they were before that.
        """
        requester_id, counterparty_id = str(requester_id), str(counterparty_id)
        cursor = self.messages.find({
            "$or": [
                {"sender_id": requester_id, "receiver_id": counterparty_id},
                {"sender_id": counterparty_id, "receiver_id": requester_id}
            ]
        }).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
        thread = serialize_docs(list(cursor))

        self.mark_read(sender_id=counterparty_id, receiver_id=requester_id)
        return thread

    def mark_read(self, sender_id: str, receiver_id: str) -> int:
        """Flag every unread sender -> receiver message as read."""
        result = self.messages.update_many(
            {"sender_id": str(sender_id), "receiver_id": str(receiver_id), "read": False},
            {"$set": {"read": True}}
        )
        return result.modified_count

    async def acknowledge_read(self, sender_id: str, receiver_id: str) -> int:
        """
        The receiver has seen sender's messages: persist it, then tell the
        sender. The reader's own UI does not wait for this.
        """
        updated = self.mark_read(sender_id, receiver_id)
        await self.hub.route_to(str(sender_id), EVENT_MESSAGES_READ, {"readerId": str(receiver_id)})
        return updated

    def get_latest_per_counterparty(self, user_id: str) -> Dict[str, dict]:
        """Most recent message with every user `user_id` ever talked to."""
        user_id = str(user_id)
        cursor = self.messages.find({
            "$or": [{"sender_id": user_id}, {"receiver_id": user_id}]
        }).sort([("created_at", DESCENDING), ("_id", DESCENDING)])

        latest: Dict[str, dict] = {}
        for doc in cursor:
            other = doc["receiver_id"] if doc["sender_id"] == user_id else doc["sender_id"]
            if other not in latest:
                latest[other] = serialize_doc(doc)
        return latest

    def count_unread(self, user_id: str) -> Dict[str, int]:
        """Unread incoming messages per sender, for conversation list badges."""
        pipeline = [
            {"$match": {"receiver_id": str(user_id), "read": False}},
            {"$group": {"_id": "$sender_id", "count": {"$sum": 1}}}
        ]
        return {row["_id"]: row["count"] for row in self.messages.aggregate(pipeline)}
