"""
MongoDB Service - shared helpers and the identity profile directory.

Identity collections:
1. students   - student profiles (fullname, status, follow edges, last_seen)
2. recruiters - recruiter profiles (companyname, company details, follow edges, last_seen)

Both collections are addressed by the same kind of id, so every lookup
here takes the UserKind that says which collection to search.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple
from bson import ObjectId
from pymongo.collection import Collection
from pymongo.database import Database

from careerhub.db.mongodb import get_collection, COLLECTIONS
from careerhub.models import UserKind


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a client supplied id; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# PROFILE DIRECTORY
# Students and recruiters, looked up by (kind, id)
# ============================================================

# Fields exposed when a profile is shown next to someone else's content
PUBLIC_FIELDS = {"fullname": 1, "companyname": 1, "profile.profile_photo": 1, "last_seen": 1}


class ProfileService:
    """
    Reads and stamps student/recruiter profiles.
    Used by auth (login, current user), notifications (sender resolution),
    follows and the realtime hub (last_seen on disconnect).
    """

    def __init__(self, db: Database = None):
        self.collections: Dict[UserKind, Collection] = {
            UserKind.student: get_collection(COLLECTIONS["students"], db),
            UserKind.recruiter: get_collection(COLLECTIONS["recruiters"], db),
        }

    def collection_for(self, kind) -> Collection:
        return self.collections[UserKind(kind)]

    def create(self, kind, fields: dict) -> str:
        """Insert a new profile. `fields` must already hold password_hash."""
        kind = UserKind(kind)
        now = utcnow()
        doc = {
            **fields,
            "role": kind.value,
            "following": [],
            "followers": [],
            "last_seen": now,
            "created_at": now,
            "updated_at": now
        }
        result = self.collection_for(kind).insert_one(doc)
        return str(result.inserted_id)

    def find_by_email(self, kind, email: str) -> Optional[dict]:
        """Raw profile (password hash included) for login."""
        return self.collection_for(kind).find_one({"email": email.lower()})

    def email_taken(self, email: str) -> bool:
        return any(
            coll.count_documents({"email": email.lower()}, limit=1) > 0
            for coll in self.collections.values()
        )

    def get(self, kind, user_id: str) -> Optional[dict]:
        """Fetch a profile without its password hash."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = self.collection_for(kind).find_one({"_id": oid}, {"password_hash": 0})
        return serialize_doc(doc)

    def get_public(self, kind, user_id: str) -> Optional[dict]:
        """Fetch the public card of a profile (name, photo, role)."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = self.collection_for(kind).find_one({"_id": oid}, PUBLIC_FIELDS)
        return public_card(serialize_doc(doc), kind) if doc else None

    def find_any(self, user_id: str) -> Optional[Tuple[UserKind, dict]]:
        """Look a bare id up in both collections (students first)."""
        for kind in (UserKind.student, UserKind.recruiter):
            doc = self.get(kind, user_id)
            if doc:
                return kind, doc
        return None

    def touch_last_seen(self, user_id: str, kind=None) -> bool:
        """
        Stamp last_seen = now on the user's profile.
        When kind is unknown (realtime disconnect) both collections are tried.
        """
        oid = to_object_id(user_id)
        if oid is None:
            return False
        kinds = [UserKind(kind)] if kind else [UserKind.student, UserKind.recruiter]
        now = utcnow()
        for k in kinds:
            result = self.collection_for(k).update_one({"_id": oid}, {"$set": {"last_seen": now}})
            if result.matched_count:
                return True
        return False

    def add_edge(self, kind, user_id: str, field: str, edge: dict) -> bool:
        result = self.collection_for(kind).update_one(
            {"_id": to_object_id(user_id)},
            {"$addToSet": {field: edge}, "$set": {"updated_at": utcnow()}}
        )
        return result.modified_count > 0

    def remove_edge(self, kind, user_id: str, field: str, edge: dict) -> bool:
        result = self.collection_for(kind).update_one(
            {"_id": to_object_id(user_id)},
            {"$pull": {field: edge}, "$set": {"updated_at": utcnow()}}
        )
        return result.modified_count > 0


def display_name(doc: dict) -> str:
    """Students are shown by full name, recruiters by company name."""
    if not doc:
        return ""
    return doc.get("fullname") or doc.get("companyname") or ""


def public_card(doc: dict, kind) -> dict:
    profile = doc.get("profile") or {}
    return {
        "_id": doc["_id"],
        "kind": UserKind(kind).value,
        "name": display_name(doc),
        "profile_photo": profile.get("profile_photo"),
        "last_seen": doc.get("last_seen"),
    }

