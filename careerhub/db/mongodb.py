"""
MongoDB Connection Utility

MongoDB stores every durable entity of the platform:
- students / recruiters: identity profiles (with last_seen and follow edges)
- messages: direct messages between two users
- conversations: one document per unordered pair of participants
- notifications: per-recipient notification feed
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from careerhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, tz_aware=True)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def close_mongo_client() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def get_collection(name: str, db: Database = None) -> Collection:
    """Get a specific collection from `db` (defaults to the app database)."""
    if db is None:
        db = get_mongo_db()
    return db[name]


def test_mongo_connection(db: Database = None) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        if db is None:
            db = get_mongo_db()
        # ping command checks connection
        db.command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "students": "students",
    "recruiters": "recruiters",
    "messages": "messages",
    "conversations": "conversations",
    "notifications": "notifications",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    if db is None:
        db = get_mongo_db()

    # Identity lookups at login
    db[COLLECTIONS["students"]].create_index("email", unique=True)
    db[COLLECTIONS["recruiters"]].create_index("email", unique=True)

    # Thread reads and bulk read-receipt updates
    db[COLLECTIONS["messages"]].create_index([
        ("sender_id", ASCENDING),
        ("receiver_id", ASCENDING),
        ("read", ASCENDING)
    ])
    db[COLLECTIONS["messages"]].create_index("created_at")

    # One conversation per unordered pair
    db[COLLECTIONS["conversations"]].create_index("pair_key", unique=True)

    db[COLLECTIONS["notifications"]].create_index([
        ("recipient_id", ASCENDING),
        ("created_at", DESCENDING)
    ])

    logger.info("MongoDB indexes created successfully")
