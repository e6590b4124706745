#!/usr/bin/env python3
"""
MongoDB Smoke Script

Exercises messages, conversations and notifications against a live
MongoDB with nobody connected to the realtime hub, i.e. every push is
dropped and only the durable writes are visible.

Run: python scripts/smoke_mongo.py
"""
import asyncio
import sys
sys.path.insert(0, '.')

from careerhub.db.mongodb import test_mongo_connection, init_mongo_indexes, get_mongo_db
from careerhub.models import UserKind, sender_from
from careerhub.schemas.schemas import NotificationKind
from careerhub.services.message_service import MessageService
from careerhub.services.mongo_service import ProfileService
from careerhub.services.notification_service import NotificationService
from careerhub.services.presence_registry import PresenceRegistry
from careerhub.services.realtime_hub import RealtimeHub

SMOKE_EMAIL_DOMAIN = "@smoke.careerhub.test"


def seed_profiles(profiles: ProfileService):
    """Create one student and one recruiter."""
    print("\n[1] Seeding profiles...")
    student_id = profiles.create(UserKind.student, {
        "fullname": "Smoke Student",
        "email": f"student{SMOKE_EMAIL_DOMAIN}",
        "password_hash": "x",
        "status": "fresher"
    })
    recruiter_id = profiles.create(UserKind.recruiter, {
        "companyname": "Smoke Corp",
        "email": f"recruiter{SMOKE_EMAIL_DOMAIN}",
        "password_hash": "x",
        "cin_number": "U00000KA2020PTC000000",
        "company_address": "Bangalore"
    })
    print(f"    ✅ Student: {student_id}  Recruiter: {recruiter_id}")
    return student_id, recruiter_id


async def smoke_messages(service: MessageService, student_id: str, recruiter_id: str):
    print("\n[2] Testing messages / conversations...")
    await service.send(recruiter_id, student_id, "Hello! Are you open to an internship?")
    await service.send(student_id, recruiter_id, "Yes, very much.")

    conversation = service.get_conversation(student_id, recruiter_id)
    print(f"    ✅ Conversation {conversation['_id']} holds {len(conversation['messages'])} messages")

    thread = service.get_thread(student_id, recruiter_id)
    print(f"    ✅ Thread length: {len(thread)}")
    print(f"    ✅ Unread for recruiter: {service.count_unread(recruiter_id)}")


async def smoke_notifications(service: NotificationService, student_id: str, recruiter_id: str):
    print("\n[3] Testing notifications...")
    created = await service.create(
        recipient_id=student_id,
        sender=sender_from(UserKind.recruiter, recruiter_id),
        kind=NotificationKind.system,
        title="Welcome",
        body="Smoke Corp says hi"
    )
    print(f"    ✅ Created notification {created['_id']} from {created['sender']['name']}")
    service.mark_read(created["_id"])
    listing = service.list_for_user(student_id)
    print(f"    ✅ Listed {len(listing)} notification(s), read={listing[0]['read']}")


def cleanup(student_id: str, recruiter_id: str):
    print("\n[4] Cleaning up smoke data...")
    db = get_mongo_db()
    ids = [student_id, recruiter_id]
    db["messages"].delete_many({"sender_id": {"$in": ids}})
    db["conversations"].delete_many({"participants": {"$in": ids}})
    db["notifications"].delete_many({"recipient_id": {"$in": ids}})
    db["students"].delete_many({"email": {"$regex": f"{SMOKE_EMAIL_DOMAIN}$"}})
    db["recruiters"].delete_many({"email": {"$regex": f"{SMOKE_EMAIL_DOMAIN}$"}})
    print("    ✅ Smoke data removed")


def main():
    print("=" * 60)
    print("MONGODB SMOKE TEST")
    print("=" * 60)

    if not test_mongo_connection():
        print("❌ MongoDB connection failed!")
        return

    db = get_mongo_db()
    init_mongo_indexes(db)

    hub = RealtimeHub(PresenceRegistry())
    profiles = ProfileService(db)
    student_id, recruiter_id = seed_profiles(profiles)
    try:
        asyncio.run(smoke_messages(MessageService(hub, db), student_id, recruiter_id))
        asyncio.run(smoke_notifications(NotificationService(hub, profiles, db), student_id, recruiter_id))
        print("\n" + "=" * 60)
        print("✅ SMOKE TEST PASSED!")
        print("=" * 60)
    finally:
        cleanup(student_id, recruiter_id)


if __name__ == "__main__":
    main()
