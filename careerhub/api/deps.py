"""
Shared FastAPI dependencies.

The database handle and the realtime hub are created once at startup and
kept on app.state; services are cheap wrappers built per request around
them. HTTPConnection lets the same dependencies serve REST routes and
the /ws endpoint.
"""

from fastapi import Depends
from pymongo.database import Database
from starlette.requests import HTTPConnection

from careerhub.services.follow_service import FollowService
from careerhub.services.message_service import MessageService
from careerhub.services.mongo_service import ProfileService
from careerhub.services.notification_service import NotificationService
from careerhub.services.realtime_hub import RealtimeHub


def get_database(conn: HTTPConnection) -> Database:
    return conn.app.state.db


def get_hub(conn: HTTPConnection) -> RealtimeHub:
    return conn.app.state.hub


def get_profile_service(db: Database = Depends(get_database)) -> ProfileService:
    return ProfileService(db)


def get_message_service(
    hub: RealtimeHub = Depends(get_hub),
    db: Database = Depends(get_database)
) -> MessageService:
    return MessageService(hub, db)


def get_notification_service(
    hub: RealtimeHub = Depends(get_hub),
    profiles: ProfileService = Depends(get_profile_service),
    db: Database = Depends(get_database)
) -> NotificationService:
    return NotificationService(hub, profiles, db)


def get_follow_service(
    profiles: ProfileService = Depends(get_profile_service),
    notifications: NotificationService = Depends(get_notification_service)
) -> FollowService:
    return FollowService(profiles, notifications)
