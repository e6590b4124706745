"""
Follow Service - follower/following edges between students and recruiters.

Edges are stored on both profiles as {"user_id", "kind"} sub-documents:
- follower.following  += {target}
- target.followers    += {follower}

Following someone is also a notification producer: the target gets a
"New Follower" notification, pushed live when they are online.
"""

import logging
from typing import List

from careerhub.core.errors import InvalidRequestError, NotFoundError
from careerhub.models import UserKind, sender_from
from careerhub.schemas.schemas import NotificationKind
from careerhub.services.mongo_service import ProfileService, display_name
from careerhub.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def _edge(user_id: str, kind) -> dict:
    # Field order matters for $addToSet/$pull equality on sub-documents
    return {"user_id": str(user_id), "kind": UserKind(kind).value}


class FollowService:

    def __init__(self, profiles: ProfileService, notifications: NotificationService):
        self.profiles = profiles
        self.notifications = notifications

    async def follow(self, follower: dict, following_id: str, following_kind: UserKind) -> dict:
        """
        follower is the authenticated identity ({user_id, role, name}).
        Returns {"user_name", "notification"}.
        """
        follower_id, follower_kind = follower["user_id"], UserKind(follower["role"])
        if str(following_id) == str(follower_id):
            raise InvalidRequestError("You cannot follow yourself")

        target = self.profiles.get(following_kind, following_id)
        if not target:
            raise NotFoundError("User to follow not found")

        self.profiles.add_edge(follower_kind, follower_id, "following", _edge(following_id, following_kind))
        self.profiles.add_edge(following_kind, following_id, "followers", _edge(follower_id, follower_kind))

        name = follower.get("name") or display_name(self.profiles.get(follower_kind, follower_id))
        notification = await self.notifications.create(
            recipient_id=following_id,
            sender=sender_from(follower_kind, follower_id),
            kind=NotificationKind.follow,
            title="New Follower",
            body=f"{name} started following you"
        )
        return {"user_name": display_name(target), "notification": notification}

    def unfollow(self, follower: dict, following_id: str, following_kind: UserKind) -> str:
        """Remove the edge on both sides. Returns the target's display name."""
        follower_id, follower_kind = follower["user_id"], UserKind(follower["role"])

        target = self.profiles.get(following_kind, following_id)
        if not target:
            raise NotFoundError("User to unfollow not found")

        self.profiles.remove_edge(follower_kind, follower_id, "following", _edge(following_id, following_kind))
        self.profiles.remove_edge(following_kind, following_id, "followers", _edge(follower_id, follower_kind))
        return display_name(target)

    def followers(self, user_id: str, kind: UserKind) -> List[dict]:
        return self._cards(user_id, kind, "followers")

    def following(self, user_id: str, kind: UserKind) -> List[dict]:
        return self._cards(user_id, kind, "following")

    def _cards(self, user_id: str, kind: UserKind, field: str) -> List[dict]:
        user = self.profiles.get(kind, user_id)
        if not user:
            raise NotFoundError("User not found")

        cards = []
        for edge in user.get(field) or []:
            card = self.profiles.get_public(edge.get("kind"), edge.get("user_id"))
            if card is None:
                logger.debug("Skipping dangling %s edge %s on %s", field, edge, user_id)
                continue
            cards.append(card)
        return cards
