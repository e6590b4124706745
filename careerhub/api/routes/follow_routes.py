"""
Follow Routes

POST /v1/follow/follow - Follow a student or recruiter (notifies them)
POST /v1/follow/unfollow - Unfollow
GET /v1/follow/followers/{user_id}/{user_kind} - Who follows a user
GET /v1/follow/following/{user_id}/{user_kind} - Whom a user follows
"""

from fastapi import APIRouter, Depends

from careerhub.api.deps import get_follow_service
from careerhub.core.auth import get_current_user
from careerhub.models import UserKind
from careerhub.schemas.schemas import FollowRequest, FollowResponse, FollowListResponse
from careerhub.services.follow_service import FollowService

router = APIRouter(prefix="/v1/follow", tags=["Follow"])


@router.post("/follow", response_model=FollowResponse)
async def follow_user(
    data: FollowRequest,
    user: dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service)
):
    result = await service.follow(user, data.following_id, data.following_kind)
    return FollowResponse(
        message=f"Successfully followed {result['user_name']}",
        user_name=result["user_name"],
        notification=result["notification"]
    )


@router.post("/unfollow", response_model=FollowResponse)
async def unfollow_user(
    data: FollowRequest,
    user: dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service)
):
    name = service.unfollow(user, data.following_id, data.following_kind)
    return FollowResponse(message=f"Successfully unfollowed {name}", user_name=name)


@router.get("/followers/{user_id}/{user_kind}", response_model=FollowListResponse)
async def get_followers(
    user_id: str,
    user_kind: UserKind,
    user: dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service)
):
    return FollowListResponse(data=service.followers(user_id, user_kind))


@router.get("/following/{user_id}/{user_kind}", response_model=FollowListResponse)
async def get_following(
    user_id: str,
    user_kind: UserKind,
    user: dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service)
):
    return FollowListResponse(data=service.following(user_id, user_kind))
