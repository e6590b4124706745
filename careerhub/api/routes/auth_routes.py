"""
Authentication Routes

POST /v1/auth/register - Register a student or recruiter
POST /v1/auth/login - Login and get JWT token
POST /v1/auth/logout - Stamp last seen and announce the user offline
GET /v1/auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends

from careerhub.api.deps import get_hub, get_profile_service
from careerhub.core.auth import hash_password, verify_password, create_access_token, get_current_user
from careerhub.models import UserKind
from careerhub.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)
from careerhub.services.mongo_service import ProfileService
from careerhub.services.realtime_hub import RealtimeHub, EVENT_USER_STATUS

router = APIRouter(prefix="/v1/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, profiles: ProfileService = Depends(get_profile_service)):
    """
    Register a new student or recruiter account.

    After registration, login to get access token.
    """
    if profiles.email_taken(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    fields = {
        "email": request.email.lower(),
        "password_hash": hash_password(request.password),
        "profile": {"bio": None, "profile_photo": None}
    }
    if request.role == UserKind.student:
        if request.status is None:
            raise HTTPException(status_code=400, detail="Student status (fresher/experienced) is required")
        fields.update({
            "fullname": request.name,
            "phone_number": request.phone_number,
            "status": request.status.value
        })
    else:
        if not request.cin_number or not request.company_address:
            raise HTTPException(status_code=400, detail="CIN number and company address are required")
        fields.update({
            "companyname": request.name,
            "cin_number": request.cin_number,
            "company_address": request.company_address
        })

    profiles.create(request.role, fields)
    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, profiles: ProfileService = Depends(get_profile_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = profiles.find_by_email(request.role, request.email)

    if not user or not verify_password(request.password, user.get("password_hash", "")):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_id = str(user["_id"])
    token = create_access_token(data={"sub": user_id, "role": request.role.value})

    return TokenResponse(access_token=token, user_id=user_id, role=request.role.value)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user: dict = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
    hub: RealtimeHub = Depends(get_hub)
):
    """
    Logout. Tokens are stateless, so the client discards its own; the
    server records last seen and tells every connected client the user
    went offline.
    """
    profiles.touch_last_seen(user["user_id"], UserKind(user["role"]))
    await hub.broadcast_all(EVENT_USER_STATUS, {"userId": user["user_id"], "isOnline": False})
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user), hub: RealtimeHub = Depends(get_hub)):
    """Get current authenticated user's info."""
    return UserResponse(
        user_id=user["user_id"],
        role=user["role"],
        name=user["name"],
        email=user.get("email"),
        last_seen=user.get("last_seen"),
        is_online=hub.is_online(user["user_id"])
    )
