"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependency for protected routes

A token's `sub` is the profile id and its `role` names the collection
(students / recruiters) the profile lives in.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from careerhub.core.config import get_settings
from careerhub.models import UserKind
from careerhub.api.deps import get_profile_service
from careerhub.services.mongo_service import ProfileService, display_name

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    profiles: ProfileService = Depends(get_profile_service)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Also stamps last_seen on the caller's profile; a failure there is
    logged and does not fail the request.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    try:
        role = UserKind(payload.get("role"))
    except ValueError:
        raise credentials_exception
    if not user_id:
        raise credentials_exception

    # Verify user exists
    profile = profiles.get(role, user_id)
    if not profile:
        raise credentials_exception

    try:
        profiles.touch_last_seen(user_id, role)
    except Exception:
        logger.warning("Failed to update last seen for %s", user_id, exc_info=True)

    return {
        "user_id": profile["_id"],
        "role": role.value,
        "name": display_name(profile),
        "email": profile.get("email"),
        "last_seen": profile.get("last_seen"),
    }
