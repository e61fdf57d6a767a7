"""
Authentication router — email/password sign-up and login, JWT bearer auth.

Endpoints:
    POST /auth/signup  → create account, return token + user
    POST /auth/login   → verify credentials, return token + user
    GET  /auth/me      → current user
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from jose import JWTError

from ideahub.models.user import User
from ideahub.schemas.user import AuthResponse, MeResponse, UserCreate, UserLogin
from ideahub.services.auth import (
    create_access_token,
    decode_access_token,
    extract_bearer_token,
    hash_password,
    verify_password,
)
from ideahub.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ═══════════════════════════════════════════════════════════════
#  Dependencies
# ═══════════════════════════════════════════════════════════════

async def get_current_user(
    authorization: Optional[str] = Header(None),
    storage: Storage = Depends(get_storage),
) -> User:
    """Decode the bearer token and return its User, or fail with 401."""
    token = extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")
    try:
        user_id = decode_access_token(token)
    except (JWTError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


# ═══════════════════════════════════════════════════════════════
#  Routes
# ═══════════════════════════════════════════════════════════════

@router.post("/signup", response_model=AuthResponse)
async def signup(body: UserCreate, storage: Storage = Depends(get_storage)):
    if await storage.get_user_by_email(body.email):
        raise HTTPException(status_code=400, detail="User already exists")
    if await storage.get_user_by_username(body.username):
        raise HTTPException(status_code=400, detail="User already exists")

    user = await storage.create_user(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        full_name=body.full_name,
    )
    logger.info("New user signed up: id=%s username=%s", user.id, user.username)
    return {"token": create_access_token(user), "user": user}


@router.post("/login", response_model=AuthResponse)
async def login(body: UserLogin, storage: Storage = Depends(get_storage)):
    user = await storage.get_user_by_email(body.email)
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"token": create_access_token(user), "user": user}


@router.get("/me", response_model=MeResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return {"user": current_user}
