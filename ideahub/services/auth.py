"""Password hashing, JWT issue/verify, and the idea mutation capability check."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt

from ideahub.config import settings
from ideahub.models.idea import Idea
from ideahub.models.user import User


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def create_access_token(user: User) -> str:
    """Create a signed JWT with an expiry claim."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Return the user id carried by a token.

    Raises ``jose.JWTError`` for a bad signature or an expired token and
    ``ValueError`` when the subject claim is missing or not an id.
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    user_id = int(payload.get("sub", 0))
    if not user_id:
        raise ValueError("token has no subject")
    return user_id


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


def is_owner_or_admin(idea: Idea, user: User) -> bool:
    """Single capability check applied before any idea mutation."""
    return idea.author_id == user.id or user.is_admin
