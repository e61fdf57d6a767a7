"""User Pydantic schemas — signup, login, profile output."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from ideahub.models.user import Role
from ideahub.schemas.base import ApiModel


class UserCreate(ApiModel):
    """Fields submitted on signup."""
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    full_name: str = Field(min_length=1, max_length=200)


class UserLogin(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(ApiModel):
    """Public user representation returned by the API."""
    id: int
    username: str
    email: str
    full_name: str
    role: Role


class UserAdminOut(UserOut):
    created_at: Optional[datetime] = None


class AuthorOut(ApiModel):
    id: int
    username: str
    full_name: str


class AuthorAdminOut(AuthorOut):
    email: str


class AuthResponse(ApiModel):
    token: str
    user: UserOut


class MeResponse(ApiModel):
    user: UserOut


class RoleUpdate(ApiModel):
    role: Role
