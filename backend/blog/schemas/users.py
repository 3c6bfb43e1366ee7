# blog/schemas/users.py
"""
Pydantic schemas for the user endpoints.

Request bodies keep their fields optional so that missing values reach the
account core and come back as INVALID_USER_DATA / INVALID_CREDENTIALS
instead of a generic validation error.
"""
from typing import List, Optional

from pydantic import BaseModel


class LoginIn(BaseModel):
    email: str = ""
    password: str = ""


class RegisterIn(BaseModel):
    fullName: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    profileImage: Optional[str] = None
    username: Optional[str] = None
    roles: Optional[List[str]] = None  # Defaults to ["USER"] when omitted or empty


class ProfileUpdateIn(BaseModel):
    """Empty or missing fields keep their current value."""
    fullName: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None


class AdminUserUpdateIn(BaseModel):
    """Only provided (non-null) fields are updated; roles replace the whole set."""
    fullName: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    roles: Optional[List[str]] = None  # Validated against UserRole by the account core


class FollowIn(BaseModel):
    followingId: str


class UserOut(BaseModel):
    """
    Account as returned to clients.
    The password hash is never part of this model.
    """
    id: str
    fullName: str
    email: str
    username: Optional[str] = None
    profileImage: str
    roles: List[str]
    isAdmin: bool
    isBanned: bool
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class AuthOut(UserOut):
    token: str


class ProfileOut(UserOut):
    followersCount: int
    followingCount: int


class FollowOut(BaseModel):
    message: str
    followerId: str
    followingId: str
    followersCount: int
    followingCount: int


class ModerationOut(BaseModel):
    message: str
    user: UserOut


class MessageOut(BaseModel):
    message: str
