"""User and authentication models."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .document import utc_isoformat

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=320)
    password: str = Field(..., min_length=6, max_length=128)


class SigninRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, max_length=320)
    password: Optional[str] = Field(None, min_length=6, max_length=128)


class User(BaseModel):
    """User profile (never carries the password hash)."""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    email: str
    created_at: datetime


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: str = Field(..., alias="createdAt")

    @classmethod
    def from_user(cls, user: User):
        """Convert User to UserResponse."""
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            created_at=utc_isoformat(user.created_at),
        )


class AuthResponse(BaseModel):
    """Response to signup and signin."""
    user: UserResponse
    token: str
