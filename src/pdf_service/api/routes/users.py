"""Account endpoints: signup, signin and profile."""

import logging
from fastapi import APIRouter, Depends

from ...core.auth_manager import AuthManager
from ...models.user import (
    AuthResponse,
    ProfileUpdate,
    SigninRequest,
    SignupRequest,
    UserResponse,
)
from ..dependencies import get_auth_manager, get_current_user_id

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=201,
    summary="Sign Up",
    description="""
Create an account and return it together with a bearer token.

**Request Example**:
```json
{"name": "Ada", "email": "ada@example.com", "password": "secret123"}
```

Emails are compared case-insensitively. The token is valid for 24 hours.
    """,
    responses={
        201: {"description": "Account created"},
        400: {"description": "Invalid data or email already registered"},
    }
)
async def signup(body: SignupRequest, auth: AuthManager = Depends(get_auth_manager)):
    """Create a new account."""
    user, token = await auth.signup(body.name, body.email, body.password)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@router.post(
    "/signin",
    response_model=AuthResponse,
    summary="Sign In",
    responses={
        200: {"description": "Signed in"},
        401: {"description": "Invalid email or password"},
    }
)
async def signin(body: SigninRequest, auth: AuthManager = Depends(get_auth_manager)):
    """Exchange credentials for a bearer token."""
    user, token = await auth.signin(body.email, body.password)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current User",
    responses={
        401: {"description": "Missing or invalid authentication"},
        404: {"description": "User no longer exists"},
    }
)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    auth: AuthManager = Depends(get_auth_manager),
):
    user = await auth.get_profile(user_id)
    return UserResponse.from_user(user)


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Get Profile",
    responses={
        401: {"description": "Missing or invalid authentication"},
        404: {"description": "User no longer exists"},
    }
)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    auth: AuthManager = Depends(get_auth_manager),
):
    user = await auth.get_profile(user_id)
    return UserResponse.from_user(user)


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update Profile",
    description="""
Update any of `name`, `email` and `password`. Omitted fields keep their value.
Changing the email to one used by another account fails with 400.
    """,
    responses={
        400: {"description": "Invalid data or email already in use"},
        401: {"description": "Missing or invalid authentication"},
        404: {"description": "User no longer exists"},
    }
)
async def update_profile(
    updates: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    auth: AuthManager = Depends(get_auth_manager),
):
    """Update the caller's profile."""
    user = await auth.update_profile(user_id, updates)
    return UserResponse.from_user(user)
