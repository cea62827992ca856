"""Shared API dependencies."""

from typing import Optional

from fastapi import Depends, Header, Request

from ..core.auth_manager import AuthManager
from ..core.document_manager import DocumentManager
from ..core.exceptions import AuthenticationError


def get_auth_manager(request: Request) -> AuthManager:
    """Auth manager created by the application lifespan."""
    return request.app.state.auth_manager


def get_document_manager(request: Request) -> DocumentManager:
    """Document manager created by the application lifespan."""
    return request.app.state.document_manager


def get_bearer_token(authorization: Optional[str] = Header(None, alias="Authorization")) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user_id(
    token: Optional[str] = Depends(get_bearer_token),
    auth_manager: AuthManager = Depends(get_auth_manager),
) -> str:
    """Resolve the caller's user ID from the bearer token (401 otherwise)."""
    if token is None:
        raise AuthenticationError("Authentication required")
    return auth_manager.validate_token(token)
