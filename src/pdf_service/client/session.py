"""Client-side session state."""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SessionContext:
    """The one place a client keeps its authentication state.

    Create one per process and hand it to every component that needs it.
    ``init`` starts a session after signup/signin, ``invalidate`` ends it
    (explicit sign-out or a 401 from the server).
    """

    def __init__(self):
        self._token: Optional[str] = None
        self._user: Optional[Dict[str, Any]] = None

    def init(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        if not token:
            raise ValueError("Cannot start a session without a token")
        self._token = token
        self._user = user
        logger.debug("Session initialized")

    def invalidate(self) -> None:
        self._token = None
        self._user = None
        logger.debug("Session invalidated")

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def auth_headers(self) -> Dict[str, str]:
        """``Authorization`` header for the current session, if any."""
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}
