"""Account management and bearer-token issuance.

Tokens are HS256 JWTs carrying the user id in ``sub``. Expiry is the only
revocation mechanism: there is no server-side deny list, so a leaked token
stays valid until its ``exp`` passes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import uuid4

import jwt
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from ..infrastructure.database.client import DatabaseClient
from ..infrastructure.database.models import UserModel
from ..models.user import ProfileUpdate, User
from .exceptions import AuthenticationError, DuplicateAccountError, NotFoundError

logger = logging.getLogger(__name__)


class AuthManager:
    """Business logic for accounts and tokens."""

    def __init__(
        self,
        db_client: DatabaseClient,
        secret: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(hours=24),
    ):
        """Initialize auth manager.

        Args:
            db_client: Database client for user records
            secret: Signing key for issued tokens
            algorithm: JWT signing algorithm
            token_ttl: Validity window of issued tokens
        """
        self.db = db_client
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = token_ttl

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_token(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Issue a signed bearer token for ``user_id``."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.token_ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate_token(self, token: Optional[str]) -> str:
        """Return the user id carried by ``token``.

        Raises:
            AuthenticationError: If the token is missing, malformed, tampered or expired
        """
        if not token:
            raise AuthenticationError("Authentication required")
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired") from None
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token") from None

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationError("Invalid token")
        return user_id

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def signup(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """Create an account and return it with a fresh token.

        Raises:
            DuplicateAccountError: If the email is already registered
        """
        email = email.strip().lower()
        if await self.db.get_user_by_email(email):
            raise DuplicateAccountError("User already exists")

        now = datetime.now(timezone.utc)
        db_user = UserModel(
            user_id=str(uuid4()),
            name=name.strip(),
            email=email,
            password_hash=generate_password_hash(password),
            created_at=now,
            updated_at=now,
        )
        try:
            created = await self.db.create_user(db_user)
        except IntegrityError:
            raise DuplicateAccountError("User already exists") from None

        logger.info(f"Created user {created.user_id}")
        return User.model_validate(created), self.issue_token(created.user_id)

    async def signin(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and return the user with a fresh token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        db_user = await self.db.get_user_by_email(email.strip().lower())
        if not db_user or not check_password_hash(db_user.password_hash, password):
            logger.info("Rejected sign-in with invalid credentials")
            raise AuthenticationError("Invalid email or password")

        logger.info(f"User {db_user.user_id} signed in")
        return User.model_validate(db_user), self.issue_token(db_user.user_id)

    async def get_profile(self, user_id: str) -> User:
        db_user = await self.db.get_user(user_id)
        if not db_user:
            raise NotFoundError("User not found")
        return User.model_validate(db_user)

    async def update_profile(self, user_id: str, updates: ProfileUpdate) -> User:
        """Update name, email and/or password of ``user_id``.

        Raises:
            NotFoundError: If the user no longer exists
            DuplicateAccountError: If the new email belongs to another account
        """
        update_dict = {}
        if updates.name is not None:
            update_dict["name"] = updates.name.strip()
        if updates.email is not None:
            email = updates.email.strip().lower()
            owner = await self.db.get_user_by_email(email)
            if owner and owner.user_id != user_id:
                raise DuplicateAccountError("Email is already in use")
            update_dict["email"] = email
        if updates.password is not None:
            update_dict["password_hash"] = generate_password_hash(updates.password)

        try:
            db_user = await self.db.update_user(user_id, **update_dict)
        except IntegrityError:
            raise DuplicateAccountError("Email is already in use") from None
        if not db_user:
            raise NotFoundError("User not found")

        logger.info(f"Updated profile of user {user_id}")
        return User.model_validate(db_user)
