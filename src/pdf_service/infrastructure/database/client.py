"""Database client for users and document storage."""

import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import select, delete, update, text
from sqlalchemy.orm import defer
from .models import Base, DocumentModel, UserModel

logger = logging.getLogger(__name__)


class DatabaseClient:
    """Async database client for users and documents."""

    def __init__(self, database_url: str):
        """Initialize database client.

        Args:
            database_url: SQLAlchemy database URL (e.g., sqlite+aiosqlite:///./db.sqlite)
        """
        self.engine = create_async_engine(database_url, echo=False)
        self.async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def verify_connection(self):
        """Verify the database answers a trivial query."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")

    async def initialize(self):
        """Create database tables."""
        await self.verify_connection()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")

    async def health_check(self) -> bool:
        """Return True if the database is reachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, user: UserModel) -> UserModel:
        """Create a new user. Raises IntegrityError on duplicate email."""
        async with self.async_session() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    async def get_user(self, user_id: str) -> Optional[UserModel]:
        async with self.async_session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[UserModel]:
        async with self.async_session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.email == email)
            )
            return result.scalar_one_or_none()

    async def update_user(self, user_id: str, **updates) -> Optional[UserModel]:
        """Update user fields. None values are ignored."""
        async with self.async_session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.user_id == user_id)
            )
            user = result.scalar_one_or_none()

            if not user:
                return None

            for key, value in updates.items():
                if hasattr(user, key) and value is not None:
                    setattr(user, key, value)

            await session.commit()
            await session.refresh(user)
            return user

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def create_document(self, document: DocumentModel) -> DocumentModel:
        """Create a new document."""
        async with self.async_session() as session:
            session.add(document)
            await session.commit()
            await session.refresh(document)
            return document

    async def get_document(self, document_id: str, include_data: bool = False) -> Optional[DocumentModel]:
        """Get document by ID regardless of owner.

        Ownership is checked by the caller so that a foreign document can be
        told apart from a missing one. The binary payload is only loaded when
        ``include_data`` is set.
        """
        async with self.async_session() as session:
            query = select(DocumentModel).where(DocumentModel.document_id == document_id)
            if not include_data:
                query = query.options(defer(DocumentModel.data))
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def list_documents(self, user_id: str) -> List[DocumentModel]:
        """List a user's documents, newest first, without payload or text."""
        async with self.async_session() as session:
            query = (
                select(DocumentModel)
                .options(defer(DocumentModel.data), defer(DocumentModel.extracted_text))
                .where(DocumentModel.user_id == user_id)
                .order_by(DocumentModel.created_at.desc())
            )
            result = await session.execute(query)
            return list(result.scalars().all())

    async def set_extraction_state(
        self,
        document_id: str,
        state: str,
        extracted_text: Optional[str] = None,
        error: Optional[str] = None,
    ) -> bool:
        """Write state, text and error in a single UPDATE.

        Text and error are always overwritten, so leaving them out clears them.

        Returns:
            True if the document still exists, False otherwise
        """
        async with self.async_session() as session:
            result = await session.execute(
                update(DocumentModel)
                .where(DocumentModel.document_id == document_id)
                .values(
                    extraction_state=state,
                    extracted_text=extracted_text,
                    extraction_error=error,
                )
            )
            await session.commit()
            return result.rowcount > 0

    async def fail_pending_extractions(self, error: str) -> int:
        """Mark every ``pending`` document as ``failed``.

        Only safe while no extraction task is running, i.e. at startup.

        Returns:
            Number of documents changed
        """
        async with self.async_session() as session:
            result = await session.execute(
                update(DocumentModel)
                .where(DocumentModel.extraction_state == "pending")
                .values(
                    extraction_state="failed",
                    extracted_text=None,
                    extraction_error=error,
                )
            )
            await session.commit()
            return result.rowcount

    async def delete_document(self, document_id: str) -> bool:
        """Delete document."""
        async with self.async_session() as session:
            result = await session.execute(
                delete(DocumentModel).where(DocumentModel.document_id == document_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def close(self):
        """Close database connections."""
        await self.engine.dispose()
