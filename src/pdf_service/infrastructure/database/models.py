"""SQLAlchemy ORM models for users and uploaded documents."""

from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, Integer, LargeBinary
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    """Account credentials and profile."""
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<UserModel(user_id={self.user_id}, email={self.email})>"


class DocumentModel(Base):
    """Uploaded PDF plus its extraction result."""
    __tablename__ = "documents"

    document_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    original_name = Column(String(500), nullable=False)
    size_bytes = Column(Integer, nullable=False)
    content_type = Column(String(100), nullable=False, default="application/pdf")
    data = Column(LargeBinary, nullable=False)
    extracted_text = Column(Text, nullable=True)
    extraction_state = Column(String(20), nullable=False, index=True)
    extraction_error = Column(Text, nullable=True)  # diagnostic only, never served
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return (
            f"<DocumentModel(document_id={self.document_id}, "
            f"state={self.extraction_state})>"
        )
