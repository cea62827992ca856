"""Document data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


def utc_isoformat(value: datetime) -> str:
    """ISO 8601 with an explicit offset; naive values (SQLite) are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class ExtractionState(str, Enum):
    """Lifecycle of a document's text extraction."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class SummaryStyle(str, Enum):
    """Summary flavours offered to clients."""
    CONCISE = "concise"
    DETAILED = "detailed"
    BULLET = "bullet"


class Document(BaseModel):
    """Document metadata and extraction result, without the binary payload."""
    model_config = ConfigDict(from_attributes=True)

    document_id: str
    user_id: str
    original_name: str
    size_bytes: int
    content_type: str
    extraction_state: ExtractionState
    extracted_text: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StoredFile(BaseModel):
    """Raw payload of a document, for download."""
    filename: str
    content_type: str
    data: bytes


class DocumentSummary(BaseModel):
    """API representation of a document (metadata only)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    filename: str
    file_size: int = Field(..., alias="fileSize")
    content_type: str = Field(..., alias="contentType")
    status: ExtractionState
    upload_date: str = Field(..., alias="uploadDate")
    file_url: str = Field(..., alias="fileUrl")

    @classmethod
    def from_document(cls, doc: Document):
        """Convert Document to DocumentSummary."""
        return cls(
            id=doc.document_id,
            filename=doc.original_name,
            file_size=doc.size_bytes,
            content_type=doc.content_type,
            status=doc.extraction_state,
            upload_date=utc_isoformat(doc.created_at),
            file_url=f"/api/pdfs/{doc.document_id}",
        )


class DocumentStatus(BaseModel):
    """Extraction status of a document as seen by a polling client."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: ExtractionState
    text: Optional[str] = None
    error: Optional[str] = None


class ExtractResponse(BaseModel):
    """Result of a synchronous upload + extraction (+ summary)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    filename: str
    file_size: int = Field(..., alias="fileSize")
    text: str
    summary: Optional[str] = None
