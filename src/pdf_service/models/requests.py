"""Request and response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from .document import ExtractionState


class SummarizeRequest(BaseModel):
    """Standalone summarization request.

    The style travels as ``type`` on the wire and is validated by the
    document manager so that unknown values fail with a readable message.
    """
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., max_length=1_000_000)
    style: str = Field(default="concise", alias="type")


class SummarizeResponse(BaseModel):
    summary: str


class ReextractResponse(BaseModel):
    id: str
    status: ExtractionState


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    version: str
    database_connected: bool
    active_extractions: int
