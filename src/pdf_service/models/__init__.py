"""Data models for PDF Service."""

from .document import (
    Document,
    DocumentStatus,
    DocumentSummary,
    ExtractionState,
    ExtractResponse,
    StoredFile,
    SummaryStyle,
)
from .requests import (
    HealthResponse,
    MessageResponse,
    ReextractResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from .user import (
    AuthResponse,
    ProfileUpdate,
    SigninRequest,
    SignupRequest,
    User,
    UserResponse,
)

__all__ = [
    "Document",
    "DocumentStatus",
    "DocumentSummary",
    "ExtractionState",
    "ExtractResponse",
    "StoredFile",
    "SummaryStyle",
    "HealthResponse",
    "MessageResponse",
    "ReextractResponse",
    "SummarizeRequest",
    "SummarizeResponse",
    "AuthResponse",
    "ProfileUpdate",
    "SigninRequest",
    "SignupRequest",
    "User",
    "UserResponse",
]
