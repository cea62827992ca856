"""Python client for PDF Service."""

from .api_client import ApiError, PdfServiceClient
from .session import SessionContext

__all__ = ["ApiError", "PdfServiceClient", "SessionContext"]
