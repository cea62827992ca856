"""PDF text extraction."""

from .base import BaseTextExtractor, ExtractionError
from .pypdf_extractor import PypdfExtractor

__all__ = ["BaseTextExtractor", "ExtractionError", "PypdfExtractor"]
