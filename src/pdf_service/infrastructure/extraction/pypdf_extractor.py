"""PDF text extraction using pypdf."""

import io
import logging
from typing import List

from pypdf import PdfReader
from pypdf.errors import PdfReadError, PdfStreamError

from .base import BaseTextExtractor, ExtractionError

logger = logging.getLogger(__name__)


class PypdfExtractor(BaseTextExtractor):
    """Extracts text page by page with pypdf."""

    def extract(self, data: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
        except (PdfReadError, PdfStreamError) as e:
            raise ExtractionError(f"Failed to read PDF file: {e}") from e
        except Exception as e:
            raise ExtractionError(f"Unexpected error reading PDF: {type(e).__name__}: {e}") from e

        if reader.is_encrypted:
            raise ExtractionError("PDF is encrypted and cannot be read without a password")

        pages: List[str] = []
        for page_num, page in enumerate(reader.pages, start=1):
            try:
                pages.append(page.extract_text() or "")
            except Exception as e:
                raise ExtractionError(f"Text extraction failed on page {page_num}: {e}") from e

        text = "\n".join(pages).strip()
        if not text:
            raise ExtractionError("No extractable text found in PDF")

        logger.debug(f"Extracted {len(text)} characters from {len(pages)} pages")
        return text
