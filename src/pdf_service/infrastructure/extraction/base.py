"""Text Extractor Interface

Contract for turning a stored PDF payload into plain text.
"""

from abc import ABC, abstractmethod


class ExtractionError(Exception):
    """Raised when a payload cannot be turned into text."""


class BaseTextExtractor(ABC):
    """Abstract base class for PDF text extractors.

    Implementations must be stateless so that the same instance can be called
    from several worker threads at once.
    """

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """Extract plain text from PDF bytes.

        Args:
            data: Raw PDF file content

        Returns:
            Extracted text, pages joined by newlines

        Raises:
            ExtractionError: If the payload is unreadable or has no text
        """
        pass
