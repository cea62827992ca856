"""Summarizer Interface"""

from abc import ABC, abstractmethod

from ...models.document import SummaryStyle


class SummarizationError(Exception):
    """Raised when the language-model provider cannot produce a summary."""


class BaseSummarizer(ABC):
    """Contract for provider-specific summarization clients.

    A single call is a single attempt: implementations must not retry.
    """

    @abstractmethod
    async def summarize(self, text: str, style: SummaryStyle) -> str:
        """Return a summary of ``text`` written in the requested style.

        Raises:
            SummarizationError: On any provider, network or content failure
        """
        pass
