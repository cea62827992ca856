"""Summarizer built on the OpenAI-compatible chat completions API."""

import logging
from typing import Optional

import httpx
import openai

from ...models.document import SummaryStyle
from .base import BaseSummarizer, SummarizationError
from .prompts import build_instruction

logger = logging.getLogger(__name__)


class OpenAISummarizer(BaseSummarizer):
    """Summarization client adapter for OpenAI chat models."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: float,
        max_input_chars: int,
        base_url: Optional[str] = None,
    ) -> None:
        self.model = model
        self.max_input_chars = max_input_chars
        self._client: Optional[openai.AsyncOpenAI] = None
        if api_key:
            self._client = openai.AsyncOpenAI(
                api_key=api_key,
                timeout=timeout_seconds,
                base_url=base_url,
                max_retries=0,
            )
        else:
            logger.warning("No OpenAI API key configured; summarization requests will fail")

    async def summarize(self, text: str, style: SummaryStyle) -> str:
        if self._client is None:
            raise SummarizationError("Summarization provider is not configured")

        instruction = build_instruction(style)
        if len(text) > self.max_input_chars:
            logger.info(f"Truncating summary input from {len(text)} to {self.max_input_chars} characters")
            text = text[: self.max_input_chars]

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instruction},
                    {"role": "user", "content": text},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise SummarizationError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise SummarizationError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise SummarizationError("AI returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise SummarizationError("AI returned empty response")
        return content.strip()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
