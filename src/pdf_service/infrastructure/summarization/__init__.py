"""Text summarization through a hosted language model."""

from .base import BaseSummarizer, SummarizationError
from .openai_summarizer import OpenAISummarizer
from .prompts import STYLE_INSTRUCTIONS, build_instruction

__all__ = [
    "BaseSummarizer",
    "SummarizationError",
    "OpenAISummarizer",
    "STYLE_INSTRUCTIONS",
    "build_instruction",
]
