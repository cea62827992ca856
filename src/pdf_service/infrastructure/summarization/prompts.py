"""Instruction templates for each summary style."""

from typing import Dict

from ...models.document import SummaryStyle

STYLE_INSTRUCTIONS: Dict[SummaryStyle, str] = {
    SummaryStyle.CONCISE: (
        "You summarize documents. Write a concise summary of the text in "
        "2-3 sentences. Keep only the main point and the most important facts."
    ),
    SummaryStyle.DETAILED: (
        "You summarize documents. Write a detailed summary of the text in "
        "several paragraphs. Cover every major section, its key arguments and "
        "any figures, dates or conclusions it states."
    ),
    SummaryStyle.BULLET: (
        "You summarize documents. List the key points of the text as a "
        "bulleted list. Start every line with '- ' and keep each point to one "
        "sentence."
    ),
}


def build_instruction(style: SummaryStyle) -> str:
    """Return the system instruction for ``style``.

    Raises:
        ValueError: If the style has no template
    """
    try:
        return STYLE_INSTRUCTIONS[style]
    except KeyError:
        raise ValueError(f"No instruction template for summary style {style!r}") from None
