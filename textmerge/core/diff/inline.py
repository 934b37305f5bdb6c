"""
Inline highlighting of the differences between two conflict options.
"""

from __future__ import annotations

from typing import Optional

from textmerge.core.diff.lcs import LcsAligner
from textmerge.core.diff.tokenizer import tokenize
from textmerge.core.models import ConflictSegment, HighlightToken, InlineHighlight


class InlineHighlighter:
    """Flags the tokens of each option that are not part of the common subsequence."""

    def __init__(self, aligner: Optional[LcsAligner] = None):
        self.aligner = aligner or LcsAligner()

    def compare(self, option_a: str, option_b: str) -> InlineHighlight:
        """
        Compare two option texts token by token.

        Returns:
            InlineHighlight with one flagged token per token of each side
        """
        tokens_a = tokenize(option_a)
        tokens_b = tokenize(option_b)
        matched_a, matched_b = self.aligner.matches(tokens_a, tokens_b)

        return InlineHighlight(
            left=[HighlightToken(t, i not in matched_a) for i, t in enumerate(tokens_a)],
            right=[HighlightToken(t, i not in matched_b) for i, t in enumerate(tokens_b)]
        )

    def highlight(self, conflict: ConflictSegment) -> InlineHighlight:
        """Highlight the options of a conflict segment."""
        return self.compare(conflict.option_a, conflict.option_b)


def highlight_conflict(option_a: str, option_b: str) -> InlineHighlight:
    """Compare two option texts with the default highlighter."""
    return InlineHighlighter().compare(option_a, option_b)
