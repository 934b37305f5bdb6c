"""
Diff module for token-level comparison.

Provides:
- Tokenization (loss-free word/whitespace/punctuation split)
- LCS alignment into diff operations
- Inline highlighting of conflict options
"""

from textmerge.core.diff.tokenizer import (
    tokenize,
    PUNCTUATION,
)
from textmerge.core.diff.lcs import (
    LcsAligner,
    AlignmentTooLargeError,
    build_lcs_table,
    diff_ops,
    matched_indices,
)
from textmerge.core.diff.inline import (
    InlineHighlighter,
    highlight_conflict,
)

__all__ = [
    # Tokenizer
    'tokenize',
    'PUNCTUATION',
    # Alignment
    'LcsAligner',
    'AlignmentTooLargeError',
    'build_lcs_table',
    'diff_ops',
    'matched_indices',
    # Inline
    'InlineHighlighter',
    'highlight_conflict',
]
