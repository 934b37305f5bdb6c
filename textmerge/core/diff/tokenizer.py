"""
Text tokenizer for word-level alignment.

Splits text into words, whitespace runs and single punctuation marks
without dropping any character, so joining the tokens gives back the
original text.
"""

from __future__ import annotations

import re

PUNCTUATION = '.,!?;:"\'()[]{}'

_SPLIT_PATTERN = re.compile(r'(\s+|[' + re.escape(PUNCTUATION) + r'])')


def tokenize(text: str) -> list[str]:
    """
    Tokenize text into words, whitespace runs and punctuation.

    Each whitespace run and each punctuation character is its own token;
    everything between them forms a word token. Empty text gives [].
    """
    if not text:
        return []
    return [token for token in _SPLIT_PATTERN.split(text) if token]
