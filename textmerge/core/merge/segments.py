"""
Pairwise merge: grouping diff operations into segments.

Walks a diff-operation stream and splits it into alternating blocks of
agreed tokens and changed tokens, then classifies each block:
1. A block of equal tokens becomes content
2. A block with both deletions and insertions becomes a conflict
3. A block with only deletions or only insertions is accepted as content
4. Adjacent content segments are coalesced
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from textmerge.core.diff.lcs import LcsAligner
from textmerge.core.diff.tokenizer import tokenize
from textmerge.core.models import (
    ConflictSegment,
    ContentSegment,
    DiffOp,
    DiffOpType,
    Segment,
)

CONFLICT_REASON = "Versions differ here"


def coalesce(segments: Iterable[Segment]) -> list[Segment]:
    """Join runs of adjacent content segments into single segments."""
    merged: list[Segment] = []

    for segment in segments:
        if (merged and not segment.is_conflict
                and not merged[-1].is_conflict):
            merged[-1] = ContentSegment(merged[-1].text + segment.text)
        else:
            merged.append(segment)

    return merged


class SegmentBuilder:
    """
    Builds content/conflict segments from two texts.

    One-sided changes (pure insertions or pure deletions) are accepted
    silently; only spans that both sides changed are reported as conflicts.
    """

    def __init__(
        self,
        reason: str = CONFLICT_REASON,
        aligner: Optional[LcsAligner] = None
    ):
        self.reason = reason
        self.aligner = aligner or LcsAligner()

    def merge_pair(self, text_a: str, text_b: str) -> list[Segment]:
        """
        Merge two texts into segments.

        Args:
            text_a: Earlier text (source of conflict option A)
            text_b: Later text (source of conflict option B)

        Returns:
            Segment list with no two adjacent content segments
        """
        ops = self.aligner.diff(tokenize(text_a), tokenize(text_b))
        return self.build(ops)

    def build(self, ops: Sequence[DiffOp]) -> list[Segment]:
        """Group diff operations into blocks and classify them."""
        segments: list[Segment] = []
        block: list[DiffOp] = []

        for op in ops:
            # Blocks are either all-equal or all-changed
            if block and op.is_equal != block[0].is_equal:
                segments.append(self._classify(block))
                block = []
            block.append(op)

        if block:
            segments.append(self._classify(block))

        result = coalesce(segments)
        logging.debug(
            f"SegmentBuilder - Built {len(result)} segments from {len(ops)} ops"
        )
        return result

    def _classify(self, block: list[DiffOp]) -> Segment:
        """Turn one block of diff operations into a segment."""
        has_equal = any(op.op_type == DiffOpType.EQUAL for op in block)
        has_delete = any(op.op_type == DiffOpType.DELETE for op in block)
        has_insert = any(op.op_type == DiffOpType.INSERT for op in block)

        if not has_equal and has_delete and has_insert:
            return ConflictSegment(
                option_a=''.join(op.text for op in block if op.op_type == DiffOpType.DELETE),
                option_b=''.join(op.text for op in block if op.op_type == DiffOpType.INSERT),
                reason=self.reason
            )

        return ContentSegment(''.join(op.text for op in block))


def merge_two_texts(text_a: str, text_b: str) -> list[Segment]:
    """Merge two texts with the default builder."""
    return SegmentBuilder().merge_pair(text_a, text_b)
