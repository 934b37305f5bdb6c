"""
Longest-common-subsequence alignment of token sequences.

Provides the single alignment primitive used by both the segment builder
(block-level diff) and the inline highlighter (token change flags):
- LCS table construction
- Backtracking into a diff-operation stream
- Matched index sets for both sides

Backtracking resolves ties between stepping on the first sequence and
stepping on the second in favour of the first (DELETE before INSERT).
Output depends on this convention, so it must not change.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from textmerge.core.models import DiffOp, DiffOpType


class AlignmentTooLargeError(ValueError):
    """Raised when an alignment table would exceed the configured size."""
    pass


def build_lcs_table(a: Sequence[str], b: Sequence[str]) -> list[list[int]]:
    """
    Build the LCS length table.

    dp[i][j] is the LCS length of a[:i] and b[:j]. Tokens are compared by
    exact string equality.
    """
    m = len(a)
    n = len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        row = dp[i]
        prev = dp[i - 1]
        token = a[i - 1]
        for j in range(1, n + 1):
            if token == b[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])

    return dp


def _backtrack(
    a: Sequence[str],
    b: Sequence[str],
    dp: list[list[int]]
) -> Iterator[tuple[DiffOpType, int, int]]:
    """
    Walk the table from (m, n) to (0, 0).

    Yields (op_type, i, j) in reverse order, where i/j index the consumed
    token of a/b (-1 for the side that is not consumed).
    """
    i = len(a)
    j = len(b)

    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            yield (DiffOpType.EQUAL, i - 1, j - 1)
            i -= 1
            j -= 1
        elif i > 0 and (j == 0 or dp[i - 1][j] >= dp[i][j - 1]):
            yield (DiffOpType.DELETE, i - 1, -1)
            i -= 1
        else:
            yield (DiffOpType.INSERT, -1, j - 1)
            j -= 1


def diff_ops(a: Sequence[str], b: Sequence[str]) -> list[DiffOp]:
    """Align two token sequences into an ordered list of diff operations."""
    dp = build_lcs_table(a, b)
    ops: list[DiffOp] = []

    for op_type, i, j in _backtrack(a, b, dp):
        if op_type == DiffOpType.INSERT:
            ops.append(DiffOp(op_type, b[j]))
        else:
            ops.append(DiffOp(op_type, a[i]))

    ops.reverse()
    return ops


def matched_indices(
    a: Sequence[str],
    b: Sequence[str]
) -> tuple[set[int], set[int]]:
    """
    Find the token positions that take part in the optimal alignment.

    Returns:
        Tuple of (matched indices in a, matched indices in b)
    """
    dp = build_lcs_table(a, b)
    matched_a: set[int] = set()
    matched_b: set[int] = set()

    for op_type, i, j in _backtrack(a, b, dp):
        if op_type == DiffOpType.EQUAL:
            matched_a.add(i)
            matched_b.add(j)

    return matched_a, matched_b


class LcsAligner:
    """
    Aligner for token sequences.

    Uses an O(m*n) table; suitable for document-sized inputs. An optional
    cell limit rejects inputs whose table would be too large.
    """

    def __init__(self, max_cells: Optional[int] = None):
        self.max_cells = max_cells

    def diff(self, a: Sequence[str], b: Sequence[str]) -> list[DiffOp]:
        """Align two token sequences into diff operations."""
        self._check_size(a, b)
        ops = diff_ops(a, b)
        logging.debug(
            f"LcsAligner - Aligned {len(a)} x {len(b)} tokens into {len(ops)} ops"
        )
        return ops

    def matches(
        self,
        a: Sequence[str],
        b: Sequence[str]
    ) -> tuple[set[int], set[int]]:
        """Get matched token indices on both sides."""
        self._check_size(a, b)
        return matched_indices(a, b)

    def _check_size(self, a: Sequence[str], b: Sequence[str]) -> None:
        if self.max_cells is None:
            return
        cells = (len(a) + 1) * (len(b) + 1)
        if cells > self.max_cells:
            logging.warning(
                f"LcsAligner - Refusing {len(a)} x {len(b)} alignment "
                f"({cells} cells, limit {self.max_cells})"
            )
            raise AlignmentTooLargeError(
                f"Alignment of {len(a)} x {len(b)} tokens exceeds limit of {self.max_cells} cells"
            )
