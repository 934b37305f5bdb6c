"""Tests for LCS alignment and its backtracking convention."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from textmerge.core.diff.lcs import (
    AlignmentTooLargeError,
    LcsAligner,
    build_lcs_table,
    diff_ops,
    matched_indices,
)
from textmerge.core.models import DiffOp, DiffOpType

EQ = DiffOpType.EQUAL
DEL = DiffOpType.DELETE
INS = DiffOpType.INSERT

_TOKENS = st.lists(st.sampled_from(["a", "b", "c", " ", "."]), max_size=12)


def test_table_holds_lcs_length() -> None:
    dp = build_lcs_table(["a", "b", "c"], ["a", "c"])
    assert len(dp) == 4
    assert len(dp[0]) == 3
    assert dp[3][2] == 2


def test_empty_inputs() -> None:
    assert diff_ops([], []) == []
    assert diff_ops([], ["a", "b"]) == [DiffOp(INS, "a"), DiffOp(INS, "b")]
    assert diff_ops(["a"], []) == [DiffOp(DEL, "a")]


def test_single_replacement_lists_insert_before_delete() -> None:
    assert diff_ops(["x"], ["y"]) == [DiffOp(INS, "y"), DiffOp(DEL, "x")]


def test_ops_keep_original_order() -> None:
    assert diff_ops(["a", "b"], ["a", "c"]) == [
        DiffOp(EQ, "a"),
        DiffOp(INS, "c"),
        DiffOp(DEL, "b"),
    ]


def test_ties_step_on_first_sequence() -> None:
    # Both "x" and "y" are valid single-token alignments; the tie-break
    # keeps the earlier "x" of the first sequence as the match.
    assert diff_ops(["x", "y"], ["y", "x"]) == [
        DiffOp(INS, "y"),
        DiffOp(EQ, "x"),
        DiffOp(DEL, "y"),
    ]
    assert matched_indices(["x", "y"], ["y", "x"]) == ({0}, {1})


def test_matched_indices_for_identical_sequences() -> None:
    tokens = ["a", " ", "b"]
    assert matched_indices(tokens, tokens) == ({0, 1, 2}, {0, 1, 2})


def test_aligner_rejects_oversized_tables() -> None:
    aligner = LcsAligner(max_cells=10)
    with pytest.raises(AlignmentTooLargeError):
        aligner.diff(["a"] * 4, ["b"] * 4)
    assert aligner.diff(["a"], ["a"]) == [DiffOp(EQ, "a")]


def test_aligner_without_limit() -> None:
    assert LcsAligner().matches(["a", "b"], ["b"]) == ({1}, {0})


@settings(max_examples=150, deadline=None)
@given(a=_TOKENS, b=_TOKENS)
def test_ops_reproduce_both_inputs(a: list[str], b: list[str]) -> None:
    ops = diff_ops(a, b)
    assert [op.text for op in ops if op.op_type != INS] == a
    assert [op.text for op in ops if op.op_type != DEL] == b


@settings(max_examples=150, deadline=None)
@given(a=_TOKENS, b=_TOKENS)
def test_equal_ops_match_lcs_length(a: list[str], b: list[str]) -> None:
    ops = diff_ops(a, b)
    dp = build_lcs_table(a, b)
    equal_count = sum(1 for op in ops if op.op_type == EQ)
    matched_a, matched_b = matched_indices(a, b)

    assert equal_count == dp[len(a)][len(b)]
    assert len(matched_a) == len(matched_b) == equal_count
    assert all(a[i] in b for i in matched_a)
