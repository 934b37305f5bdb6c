"""Tests for conflict suggestions and automatic resolution strategies."""

from __future__ import annotations

import pytest

from textmerge.core.merge.conflict_resolver import (
    AutoResolver,
    ConflictAnalyzer,
    ResolutionStrategy,
)
from textmerge.core.merge.resolution import MergeSession
from textmerge.core.models import ConflictSegment, ContentSegment, Decision


def test_whitespace_only_difference() -> None:
    suggestions = ConflictAnalyzer.analyze(ConflictSegment("a  b", "a b"))
    assert suggestions[0].decision is Decision.USE_B
    assert suggestions[0].confidence == 0.9
    assert suggestions[0].preview == "a b"


def test_option_containing_the_other_is_suggested() -> None:
    suggestions = ConflictAnalyzer.analyze(ConflictSegment("quick", "very quick"))
    assert [s.decision for s in suggestions] == [Decision.USE_B]

    suggestions = ConflictAnalyzer.analyze(ConflictSegment("very quick", "quick"))
    assert [s.decision for s in suggestions] == [Decision.USE_A]


def test_reordered_words() -> None:
    suggestions = ConflictAnalyzer.analyze(ConflictSegment("red blue", "blue red"))
    assert len(suggestions) == 1
    assert suggestions[0].confidence == 0.5


def test_empty_option_prefers_the_other_side() -> None:
    suggestions = ConflictAnalyzer.analyze(ConflictSegment("", "text"))
    assert suggestions[0].decision is Decision.USE_B


def test_unrelated_options_have_no_suggestion() -> None:
    assert ConflictAnalyzer.analyze(ConflictSegment("cat", "dog")) == []


def test_similarity_score() -> None:
    assert ConflictAnalyzer.similarity_score("a b", "a c") == 0.5
    assert ConflictAnalyzer.similarity_score("", "") == 1.0
    assert ConflictAnalyzer.similarity_score("a", "") == 0.0


def _session() -> MergeSession:
    return MergeSession([
        ConflictSegment("longer", "x"),
        ContentSegment(" "),
        ConflictSegment("a", "bbb"),
        ContentSegment(" "),
        ConflictSegment("one  two", "one two"),
    ])


@pytest.mark.parametrize(
    ("strategy", "expected"),
    [
        (ResolutionStrategy.FAVOR_A, {0: Decision.USE_A, 2: Decision.USE_A}),
        (ResolutionStrategy.FAVOR_B, {0: Decision.USE_B, 2: Decision.USE_B}),
        (ResolutionStrategy.FAVOR_SHORTER, {0: Decision.USE_B, 2: Decision.USE_A}),
        (ResolutionStrategy.FAVOR_LONGER, {0: Decision.USE_A, 2: Decision.USE_B}),
    ],
)
def test_strategies(strategy: ResolutionStrategy, expected: dict) -> None:
    session = _session()
    assert AutoResolver(strategy).apply(session) == 3
    assert session.decisions == {**expected, 4: Decision.USE_B}
    assert session.is_fully_resolved


def test_manual_strategy_only_settles_whitespace() -> None:
    session = _session()
    assert AutoResolver().apply(session) == 1
    assert session.decisions == {4: Decision.USE_B}

    session = _session()
    assert AutoResolver(auto_resolve_whitespace=False).apply(session) == 0


def test_existing_decisions_are_kept_and_auto_decisions_undo() -> None:
    session = _session()
    session.set_decision(0, Decision.A_THEN_B)
    AutoResolver(ResolutionStrategy.FAVOR_B).apply(session)
    assert session.get_decision(0) is Decision.A_THEN_B

    session.undo()
    assert 4 not in session.decisions


def test_custom_resolver() -> None:
    def keep_both(conflict: ConflictSegment):
        return Decision.B_THEN_A if conflict.option_a == "a" else None

    session = _session()
    AutoResolver(custom_resolvers=[keep_both]).apply(session)
    assert session.decisions == {2: Decision.B_THEN_A, 4: Decision.USE_B}
