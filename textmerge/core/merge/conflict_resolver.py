"""
Conflict resolution utilities and strategies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from textmerge.core.diff.tokenizer import tokenize
from textmerge.core.merge.resolution import MergeSession
from textmerge.core.models import ConflictSegment, Decision


class ResolutionStrategy(Enum):
    """Strategy for automatic conflict resolution."""
    MANUAL = auto()          # All conflicts require manual resolution
    FAVOR_A = auto()         # Automatically choose option A
    FAVOR_B = auto()         # Automatically choose option B
    FAVOR_SHORTER = auto()   # Choose the shorter option
    FAVOR_LONGER = auto()    # Choose the longer option


@dataclass
class ResolutionSuggestion:
    """A suggested resolution for a conflict."""
    decision: Decision
    confidence: float  # 0.0 to 1.0
    reason: str
    preview: str


def _is_whitespace_only(conflict: ConflictSegment) -> bool:
    return conflict.option_a.split() == conflict.option_b.split()


class ConflictAnalyzer:
    """Analyzes conflicts to suggest resolutions."""

    @staticmethod
    def analyze(conflict: ConflictSegment) -> list[ResolutionSuggestion]:
        """
        Analyze a conflict and return suggested resolutions.

        Returns suggestions sorted by confidence (highest first).
        """
        suggestions: list[ResolutionSuggestion] = []

        def suggest(decision: Decision, confidence: float, reason: str) -> None:
            suggestions.append(ResolutionSuggestion(
                decision=decision,
                confidence=confidence,
                reason=reason,
                preview=conflict.preview(decision)
            ))

        # Check for empty sides
        if not conflict.option_a:
            suggest(Decision.USE_B, 0.8, "Option A is empty")
        elif not conflict.option_b:
            suggest(Decision.USE_A, 0.8, "Option B is empty")

        if _is_whitespace_only(conflict):
            suggest(Decision.USE_B, 0.9, "Difference is whitespace only")

        # Check if one side contains the other
        elif conflict.option_a and conflict.option_a in conflict.option_b:
            suggest(Decision.USE_B, 0.6, "Option B contains all of option A plus additions")
        elif conflict.option_b and conflict.option_b in conflict.option_a:
            suggest(Decision.USE_A, 0.6, "Option A contains all of option B plus additions")

        # Check for reordering
        elif sorted(tokenize(conflict.option_a)) == sorted(tokenize(conflict.option_b)):
            suggest(Decision.USE_B, 0.5, "Same words in different order")

        suggestions.sort(key=lambda s: s.confidence, reverse=True)

        return suggestions

    @staticmethod
    def similarity_score(option_a: str, option_b: str) -> float:
        """
        Calculate token similarity between two options.

        Returns a value between 0.0 (completely different) and 1.0 (identical).
        """
        if not option_a and not option_b:
            return 1.0
        if not option_a or not option_b:
            return 0.0

        # Use Jaccard similarity
        a_set = set(tokenize(option_a))
        b_set = set(tokenize(option_b))

        intersection = len(a_set & b_set)
        union = len(a_set | b_set)

        return intersection / union if union > 0 else 0.0


class AutoResolver:
    """
    Automatic resolution helper for common scenarios.

    Decisions go through MergeSession.set_decision, so each one can be
    undone like a manual decision.
    """

    def __init__(
        self,
        strategy: ResolutionStrategy = ResolutionStrategy.MANUAL,
        auto_resolve_whitespace: bool = True,
        custom_resolvers: list[Callable[[ConflictSegment], Optional[Decision]]] | None = None
    ):
        self.strategy = strategy
        self.auto_resolve_whitespace = auto_resolve_whitespace
        self.custom_resolvers = custom_resolvers or []

    def apply(self, session: MergeSession) -> int:
        """
        Resolve every undecided conflict that can be decided automatically.

        Returns:
            Number of conflicts resolved
        """
        resolved_count = 0

        for index in session.conflict_indices:
            if session.get_decision(index) is not None:
                continue

            decision = self.decide(session.segments[index])
            if decision is not None:
                session.set_decision(index, decision)
                resolved_count += 1

        logging.info(
            f"AutoResolver - Resolved {resolved_count} conflicts "
            f"with {self.strategy.name} strategy"
        )
        return resolved_count

    def decide(self, conflict: ConflictSegment) -> Optional[Decision]:
        """Pick a decision for a single conflict, or None to leave it open."""
        if self.auto_resolve_whitespace and _is_whitespace_only(conflict):
            return Decision.USE_B

        for resolver in self.custom_resolvers:
            decision = resolver(conflict)
            if decision is not None:
                return decision

        len_a = len(conflict.option_a)
        len_b = len(conflict.option_b)

        if self.strategy == ResolutionStrategy.FAVOR_A:
            return Decision.USE_A
        elif self.strategy == ResolutionStrategy.FAVOR_B:
            return Decision.USE_B
        elif self.strategy == ResolutionStrategy.FAVOR_SHORTER:
            return Decision.USE_A if len_a <= len_b else Decision.USE_B
        elif self.strategy == ResolutionStrategy.FAVOR_LONGER:
            return Decision.USE_A if len_a >= len_b else Decision.USE_B

        return None
