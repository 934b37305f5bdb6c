"""
Core data models for the text merge engine.

This module defines all data structures shared by the engine:
- Diff operation models (alignment output)
- Segment models (agreed content and conflicts)
- Decision models (how a conflict was resolved)
- Highlight models (token-level change flags)
- Result models (merge and assembly results)

All models are designed to be:
- UI-agnostic (can be used with any frontend)
- Immutable where practical
- Type-hinted for IDE support
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union


# =============================================================================
# Enumerations
# =============================================================================

class DiffOpType(Enum):
    """Kind of a single alignment step between two token sequences."""
    EQUAL = auto()   # Token present in both sequences
    DELETE = auto()  # Token present only in the first sequence
    INSERT = auto()  # Token present only in the second sequence


class SegmentType(Enum):
    """Type of a segment in a merge result."""
    CONTENT = "content"    # Accepted verbatim
    CONFLICT = "conflict"  # Needs a decision


class Decision(Enum):
    """How a conflict is resolved."""
    USE_A = "A"        # Take option A
    USE_B = "B"        # Take option B
    A_THEN_B = "A+B"   # Concatenate: A then B
    B_THEN_A = "B+A"   # Concatenate: B then A

    @classmethod
    def from_string(cls, value: str) -> 'Decision':
        """Create from a short label ('A', 'A+B') or a member name."""
        if not isinstance(value, str):
            raise ValueError(f"Unknown decision: {value!r}")
        for decision in cls:
            if decision.value == value.upper():
                return decision
        try:
            return cls[value.upper().replace('-', '_')]
        except KeyError:
            raise ValueError(f"Unknown decision: {value!r}") from None


# =============================================================================
# Diff Models
# =============================================================================

@dataclass(frozen=True)
class DiffOp:
    """
    A single alignment step.

    Concatenating the text of EQUAL and INSERT ops reproduces the second
    input; EQUAL and DELETE ops reproduce the first.
    """
    op_type: DiffOpType
    text: str

    @property
    def is_equal(self) -> bool:
        return self.op_type == DiffOpType.EQUAL


# =============================================================================
# Segment Models
# =============================================================================

@dataclass(frozen=True)
class ContentSegment:
    """Text accepted into the merge result verbatim."""
    text: str

    @property
    def segment_type(self) -> SegmentType:
        return SegmentType.CONTENT

    @property
    def is_conflict(self) -> bool:
        return False


@dataclass(frozen=True)
class ConflictSegment:
    """
    A disputed span with two candidate texts.

    option_a comes from the earlier (accumulated) text, option_b from the
    later version. At least one option is non-empty.
    """
    option_a: str
    option_b: str
    reason: str = ""

    def __post_init__(self):
        if not self.option_a and not self.option_b:
            raise ValueError("Conflict requires at least one non-empty option")

    @property
    def segment_type(self) -> SegmentType:
        return SegmentType.CONFLICT

    @property
    def is_conflict(self) -> bool:
        return True

    @property
    def has_newline(self) -> bool:
        """True if either option spans more than one line."""
        return '\n' in self.option_a or '\n' in self.option_b

    @property
    def separator(self) -> str:
        """Separator used when both options are kept."""
        return '\n' if self.has_newline else ' '

    def preview(self, decision: Decision) -> str:
        """Get the text a decision would produce for this conflict."""
        if decision == Decision.USE_A:
            return self.option_a
        elif decision == Decision.USE_B:
            return self.option_b
        elif decision == Decision.A_THEN_B:
            return self.option_a + self.separator + self.option_b
        elif decision == Decision.B_THEN_A:
            return self.option_b + self.separator + self.option_a
        raise ValueError(f"Unknown decision: {decision}")


Segment = Union[ContentSegment, ConflictSegment]

# Segment index -> decision
Decisions = dict[int, Decision]


# =============================================================================
# Highlight Models
# =============================================================================

@dataclass(frozen=True)
class HighlightToken:
    """A token of a conflict option, flagged if it differs from the other side."""
    text: str
    changed: bool


@dataclass
class InlineHighlight:
    """Token-level differences between the two options of a conflict."""
    left: list[HighlightToken] = field(default_factory=list)
    right: list[HighlightToken] = field(default_factory=list)

    @property
    def changed_text_left(self) -> list[str]:
        return [t.text for t in self.left if t.changed]

    @property
    def changed_text_right(self) -> list[str]:
        return [t.text for t in self.right if t.changed]

    @property
    def is_identical(self) -> bool:
        return not any(t.changed for t in self.left + self.right)


# =============================================================================
# Result Models
# =============================================================================

@dataclass
class AssembledText:
    """Final text built from segments and decisions."""
    text: str
    unresolved_count: int
    conflict_count: int

    @property
    def resolved_count(self) -> int:
        return self.conflict_count - self.unresolved_count

    @property
    def is_ready(self) -> bool:
        """True when no conflict is left unresolved."""
        return self.unresolved_count == 0


@dataclass
class MergeResult:
    """
    Complete result of a multi-version merge.

    Only the segments of the final pairwise comparison are kept.
    """
    segments: list[Segment]
    version_count: int
    label_a: str = "Version 1"
    label_b: str = "Version 2"

    @property
    def conflict_indices(self) -> list[int]:
        return [i for i, seg in enumerate(self.segments) if seg.is_conflict]

    @property
    def conflict_count(self) -> int:
        return len(self.conflict_indices)

    @property
    def content_count(self) -> int:
        return len(self.segments) - self.conflict_count

    @property
    def has_conflicts(self) -> bool:
        return self.conflict_count > 0

    @property
    def merged_text(self) -> str:
        """Text with every conflict resolved to option B."""
        return ''.join(
            seg.option_b if seg.is_conflict else seg.text
            for seg in self.segments
        )

    def conflict_number(self, index: int) -> Optional[int]:
        """1-based ordinal of the conflict at segment `index`, or None."""
        if not (0 <= index < len(self.segments)) or not self.segments[index].is_conflict:
            return None
        return sum(1 for seg in self.segments[:index + 1] if seg.is_conflict)
