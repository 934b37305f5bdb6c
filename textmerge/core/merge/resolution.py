"""
Conflict resolution state and final text assembly.

A MergeSession holds the decisions made for the conflicts of one merge
result, together with a bounded undo/redo history of decision snapshots.
Every transition replaces the whole decisions map at once.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from textmerge.core.models import (
    AssembledText,
    Decision,
    Decisions,
    Segment,
)

DEFAULT_HISTORY_LIMIT = 50
UNRESOLVED_REASON = "Select Option"


class InvalidDecisionError(ValueError):
    """Raised when a decision targets something other than a conflict."""
    pass


def unresolved_placeholder(reason: str) -> str:
    """Placeholder text for a conflict that has no decision yet."""
    return f"[CONFLICT: {reason or UNRESOLVED_REASON}]"


def assemble_text(segments: Sequence[Segment], decisions: Decisions) -> AssembledText:
    """
    Build the final text from segments and decisions.

    Content segments are copied verbatim. A decided conflict contributes
    the text its decision selects; an undecided one contributes a
    placeholder carrying its reason.
    """
    parts: list[str] = []
    conflict_count = 0
    unresolved_count = 0

    for index, segment in enumerate(segments):
        if not segment.is_conflict:
            parts.append(segment.text)
            continue

        conflict_count += 1
        decision = decisions.get(index)
        if decision is None:
            unresolved_count += 1
            parts.append(unresolved_placeholder(segment.reason))
        else:
            parts.append(segment.preview(decision))

    return AssembledText(
        text=''.join(parts),
        unresolved_count=unresolved_count,
        conflict_count=conflict_count
    )


class DecisionHistory:
    """Undo and redo stacks of decision snapshots, bounded in size."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self.limit = limit
        self._undo: list[Decisions] = []
        self._redo: list[Decisions] = []

    @property
    def can_undo(self) -> bool:
        return len(self._undo) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo) > 0

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def record(self, snapshot: Decisions) -> None:
        """Record the state before a new change; discards redo history."""
        self._push(self._undo, snapshot)
        self._redo.clear()

    def undo(self, current: Decisions) -> Optional[Decisions]:
        """Swap `current` for the latest undo snapshot, or None if empty."""
        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._push(self._redo, current)
        return snapshot

    def redo(self, current: Decisions) -> Optional[Decisions]:
        """Swap `current` for the latest redo snapshot, or None if empty."""
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._push(self._undo, current)
        return snapshot

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _push(self, stack: list[Decisions], snapshot: Decisions) -> None:
        stack.append(dict(snapshot))
        # Oldest snapshots fall off once the limit is passed
        if len(stack) > self.limit:
            del stack[:len(stack) - self.limit]


class MergeSession:
    """
    Caller-held resolution state for one segment sequence.

    Usage:
        session = MergeSession(result.segments)
        session.set_decision(1, Decision.USE_B)
        session.undo()
        text = session.assemble().text
    """

    def __init__(
        self,
        segments: Sequence[Segment],
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):
        self.segments: list[Segment] = list(segments)
        self.history = DecisionHistory(history_limit)
        self._decisions: Decisions = {}

    @property
    def decisions(self) -> Decisions:
        """Copy of the current decisions map."""
        return dict(self._decisions)

    @property
    def conflict_indices(self) -> list[int]:
        return [i for i, seg in enumerate(self.segments) if seg.is_conflict]

    @property
    def conflict_count(self) -> int:
        return len(self.conflict_indices)

    @property
    def resolved_count(self) -> int:
        return len(self._decisions)

    @property
    def unresolved_count(self) -> int:
        return self.conflict_count - self.resolved_count

    @property
    def is_fully_resolved(self) -> bool:
        return self.unresolved_count == 0

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def get_decision(self, index: int) -> Optional[Decision]:
        return self._decisions.get(index)

    def set_decision(self, index: int, decision: Union[Decision, str]) -> None:
        """
        Record a decision for the conflict at segment `index`.

        Raises:
            InvalidDecisionError: If `index` is not a conflict segment or
                the decision is unknown
        """
        self._check_conflict_index(index)
        if not isinstance(decision, Decision):
            try:
                decision = Decision.from_string(decision)
            except ValueError as e:
                raise InvalidDecisionError(str(e)) from e

        self.history.record(self._decisions)
        self._decisions = {**self._decisions, index: decision}
        logging.debug(f"MergeSession - Conflict at {index} set to {decision.value}")

    def clear_decision(self, index: int) -> bool:
        """
        Return the conflict at `index` to the unresolved state.

        Returns:
            True if a decision was removed
        """
        self._check_conflict_index(index)
        if index not in self._decisions:
            return False

        self.history.record(self._decisions)
        self._decisions = {k: v for k, v in self._decisions.items() if k != index}
        return True

    def undo(self) -> bool:
        """Restore the previous decisions; False if there is nothing to undo."""
        snapshot = self.history.undo(self._decisions)
        if snapshot is None:
            return False
        self._decisions = snapshot
        return True

    def redo(self) -> bool:
        """Re-apply an undone change; False if there is nothing to redo."""
        snapshot = self.history.redo(self._decisions)
        if snapshot is None:
            return False
        self._decisions = snapshot
        return True

    def next_unresolved(self, after: int = -1) -> Optional[int]:
        """Index of the first unresolved conflict after `after`, if any."""
        for index in self.conflict_indices:
            if index > after and index not in self._decisions:
                return index
        return None

    def assemble(self) -> AssembledText:
        """Assemble the final text from the current decisions."""
        return assemble_text(self.segments, self._decisions)

    def _check_conflict_index(self, index: int) -> None:
        # bool is an int subclass; True must not address segment 1
        if (not isinstance(index, int) or isinstance(index, bool)
                or not 0 <= index < len(self.segments)
                or not self.segments[index].is_conflict):
            raise InvalidDecisionError(f"Segment {index} is not a conflict")
