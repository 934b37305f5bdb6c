"""
Sequential merge of more than two text versions.

Versions are folded left to right: each pass compares the accumulated
text with the next version. Between passes the segments are flattened
back to plain text with every conflict taking the later option, so
conflicts from earlier passes are not carried into the final result.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from textmerge.core.diff.lcs import LcsAligner
from textmerge.core.merge.segments import CONFLICT_REASON, SegmentBuilder
from textmerge.core.models import ContentSegment, MergeResult, Segment


class NotEnoughVersionsError(ValueError):
    """Raised when fewer than the required number of non-blank versions are given."""
    pass


def flatten_segments(segments: Sequence[Segment]) -> str:
    """Flatten segments to text, resolving every conflict to option B."""
    return ''.join(
        seg.option_b if seg.is_conflict else seg.text
        for seg in segments
    )


def version_labels(count: int) -> tuple[str, str]:
    """
    Labels for the two sides of the final comparison.

    With more than two versions, side A is the combination of all earlier
    versions and side B is the latest one.
    """
    if count > 2:
        return (f"Combined (v1..v{count - 1})", f"Version {count} (Latest)")
    return ("Version 1", "Version 2")


def prepare_versions(raw: Sequence[str], minimum: int = 2) -> list[str]:
    """
    Drop blank inputs and check that enough versions remain.

    Raises:
        NotEnoughVersionsError: If fewer than `minimum` non-blank versions
    """
    versions = [text for text in raw if text.strip()]
    if len(versions) < minimum:
        raise NotEnoughVersionsError(
            f"Please provide at least {minimum} versions of text to merge "
            f"(got {len(versions)})"
        )
    return versions


class MultiVersionMerger:
    """
    Merges an ordered list of versions into one segment sequence.

    Only the segments of the last pairwise comparison are returned.
    """

    def __init__(
        self,
        reason: str = CONFLICT_REASON,
        max_cells: Optional[int] = None
    ):
        self.builder = SegmentBuilder(reason=reason, aligner=LcsAligner(max_cells))

    def merge_segments(
        self,
        versions: Sequence[str],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> list[Segment]:
        """
        Merge versions into segments.

        Args:
            versions: Texts in chronological order
            progress_callback: Called with (pass, total passes) after each pass

        Returns:
            Segments of the final comparison; [] for no versions, a single
            content segment for one version
        """
        if not versions:
            return []
        if len(versions) == 1:
            return [ContentSegment(versions[0])]

        total = len(versions) - 1
        base = versions[0]
        segments: list[Segment] = []

        for step, version in enumerate(versions[1:], start=1):
            segments = self.builder.merge_pair(base, version)
            logging.debug(
                f"MultiVersionMerger - Pass {step}/{total}: {len(segments)} segments"
            )

            if step < total:
                base = flatten_segments(segments)

            if progress_callback:
                progress_callback(step, total)

        return segments

    def merge(
        self,
        versions: Sequence[str],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> MergeResult:
        """Merge versions and wrap the segments with labels and counts."""
        segments = self.merge_segments(versions, progress_callback)
        label_a, label_b = version_labels(len(versions))

        result = MergeResult(
            segments=segments,
            version_count=len(versions),
            label_a=label_a,
            label_b=label_b
        )
        logging.info(
            f"MultiVersionMerger - Merged {len(versions)} versions: "
            f"{result.conflict_count} conflicts in {len(segments)} segments"
        )
        return result


def merge_versions(versions: Sequence[str]) -> list[Segment]:
    """Merge versions with default settings."""
    return MultiVersionMerger().merge_segments(versions)
