"""
Merge module for multi-version text merging and conflict resolution.
"""

from textmerge.core.merge.segments import (
    SegmentBuilder,
    CONFLICT_REASON,
    coalesce,
    merge_two_texts,
)
from textmerge.core.merge.multi_version import (
    MultiVersionMerger,
    NotEnoughVersionsError,
    flatten_segments,
    merge_versions,
    prepare_versions,
    version_labels,
)
from textmerge.core.merge.resolution import (
    MergeSession,
    DecisionHistory,
    InvalidDecisionError,
    assemble_text,
)
from textmerge.core.merge.conflict_resolver import (
    AutoResolver,
    ConflictAnalyzer,
    ResolutionStrategy,
    ResolutionSuggestion,
)

__all__ = [
    # Pairwise
    'SegmentBuilder',
    'CONFLICT_REASON',
    'coalesce',
    'merge_two_texts',
    # Multi-version
    'MultiVersionMerger',
    'NotEnoughVersionsError',
    'flatten_segments',
    'merge_versions',
    'prepare_versions',
    'version_labels',
    # Resolution
    'MergeSession',
    'DecisionHistory',
    'InvalidDecisionError',
    'assemble_text',
    # Strategies
    'AutoResolver',
    'ConflictAnalyzer',
    'ResolutionStrategy',
    'ResolutionSuggestion',
]
