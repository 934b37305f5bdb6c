"""
Background workers for non-blocking operations.

Provides QObject-based workers for:
- Multi-version merging (from texts or files)
- Inline highlighting of conflicts

All workers use Qt signals for thread-safe communication
with the UI thread.
"""

from textmerge.workers.base_worker import (
    BaseWorker,
    WorkerSignals,
    WorkerState,
    WorkerThread,
    CancelledException,
)
from textmerge.workers.merge_worker import (
    MergeWorker,
    MergeFromFilesWorker,
    HighlightWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    'CancelledException',
    # Merge
    'MergeWorker',
    'MergeFromFilesWorker',
    'HighlightWorker',
]
