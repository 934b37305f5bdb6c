"""
Workers for merge operations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from PyQt6.QtCore import QObject

from textmerge.workers.base_worker import BaseWorker
from textmerge.core.diff.inline import InlineHighlighter
from textmerge.core.merge.multi_version import MultiVersionMerger
from textmerge.core.merge.segments import CONFLICT_REASON
from textmerge.core.models import ConflictSegment, InlineHighlight, MergeResult
from textmerge.services.file_io import VersionReader


class MergeWorker(BaseWorker):
    """
    Worker for merging version texts.

    Reports one progress step per pairwise pass and can be cancelled
    between passes.
    """

    def __init__(
        self,
        versions: Sequence[str],
        reason: str = CONFLICT_REASON,
        max_cells: Optional[int] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.versions = list(versions)
        self.reason = reason
        self.max_cells = max_cells

    def do_work(self) -> MergeResult:
        merger = MultiVersionMerger(reason=self.reason, max_cells=self.max_cells)
        return merger.merge(self.versions, progress_callback=self._on_pass)

    def _on_pass(self, step: int, total: int) -> None:
        self.pass_done(step, total, f"Compared version {step + 1} of {total + 1}")


class MergeFromFilesWorker(MergeWorker):
    """Worker that reads version files, in order, before merging them."""

    def __init__(
        self,
        paths: Sequence[str | Path],
        encoding: Optional[str] = None,
        reason: str = CONFLICT_REASON,
        max_cells: Optional[int] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__([], reason=reason, max_cells=max_cells, parent=parent)
        self.paths = [Path(p) for p in paths]
        self.encoding = encoding

    def do_work(self) -> MergeResult:
        # VersionReadError propagates to run() and is reported as an error
        reader = VersionReader(encoding=self.encoding)
        self.versions = [version.text for version in reader.read_all(self.paths)]
        return super().do_work()


class HighlightWorker(BaseWorker):
    """Worker computing inline highlights for one conflict."""

    def __init__(
        self,
        conflict: ConflictSegment,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.conflict = conflict

    def do_work(self) -> InlineHighlight:
        return InlineHighlighter().highlight(self.conflict)
