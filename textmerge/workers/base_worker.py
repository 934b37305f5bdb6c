"""
Qt plumbing for running merges off the UI thread.

A worker performs a series of pairwise passes. After each pass it reports
(pass, total) and stops if a cancel was requested in the meantime. A
cancelled worker emits `cancelled` and keeps no result; the merge engine
itself never holds partial state, so nothing needs rolling back.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QMutex, QMutexLocker, QObject, QThread, Qt, pyqtSignal, pyqtSlot


class WorkerState(Enum):
    """Lifecycle of a worker."""
    PENDING = auto()
    RUNNING = auto()
    COMPLETED = auto()
    CANCELLED = auto()
    FAILED = auto()


class CancelledException(Exception):
    """Raised between passes once a cancel has been requested."""
    pass


class WorkerSignals(QObject):
    """Signals a worker emits towards the thread that owns the UI."""
    # (pass, total passes, message)
    progress = pyqtSignal(int, int, str)
    finished = pyqtSignal(object)
    # (exception type name, message)
    error = pyqtSignal(str, str)
    cancelled = pyqtSignal()


class BaseWorker(QObject):
    """
    Runs `do_work` once and reports how it ended.

    Subclasses call `pass_done` after each pass; that is the only point
    where cancellation takes effect.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        # Parented so it follows the worker into its thread
        self.signals = WorkerSignals(self)
        self.state = WorkerState.PENDING
        self.result: Any = None
        self.error: Optional[tuple[str, str]] = None
        self._mutex = QMutex()
        self._cancel_requested = False

    @property
    def is_cancelled(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._cancel_requested

    def cancel(self) -> None:
        """Ask the worker to stop after the current pass."""
        with QMutexLocker(self._mutex):
            self._cancel_requested = True

    def pass_done(self, step: int, total: int, message: str = "") -> None:
        """
        Report a finished pass.

        Raises:
            CancelledException: If a cancel is pending
        """
        self.signals.progress.emit(step, total, message or f"Pass {step} of {total}")
        if self.is_cancelled:
            raise CancelledException(f"Cancelled after pass {step} of {total}")

    @pyqtSlot()
    def run(self) -> None:
        """Entry point for the thread; subclasses implement `do_work`."""
        self.state = WorkerState.RUNNING

        try:
            if self.is_cancelled:
                raise CancelledException("Cancelled before start")
            result = self.do_work()

        except CancelledException as e:
            logging.info(f"{type(self).__name__} - {e}")
            self.state = WorkerState.CANCELLED
            self.signals.cancelled.emit()
            return

        except Exception as e:
            logging.error(f"{type(self).__name__} - Failed: {e}")
            self.error = (type(e).__name__, str(e))
            self.state = WorkerState.FAILED
            self.signals.error.emit(*self.error)
            return

        self.result = result
        self.state = WorkerState.COMPLETED
        self.signals.finished.emit(result)

    def do_work(self) -> Any:
        raise NotImplementedError


class WorkerThread(QThread):
    """
    Runs one worker on a dedicated thread.

    Usage:
        thread = WorkerThread(MergeWorker(versions))
        thread.worker.signals.finished.connect(on_result)
        thread.start()
    """

    def __init__(self, worker: BaseWorker, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)
        self.started.connect(self.worker.run)

        # Direct: the thread must stop even when no event loop runs on the caller
        signals = self.worker.signals
        for signal in (signals.finished, signals.error, signals.cancelled):
            signal.connect(self.quit, Qt.ConnectionType.DirectConnection)

    def cancel(self) -> None:
        self.worker.cancel()
