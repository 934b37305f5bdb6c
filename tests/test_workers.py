"""Tests for the background merge workers."""

from __future__ import annotations

from textmerge.core.models import ConflictSegment, InlineHighlight, MergeResult
from textmerge.workers import (
    HighlightWorker,
    MergeFromFilesWorker,
    MergeWorker,
    WorkerState,
    WorkerThread,
)

THREE_VERSIONS = ["alpha beta", "alpha gamma", "alpha delta"]


def _collect(worker):
    events = {"finished": [], "progress": [], "error": [], "cancelled": 0}
    worker.signals.finished.connect(events["finished"].append)
    worker.signals.progress.connect(lambda step, total, msg: events["progress"].append((step, total)))
    worker.signals.error.connect(lambda kind, msg: events["error"].append((kind, msg)))

    def on_cancelled():
        events["cancelled"] += 1

    worker.signals.cancelled.connect(on_cancelled)
    return events


def test_merge_worker_reports_each_pass(qapp) -> None:
    worker = MergeWorker(THREE_VERSIONS)
    events = _collect(worker)

    worker.run()

    assert worker.state is WorkerState.COMPLETED
    assert events["progress"] == [(1, 2), (2, 2)]
    result = events["finished"][0]
    assert isinstance(result, MergeResult)
    assert result is worker.result
    assert result.conflict_count == 1
    assert result.label_b == "Version 3 (Latest)"


def test_pass_message_names_the_version(qapp) -> None:
    worker = MergeWorker(THREE_VERSIONS)
    messages = []
    worker.signals.progress.connect(lambda step, total, msg: messages.append(msg))

    worker.run()

    assert messages == ["Compared version 2 of 3", "Compared version 3 of 3"]


def test_cancel_before_start_skips_the_merge(qapp) -> None:
    worker = MergeWorker(["one", "two"])
    events = _collect(worker)

    worker.cancel()
    worker.run()

    assert worker.state is WorkerState.CANCELLED
    assert events["cancelled"] == 1
    assert events["progress"] == []
    assert events["finished"] == []
    assert worker.result is None


def test_cancel_takes_effect_after_the_current_pass(qapp) -> None:
    worker = MergeWorker(THREE_VERSIONS)
    events = _collect(worker)
    worker.signals.progress.connect(lambda step, total, msg: worker.cancel())

    worker.run()

    assert worker.state is WorkerState.CANCELLED
    assert events["progress"] == [(1, 2)]
    assert events["finished"] == []
    assert worker.result is None


def test_failed_merge_reports_error(qapp) -> None:
    worker = MergeWorker(["a b c d", "a x c y"], max_cells=4)
    events = _collect(worker)

    worker.run()

    assert worker.state is WorkerState.FAILED
    assert events["error"][0][0] == "AlignmentTooLargeError"
    assert worker.error == events["error"][0]


def test_missing_file_reports_error(qapp, tmp_path) -> None:
    present = tmp_path / "v1.txt"
    present.write_text("text", encoding="utf-8")
    worker = MergeFromFilesWorker([present, tmp_path / "missing.txt"])
    events = _collect(worker)

    worker.run()

    assert worker.state is WorkerState.FAILED
    kind, message = events["error"][0]
    assert kind == "VersionReadError"
    assert "version 2" in message


def test_merge_from_files(qapp, tmp_path) -> None:
    first = tmp_path / "v1.txt"
    second = tmp_path / "v2.txt"
    first.write_text("The meeting is on Monday.", encoding="utf-8")
    second.write_text("The meeting is on Friday.", encoding="utf-8")

    worker = MergeFromFilesWorker([first, second], encoding="utf-8")
    worker.run()

    assert worker.state is WorkerState.COMPLETED
    assert worker.result.conflict_count == 1


def test_highlight_worker(qapp) -> None:
    worker = HighlightWorker(ConflictSegment("red car", "blue car"))
    worker.run()

    assert isinstance(worker.result, InlineHighlight)
    assert worker.result.changed_text_left == ["red"]


def test_worker_thread_stops_when_the_worker_ends(qapp) -> None:
    worker = MergeWorker(THREE_VERSIONS)
    events = _collect(worker)
    thread = WorkerThread(worker)

    thread.start()

    assert thread.wait(5000)
    qapp.processEvents()
    assert worker.state is WorkerState.COMPLETED
    assert worker.result.conflict_count == 1
    assert events["finished"] == [worker.result]
