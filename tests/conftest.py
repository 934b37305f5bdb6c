"""Shared fixtures for the textmerge test suite."""

from __future__ import annotations

import pytest
from PyQt6.QtCore import QCoreApplication

from textmerge.core.models import ConflictSegment, ContentSegment


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def meeting_segments() -> list:
    return [
        ContentSegment("The meeting is on "),
        ConflictSegment("Monday", "Friday", "Versions differ here"),
        ContentSegment("."),
    ]
