"""
Shared pytest configuration for the notes manager test suite.

This file centralizes reusable testing utilities so that:
    • Note timestamps are controlled by a deterministic fake clock
    • File names get deterministic millisecond stamps
    • The external editor is replaced by an in-memory double
    • CLI tests use a fresh Typer CliRunner and a temp notes directory

All helpers here are intentionally simple and deterministic to ensure
stable test behavior across environments.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

import pytest
from typer.testing import CliRunner

from pnm.repository import NoteRepository

START_TIME = datetime(2024, 1, 15, 9, 30, 0)


# ============================================================================
# 1 — DETERMINISTIC TIME SOURCES
# ============================================================================


class FakeClock:
    """
    Clock double: every call returns the current value, then advances it by
    `step` seconds. Tests can also move time by assigning `.now`.
    """

    def __init__(self, start: datetime = START_TIME, step: int = 1) -> None:
        self.now = start
        self.step = timedelta(seconds=step)
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        value = self.now
        self.now = self.now + self.step
        return value


class FakeMillis:
    """Millisecond counter for file names: 1700000000000, ...001, ..."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.value = start

    def __call__(self) -> int:
        value = self.value
        self.value += 1
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def millis() -> FakeMillis:
    return FakeMillis()


# ============================================================================
# 2 — EDITOR DOUBLE
# ============================================================================


class FakeEditor:
    """
    In-memory stand-in for EditorService.

    Returns `result` (or the initial content unchanged when `result` is None)
    and records every call so tests can assert on what was opened.
    """

    def __init__(self, result: Optional[str] = None) -> None:
        self.result = result
        self.calls: List[tuple] = []

    def edit_content(self, initial_content: str, temp_file_name_hint: str) -> str:
        self.calls.append((initial_content, temp_file_name_hint))
        return initial_content if self.result is None else self.result


@pytest.fixture
def fake_editor() -> FakeEditor:
    return FakeEditor(result="Body written in the editor.")


# ============================================================================
# 3 — REPOSITORY + CLI FIXTURES
# ============================================================================


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    return tmp_path / "notes"


@pytest.fixture
def warning_messages() -> List[str]:
    return []


@pytest.fixture
def repository(notes_dir: Path, clock: FakeClock, millis: FakeMillis, warning_messages: List[str]) -> NoteRepository:
    """A repository on a temp directory with fake time and captured warnings."""
    return NoteRepository(notes_dir, clock=clock, millis=millis, warn=warning_messages.append)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


@pytest.fixture
def make_editor():
    """Build a FakeEditor returning the given text (None echoes the input)."""

    def _factory(result: Optional[str] = None) -> FakeEditor:
        return FakeEditor(result=result)

    return _factory
