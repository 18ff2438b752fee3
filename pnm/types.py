"""
pnm/types.py

Centralized type definitions for the Personal Notes Manager.

This module defines the TypedDicts and Protocols shared by the note entity,
the repository, the editor collaborator, and the test doubles. Keeping these
types in one place gives:

    • A single source of truth for injected capabilities (clocks, editors)
    • Clear contracts between the CLI, the repository, and the serializer
    • Easy substitution of deterministic doubles in tests
"""

from datetime import datetime
from typing import List, Protocol, TypedDict


# ---------------------------------------------------------------------------
# NoteStats
# ---------------------------------------------------------------------------
# Summary returned by pnm.stats.compute_stats() and printed by `notes stats`.
#
# The CLI prints these fields verbatim, and tests assert on exact values, so
# every field is always present.
# ---------------------------------------------------------------------------
class NoteStats(TypedDict):
    total_notes: int
    unique_tags: List[str]
    total_words: int
    average_words: int
    notes_with_authors: int


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------
# Source of "now" for Note mutators. Every setter on Note bumps `modified`
# from this callable, so tests inject a fake clock instead of sleeping.
# ---------------------------------------------------------------------------
class Clock(Protocol):
    def __call__(self) -> datetime: ...


# ---------------------------------------------------------------------------
# MillisClock
# ---------------------------------------------------------------------------
# Source of the millisecond timestamp embedded in note file names.
# ---------------------------------------------------------------------------
class MillisClock(Protocol):
    def __call__(self) -> int: ...


# ---------------------------------------------------------------------------
# WarningSink
# ---------------------------------------------------------------------------
# Receives human-readable warnings for non-fatal problems (e.g. a corrupt
# note file skipped during listing). The default sink prints to stderr via
# pnm.logging_utils.log_warning; tests pass `list.append`.
# ---------------------------------------------------------------------------
class WarningSink(Protocol):
    def __call__(self, message: str) -> None: ...


# ---------------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------------
# Structural interface for the external editor collaborator.
#
# The real implementation (pnm.editor.EditorService) spawns a subprocess and
# blocks until the user closes the editor. Any object with a compatible
# edit_content() method is accepted, including the FakeEditor used in tests.
# ---------------------------------------------------------------------------
class Editor(Protocol):
    def edit_content(self, initial_content: str, temp_file_name_hint: str) -> str:
        """
        Let the user edit `initial_content` and return the final text.
        """
        ...
