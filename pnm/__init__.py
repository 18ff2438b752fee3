"""
Personal Notes Manager.

Public API surface for the note entity, the on-disk format, and the
repository. The `notes` command-line tool lives in pnm/cli/main.py.
"""

from .note import Note
from .repository import NoteRepository

__version__ = "1.0.0"

__all__ = [
    "Note",
    "NoteRepository",
    "__version__",
]
