"""
Error types raised by the Personal Notes Manager core.

Each class subclasses the builtin exception that already describes the
failure, so callers that only care about ValueError / OSError keep working.

    • NoteValidationError — a note failed is_valid() on save
    • NoteFormatError     — a note file could not be decoded
    • EditorError         — the external editor could not run or failed
"""


class NoteValidationError(ValueError):
    """Raised when saving a note that is missing a title or timestamps."""


class NoteFormatError(ValueError):
    """Raised when note text does not follow the header/body file format."""


class EditorError(OSError):
    """Raised when the external editor cannot be started or exits non-zero."""
