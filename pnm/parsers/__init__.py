"""
Public API for the note file format.

Callers should import from here rather than reaching into the submodule:

    from pnm.parsers import encode_note, decode_note
"""

from .note_file import decode_note, encode_note

__all__ = [
    "decode_note",
    "encode_note",
]
