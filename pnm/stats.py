"""
Note statistics and text helpers.

Pure functions over loaded notes. Nothing here reads the filesystem; the CLI
loads notes through NoteRepository and passes them in.

Design goals:
    • Pure functions (no side effects)
    • Deterministic output (sorted tags, integer averages)
    • Easy to test without a notes directory
"""

from typing import List, Sequence

from pnm.note import Note
from pnm.types import NoteStats


def count_words(text: str) -> int:
    """Number of whitespace‑separated words; 0 for blank text."""
    return len(text.split())


def compute_stats(notes: Sequence[Note]) -> NoteStats:
    """
    Summarize a collection of notes.

    Rules:
        • unique_tags is the sorted set of all tags
        • average_words uses integer division and is 0 for no notes
        • notes_with_authors counts authors that are set and not blank
    """
    unique_tags: List[str] = sorted({tag for note in notes for tag in note.tags})
    total_words = sum(count_words(note.content) for note in notes)
    with_authors = sum(1 for note in notes if note.author and note.author.strip())

    return {
        "total_notes": len(notes),
        "unique_tags": unique_tags,
        "total_words": total_words,
        "average_words": total_words // len(notes) if notes else 0,
        "notes_with_authors": with_authors,
    }


def content_snippet(content: str, query: str, radius: int = 30) -> str:
    """
    Return the text around the first case‑insensitive hit of `query`.

    Example:
        content_snippet("... lots of text about python packaging ...", "python")
        -> "...lots of text about python packaging..."

    Returns "" when content is empty or does not contain the query.
    """
    if not content or not query:
        return ""

    index = content.lower().find(query.lower())
    if index == -1:
        return ""

    start = max(0, index - radius)
    end = min(len(content), index + len(query) + radius)
    return "..." + content[start:end].strip() + "..."
