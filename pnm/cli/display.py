"""
Text rendering for the notes CLI.

Every function here returns plain strings; the commands in pnm/cli/main.py
decide where to echo them. Keeping rendering separate from the commands makes
the output easy to assert on in tests.
"""

from typing import List, Optional, Sequence

from pnm.note import Note
from pnm.stats import content_snippet
from pnm.types import NoteStats

LIST_RULE = "─" * 50
DETAIL_RULE = "═" * 60
STATS_RULE = "═" * 40


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_tags(tags: Sequence[str]) -> str:
    return "[" + ", ".join(tags) + "]" if tags else ""


def note_row(note: Note) -> str:
    """One line of a listing: padded title followed by its tags."""
    title = truncate(note.title or "", 28)
    return f"{title:<30} {format_tags(note.tags)}".rstrip()


# ---------------------------------------------------------------------------
# notes list
# ---------------------------------------------------------------------------
def render_note_list(notes: Sequence[Note], tag: Optional[str] = None) -> List[str]:
    lines = [f"Notes with tag '{tag}':" if tag is not None else "All notes:", LIST_RULE]
    lines.extend(note_row(note) for note in notes)
    lines.append(LIST_RULE)
    lines.append(f"Total: {len(notes)} notes")
    return lines


# ---------------------------------------------------------------------------
# notes read
# ---------------------------------------------------------------------------
def render_note_detail(note: Note) -> List[str]:
    lines = [
        DETAIL_RULE,
        f"Title: {note.title or ''}",
        f"Created: {note.formatted_created or ''}",
        f"Modified: {note.formatted_modified or ''}",
    ]
    if note.tags:
        lines.append("Tags: " + ", ".join(note.tags))
    if note.author is not None:
        lines.append(f"Author: {note.author}")
    if note.status is not None:
        lines.append(f"Status: {note.status}")
    if note.priority is not None:
        lines.append(f"Priority: {note.priority}")
    lines.extend([DETAIL_RULE, "", note.content, ""])
    return lines


# ---------------------------------------------------------------------------
# notes search
# ---------------------------------------------------------------------------
def render_search_results(notes: Sequence[Note], query: str) -> List[str]:
    lines = [f"Search results for '{query}':", LIST_RULE]
    for note in notes:
        lines.append(note_row(note))
        snippet = content_snippet(note.content, query)
        if snippet:
            lines.append("  " + snippet)
        lines.append("")
    lines.append(LIST_RULE)
    lines.append(f"Found {len(notes)} notes")
    return lines


# ---------------------------------------------------------------------------
# notes stats
# ---------------------------------------------------------------------------
def render_stats(stats: NoteStats) -> List[str]:
    lines = [
        "Notes Statistics",
        STATS_RULE,
        f"Total notes: {stats['total_notes']}",
        f"Unique tags: {len(stats['unique_tags'])}",
    ]
    if stats["unique_tags"]:
        lines.append("Tags: " + ", ".join(stats["unique_tags"]))
    lines.append(f"Total words: {stats['total_words']}")
    lines.append(f"Average words per note: {stats['average_words']}")
    if stats["notes_with_authors"] > 0:
        lines.append(f"Notes with authors: {stats['notes_with_authors']}")
    return lines
