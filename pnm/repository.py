"""
NoteRepository: the only component that touches the notes directory.

Every query re‑reads every `.note` file and scans linearly. There is no
index and no cache; the directory on disk is the single source of truth.

Enumeration order is the sorted file name order, so `find()` and listings
are deterministic across platforms.

Partial‑failure policy:
    A file that cannot be read or decoded is skipped and reported through
    the warning sink. One corrupt note never prevents listing the rest.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional, Union

from pnm.config import NOTE_SUFFIX
from pnm.errors import NoteFormatError, NoteValidationError
from pnm.logging_utils import log_warning
from pnm.note import Note, slugify_title
from pnm.parsers.note_file import decode_note, encode_note
from pnm.types import Clock, MillisClock, WarningSink

# Upper bound on the title part of a generated file name.
MAX_SLUG_LENGTH = 50


def system_millis() -> int:
    return time.time_ns() // 1_000_000


class NoteRepository:
    """CRUD and query operations over a directory of `.note` files."""

    def __init__(
        self,
        notes_dir: Union[str, Path],
        *,
        clock: Optional[Clock] = None,
        millis: Optional[MillisClock] = None,
        warn: Optional[WarningSink] = None,
    ) -> None:
        self.notes_dir = Path(notes_dir)
        self._clock = clock
        self._millis: MillisClock = millis or system_millis
        self._warn: WarningSink = warn or log_warning

        # Warnings produced by the most recent list_all() call.
        self.warnings: List[str] = []

        try:
            self.notes_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Failed to create notes directory: {self.notes_dir}") from e

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def note_files(self) -> List[Path]:
        """All note files in the directory, sorted by file name."""
        if not self.notes_dir.exists():
            return []
        return sorted(
            (p for p in self.notes_dir.iterdir() if p.is_file() and p.name.endswith(NOTE_SUFFIX)),
            key=lambda p: p.name,
        )

    def load(self, path: Path) -> Note:
        """
        Read and decode a single note file.

        Raises
        ------
        OSError
            If the file cannot be read.
        NoteFormatError
            If the file is not a valid note.
        """
        text = path.read_text(encoding="utf-8")
        return decode_note(text, file_path=path, clock=self._clock)

    def list_all(self) -> List[Note]:
        """Decode every note file, skipping (and reporting) broken ones."""
        self.warnings = []
        notes: List[Note] = []

        for path in self.note_files():
            try:
                notes.append(self.load(path))
            except (OSError, UnicodeDecodeError, NoteFormatError) as e:
                message = f"Could not read note file {path}: {e}"
                self.warnings.append(message)
                self._warn(message)

        return notes

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def filter_by_tag(self, tag: str) -> List[Note]:
        return [note for note in self.list_all() if note.has_tag(tag)]

    def find(self, identifier: str) -> Optional[Note]:
        """
        Look up a note by exact ID, then by case‑insensitive title substring.

        The first match in enumeration order wins. Returns None when neither
        pass matches.
        """
        notes = self.list_all()

        for note in notes:
            if note.id == identifier:
                return note

        needle = identifier.lower()
        for note in notes:
            if needle in (note.title or "").lower():
                return note

        return None

    def search(
        self,
        query: str,
        title_only: bool = False,
        content_only: bool = False,
    ) -> List[Note]:
        """
        Case‑insensitive substring search.

        title_only searches titles, content_only searches bodies; otherwise a
        hit in the title, the content, any tag, or the author qualifies.
        title_only wins if both flags are set.
        """
        needle = query.lower()
        return [
            note
            for note in self.list_all()
            if _matches(note, needle, title_only, content_only)
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def file_name_for(self, title: str) -> str:
        """
        Build `<slug>-<milliseconds>.note` for a title.

        The slug is cut to min(len(title), 50) characters; slicing clamps to
        the filtered slug's own length.
        """
        slug = slugify_title(title)[: min(len(title), MAX_SLUG_LENGTH)]
        return f"{slug or 'note'}-{self._millis()}{NOTE_SUFFIX}"

    def save(self, note: Note) -> Path:
        """
        Write `note` to a new file in the notes directory.

        Raises
        ------
        NoteValidationError
            If the note has no title or is missing its timestamps. Nothing is
            written in that case.
        """
        if not note.is_valid():
            raise NoteValidationError("Note is not valid: a title and timestamps are required")

        path = self.notes_dir / self.file_name_for(note.title or "")
        path.write_text(encode_note(note), encoding="utf-8")
        note.file_path = path
        return path

    def delete(self, note: Note) -> bool:
        """Delete the note's backing file. False if there is nothing to delete."""
        if note.file_path is None:
            return False
        path = Path(note.file_path)
        if not path.exists():
            return False
        path.unlink()
        return True

    def replace(self, note: Note) -> Path:
        """
        Rewrite an edited note: drop its old file, then save a fresh one.

        The new file name carries a new millisecond stamp; the note ID is
        unchanged because `created` is unchanged.
        """
        self.delete(note)
        return self.save(note)


def _matches(note: Note, needle: str, title_only: bool, content_only: bool) -> bool:
    title = (note.title or "").lower()
    if title_only:
        return needle in title

    content = note.content.lower()
    if content_only:
        return needle in content

    return (
        needle in title
        or needle in content
        or any(needle in tag.lower() for tag in note.tags)
        or (note.author is not None and needle in note.author.lower())
    )
