"""
Core Note entity.

A Note is pure data plus a few derived values (identifier, validity,
formatted timestamps). It never touches the filesystem; reading and writing
happens in pnm.repository via pnm.parsers.note_file.

Mutation contract
-----------------
Assigning title, tags, author, status, priority, or content (and calling
add_tag / remove_tag) stamps `modified` with the current time. The time
comes from an injectable clock so tests can control it. Assigning created,
modified, or file_path is not a mutation and leaves `modified` alone.
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from pnm.types import Clock

# Stamped as-is onto whatever wall-clock value is stored. No UTC conversion.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_NON_SLUG_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def system_clock() -> datetime:
    """Local wall-clock time truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def slugify_title(title: str) -> str:
    """
    Lowercase `title`, drop everything outside [a-z0-9\\s], and collapse
    whitespace runs into single hyphens.

    Shared by the note identifier and the repository's file names.
    """
    cleaned = _NON_SLUG_RE.sub("", title.lower())
    return _WHITESPACE_RE.sub("-", cleaned)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def _dedupe(tags: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(tags))


class Note:
    """A single user note: metadata header fields plus a free-form body."""

    def __init__(
        self,
        title: Optional[str] = None,
        content: Optional[str] = "",
        *,
        created: Optional[datetime] = None,
        modified: Optional[datetime] = None,
        tags: Optional[Iterable[str]] = None,
        author: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[int] = None,
        file_path: Optional[Path] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._clock: Clock = clock or system_clock
        now = self._clock()

        self._title = title
        self._content = content if content is not None else ""
        self._created: Optional[datetime] = created if created is not None else now
        self._modified: Optional[datetime] = modified if modified is not None else now
        self._tags: List[str] = _dedupe(tags or [])
        self._author = author
        self._status = status
        self._priority = priority
        self.file_path: Optional[Path] = Path(file_path) if file_path is not None else None

    # ------------------------------------------------------------------
    # Mutated fields (each assignment bumps `modified`)
    # ------------------------------------------------------------------

    @property
    def title(self) -> Optional[str]:
        return self._title

    @title.setter
    def title(self, value: Optional[str]) -> None:
        self._title = value
        self._touch()

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: Optional[str]) -> None:
        self._content = value if value is not None else ""
        self._touch()

    @property
    def tags(self) -> List[str]:
        """A copy of the tag list; use add_tag/remove_tag or assign to change it."""
        return list(self._tags)

    @tags.setter
    def tags(self, value: Optional[Iterable[str]]) -> None:
        self._tags = _dedupe(value or [])
        self._touch()

    @property
    def author(self) -> Optional[str]:
        return self._author

    @author.setter
    def author(self, value: Optional[str]) -> None:
        self._author = value
        self._touch()

    @property
    def status(self) -> Optional[str]:
        return self._status

    @status.setter
    def status(self, value: Optional[str]) -> None:
        self._status = value
        self._touch()

    @property
    def priority(self) -> Optional[int]:
        return self._priority

    @priority.setter
    def priority(self, value: Optional[int]) -> None:
        self._priority = value
        self._touch()

    # ------------------------------------------------------------------
    # Timestamps (plain assignment, no bump)
    # ------------------------------------------------------------------

    @property
    def created(self) -> Optional[datetime]:
        return self._created

    @created.setter
    def created(self, value: Optional[datetime]) -> None:
        self._created = value

    @property
    def modified(self) -> Optional[datetime]:
        return self._modified

    @modified.setter
    def modified(self, value: Optional[datetime]) -> None:
        self._modified = value

    @property
    def formatted_created(self) -> Optional[str]:
        return format_timestamp(self._created)

    @property
    def formatted_modified(self) -> Optional[str]:
        return format_timestamp(self._modified)

    def _touch(self) -> None:
        self._modified = self._clock()

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def add_tag(self, tag: str) -> None:
        """Append `tag` unless it is already present (then nothing changes)."""
        if tag in self._tags:
            return
        self._tags.append(tag)
        self._touch()

    def remove_tag(self, tag: str) -> None:
        """Remove `tag` if present. `modified` is bumped either way."""
        if tag in self._tags:
            self._tags.remove(tag)
        self._touch()

    def has_tag(self, tag: str) -> bool:
        return tag in self._tags

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def id(self) -> Optional[str]:
        """
        Identifier derived from the title slug and the creation time as
        epoch seconds (the stored wall-clock value is read as UTC).

        None when either the title or the creation time is missing. Two notes
        with the same title created in the same second share an ID.
        """
        if self._title is None or self._created is None:
            return None
        epoch_seconds = calendar.timegm(self._created.timetuple())
        return f"{slugify_title(self._title)}-{epoch_seconds}"

    def is_valid(self) -> bool:
        return (
            self._title is not None
            and bool(self._title.strip())
            and self._created is not None
            and self._modified is not None
        )

    # ------------------------------------------------------------------
    # Equality is (title, created, content) only
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Note):
            return NotImplemented
        return (
            self._title == other._title
            and self._created == other._created
            and self._content == other._content
        )

    def __hash__(self) -> int:
        return hash((self._title, self._created, self._content))

    def __repr__(self) -> str:
        return (
            f"Note(title={self._title!r}, created={self.formatted_created!r}, "
            f"tags={self._tags!r}, status={self._status!r})"
        )
