"""
Encoder/decoder for `.note` files.

A note file is a delimited header block followed by free‑form content:

    ---
    title: Weekly Review
    created: 2024-03-01T09:30:00Z
    modified: 2024-03-01T10:02:41Z
    tags: [review, planning]
    author: Sam
    status: draft
    priority: 2
    ---

    Body text...

The header uses a YAML‑compatible subset: `key: value` pairs, flow lists
(`[a, b]`) or block lists (`- a`) for tags, plain / single‑quoted /
double‑quoted scalars. Only the seven known keys are read; anything else is
ignored. A generic YAML loader is deliberately not used: it would turn titles
like `yes` into booleans and timestamps into datetime objects, and the file
format must stay bit‑for‑bit stable.

Public surface:
    • encode_note(note) -> str
    • decode_note(text, file_path=None, clock=None) -> Note
"""

from datetime import datetime
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pnm.errors import NoteFormatError
from pnm.note import TIMESTAMP_FORMAT, Note
from pnm.types import Clock

DELIMITER = "---"

# Fixed key order used when writing the header.
HEADER_KEYS = ("title", "created", "modified", "tags", "author", "status", "priority")

_KEY_RE = re.compile(r"^(?P<key>[^\s:#'\"\-][^:]*?):(?:[ \t]+(?P<value>.*))?$")
_INT_RE = re.compile(r"^[-+]?\d+$")
_NUMBER_LIKE_RE = re.compile(
    r"^[-+]?(\d[\d_]*(\.\d*)?|\.\d+)([eE][-+]?\d+)?$|^[-+]?\.(inf|Inf|INF)$|^\.(nan|NaN|NAN)$"
)
_DATE_LIKE_RE = re.compile(r"^\d{4}-\d\d?-\d\d?")
# YAML 1.1 integer forms besides plain decimals: hex, octal, binary, base 60.
_YAML_INT_FORMS_RE = re.compile(
    r"^[-+]?(0x[0-9a-fA-F_]+|0o?[0-7_]+|0b[01_]+|[1-9][0-9_]*(:[0-5]?[0-9])+(\.[0-9_]*)?)$"
)
# Line separators YAML and str.splitlines() honour but the file format does not.
_UNICODE_BREAKS = {"\x85": "\\u0085", "\u2028": "\\u2028", "\u2029": "\\u2029"}
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_NULL_WORDS = {"", "~", "null", "Null", "NULL"}
_RESERVED_WORDS = {"null", "~", "true", "false", "yes", "no", "on", "off", "y", "n"}
_INDICATOR_CHARS = set("-?:,[]{}#&*!|>'\"%@`")
_FLOW_CHARS = set(",[]{}")


# ============================================================================
# 1 — SCALAR FORMATTING (WRITE SIDE)
# ============================================================================


def _needs_quotes(value: str, in_flow: bool = False) -> bool:
    """
    Return True when `value` would not read back as the same string if it
    were written as a plain YAML scalar.
    """
    if not value or value != value.strip():
        return True
    if any(ord(ch) < 32 or ord(ch) == 127 or ch in _UNICODE_BREAKS for ch in value):
        return True
    if value[0] in _INDICATOR_CHARS:
        return True
    if ": " in value or " #" in value or value.endswith(":"):
        return True
    if in_flow and any(ch in _FLOW_CHARS for ch in value):
        return True
    if value.lower() in _RESERVED_WORDS:
        return True
    return bool(
        _NUMBER_LIKE_RE.match(value)
        or _YAML_INT_FORMS_RE.match(value)
        or _DATE_LIKE_RE.match(value)
    )


def _format_scalar(value: Optional[str], in_flow: bool = False) -> str:
    if value is None:
        return "null"
    if _needs_quotes(value, in_flow):
        # JSON string escapes are a subset of YAML double-quoted escapes.
        # json.dumps leaves the Unicode line separators raw; escape them too.
        quoted = json.dumps(value, ensure_ascii=False)
        for char, escaped in _UNICODE_BREAKS.items():
            quoted = quoted.replace(char, escaped)
        return quoted
    return value


def _format_tags(tags: List[str]) -> str:
    return "[" + ", ".join(_format_scalar(tag, in_flow=True) for tag in tags) + "]"


# ============================================================================
# 2 — ENCODE A NOTE
# ============================================================================


def encode_note(note: Note) -> str:
    """
    Render `note` in the on‑disk format.

    Optional keys (tags, author, status, priority) are written only when set.
    Content follows after a blank line, and only when it is not blank.
    """
    lines = [
        DELIMITER,
        f"title: {_format_scalar(note.title)}",
        f"created: {note.formatted_created or 'null'}",
        f"modified: {note.formatted_modified or 'null'}",
    ]

    if note.tags:
        lines.append(f"tags: {_format_tags(note.tags)}")
    if note.author is not None:
        lines.append(f"author: {_format_scalar(note.author)}")
    if note.status is not None:
        lines.append(f"status: {_format_scalar(note.status)}")
    if note.priority is not None:
        lines.append(f"priority: {int(note.priority)}")

    lines.append(DELIMITER)

    text = "\n".join(lines) + "\n"
    if note.content.strip():
        text += "\n" + note.content
    return text


# ============================================================================
# 3 — SCALAR PARSING (READ SIDE)
# ============================================================================


def _check_trailing(rest: str, raw: str) -> None:
    rest = rest.strip()
    if rest and not rest.startswith("#"):
        raise NoteFormatError(f"Unexpected text after quoted value: {raw!r}")


def _scan_single_quoted(raw: str, start: int) -> Tuple[str, int]:
    """Parse a single‑quoted scalar starting at raw[start]; return (value, end)."""
    chars: List[str] = []
    i = start + 1
    while i < len(raw):
        ch = raw[i]
        if ch == "'":
            if i + 1 < len(raw) and raw[i + 1] == "'":
                chars.append("'")
                i += 2
                continue
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise NoteFormatError(f"Unterminated single-quoted value: {raw!r}")


def _scan_double_quoted(raw: str, start: int) -> Tuple[str, int]:
    """Parse a double‑quoted scalar starting at raw[start]; return (value, end)."""
    try:
        value, end = json.JSONDecoder().raw_decode(raw, start)
    except json.JSONDecodeError as e:
        raise NoteFormatError(f"Invalid double-quoted value: {raw!r}") from e
    if not isinstance(value, str):
        raise NoteFormatError(f"Invalid double-quoted value: {raw!r}")
    return value, end


def _parse_scalar(raw: str) -> Optional[str]:
    """
    Parse one header value into text.

    Returns None for empty / `~` / `null` values, which mean "unset".
    """
    raw = raw.strip()

    if raw.startswith('"'):
        value, end = _scan_double_quoted(raw, 0)
        _check_trailing(raw[end:], raw)
        return value

    if raw.startswith("'"):
        value, end = _scan_single_quoted(raw, 0)
        _check_trailing(raw[end:], raw)
        return value

    if raw.startswith("#"):
        return None
    comment = raw.find(" #")
    if comment >= 0:
        raw = raw[:comment].rstrip()

    if raw in _NULL_WORDS:
        return None
    return raw


def _parse_flow_list(raw: str) -> List[str]:
    """Parse `[a, "b, c", 'd']` into a list of strings."""
    items: List[str] = []
    i = 1
    n = len(raw)

    while True:
        while i < n and raw[i] in " \t":
            i += 1
        if i >= n:
            raise NoteFormatError(f"Unterminated list: {raw!r}")
        if raw[i] == "]":
            _check_trailing(raw[i + 1 :], raw)
            return items

        if raw[i] == '"':
            item, i = _scan_double_quoted(raw, i)
        elif raw[i] == "'":
            item, i = _scan_single_quoted(raw, i)
        else:
            end = i
            while end < n and raw[end] not in ",]":
                end += 1
            plain = _parse_scalar(raw[i:end])
            i = end
            if plain is None:
                # Empty slot such as "[a, , b]"; YAML reads it as null.
                if i < n and raw[i] == ",":
                    i += 1
                continue
            item = plain

        items.append(item)

        while i < n and raw[i] in " \t":
            i += 1
        if i < n and raw[i] == ",":
            i += 1
        elif i >= n or raw[i] != "]":
            raise NoteFormatError(f"Malformed list: {raw!r}")


def _parse_tags(raw: str) -> List[str]:
    raw = raw.strip()
    if raw.startswith("["):
        return _parse_flow_list(raw)
    value = _parse_scalar(raw)
    if value is None:
        return []
    # A bare scalar is accepted as a comma‑separated list.
    return [t.strip() for t in value.split(",") if t.strip()]


def _parse_timestamp(key: str, raw: Optional[str]) -> Optional[datetime]:
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise NoteFormatError(f"Invalid {key} timestamp: {raw!r}") from e


def _parse_priority(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    if not _INT_RE.match(raw):
        raise NoteFormatError(f"Priority must be an integer: {raw!r}")
    try:
        return int(raw)
    except ValueError as e:
        raise NoteFormatError(f"Priority is not a usable integer: {raw[:20]!r}...") from e


# ============================================================================
# 4 — HEADER BLOCK
# ============================================================================


def parse_header(lines: List[str]) -> Dict[str, Any]:
    """
    Parse the lines between the two delimiters into a dict of known keys.

    Values are already typed: str / None for scalars, list[str] for tags,
    raw text for timestamps and priority (converted by decode_note).
    Block lists are only meaningful under `tags`; indented or `- ` lines that
    belong to an unknown key are skipped together with that key.
    """
    header: Dict[str, Any] = {}
    current_key: Optional[str] = None

    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        is_continuation = line[0] in " \t" or stripped == "-" or stripped.startswith("- ")
        if is_continuation:
            if current_key is None:
                raise NoteFormatError(f"Unexpected header line: {line!r}")
            if current_key not in HEADER_KEYS:
                continue
            if current_key == "tags" and stripped.startswith("-"):
                item = _parse_scalar(stripped[1:])
                if item is not None:
                    header["tags"].append(item)
                continue
            raise NoteFormatError(f"Unexpected header line: {line!r}")

        match = _KEY_RE.match(line)
        if not match:
            raise NoteFormatError(f"Invalid header line: {line!r}")

        key = match.group("key").strip()
        raw_value = match.group("value") or ""
        current_key = key

        if key not in HEADER_KEYS:
            continue
        if key == "tags":
            header["tags"] = _parse_tags(raw_value)
        else:
            header[key] = _parse_scalar(raw_value)

    return header


# ============================================================================
# 5 — DECODE A NOTE
# ============================================================================


def decode_note(
    text: str,
    file_path: Optional[Path] = None,
    clock: Optional[Clock] = None,
) -> Note:
    """
    Parse note file text into a Note.

    Raises
    ------
    NoteFormatError
        If the first line is not the opening delimiter, if no closing
        delimiter follows, or if a header value is malformed.
    """
    # Only \n, \r\n and \r end a line; other Unicode separators are content.
    lines = _LINE_BREAK_RE.split(text.lstrip("\ufeff"))

    if not lines or lines[0] != DELIMITER:
        raise NoteFormatError("Invalid note format - missing opening delimiter")

    end_index = next(
        (i for i in range(1, len(lines)) if lines[i].strip() == DELIMITER),
        None,
    )
    if end_index is None:
        raise NoteFormatError("Invalid note format - missing closing delimiter")

    header = parse_header(lines[1:end_index])
    content = "\n".join(lines[end_index + 1 :]).strip()

    created = _parse_timestamp("created", header.get("created"))
    modified = _parse_timestamp("modified", header.get("modified"))

    note = Note(
        header.get("title"),
        content,
        created=created,
        modified=modified,
        tags=header.get("tags"),
        author=header.get("author"),
        status=header.get("status"),
        priority=_parse_priority(header.get("priority")),
        file_path=file_path,
        clock=clock,
    )
    # Missing timestamps stay missing instead of being stamped with "now".
    note.created = created
    note.modified = modified
    return note
