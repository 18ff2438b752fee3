"""
Root entrypoint for the Personal Notes Manager CLI.

This module defines the top‑level `notes` command and its subcommands:

    • notes create [--title T] [--tag t1,t2] [--author A] [--status S] [--priority N]
    • notes list [--tag T]
    • notes read <id-or-title>
    • notes edit <id-or-title>
    • notes delete <id-or-title> [--force]
    • notes search <query> [--content | --title]
    • notes stats

The commands stay thin: lookups, persistence and search are delegated to
NoteRepository, editing to an Editor collaborator, and rendering to
pnm/cli/display.py. Every reported error exits with code 1.

Dependency injection
--------------------
The root callback stores settings in `ctx.obj`. Callers (tests) may
pre‑populate `ctx.obj` with:

    • "editor" — any object implementing pnm.types.Editor
    • "clock"  — a callable returning the current datetime
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from pnm import __version__
from pnm.config import APP_NAME, get_notes_dir
from pnm.editor import EditorService
from pnm.errors import NoteValidationError
from pnm.logging_utils import log_error, log_verbose
from pnm.note import Note
from pnm.repository import NoteRepository, system_millis
from pnm.stats import compute_stats
from pnm.types import Editor

from .display import (
    render_note_detail,
    render_note_list,
    render_search_results,
    render_stats,
)

NO_NOTES_MESSAGE = f"No notes found. Create your first note with '{APP_NAME} create'"

# ---------------------------------------------------------------------------
# Root CLI application
# ---------------------------------------------------------------------------
cli = typer.Typer(
    name=APP_NAME,
    help=(
        "Personal Notes Manager - a command-line tool for managing notes "
        "with a structured metadata header.\n\n"
        "Notes are stored one per file in the notes directory "
        "(--notes-dir, or NOTES_DIR from the environment / .env)."
    ),
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {__version__}")
        raise typer.Exit()


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    notes_dir: Optional[Path] = typer.Option(
        None,
        "--notes-dir",
        envvar="NOTES_DIR",
        file_okay=False,
        help="Directory holding the .note files.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show high‑level progress messages.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """
    Personal Notes Manager - create, list, read, edit, delete, search and
    summarize notes.
    """
    ctx.ensure_object(dict)
    ctx.obj["notes_dir"] = notes_dir or get_notes_dir()
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Helpers shared by the commands
# ---------------------------------------------------------------------------
def _settings(ctx: typer.Context) -> Dict[str, Any]:
    return ctx.ensure_object(dict)


def _repository(ctx: typer.Context) -> NoteRepository:
    settings = _settings(ctx)
    notes_dir = settings["notes_dir"]
    log_verbose(f"Using notes directory: {notes_dir}", settings["verbose"])
    try:
        return NoteRepository(notes_dir, clock=settings.get("clock"))
    except OSError as e:
        log_error(str(e))
        raise typer.Exit(code=1)


def _editor(ctx: typer.Context) -> Editor:
    return _settings(ctx).get("editor") or EditorService()


def _find_or_exit(repository: NoteRepository, identifier: str) -> Note:
    try:
        note = repository.find(identifier)
    except OSError as e:
        log_error(f"Error reading notes: {e}")
        raise typer.Exit(code=1)

    if note is None:
        log_error(f"Note not found: {identifier}")
        raise typer.Exit(code=1)
    return note


def _split_tags(values: Optional[List[str]]) -> List[str]:
    """Flatten `--tag a,b --tag c` into ["a", "b", "c"]."""
    tags: List[str] = []
    for value in values or []:
        tags.extend(t.strip() for t in value.split(",") if t.strip())
    return tags


def _echo_lines(lines: List[str]) -> None:
    for line in lines:
        typer.echo(line)


# ---------------------------------------------------------------------------
# notes create
# ---------------------------------------------------------------------------
@cli.command("create")
def create_note(
    ctx: typer.Context,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Note title."),
    tag: Optional[List[str]] = typer.Option(
        None,
        "--tag",
        help="Tags to add; comma-separated and/or repeated.",
    ),
    author: Optional[str] = typer.Option(None, "--author", help="Note author."),
    status: Optional[str] = typer.Option(None, "--status", help="Note status (e.g. draft)."),
    priority: Optional[int] = typer.Option(None, "--priority", help="Integer priority."),
) -> None:
    """Create a new note and open it in your editor."""
    settings = _settings(ctx)

    if title is None or not title.strip():
        title = typer.prompt("Enter note title", default="", show_default=False).strip()
        title = title or "Untitled Note"
    title = title.strip()

    repository = _repository(ctx)

    note = Note(
        title,
        "",
        author=author,
        status=status,
        priority=priority,
        clock=settings.get("clock"),
    )
    for name in _split_tags(tag):
        note.add_tag(name)

    try:
        initial_content = f"# {title}\n\nWrite your note content here...\n"
        hint = f"note-{system_millis()}"
        content = _editor(ctx).edit_content(initial_content, hint)

        # Leave the body empty when the template was not touched.
        if content != initial_content:
            note.content = content

        path = repository.save(note)
    except (NoteValidationError, OSError) as e:
        log_error(f"Error creating note: {e}")
        raise typer.Exit(code=1)

    log_verbose(f"Wrote {path}", settings["verbose"])
    typer.echo(f"Note created successfully: {note.title}")
    typer.echo(f"ID: {note.id}")


# ---------------------------------------------------------------------------
# notes list
# ---------------------------------------------------------------------------
@cli.command("list")
def list_notes(
    ctx: typer.Context,
    tag: Optional[str] = typer.Option(None, "--tag", help="Only show notes with this tag."),
) -> None:
    """List all notes, or only those carrying a tag."""
    repository = _repository(ctx)

    try:
        notes = repository.filter_by_tag(tag) if tag is not None else repository.list_all()
    except OSError as e:
        log_error(f"Error reading notes: {e}")
        raise typer.Exit(code=1)

    if not notes:
        typer.echo(f"No notes found with tag: {tag}" if tag is not None else NO_NOTES_MESSAGE)
        return

    _echo_lines(render_note_list(notes, tag))


# ---------------------------------------------------------------------------
# notes read
# ---------------------------------------------------------------------------
@cli.command("read")
def read_note(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Note ID or part of its title."),
) -> None:
    """Display a note's metadata and content."""
    note = _find_or_exit(_repository(ctx), identifier)
    _echo_lines(render_note_detail(note))


# ---------------------------------------------------------------------------
# notes edit
# ---------------------------------------------------------------------------
@cli.command("edit")
def edit_note(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Note ID or part of its title."),
) -> None:
    """Edit a note's content in your editor."""
    repository = _repository(ctx)
    note = _find_or_exit(repository, identifier)

    current_content = note.content or f"# {note.title}\n\n"

    try:
        new_content = _editor(ctx).edit_content(current_content, f"edit-{note.id}")

        if new_content == current_content:
            typer.echo(f"No changes made to: {note.title}")
            return

        note.content = new_content
        path = repository.replace(note)
    except (NoteValidationError, OSError) as e:
        log_error(f"Error editing note: {e}")
        raise typer.Exit(code=1)

    log_verbose(f"Wrote {path}", _settings(ctx)["verbose"])
    typer.echo(f"Note updated: {note.title}")


# ---------------------------------------------------------------------------
# notes delete
# ---------------------------------------------------------------------------
@cli.command("delete")
def delete_note(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Note ID or part of its title."),
    force: bool = typer.Option(False, "--force", "-f", help="Delete without confirmation."),
) -> None:
    """Delete a note."""
    repository = _repository(ctx)
    note = _find_or_exit(repository, identifier)

    if not force:
        typer.echo(f"About to delete note: {note.title}")
        if not typer.confirm("Are you sure?", default=False):
            typer.echo("Deletion cancelled")
            return

    try:
        deleted = repository.delete(note)
    except OSError as e:
        log_error(f"Error deleting note: {e}")
        raise typer.Exit(code=1)

    if not deleted:
        log_error("Failed to delete note file")
        raise typer.Exit(code=1)

    typer.echo(f"Note deleted: {note.title}")


# ---------------------------------------------------------------------------
# notes search
# ---------------------------------------------------------------------------
@cli.command("search")
def search_notes(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to look for (case-insensitive)."),
    content_only: bool = typer.Option(False, "--content", "-c", help="Search in content only."),
    title_only: bool = typer.Option(False, "--title", "-t", help="Search in titles only."),
) -> None:
    """Search notes by title, content, tags or author."""
    repository = _repository(ctx)

    try:
        results = repository.search(query, title_only=title_only, content_only=content_only)
    except OSError as e:
        log_error(f"Error searching notes: {e}")
        raise typer.Exit(code=1)

    if not results:
        typer.echo(f"No notes found matching: {query}")
        return

    _echo_lines(render_search_results(results, query))


# ---------------------------------------------------------------------------
# notes stats
# ---------------------------------------------------------------------------
@cli.command("stats")
def show_stats(ctx: typer.Context) -> None:
    """Display statistics about your notes."""
    repository = _repository(ctx)

    try:
        notes = repository.list_all()
    except OSError as e:
        log_error(f"Error reading notes: {e}")
        raise typer.Exit(code=1)

    if not notes:
        typer.echo(NO_NOTES_MESSAGE)
        return

    _echo_lines(render_stats(compute_stats(notes)))


# ---------------------------------------------------------------------------
# Entry point for `python -m pnm.cli.main`
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    cli()
