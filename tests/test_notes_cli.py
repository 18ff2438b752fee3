# tests/test_notes_cli.py
"""
CLI tests for the `notes` command.

Every test runs the real Typer app through CliRunner against a temp notes
directory. The external editor and the clock are injected through `obj`, so
no editor process is launched and timestamps are deterministic.
"""

from pnm.cli.main import NO_NOTES_MESSAGE, cli
from pnm.repository import NoteRepository


def run(cli_runner, notes_dir, args, editor=None, clock=None, input=None):
    obj = {"editor": editor, "clock": clock}
    return cli_runner.invoke(cli, ["--notes-dir", str(notes_dir), *args], obj=obj, input=input)


def create(cli_runner, notes_dir, clock, editor, title, *extra):
    result = run(cli_runner, notes_dir, ["create", "--title", title, *extra], editor=editor, clock=clock)
    assert result.exit_code == 0, result.output
    return result


# ---------------------------------------------------------------------------
# 1. Root command
# ---------------------------------------------------------------------------
def test_no_arguments_prints_help(cli_runner):
    result = cli_runner.invoke(cli, [])

    assert result.exit_code == 0
    assert "Personal Notes Manager" in result.output
    assert "Usage" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "1.0.0" in result.output


# ---------------------------------------------------------------------------
# 2. create
# ---------------------------------------------------------------------------
def test_create_writes_note_file(cli_runner, notes_dir, clock, fake_editor):
    result = create(
        cli_runner,
        notes_dir,
        clock,
        fake_editor,
        "Test Note",
        "--tag",
        "work, ideas",
        "--tag",
        "extra",
        "--author",
        "Sam",
        "--priority",
        "2",
    )

    assert "Note created successfully: Test Note" in result.output
    assert "ID: test-note-" in result.output

    notes = NoteRepository(notes_dir).list_all()
    assert len(notes) == 1
    note = notes[0]
    assert note.content == "Body written in the editor."
    assert note.tags == ["work", "ideas", "extra"]
    assert note.author == "Sam"
    assert note.priority == 2

    initial, hint = fake_editor.calls[0]
    assert initial == "# Test Note\n\nWrite your note content here...\n"
    assert hint.startswith("note-")


def test_create_with_untouched_template_saves_empty_body(cli_runner, notes_dir, clock, make_editor):
    create(cli_runner, notes_dir, clock, make_editor(None), "Blank")

    assert NoteRepository(notes_dir).list_all()[0].content == ""


def test_create_prompts_for_missing_title(cli_runner, notes_dir, clock, fake_editor):
    result = run(cli_runner, notes_dir, ["create"], editor=fake_editor, clock=clock, input="Prompted Title\n")

    assert result.exit_code == 0, result.output
    assert "Note created successfully: Prompted Title" in result.output


def test_create_blank_prompt_uses_default_title(cli_runner, notes_dir, clock, fake_editor):
    result = run(cli_runner, notes_dir, ["create"], editor=fake_editor, clock=clock, input="\n")

    assert result.exit_code == 0, result.output
    assert "Note created successfully: Untitled Note" in result.output


# ---------------------------------------------------------------------------
# 3. list / read
# ---------------------------------------------------------------------------
def test_list_empty_directory(cli_runner, notes_dir):
    result = run(cli_runner, notes_dir, ["list"])

    assert result.exit_code == 0
    assert NO_NOTES_MESSAGE in result.output


def test_list_and_filter_by_tag(cli_runner, notes_dir, clock, fake_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Alpha", "--tag", "work")
    create(cli_runner, notes_dir, clock, fake_editor, "Beta", "--tag", "home")

    result = run(cli_runner, notes_dir, ["list"])
    assert result.exit_code == 0
    assert "All notes:" in result.output
    assert "Alpha" in result.output and "Beta" in result.output
    assert "Total: 2 notes" in result.output

    result = run(cli_runner, notes_dir, ["list", "--tag", "work"])
    assert "Notes with tag 'work':" in result.output
    assert "Alpha" in result.output
    assert "Beta" not in result.output
    assert "Total: 1 notes" in result.output

    result = run(cli_runner, notes_dir, ["list", "--tag", "missing"])
    assert result.exit_code == 0
    assert "No notes found with tag: missing" in result.output


def test_read_shows_metadata_and_content(cli_runner, notes_dir, clock, fake_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Reading List", "--tag", "books", "--status", "draft")

    result = run(cli_runner, notes_dir, ["read", "reading"])

    assert result.exit_code == 0
    assert "Title: Reading List" in result.output
    assert "Created: 2024-01-15T09:30:00Z" in result.output
    assert "Tags: books" in result.output
    assert "Status: draft" in result.output
    assert "Author:" not in result.output
    assert "Body written in the editor." in result.output


def test_read_missing_note_fails(cli_runner, notes_dir):
    result = run(cli_runner, notes_dir, ["read", "nothing-here"])

    assert result.exit_code == 1
    assert "Note not found: nothing-here" in result.output


# ---------------------------------------------------------------------------
# 4. edit
# ---------------------------------------------------------------------------
def test_edit_saves_changed_content(cli_runner, notes_dir, clock, fake_editor, make_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Draft")

    result = run(cli_runner, notes_dir, ["edit", "Draft"], editor=make_editor("Rewritten body"), clock=clock)

    assert result.exit_code == 0, result.output
    assert "Note updated: Draft" in result.output
    notes = NoteRepository(notes_dir).list_all()
    assert len(notes) == 1
    assert notes[0].content == "Rewritten body"


def test_edit_without_changes(cli_runner, notes_dir, clock, fake_editor, make_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Stable")
    before = sorted(p.name for p in notes_dir.iterdir())

    result = run(cli_runner, notes_dir, ["edit", "Stable"], editor=make_editor(None), clock=clock)

    assert result.exit_code == 0
    assert "No changes made to: Stable" in result.output
    assert sorted(p.name for p in notes_dir.iterdir()) == before


def test_edit_missing_note_fails(cli_runner, notes_dir, fake_editor):
    result = run(cli_runner, notes_dir, ["edit", "ghost"], editor=fake_editor)

    assert result.exit_code == 1
    assert "Note not found: ghost" in result.output
    assert fake_editor.calls == []


# ---------------------------------------------------------------------------
# 5. delete
# ---------------------------------------------------------------------------
def test_delete_with_force(cli_runner, notes_dir, clock, fake_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Old Note")

    result = run(cli_runner, notes_dir, ["delete", "old note", "--force"])

    assert result.exit_code == 0
    assert "Note deleted: Old Note" in result.output
    assert list(notes_dir.iterdir()) == []


def test_delete_cancelled_at_prompt(cli_runner, notes_dir, clock, fake_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Keep Me")

    result = run(cli_runner, notes_dir, ["delete", "Keep"], input="n\n")

    assert result.exit_code == 0
    assert "About to delete note: Keep Me" in result.output
    assert "Deletion cancelled" in result.output
    assert len(list(notes_dir.iterdir())) == 1


def test_delete_confirmed_at_prompt(cli_runner, notes_dir, clock, fake_editor):
    create(cli_runner, notes_dir, clock, fake_editor, "Goodbye")

    result = run(cli_runner, notes_dir, ["delete", "Goodbye"], input="y\n")

    assert result.exit_code == 0
    assert "Note deleted: Goodbye" in result.output
    assert list(notes_dir.iterdir()) == []


# ---------------------------------------------------------------------------
# 6. search / stats
# ---------------------------------------------------------------------------
def test_search_modes(cli_runner, notes_dir, clock, make_editor):
    create(cli_runner, notes_dir, clock, make_editor("Notes about python packaging"), "Tooling")
    create(cli_runner, notes_dir, clock, make_editor("Unrelated text"), "Python Tips")

    result = run(cli_runner, notes_dir, ["search", "python"])
    assert result.exit_code == 0
    assert "Search results for 'python':" in result.output
    assert "Found 2 notes" in result.output
    assert "...Notes about python packaging..." in result.output

    result = run(cli_runner, notes_dir, ["search", "python", "--title"])
    assert "Found 1 notes" in result.output
    assert "Python Tips" in result.output

    result = run(cli_runner, notes_dir, ["search", "python", "-c"])
    assert "Found 1 notes" in result.output
    assert "Tooling" in result.output

    result = run(cli_runner, notes_dir, ["search", "rust"])
    assert "No notes found matching: rust" in result.output


def test_stats(cli_runner, notes_dir, clock, make_editor):
    create(cli_runner, notes_dir, clock, make_editor("one two three four"), "First", "--tag", "b,a")
    create(cli_runner, notes_dir, clock, make_editor("five six"), "Second", "--tag", "a", "--author", "Sam")

    result = run(cli_runner, notes_dir, ["stats"])

    assert result.exit_code == 0
    assert "Notes Statistics" in result.output
    assert "Total notes: 2" in result.output
    assert "Unique tags: 2" in result.output
    assert "Tags: a, b" in result.output
    assert "Total words: 6" in result.output
    assert "Average words per note: 3" in result.output
    assert "Notes with authors: 1" in result.output


def test_stats_empty(cli_runner, notes_dir):
    result = run(cli_runner, notes_dir, ["stats"])

    assert result.exit_code == 0
    assert NO_NOTES_MESSAGE in result.output
