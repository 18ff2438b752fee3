"""
External editor integration.

EditorService lets the user edit text in their preferred editor:

    1. write the initial text to a temp file
    2. run the editor on it and wait for it to exit
    3. read the file back
    4. delete the temp file, whatever happened

Editor resolution order:
    • an explicit command passed to the constructor
    • EDITOR from the environment / .env (pnm.config)
    • the first of nano, vim, vi, emacs, pico found on PATH
    • a platform fallback: notepad (Windows), TextEdit (macOS), vi

The service is an injected collaborator (see pnm.types.Editor). Commands and
tests can substitute any object with a compatible edit_content().
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, List, Optional

from pnm.config import get_editor_command
from pnm.errors import EditorError
from pnm.logging_utils import log_warning

COMMON_EDITORS = ("nano", "vim", "vi", "emacs", "pico")


class EditorService:
    """Runs the user's editor on a temp file and returns the edited text."""

    def __init__(
        self,
        command: Optional[str] = None,
        temp_dir: Optional[Path] = None,
        runner: Callable[..., Any] = subprocess.run,
        which: Callable[[str], Optional[str]] = shutil.which,
        platform: str = sys.platform,
    ) -> None:
        self.command = command
        self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
        self._runner = runner
        self._which = which
        self._platform = platform

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def edit_content(self, initial_content: str, temp_file_name_hint: str) -> str:
        """
        Open `initial_content` in the editor and return the saved result.

        Raises
        ------
        EditorError
            If the editor cannot be started or exits with a non‑zero code.
        OSError
            If the temp file cannot be written or read.
        """
        temp_file = self.temp_dir / f"{temp_file_name_hint}.md"
        temp_file.write_text(initial_content, encoding="utf-8")

        try:
            self._open_in_editor(temp_file)
            return temp_file.read_text(encoding="utf-8")
        finally:
            self._cleanup(temp_file)

    def resolve_command(self) -> List[str]:
        """Return the editor command line as an argv prefix."""
        editor = self.command or get_editor_command()
        if editor:
            return shlex.split(editor)

        for candidate in COMMON_EDITORS:
            if self._which(candidate):
                return [candidate]

        if self._platform.startswith("win"):
            return ["notepad"]
        if self._platform == "darwin":
            # -W waits for TextEdit to quit before returning
            return ["open", "-W", "-e"]
        return ["vi"]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open_in_editor(self, path: Path) -> None:
        argv = self.resolve_command() + [str(path)]
        try:
            result = self._runner(argv)
        except OSError as e:
            raise EditorError(f"Could not start editor {argv[0]!r}: {e}") from e

        if result.returncode != 0:
            raise EditorError(f"Editor exited with code {result.returncode}")

    def _cleanup(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            log_warning(f"Could not delete temp file {path}")
