# pnm/config.py

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from a .env file into the process environment
load_dotenv()

APP_NAME = "notes"

# Every note lives in its own file with this suffix
NOTE_SUFFIX = ".note"

# Relative to the working directory unless NOTES_DIR says otherwise
DEFAULT_NOTES_DIR = "notes"


def get_notes_dir() -> Path:
    """Return the notes directory from NOTES_DIR, falling back to ./notes."""
    return Path(os.getenv("NOTES_DIR") or DEFAULT_NOTES_DIR)


def get_editor_command() -> Optional[str]:
    """Return the user's preferred editor command from EDITOR, if set."""
    editor = os.getenv("EDITOR")
    if editor and editor.strip():
        return editor.strip()
    return None
