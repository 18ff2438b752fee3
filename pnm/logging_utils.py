"""
logging_utils.py

A small collection of output helpers used across the notes manager.

These helpers keep progress, warning, and error output consistent between
the CLI commands and the repository. Warnings raised deep inside the
repository (for example a corrupt note file skipped during listing) reach
the user through the same helper the commands use.

This module intentionally avoids any heavy logging frameworks. The goal is
lightweight, predictable output that works well with Typer and its test
runner.
"""

import typer


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high‑level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        Short, plain‑English description of what is happening
        (e.g., "Loading notes from notes/...").

    verbose : bool
        Whether verbose mode is active. When False, this function does
        nothing.
    """
    if verbose:
        typer.echo(message)


def log_warning(message: str) -> None:
    """
    Print a non-fatal warning to stderr.

    Used as the default warning sink of NoteRepository, so a single bad
    file never interrupts a listing but is still reported.
    """
    typer.secho(f"Warning: {message}", fg=typer.colors.YELLOW, err=True)


def log_error(message: str) -> None:
    """Print an error message to stderr in red."""
    typer.secho(message, fg=typer.colors.RED, err=True)
