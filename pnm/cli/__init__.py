"""Command-line interface for the Personal Notes Manager."""
