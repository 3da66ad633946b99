"""Utility functions for agentskills."""

from pathlib import Path


def truncate_string(s: str, max_length: int = 80) -> str:
    """Truncate string to max length with ellipsis."""
    if len(s) <= max_length:
        return s
    return s[:max_length - 3] + "..."


def directory_name(path: str | Path | None) -> str:
    """Return the final component of a directory path, ignoring trailing separators."""
    if not path:
        return ""
    return Path(path).name
