"""Filesystem helpers for config inputs and run outputs."""

from pathlib import Path


def ensure_exists(path: Path, what: str) -> Path:
    """
    Return ``path`` if it exists.

    Raises:
        FileNotFoundError: naming ``what`` the path was supposed to be
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")
    return path


def ensure_dir(path: Path) -> Path:
    """Create a directory (and parents) if needed and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path
