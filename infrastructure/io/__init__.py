"""I/O utilities: filesystem checks and dataset loading/saving."""

from infrastructure.io.datasets import read_table, write_table
from infrastructure.io.fs import ensure_dir, ensure_exists

__all__ = [
    "ensure_dir",
    "ensure_exists",
    "read_table",
    "write_table",
]
