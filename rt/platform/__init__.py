"""Platform layer: processes and files."""

from .files import atomic_write_bytes
from .process import ProcessError, run

__all__ = [
    # files
    "atomic_write_bytes",
    # process
    "ProcessError",
    "run",
]
