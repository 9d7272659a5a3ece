"""File name rules shared by all handlers.

Keep this module free of backend imports.
"""

from __future__ import annotations

from pathlib import Path

from .exceptions import FileNameInvalidError

# Quotes and the shell variable sigil; backends may hand paths to external tools.
ILLEGAL_FILE_NAME_CHARS = frozenset("'\"$")


def check_file_name(file: str | Path) -> str:
    """Return ``file`` as a string or raise if it contains an illegal character."""
    file_str = str(file)
    if any(ch in ILLEGAL_FILE_NAME_CHARS for ch in file_str):
        raise FileNameInvalidError(file_str)
    return file_str
