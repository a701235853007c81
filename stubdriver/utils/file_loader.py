"""
File loading utilities for uploaded design artifacts.

Reading a file is the only asynchronous step of ingestion; parsing itself
is synchronous.
"""

import asyncio
import os

from stubdriver.core.enums import FileType
from stubdriver.core.errors import FormatError

EXPECTED_EXTENSIONS = {
    FileType.RTM: ".csv",
    FileType.SEQUENCE_DIAGRAM: ".xml",
    FileType.CLASS_DIAGRAM: ".xml",
}


def validate_file_extension(file_name: str, file_type: FileType) -> bool:
    """
    Check that a file name carries the extension its type requires.

    Args:
        file_name: Name of the uploaded file
        file_type: Declared artifact type

    Returns:
        True if the extension matches
    """
    expected = EXPECTED_EXTENSIONS.get(file_type)
    return bool(expected) and file_name.lower().endswith(expected)


def diagram_name_from_file(file_name: str) -> str:
    """Diagram name is the file's base name with the extension stripped."""
    return os.path.splitext(os.path.basename(file_name))[0]


def _read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8-sig') as f:
        return f.read()


async def read_file_as_text(path: str) -> str:
    """
    Read a file's content as text without blocking the event loop.

    Args:
        path: Path to the file

    Returns:
        File content

    Raises:
        FormatError: If the file cannot be read or decoded
    """
    try:
        return await asyncio.to_thread(_read_text, path)
    except (OSError, UnicodeDecodeError) as e:
        raise FormatError(f"Could not read {path}", {"reason": str(e)}) from e
