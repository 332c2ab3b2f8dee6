"""
Reading and writing the host markdown file.

The new content is always computed in memory first; the file is written in
one call only when that succeeded.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class HostFile:
    """Snapshot of a host file before modification."""

    path: Path
    content: str
    exists: bool

    @property
    def size(self) -> int:
        """Size of the current content in UTF-8 bytes."""
        return byte_size(self.content)


def byte_size(content: str) -> int:
    """Size of a string in UTF-8 bytes."""
    return len(content.encode("utf-8"))


def read_host_file(path: Path) -> HostFile:
    """Read a host file; a missing file reads as empty.

    Raises:
        OSError: If the file exists but cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    if not path.exists():
        return HostFile(path=path, content="", exists=False)
    return HostFile(path=path, content=path.read_text(encoding="utf-8"), exists=True)


def write_host_file(path: Path, content: str) -> int:
    """Write new host file content.

    Returns:
        Size of the written content in bytes.

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s (%d bytes)", path, byte_size(content))
    return byte_size(content)
