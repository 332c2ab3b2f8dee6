"""
Filesystem access used by skill discovery.

Discovery only needs to list directories, read text files and check for
existence. Keeping those behind a small interface lets callers point the
discoverer at something other than the local disk.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DirEntry:
    """A single directory listing entry."""

    name: str
    is_dir: bool


class FileSystem(ABC):
    """Read-only filesystem primitives.

    Implementations raise OSError (or a subclass) on failure; callers decide
    whether a failure is fatal.
    """

    @abstractmethod
    def list_dir(self, path: Path) -> list[DirEntry]:
        """List the entries of a directory."""
        ...

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file.

        Raises:
            OSError: If the file cannot be read.
            UnicodeDecodeError: If the file is not valid UTF-8.
        """
        ...

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check whether a path exists."""
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Check whether a path is a directory."""
        ...


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    def list_dir(self, path: Path) -> list[DirEntry]:
        return [DirEntry(name=item.name, is_dir=item.is_dir()) for item in Path(path).iterdir()]

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()


_default_fs = LocalFileSystem()


def get_default_fs() -> FileSystem:
    """Get the shared local filesystem instance."""
    return _default_fs
