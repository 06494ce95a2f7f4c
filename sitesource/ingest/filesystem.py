"""
Filesystem Access - Disk and in-memory backends

Everything the ingestion pipeline needs from a filesystem goes through the
FileSystem protocol: existence checks, recursive file listing, text reads and
modification times. LocalFileSystem talks to the disk; MemoryFileSystem holds
a dict of path -> content so the pipeline can run against fixtures.
"""

import logging
import os
import posixpath
from typing import Dict, Iterator, Optional, Protocol, Union

from sitesource.exceptions import FileAccessError

logger = logging.getLogger(__name__)


def normalize_separators(path: str) -> str:
    """Return path with forward slashes regardless of host platform."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


class FileSystem(Protocol):
    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool: ...

    def walk_files(self, root: str) -> Iterator[str]:
        """Yield forward-slash paths, relative to root, of every regular file."""
        ...

    def read_text(self, path: str) -> str: ...

    def mtime(self, path: str) -> float: ...

    def realpath(self, path: str) -> str: ...


class LocalFileSystem:
    """FileSystem backed by the operating system."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def walk_files(self, root: str) -> Iterator[str]:
        if not os.path.isdir(root):
            raise FileAccessError(f"Directory not found: {root}", path=root)

        logger.debug(f"Walking {root}")

        def _raise(error: OSError):
            raise FileAccessError(
                f"Cannot list {error.filename}: {error.strerror}", path=error.filename
            ) from error

        for current, dirnames, filenames in os.walk(root, onerror=_raise):
            # Sorted traversal keeps ids in a stable order between runs
            dirnames.sort()
            for name in sorted(filenames):
                full = os.path.join(current, name)
                if not os.path.isfile(full):
                    continue
                yield normalize_separators(os.path.relpath(full, root))

    def read_text(self, path: str) -> str:
        """Read a file verbatim.

        Bytes that are not UTF-8 are kept as surrogates and come back with
        `text.encode("utf-8", "surrogateescape")`.
        """
        try:
            with open(
                path, "r", encoding="utf-8", errors="surrogateescape", newline=""
            ) as f:
                return f.read()
        except OSError as e:
            raise FileAccessError(f"Cannot read {path}: {e.strerror}", path=path) from e

    def mtime(self, path: str) -> float:
        try:
            return os.stat(path).st_mtime
        except OSError as e:
            raise FileAccessError(f"Cannot stat {path}: {e.strerror}", path=path) from e

    def realpath(self, path: str) -> str:
        return normalize_separators(os.path.realpath(path))


class MemoryFileSystem:
    """FileSystem holding its files in a dict.

    Keys are forward-slash paths; values are text or bytes. Every file shares
    the same modification time unless one is given in ``mtimes``.
    """

    def __init__(
        self,
        files: Optional[Dict[str, Union[str, bytes]]] = None,
        mtimes: Optional[Dict[str, float]] = None,
        default_mtime: float = 0.0,
    ):
        self.files: Dict[str, Union[str, bytes]] = {}
        self.mtimes: Dict[str, float] = {}
        self.default_mtime = default_mtime
        self.reads = []

        for path, content in (files or {}).items():
            self.add(path, content)
        for path, value in (mtimes or {}).items():
            self.mtimes[self._norm(path)] = value

    @staticmethod
    def _norm(path: str) -> str:
        return posixpath.normpath(normalize_separators(path))

    def add(self, path: str, content: Union[str, bytes], mtime: Optional[float] = None):
        key = self._norm(path)
        self.files[key] = content
        if mtime is not None:
            self.mtimes[key] = mtime

    def exists(self, path: str) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def is_file(self, path: str) -> bool:
        return self._norm(path) in self.files

    def is_dir(self, path: str) -> bool:
        prefix = self._norm(path).rstrip("/") + "/"
        return any(key.startswith(prefix) for key in self.files)

    def walk_files(self, root: str) -> Iterator[str]:
        if not self.is_dir(root):
            raise FileAccessError(f"Directory not found: {root}", path=root)

        prefix = self._norm(root).rstrip("/") + "/"
        for key in sorted(self.files):
            if key.startswith(prefix):
                yield key[len(prefix):]

    def read_text(self, path: str) -> str:
        key = self._norm(path)
        if key not in self.files:
            raise FileAccessError(f"Cannot read {path}: No such file", path=path)

        self.reads.append(key)
        content = self.files[key]
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="surrogateescape")
        return content

    def mtime(self, path: str) -> float:
        key = self._norm(path)
        if key not in self.files:
            raise FileAccessError(f"Cannot stat {path}: No such file", path=path)
        return self.mtimes.get(key, self.default_mtime)

    def realpath(self, path: str) -> str:
        return self._norm(path)
