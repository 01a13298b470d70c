"""Filesystem collaborator consumed by the selection and search engine.

The store is synchronous and raises ``OSError``; callers on the event loop
push each call through ``asyncio.to_thread`` so it becomes a suspension
point instead of blocking the loop.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from stat import S_ISDIR
from typing import Protocol


class EntryKind(Enum):
    """Kind of a filesystem entry."""

    FILE = "file"
    DIRECTORY = "directory"


class FsEventKind(Enum):
    """Kind of a watcher notification."""

    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class FileStat:
    """Result of ``FileStore.stat``."""

    is_directory: bool


@dataclass(frozen=True, slots=True)
class FsEvent:
    """A single change observed under the watched root."""

    kind: FsEventKind
    path: str


class FileStore(Protocol):
    """Minimal filesystem surface the engine reads from."""

    def list_directory(self, path: str) -> list[tuple[str, EntryKind]]:
        """Return the immediate (name, kind) entries of ``path``, unordered."""
        ...

    def stat(self, path: str) -> FileStat:
        """Stat ``path``, following symlinks. Raises OSError if it is gone."""
        ...


class LocalFileStore:
    """``FileStore`` backed by the local operating system."""

    def list_directory(self, path: str) -> list[tuple[str, EntryKind]]:
        entries: list[tuple[str, EntryKind]] = []
        with os.scandir(path) as it:
            for dirent in it:
                try:
                    # Symlinked directories are terminal so cascades and searches cannot loop
                    is_dir = dirent.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                entries.append((dirent.name, EntryKind.DIRECTORY if is_dir else EntryKind.FILE))
        return entries

    def stat(self, path: str) -> FileStat:
        return FileStat(is_directory=S_ISDIR(os.stat(path).st_mode))
