"""Entry Lister: ordered, hidden-filtered directory listings.

Listings are produced on demand and never cached. I/O failures (permission
denied, directory removed mid-call) are logged and yield an empty listing so
a picker view stays usable under partial filesystem failure.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass

import structlog

from promptpilot.fs.store import EntryKind, FileStore

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class FilesystemEntry:
    """One immediate child of a listed directory."""

    name: str
    absolute_path: str
    kind: EntryKind

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def _sort_key(item: tuple[str, EntryKind]) -> tuple[bool, str, str]:
    name, kind = item
    # Directories first, then case-folded name with the raw name as tie-breaker
    return (kind is not EntryKind.DIRECTORY, name.casefold(), name)


class EntryLister:
    """Lists directories through a ``FileStore``."""

    def __init__(self, store: FileStore) -> None:
        self._store = store

    @property
    def store(self) -> FileStore:
        return self._store

    async def list_entries(self, dir_path: str) -> list[FilesystemEntry]:
        """List ``dir_path``: directories before files, each alphabetical.

        Entries whose name begins with ``.`` are excluded. Never raises for
        I/O errors; returns ``[]`` and logs instead.
        """
        try:
            raw = await asyncio.to_thread(self._store.list_directory, dir_path)
        except OSError as e:
            logger.warning("list_directory_failed", path=dir_path, error=str(e))
            return []

        visible = sorted((item for item in raw if not is_hidden(item[0])), key=_sort_key)
        return [
            FilesystemEntry(name=name, absolute_path=os.path.join(dir_path, name), kind=kind)
            for name, kind in visible
        ]

    async def descendant_files(self, dir_path: str) -> list[str]:
        """Absolute paths of every file below ``dir_path``, as listed right now.

        Recurses through ``list_entries``, so hidden entries are skipped and
        unreadable subdirectories contribute nothing.
        """
        files: list[str] = []
        for entry in await self.list_entries(dir_path):
            if entry.is_directory:
                files.extend(await self.descendant_files(entry.absolute_path))
            else:
                files.append(entry.absolute_path)
        return files
