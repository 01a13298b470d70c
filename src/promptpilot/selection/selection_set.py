"""Selection Set: the paths currently marked selected, with directory cascade.

Storage makes no distinction between files and directories; kind is
re-derived from the filesystem whenever a snapshot is taken.

A directory cascade is computed from the filesystem at toggle time and is
never reconciled afterwards: files added to a selected directory later are
not selected, and files deleted later stay in the set until a toggle touches
them again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import structlog

from promptpilot.core.errors import SelectionError
from promptpilot.core.events import EventChannel
from promptpilot.fs.store import EntryKind
from promptpilot.tree.lister import EntryLister

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class SelectedPath:
    """One snapshot row: a selected path and its kind at snapshot time."""

    path: str
    is_directory: bool

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "is_directory": self.is_directory}


class SelectionSet:
    """Mutable set of selected absolute paths.

    Mutated only through ``toggle`` and ``remove_by_path``; every effective
    mutation broadcasts the full snapshot on ``selection_changed``.
    """

    def __init__(self, lister: EntryLister) -> None:
        self._lister = lister
        # dict as an insertion-ordered set
        self._paths: dict[str, None] = {}
        self._selection_changed: EventChannel[list[SelectedPath]] = EventChannel(
            "selection_changed"
        )

    @property
    def selection_changed(self) -> EventChannel[list[SelectedPath]]:
        return self._selection_changed

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))

    def is_selected(self, path: str) -> bool:
        return path in self._paths

    async def toggle(self, path: str, kind: EntryKind | None = None) -> bool:
        """Flip the selection state of ``path``.

        Directories cascade to every descendant file present right now.
        ``kind`` defaults to what a fresh stat reports.

        Returns:
            True if ``path`` is selected afterwards.

        Raises:
            SelectionError: ``path`` cannot be stat'ed; the set is unchanged.
        """
        store = self._lister.store
        try:
            st = await asyncio.to_thread(store.stat, path)
        except OSError as e:
            logger.warning("toggle_target_missing", path=path, error=str(e))
            raise SelectionError.not_found(path) from e

        if kind is None:
            kind = EntryKind.DIRECTORY if st.is_directory else EntryKind.FILE

        cascade: list[str] = []
        if kind is EntryKind.DIRECTORY:
            cascade = await self._lister.descendant_files(path)

        # Decide and mutate with no suspension in between
        selecting = path not in self._paths
        if selecting:
            for file_path in cascade:
                self._paths[file_path] = None
            self._paths[path] = None
        else:
            for file_path in cascade:
                self._paths.pop(file_path, None)
            self._paths.pop(path, None)

        logger.debug(
            "selection_toggled",
            path=path,
            kind=kind.value,
            selected=selecting,
            cascade=len(cascade),
            total=len(self._paths),
        )
        self._broadcast()
        return selecting

    def remove_by_path(self, path: str) -> bool:
        """Remove exactly ``path`` (no cascade).

        Returns:
            True if ``path`` was selected. Absent paths are a no-op and do
            not broadcast.
        """
        if path not in self._paths:
            return False
        del self._paths[path]
        logger.debug("selection_removed", path=path, total=len(self._paths))
        self._broadcast()
        return True

    def snapshot(self, *, strict: bool = True) -> list[SelectedPath]:
        """Materialize the selection with freshly stat'ed kinds.

        Args:
            strict: When True, a selected path that can no longer be stat'ed
                raises ``SelectionError``. When False it is logged and left
                out of the result.
        """
        store = self._lister.store
        rows: list[SelectedPath] = []
        for path in list(self._paths):
            try:
                st = store.stat(path)
            except OSError as e:
                if strict:
                    raise SelectionError.stat_failed(path, str(e)) from e
                logger.warning("selected_path_unavailable", path=path, error=str(e))
                continue
            rows.append(SelectedPath(path=path, is_directory=st.is_directory))
        return rows

    def _broadcast(self) -> None:
        if self._selection_changed.listener_count == 0:
            return
        self._selection_changed.fire(self.snapshot(strict=False))
