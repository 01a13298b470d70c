"""Tree View Adapter: the host tree-widget contract over the engine.

The Selection Set is the only record of checked state. A ``TreeItem`` is an
immutable render whose checkbox is read from the set when the item is built,
and any selection change invalidates the whole view through
``tree_data_changed`` so the host re-fetches fresh items.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from promptpilot.core.debounce import debounce
from promptpilot.core.events import EventChannel, Subscription
from promptpilot.fs.store import EntryKind, FsEvent
from promptpilot.tree.lister import EntryLister

if TYPE_CHECKING:
    from promptpilot.search.engine import SearchEngine, SearchUpdate
    from promptpilot.selection.selection_set import SelectedPath, SelectionSet

logger = structlog.get_logger()

TOGGLE_SELECTION_COMMAND = "promptPilot.toggleSelection"
DEFAULT_REFRESH_DEBOUNCE_SEC = 0.3


class CheckboxState(Enum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class Collapsible(Enum):
    NONE = "none"
    COLLAPSED = "collapsed"


@dataclass(frozen=True, slots=True)
class TreeItem:
    """Renderable node handed to the host tree widget."""

    label: str
    path: str
    kind: EntryKind
    checkbox_state: CheckboxState
    description: str | None = None

    @property
    def checked(self) -> bool:
        return self.checkbox_state is CheckboxState.CHECKED

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def collapsible(self) -> Collapsible:
        return Collapsible.COLLAPSED if self.is_directory else Collapsible.NONE

    @property
    def command(self) -> tuple[str, tuple[str, ...]]:
        """Host command fired when the item is activated, with its arguments."""
        return TOGGLE_SELECTION_COMMAND, (self.path,)


class TreeViewAdapter:
    """Composes lister, selection and search into child listings for a host UI."""

    def __init__(
        self,
        root: str,
        lister: EntryLister,
        selection: SelectionSet,
        search: SearchEngine,
        *,
        refresh_debounce_sec: float = DEFAULT_REFRESH_DEBOUNCE_SEC,
    ) -> None:
        self._root = root
        self._lister = lister
        self._selection = selection
        self._search = search
        self._tree_data_changed: EventChannel[None] = EventChannel("tree_data_changed")
        self._debounced_refresh = debounce(self.refresh, refresh_debounce_sec)
        self._subscriptions: list[Subscription[Any]] = [
            search.results_changed.subscribe(self._on_search_update),
            selection.selection_changed.subscribe(self._on_selection_changed),
        ]

    @property
    def root(self) -> str:
        return self._root

    @property
    def tree_data_changed(self) -> EventChannel[None]:
        """Fires whenever the visible tree must be re-fetched."""
        return self._tree_data_changed

    @property
    def selection_changed(self) -> EventChannel[list[SelectedPath]]:
        """Fires the full selection snapshot after every selection change."""
        return self._selection.selection_changed

    async def get_children(self, item: TreeItem | None = None) -> list[TreeItem]:
        """Children of ``item``, or of the root when ``item`` is None.

        With a search query in effect the root request returns the flattened
        result buffer of the current generation instead of a listing.
        """
        if item is not None:
            return await self._list(item.path)

        if self._search.active:
            return [
                self._render(
                    name=hit.name,
                    path=os.path.join(self._root, hit.relative_path),
                    kind=hit.kind,
                    description=hit.parent or None,
                )
                for hit in self._search.results
            ]
        return await self._list(self._root)

    def get_tree_item(self, item: TreeItem) -> TreeItem:
        """Re-derive ``item``'s checked state from the current selection."""
        state = self._checkbox_state(item.path)
        if state is item.checkbox_state:
            return item
        return dataclasses.replace(item, checkbox_state=state)

    async def toggle_selection_by_ui_item(self, item: TreeItem) -> bool:
        """Forward a checkbox click to the Selection Set (with cascade)."""
        return await self._selection.toggle(item.path, item.kind)

    async def toggle_selection_by_path(self, path: str) -> bool:
        """Toggle a bare path, deriving its kind from a fresh stat."""
        return await self._selection.toggle(path)

    def uncheck_item_by_path(self, path: str) -> bool:
        """Revoke a single path without cascade. No-op if not selected."""
        return self._selection.remove_by_path(path)

    def get_selected_files(self) -> list[SelectedPath]:
        return self._selection.snapshot()

    def set_search_query(self, query: str) -> None:
        """Search by name; the empty string reverts to ordinary listing."""
        self._search.set_query(query)

    def refresh(self) -> None:
        logger.debug("tree_refresh")
        self._tree_data_changed.fire(None)

    def handle_fs_events(self, events: list[FsEvent]) -> None:
        """Watcher sink: any change anywhere schedules one debounced full refresh."""
        if not events:
            return
        logger.debug("tree_refresh_scheduled", events=len(events))
        self._debounced_refresh()

    def dispose(self) -> None:
        for sub in self._subscriptions:
            sub.dispose()
        self._subscriptions.clear()
        self._debounced_refresh.cancel()

    async def _list(self, dir_path: str) -> list[TreeItem]:
        return [
            self._render(name=entry.name, path=entry.absolute_path, kind=entry.kind)
            for entry in await self._lister.list_entries(dir_path)
        ]

    def _render(
        self, *, name: str, path: str, kind: EntryKind, description: str | None = None
    ) -> TreeItem:
        return TreeItem(
            label=name,
            path=path,
            kind=kind,
            checkbox_state=self._checkbox_state(path),
            description=description,
        )

    def _checkbox_state(self, path: str) -> CheckboxState:
        return CheckboxState.CHECKED if self._selection.is_selected(path) else CheckboxState.UNCHECKED

    def _on_search_update(self, update: SearchUpdate) -> None:
        logger.debug(
            "search_results_delivered",
            generation=update.generation,
            results=len(update.results),
            completed=update.completed,
        )
        self.refresh()

    def _on_selection_changed(self, _snapshot: list[SelectedPath]) -> None:
        self.refresh()
