"""Composition root: one explicitly constructed engine per browsing session."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

import structlog

from promptpilot.config.models import PromptPilotConfig
from promptpilot.daemon.watcher import TreeWatcher
from promptpilot.fs.store import FileStore, LocalFileStore
from promptpilot.search.engine import SearchEngine
from promptpilot.selection.selection_set import SelectionSet
from promptpilot.tree.adapter import TreeViewAdapter
from promptpilot.tree.lister import EntryLister

logger = structlog.get_logger()


@dataclass
class PromptPilotEngine:
    """Owns every component for one root and their lifecycle.

    Consumers receive the engine (or one of its parts) by reference; there is
    no module-level instance.
    """

    root: str
    store: FileStore
    lister: EntryLister
    selection: SelectionSet
    search: SearchEngine
    tree: TreeViewAdapter
    watcher: TreeWatcher | None = None

    async def start(self) -> None:
        if self.watcher is not None:
            await self.watcher.start()
        logger.info("engine_started", root=self.root, watching=self.watcher is not None)

    async def stop(self) -> None:
        if self.watcher is not None:
            await self.watcher.stop()
        await self.search.close()
        self.tree.dispose()
        logger.info("engine_stopped", root=self.root)

    async def __aenter__(self) -> PromptPilotEngine:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()


def build_engine(
    root: str | Path,
    config: PromptPilotConfig | None = None,
    *,
    store: FileStore | None = None,
) -> PromptPilotEngine:
    """Wire lister, selection, search, tree adapter and watcher for ``root``.

    Args:
        root: Directory to browse. Made absolute; selection paths are absolute.
        config: Resolved configuration (defaults if None).
        store: Filesystem collaborator override (defaults to the local disk).
    """
    config = config or PromptPilotConfig()
    root_str = os.path.abspath(os.fspath(root))
    store = store or LocalFileStore()

    lister = EntryLister(store)
    selection = SelectionSet(lister)
    search = SearchEngine(lister, root_str, debounce_sec=config.search.debounce_sec)
    tree = TreeViewAdapter(
        root_str,
        lister,
        selection,
        search,
        refresh_debounce_sec=config.tree.refresh_debounce_sec,
    )

    watcher: TreeWatcher | None = None
    if config.watcher.enabled:
        watcher = TreeWatcher(
            root=Path(root_str),
            on_change=tree.handle_fs_events,
            poll_interval=config.watcher.poll_interval_sec,
            force_polling=config.watcher.force_polling,
        )

    return PromptPilotEngine(
        root=root_str,
        store=store,
        lister=lister,
        selection=selection,
        search=search,
        tree=tree,
        watcher=watcher,
    )
