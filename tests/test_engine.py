"""Tests for engine composition and lifecycle."""

from __future__ import annotations

from pathlib import Path

import pytest

from promptpilot import PromptPilotEngine, build_engine
from promptpilot.config.models import PromptPilotConfig, SearchConfig, TreeConfig, WatcherConfig
from promptpilot.daemon.watcher import TreeWatcher
from tests.fakes import MemoryFileStore


def _config(*, watch: bool = False) -> PromptPilotConfig:
    return PromptPilotConfig(
        search=SearchConfig(debounce_sec=0.01),
        tree=TreeConfig(refresh_debounce_sec=0.02),
        watcher=WatcherConfig(enabled=watch, force_polling=True, poll_interval_sec=0.05),
    )


class TestBuildEngine:
    """Wiring of the composition root."""

    def test_components_share_one_lister(self, sample_tree: Path) -> None:
        engine = build_engine(sample_tree, _config())

        assert isinstance(engine, PromptPilotEngine)
        assert engine.root == str(sample_tree)
        assert engine.tree.root == engine.root
        assert engine.lister.store is engine.store
        assert engine.tree.selection_changed is engine.selection.selection_changed

    def test_relative_root_made_absolute(
        self, sample_tree: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(sample_tree.parent)

        engine = build_engine("root", _config())

        assert engine.root == str(sample_tree)

    def test_watcher_disabled(self, sample_tree: Path) -> None:
        assert build_engine(sample_tree, _config(watch=False)).watcher is None

    def test_watcher_enabled_uses_config(self, sample_tree: Path) -> None:
        engine = build_engine(sample_tree, _config(watch=True))

        assert isinstance(engine.watcher, TreeWatcher)
        assert engine.watcher.poll_interval == 0.05
        assert engine.watcher.force_polling

    def test_custom_store(self) -> None:
        store = MemoryFileStore(["/r/a.txt"])

        engine = build_engine("/r", _config(), store=store)

        assert engine.store is store

    def test_default_config(self, sample_tree: Path) -> None:
        engine = build_engine(sample_tree)
        assert engine.watcher is not None


class TestEngineLifecycle:
    """Start/stop through the async context manager."""

    @pytest.mark.asyncio
    async def test_context_manager_starts_and_stops_watcher(self, sample_tree: Path) -> None:
        engine = build_engine(sample_tree, _config(watch=True))

        async with engine as running:
            assert running is engine
            assert engine.watcher is not None and engine.watcher.running

        assert not engine.watcher.running

    @pytest.mark.asyncio
    async def test_end_to_end_selection_and_search(self, sample_tree: Path) -> None:
        async with build_engine(sample_tree, _config()) as engine:
            root_items = await engine.tree.get_children()
            await engine.tree.toggle_selection_by_ui_item(root_items[0])
            engine.tree.set_search_query("c")
            await engine.search.wait()
            hits = await engine.tree.get_children()

        assert [s.path for s in engine.tree.get_selected_files()] == [
            str(sample_tree / "sub" / "b.txt"),
            str(sample_tree / "sub" / "c.txt"),
            str(sample_tree / "sub"),
        ]
        assert [h.label for h in hits] == ["c.txt"]
        assert hits[0].checked

    @pytest.mark.asyncio
    async def test_stop_detaches_tree_from_selection(self, sample_tree: Path) -> None:
        engine = build_engine(sample_tree, _config())
        refreshes: list[None] = []
        engine.tree.tree_data_changed.subscribe(refreshes.append)

        await engine.start()
        await engine.stop()
        await engine.selection.toggle(str(sample_tree / "a.txt"))

        assert refreshes == []
