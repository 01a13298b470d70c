"""Tests for the Selection Set.

Covers:
- toggle on files and directories (cascade select / deselect)
- toggle failure leaves the set untouched
- remove_by_path point removal
- snapshot strictness and stale paths
- selection_changed broadcasts
"""

from __future__ import annotations

from pathlib import Path

import pytest

from promptpilot.core.errors import ErrorCode, SelectionError
from promptpilot.fs.store import EntryKind, LocalFileStore
from promptpilot.selection.selection_set import SelectedPath, SelectionSet
from promptpilot.tree.lister import EntryLister
from tests.fakes import MemoryFileStore


def _selection(store: object | None = None) -> SelectionSet:
    return SelectionSet(EntryLister(store or LocalFileStore()))  # type: ignore[arg-type]


class TestToggleFile:
    """toggle() on single files."""

    @pytest.mark.asyncio
    async def test_select_then_deselect_restores_state(self, sample_tree: Path) -> None:
        selection = _selection()
        other = str(sample_tree / "sub" / "c.txt")
        await selection.toggle(other, EntryKind.FILE)
        before = set(selection)

        target = str(sample_tree / "a.txt")
        assert await selection.toggle(target, EntryKind.FILE) is True
        assert target in selection
        assert await selection.toggle(target, EntryKind.FILE) is False

        assert set(selection) == before

    @pytest.mark.asyncio
    async def test_kind_is_derived_when_omitted(self, sample_tree: Path) -> None:
        selection = _selection()

        await selection.toggle(str(sample_tree / "sub"))

        assert len(selection) == 3


class TestToggleDirectory:
    """Directory cascade semantics."""

    @pytest.mark.asyncio
    async def test_cascade_select_and_deselect(self, sample_tree: Path) -> None:
        """Selecting sub selects it and its files; toggling again clears them."""
        selection = _selection()
        sub = str(sample_tree / "sub")

        await selection.toggle(sub, EntryKind.DIRECTORY)

        assert set(selection) == {
            sub,
            str(sample_tree / "sub" / "b.txt"),
            str(sample_tree / "sub" / "c.txt"),
        }

        await selection.toggle(sub, EntryKind.DIRECTORY)

        assert set(selection) == set()

    @pytest.mark.asyncio
    async def test_cascade_size_is_descendants_plus_one(self) -> None:
        store = MemoryFileStore(
            ["/r/D/1.txt", "/r/D/x/2.txt", "/r/D/x/y/3.txt", "/r/D/x/y/4.txt", "/r/other.txt"]
        )
        selection = _selection(store)
        await selection.toggle("/r/other.txt", EntryKind.FILE)
        base = len(selection)

        await selection.toggle("/r/D", EntryKind.DIRECTORY)
        assert len(selection) == base + 4 + 1

        await selection.toggle("/r/D", EntryKind.DIRECTORY)
        assert len(selection) == base

    @pytest.mark.asyncio
    async def test_nested_directories_are_not_added(self) -> None:
        """Only files are cascaded; intermediate directories stay unselected."""
        store = MemoryFileStore(["/r/D/x/2.txt"])
        selection = _selection(store)

        await selection.toggle("/r/D", EntryKind.DIRECTORY)

        assert "/r/D/x" not in selection
        assert "/r/D/x/2.txt" in selection

    @pytest.mark.asyncio
    async def test_files_added_later_are_not_selected(self) -> None:
        store = MemoryFileStore(["/r/D/1.txt"])
        selection = _selection(store)
        await selection.toggle("/r/D", EntryKind.DIRECTORY)

        store.add_file("/r/D/late.txt")

        assert "/r/D/late.txt" not in selection

    @pytest.mark.asyncio
    async def test_hidden_descendants_are_not_cascaded(self) -> None:
        store = MemoryFileStore(["/r/D/ok.txt", "/r/D/.secret"])
        selection = _selection(store)

        await selection.toggle("/r/D", EntryKind.DIRECTORY)

        assert set(selection) == {"/r/D", "/r/D/ok.txt"}


class TestToggleFailure:
    """NotFound handling."""

    @pytest.mark.asyncio
    async def test_missing_path_raises_not_found(self, sample_tree: Path) -> None:
        selection = _selection()
        await selection.toggle(str(sample_tree / "a.txt"), EntryKind.FILE)
        before = set(selection)

        with pytest.raises(SelectionError) as exc_info:
            await selection.toggle(str(sample_tree / "vanished"), EntryKind.DIRECTORY)

        assert exc_info.value.code is ErrorCode.SELECTION_PATH_NOT_FOUND
        assert set(selection) == before

    @pytest.mark.asyncio
    async def test_failure_does_not_broadcast(self, sample_tree: Path) -> None:
        selection = _selection()
        events: list[list[SelectedPath]] = []
        selection.selection_changed.subscribe(events.append)

        with pytest.raises(SelectionError):
            await selection.toggle(str(sample_tree / "vanished"))

        assert events == []


class TestRemoveByPath:
    """Point removal without cascade."""

    @pytest.mark.asyncio
    async def test_removes_exactly_one_path(self, sample_tree: Path) -> None:
        selection = _selection()
        sub = str(sample_tree / "sub")
        await selection.toggle(sub, EntryKind.DIRECTORY)

        removed = selection.remove_by_path(str(sample_tree / "sub" / "b.txt"))

        assert removed is True
        assert set(selection) == {sub, str(sample_tree / "sub" / "c.txt")}

    def test_absent_path_is_noop(self) -> None:
        selection = _selection(MemoryFileStore([]))
        events: list[list[SelectedPath]] = []
        selection.selection_changed.subscribe(events.append)

        assert selection.remove_by_path("/nowhere") is False
        assert events == []

    @pytest.mark.asyncio
    async def test_removing_directory_path_keeps_its_files(self) -> None:
        store = MemoryFileStore(["/r/D/1.txt"])
        selection = _selection(store)
        await selection.toggle("/r/D", EntryKind.DIRECTORY)

        selection.remove_by_path("/r/D")

        assert set(selection) == {"/r/D/1.txt"}


class TestSnapshot:
    """snapshot() materialization."""

    @pytest.mark.asyncio
    async def test_reports_fresh_kinds_in_selection_order(self, sample_tree: Path) -> None:
        selection = _selection()
        await selection.toggle(str(sample_tree / "a.txt"), EntryKind.FILE)
        await selection.toggle(str(sample_tree / "sub"), EntryKind.DIRECTORY)

        rows = selection.snapshot()

        assert rows == [
            SelectedPath(str(sample_tree / "a.txt"), False),
            SelectedPath(str(sample_tree / "sub" / "b.txt"), False),
            SelectedPath(str(sample_tree / "sub" / "c.txt"), False),
            SelectedPath(str(sample_tree / "sub"), True),
        ]

    @pytest.mark.asyncio
    async def test_strict_snapshot_raises_for_deleted_path(self, sample_tree: Path) -> None:
        selection = _selection()
        target = sample_tree / "a.txt"
        await selection.toggle(str(target), EntryKind.FILE)
        target.unlink()

        with pytest.raises(SelectionError) as exc_info:
            selection.snapshot()

        assert exc_info.value.code is ErrorCode.SNAPSHOT_STAT_FAILED

    @pytest.mark.asyncio
    async def test_lenient_snapshot_skips_deleted_path(self, sample_tree: Path) -> None:
        selection = _selection()
        await selection.toggle(str(sample_tree / "a.txt"), EntryKind.FILE)
        await selection.toggle(str(sample_tree / "sub" / "b.txt"), EntryKind.FILE)
        (sample_tree / "a.txt").unlink()

        rows = selection.snapshot(strict=False)

        assert rows == [SelectedPath(str(sample_tree / "sub" / "b.txt"), False)]
        # The stale path stays selected until something touches it
        assert str(sample_tree / "a.txt") in selection

    def test_to_dict(self) -> None:
        assert SelectedPath("/r/a", True).to_dict() == {"path": "/r/a", "is_directory": True}


class TestSelectionChanged:
    """Broadcast of full snapshots."""

    @pytest.mark.asyncio
    async def test_toggle_broadcasts_full_snapshot(self, sample_tree: Path) -> None:
        selection = _selection()
        events: list[list[SelectedPath]] = []
        selection.selection_changed.subscribe(events.append)

        await selection.toggle(str(sample_tree / "a.txt"), EntryKind.FILE)
        await selection.toggle(str(sample_tree / "sub"), EntryKind.DIRECTORY)

        assert len(events) == 2
        assert [row.path for row in events[0]] == [str(sample_tree / "a.txt")]
        assert len(events[1]) == 4

    @pytest.mark.asyncio
    async def test_remove_broadcasts(self, sample_tree: Path) -> None:
        selection = _selection()
        target = str(sample_tree / "a.txt")
        await selection.toggle(target, EntryKind.FILE)
        events: list[list[SelectedPath]] = []
        selection.selection_changed.subscribe(events.append)

        selection.remove_by_path(target)

        assert events == [[]]

    @pytest.mark.asyncio
    async def test_broadcast_skips_stale_paths(self, sample_tree: Path) -> None:
        """A stale selection does not break later toggles."""
        selection = _selection()
        stale = sample_tree / "a.txt"
        await selection.toggle(str(stale), EntryKind.FILE)
        stale.unlink()
        events: list[list[SelectedPath]] = []
        selection.selection_changed.subscribe(events.append)

        await selection.toggle(str(sample_tree / "sub" / "b.txt"), EntryKind.FILE)

        assert [row.path for row in events[-1]] == [str(sample_tree / "sub" / "b.txt")]
