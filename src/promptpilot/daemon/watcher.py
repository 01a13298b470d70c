"""File watcher using watchfiles for async filesystem monitoring.

Design:
- One recursive awatch over the whole browsed root
- Every create/change/delete under the root is forwarded; the tree view
  answers each batch with a debounced full refresh (no incremental diffing)
- Falls back to watchfiles polling for cross-filesystem roots (WSL /mnt/*)
- Watcher failures are logged and the watch restarts after a short backoff
"""

from __future__ import annotations

import asyncio
import contextlib
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from promptpilot.fs.store import FsEvent, FsEventKind

logger = structlog.get_logger()

# VCS metadata churns constantly and is hidden from the tree anyway
HARDCODED_DIRS: frozenset[str] = frozenset({".git", ".svn", ".hg", ".bzr"})

_CHANGE_KINDS: dict[Change, FsEventKind] = {
    Change.added: FsEventKind.CREATED,
    Change.modified: FsEventKind.CHANGED,
    Change.deleted: FsEventKind.DELETED,
}

RESTART_BACKOFF_SEC = 1.0


def _is_cross_filesystem(path: Path) -> bool:
    """Detect if path is on a cross-filesystem mount (WSL /mnt/*, network drives, etc.)."""
    resolved = path.resolve()
    path_str = str(resolved)
    # WSL accessing Windows filesystem: /mnt/c/, /mnt/d/, etc.
    # Must be single letter followed by / (not /mnt/data/ which is a regular mount)
    if (
        path_str.startswith("/mnt/")
        and len(path_str) > 6
        and path_str[5].isalpha()
        and path_str[6] == "/"
    ):
        return True
    # Common network/remote mounts
    return path_str.startswith(("/run/user/", "/media/", "/net/"))


def _summarize_events(events: list[FsEvent]) -> str:
    """Summarize a batch like "2 created, 1 deleted"."""
    counts: Counter[FsEventKind] = Counter(event.kind for event in events)
    return ", ".join(f"{counts[kind]} {kind.value}" for kind in FsEventKind if counts[kind])


def to_fs_events(root: Path, changes: set[tuple[Change, str]]) -> list[FsEvent]:
    """Translate a watchfiles batch, dropping paths outside root or inside VCS dirs."""
    events: list[FsEvent] = []
    for change_type, path_str in changes:
        try:
            rel_path = Path(path_str).relative_to(root)
        except ValueError:
            continue
        if HARDCODED_DIRS.intersection(rel_path.parts):
            continue
        events.append(FsEvent(kind=_CHANGE_KINDS[change_type], path=path_str))
    events.sort(key=lambda e: e.path)
    return events


@dataclass
class TreeWatcher:
    """
    Async watcher that reports every change under ``root`` to ``on_change``.

    Batching is left to the consumer; each awatch batch is delivered as a
    single ``on_change`` call.
    """

    root: Path
    on_change: Callable[[list[FsEvent]], None]
    poll_interval: float = 1.0  # Seconds between polls (cross-filesystem)
    force_polling: bool = False

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _polling: bool = field(init=False)

    def __post_init__(self) -> None:
        # Backends report canonical paths; a symlinked root must match them
        self.root = self.root.resolve()
        self._polling = self.force_polling or _is_cross_filesystem(self.root)

    @property
    def running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Start watching for file changes."""
        if self._watch_task is not None:
            return

        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "tree_watcher_started",
            root=str(self.root),
            mode="polling" if self._polling else "native",
            interval=self.poll_interval if self._polling else None,
        )

    async def stop(self) -> None:
        """Stop watching for file changes."""
        self._stop_event.set()

        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None

        logger.info("tree_watcher_stopped")

    def _dispatch(self, changes: set[tuple[Change, str]]) -> None:
        events = to_fs_events(self.root, changes)
        if not events:
            return
        logger.info("changes_detected", count=len(events), summary=_summarize_events(events))
        self.on_change(events)

    async def _watch_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    async for changes in awatch(
                        self.root,
                        watch_filter=None,
                        recursive=True,
                        step=50,
                        rust_timeout=10_000,
                        stop_event=self._stop_event,
                        force_polling=self._polling,
                        poll_delay_ms=int(self.poll_interval * 1000),
                        ignore_permission_denied=True,
                    ):
                        self._dispatch(changes)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    if self._stop_event.is_set():
                        return
                    logger.error("watcher_error", error=str(e))
                    await asyncio.sleep(RESTART_BACKOFF_SEC)
        except asyncio.CancelledError:
            pass
