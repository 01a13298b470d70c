"""Incremental, cancellable name search over a directory tree.

Design:
- ``iter_matches`` is a lazy async generator: at each directory it yields
  every matching entry of that level first, then descends into each
  subdirectory in listing order (current-level-first, depth-first)
- Matching is a case-insensitive substring test on the entry name;
  directories are descended into whether or not they match
- Every query change allocates a new generation with its own
  ``CancellationToken``; the previous generation's token is cancelled
- The traversal consults the token before every listing and every yield
  and never mutates it; once cancelled it issues no further I/O
- Streamed hits are buffered per generation and delivered through a
  debounced notifier; completion delivers the full buffer immediately
- Only the current generation ever reaches subscribers
"""

from __future__ import annotations

import asyncio
import contextlib
import os
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from enum import Enum

import structlog

from promptpilot.core.debounce import Debounced, debounce
from promptpilot.core.events import EventChannel
from promptpilot.fs.store import EntryKind
from promptpilot.tree.lister import EntryLister

logger = structlog.get_logger()

DEFAULT_DEBOUNCE_SEC = 0.1


class SearchState(Enum):
    """Lifecycle of a search generation."""

    IDLE = "idle"
    SEARCHING = "searching"
    SUPERSEDED = "superseded"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class SearchHit:
    """A matching entry, addressed relative to the search root."""

    relative_path: str
    kind: EntryKind

    @property
    def name(self) -> str:
        return os.path.basename(self.relative_path)

    @property
    def parent(self) -> str:
        """Relative directory of the hit; empty for root-level hits."""
        return os.path.dirname(self.relative_path)


@dataclass(frozen=True, slots=True)
class SearchUpdate:
    """Payload delivered to ``SearchEngine.results_changed`` subscribers."""

    generation: int
    query: str
    results: tuple[SearchHit, ...]
    completed: bool


class CancellationToken:
    """Cancellation flag of one search generation.

    Only the owning ``SearchSession`` calls ``cancel``; traversals read
    ``cancelled``.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


@dataclass(eq=False)
class SearchSession:
    """One search generation and its accumulated results."""

    generation: int
    query: str
    state: SearchState = SearchState.SEARCHING
    results: list[SearchHit] = field(default_factory=list)
    token: CancellationToken = field(default_factory=CancellationToken, repr=False)
    _notifier: Debounced | None = field(default=None, init=False, repr=False)

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def supersede(self) -> None:
        self.token.cancel()
        if self._notifier is not None:
            self._notifier.cancel()
        if self.state is SearchState.SEARCHING:
            self.state = SearchState.SUPERSEDED


def matches(name: str, query: str) -> bool:
    """Case-insensitive substring match."""
    return query.casefold() in name.casefold()


async def iter_matches(
    lister: EntryLister,
    dir_path: str,
    query: str,
    token: CancellationToken,
    _prefix: str = "",
) -> AsyncIterator[SearchHit]:
    """Yield entries under ``dir_path`` whose name contains ``query``.

    Unreadable directories list as empty (the lister logs them), so a failing
    subtree ends that branch and traversal continues with its siblings.
    """
    if token.cancelled:
        return
    entries = await lister.list_entries(dir_path)

    for entry in entries:
        if token.cancelled:
            return
        if matches(entry.name, query):
            yield SearchHit(os.path.join(_prefix, entry.name), entry.kind)

    for entry in entries:
        if not entry.is_directory:
            continue
        if token.cancelled:
            return
        sub = iter_matches(
            lister, entry.absolute_path, query, token, os.path.join(_prefix, entry.name)
        )
        async with contextlib.aclosing(sub):
            async for hit in sub:
                yield hit


class SearchEngine:
    """Runs at most one live search generation at a time over ``root``.

    ``set_query`` owns the view's session, which drives ``results_changed``
    and ``active``. ``search`` hands out one-shot pull streams that never
    touch that session; a newer query of either kind ends the previous pull
    stream.
    """

    def __init__(
        self,
        lister: EntryLister,
        root: str,
        *,
        debounce_sec: float = DEFAULT_DEBOUNCE_SEC,
    ) -> None:
        self._lister = lister
        self._root = root
        self._debounce_sec = debounce_sec
        self._generation = 0
        self._session: SearchSession | None = None
        self._pull: SearchSession | None = None
        self._task: asyncio.Task[None] | None = None
        self._results_changed: EventChannel[SearchUpdate] = EventChannel("search_results_changed")

    @property
    def results_changed(self) -> EventChannel[SearchUpdate]:
        return self._results_changed

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def session(self) -> SearchSession | None:
        return self._session

    @property
    def query(self) -> str:
        return self._session.query if self._session is not None else ""

    @property
    def active(self) -> bool:
        """True while a ``set_query`` search is in effect (running or completed)."""
        return self._session is not None

    @property
    def state(self) -> SearchState:
        return self._session.state if self._session is not None else SearchState.IDLE

    @property
    def results(self) -> list[SearchHit]:
        """Results accumulated so far by the current ``set_query`` generation."""
        return list(self._session.results) if self._session is not None else []

    def search(self, query: str, root: str | None = None) -> AsyncIterator[SearchHit]:
        """Start a pull-mode generation and return its lazy result stream.

        The returned generator is single-use and stops as soon as a newer
        generation is started. Nothing is delivered to subscribers.
        """
        self._supersede(self._pull)
        self._pull = self._next_session(query)
        return self._stream(self._pull, root or self._root)

    def set_query(self, query: str) -> SearchSession | None:
        """Supersede any active search and start streaming ``query``.

        An empty query clears the search and notifies subscribers with an
        empty, completed update.
        """
        self._supersede(self._pull)
        self._supersede(self._session)
        self._pull = None
        if not query:
            self._session = None
            self._task = None
            logger.debug("search_cleared", generation=self._generation)
            self._results_changed.fire(
                SearchUpdate(generation=self._generation, query="", results=(), completed=True)
            )
            return None

        session = self._next_session(query)
        session._notifier = debounce(self._deliver, self._debounce_sec)
        self._session = session
        self._task = asyncio.get_running_loop().create_task(self._run(session))
        return session

    async def wait(self) -> None:
        """Wait until the current streaming generation stops running."""
        while self._task is not None and not self._task.done():
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def close(self) -> None:
        """Cancel every live generation and forget the view's session."""
        self._supersede(self._pull)
        self._supersede(self._session)
        self._pull = None
        self._session = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _next_session(self, query: str) -> SearchSession:
        self._generation += 1
        return SearchSession(generation=self._generation, query=query)

    def _supersede(self, session: SearchSession | None) -> None:
        if session is None or session.cancelled:
            return
        was_running = session.state is SearchState.SEARCHING
        session.supersede()
        if was_running:
            logger.info(
                "search_superseded",
                generation=session.generation,
                query=session.query,
                discarded=len(session.results),
            )

    async def _run(self, session: SearchSession) -> None:
        structlog.contextvars.bind_contextvars(
            search_generation=session.generation, search_query=session.query
        )
        logger.info("search_started", root=self._root)

        notify = session._notifier
        stream = self._stream(session, self._root)
        async with contextlib.aclosing(stream):
            async for _hit in stream:
                if notify is not None:
                    notify(session)

        if session.state is not SearchState.COMPLETED:
            return

        if notify is not None:
            notify.cancel()
        logger.info("search_completed", results=len(session.results))
        self._deliver(session, completed=True)

    async def _stream(self, session: SearchSession, root: str) -> AsyncIterator[SearchHit]:
        hits = iter_matches(self._lister, root, session.query, session.token)
        async with contextlib.aclosing(hits):
            async for hit in hits:
                if session.cancelled:
                    return
                session.results.append(hit)
                logger.debug("search_hit", path=hit.relative_path)
                yield hit
        if not session.cancelled:
            session.state = SearchState.COMPLETED

    def _deliver(self, session: SearchSession, completed: bool = False) -> None:
        if session is not self._session or session.cancelled:
            return
        self._results_changed.fire(
            SearchUpdate(
                generation=session.generation,
                query=session.query,
                results=tuple(session.results),
                completed=completed,
            )
        )
