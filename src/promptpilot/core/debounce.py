"""Trailing-edge debouncing on the running asyncio loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger()


@dataclass
class Debounced:
    """
    Callable wrapper that coalesces bursts of calls into one delivery.

    Every call restarts the quiet window. When ``window_sec`` elapses
    without another call, ``callback`` runs once with the arguments of the
    most recent call. Must be called from inside a running event loop.
    """

    callback: Callable[..., Any]
    window_sec: float

    _task: asyncio.Task[None] | None = field(default=None, init=False)
    _args: tuple[Any, ...] = field(default=(), init=False)
    _kwargs: dict[str, Any] = field(default_factory=dict, init=False)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._args = args
        self._kwargs = kwargs
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire_later())

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        """Drop the pending delivery, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._args = ()
        self._kwargs = {}

    async def _fire_later(self) -> None:
        try:
            await asyncio.sleep(self.window_sec)
        except asyncio.CancelledError:
            return
        args, kwargs = self._args, self._kwargs
        self._task = None
        self._args = ()
        self._kwargs = {}
        try:
            self.callback(*args, **kwargs)
        except Exception as e:
            logger.error(
                "debounced_callback_failed",
                callback=getattr(self.callback, "__qualname__", repr(self.callback)),
                error=str(e),
            )


def debounce(callback: Callable[..., Any], window_sec: float) -> Debounced:
    """Wrap ``callback`` so that only the last call of a burst fires."""
    return Debounced(callback=callback, window_sec=window_sec)
