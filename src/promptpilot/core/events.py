"""Typed observer channels.

Each producer owns an ``EventChannel`` and exposes it read-only; consumers
call ``subscribe`` and keep the returned ``Subscription`` to detach later.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

Listener = Callable[[T], None]


@dataclass(eq=False)
class Subscription(Generic[T]):
    """Handle returned by ``EventChannel.subscribe``."""

    channel: EventChannel[T]
    listener: Listener[T]

    def dispose(self) -> None:
        self.channel.unsubscribe(self.listener)


@dataclass
class EventChannel(Generic[T]):
    """Synchronous fan-out of a single event type to its listeners.

    Listeners run in subscription order on the caller's task. A listener
    that raises is logged and skipped; delivery to the remaining listeners
    continues.
    """

    name: str
    _listeners: list[Listener[T]] = field(default_factory=list, init=False)

    def subscribe(self, listener: Listener[T]) -> Subscription[T]:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def unsubscribe(self, listener: Listener[T]) -> None:
        """Detach ``listener``. No-op if it is not subscribed."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def fire(self, payload: T) -> None:
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception as e:
                logger.error(
                    "listener_failed",
                    channel=self.name,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(e),
                )
