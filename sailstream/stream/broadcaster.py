"""Subscriber fan-out for pipeline channels."""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

__all__ = ["Broadcaster", "enqueue_message"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Broadcaster(Generic[T]):
    """Deliver each published item to every registered callback.

    A callback that raises is logged and skipped; the remaining subscribers
    still receive the item.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: list[Callable[[T], None]] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def add_subscriber(self, callback: Callable[[T], None]) -> None:
        """Register a callback to receive subsequent items."""
        self._subscribers.append(callback)

    def remove_subscriber(self, callback: Callable[[T], None]) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, item: T) -> None:
        for callback in list(self._subscribers):
            try:
                callback(item)
            except Exception:
                logger.exception("Subscriber %r of %s channel failed", callback, self.name)


def enqueue_message(queue: asyncio.Queue[T], item: T) -> None:
    """Put ``item`` on a bounded queue, dropping the oldest entry when full."""
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(item)
