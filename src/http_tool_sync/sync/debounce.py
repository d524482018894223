"""Trailing-edge debounce on the running asyncio event loop.

Every ``push()`` replaces the pending item and restarts the quiet window;
the callback receives only the last item once the window elapses with no
further pushes.  Everything runs on the loop thread, so no locking.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 50


class Debouncer(Generic[T]):
    """Coalesce a burst of items into the last one.

    Args:
        callback: Called with the settled item.
        delay_ms: Quiet window in milliseconds.
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> None:
        self.callback = callback
        self.delay_ms = delay_ms
        self._handle: asyncio.TimerHandle | None = None
        self._item: T | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, item: T) -> None:
        """Replace the pending item and restart the quiet window.

        Must be called from within a running event loop.
        """
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._item = item
        self._handle = loop.call_later(self.delay_ms / 1000, self._fire)

    def flush(self) -> bool:
        """Deliver the pending item now.  Returns ``False`` if none."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending item without delivering it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._item = None

    def _fire(self) -> None:
        item = self._item
        self._handle = None
        self._item = None
        logger.debug("Debounce window settled")
        self.callback(item)  # type: ignore[arg-type]
