"""Sync direction tracking.

``OriginTracker`` follows the coarse pointer signals of the field editor:
``fields`` while the user is interacting with the structured fields,
``url`` otherwise.

``SyncGate`` is the stricter companion: a two-state machine (idle, or
syncing in one direction) that refuses to start a pass in the opposite
direction while one is running.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from http_tool_sync.errors import SyncInFlightError, UnknownOriginError
from http_tool_sync.sync.models import SyncOrigin


class OriginTracker:
    """Hold the current ``SyncOrigin`` (default ``url``)."""

    def __init__(self, initial: SyncOrigin = SyncOrigin.URL) -> None:
        self._current = SyncOrigin(initial)

    @property
    def current(self) -> SyncOrigin:
        return self._current

    def pointer_down(self) -> None:
        """The user started interacting with the field editor."""
        self._current = SyncOrigin.FIELDS

    def pointer_leave(self) -> None:
        """The pointer left the field editor."""
        self._current = SyncOrigin.URL


class SyncGate:
    """Refuse to start a pass against the direction already in flight."""

    def __init__(self) -> None:
        self._direction: SyncOrigin | None = None
        self._depth = 0

    @property
    def idle(self) -> bool:
        return self._direction is None

    @property
    def direction(self) -> SyncOrigin | None:
        return self._direction

    @contextmanager
    def enter(self, origin: SyncOrigin | str) -> Iterator[SyncOrigin]:
        """Hold the gate in *origin*'s direction for the ``with`` body.

        Raises:
            UnknownOriginError: If *origin* is not a ``SyncOrigin`` value.
            SyncInFlightError: If a pass in the other direction is running.
        """
        try:
            direction = SyncOrigin(origin)
        except ValueError:
            raise UnknownOriginError(origin) from None

        if self._direction is not None and self._direction != direction:
            raise SyncInFlightError(
                f"Cannot start a {direction.value} pass while a "
                f"{self._direction.value} pass is running"
            )

        self._direction = direction
        self._depth += 1
        try:
            yield direction
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._direction = None
