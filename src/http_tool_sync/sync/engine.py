"""Sync engine binding one field list of a form to its url.

The ``SyncEngine`` ties the form, the debouncer, the origin tracker and a
synchronizer together:

1. Subscribes to the form; every change to the url or the url-bound
   lists pushes a fresh ``Snapshot`` into the debouncer.
2. When the debounce window settles, the snapshot is compared with the
   one the engine's own previous pass left behind.  A match means the
   change was the engine's own write echoing back, and is skipped.
3. Otherwise one pass runs in the direction the origin tracker reports,
   inside the ``SyncGate``.
4. The pass is recorded as a ``SyncPass``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from http_tool_sync.sync.base import UrlFieldSynchronizer
from http_tool_sync.sync.debounce import DEFAULT_DELAY_MS, Debouncer
from http_tool_sync.sync.models import Snapshot, SyncOrigin, SyncPass
from http_tool_sync.sync.origin import OriginTracker, SyncGate
from http_tool_sync.sync.path import PathVariableSynchronizer
from http_tool_sync.sync.query import QuerySynchronizer

if TYPE_CHECKING:
    from http_tool_sync.form import FormState

logger = logging.getLogger(__name__)

QUERY_PARAMETERS = "query_parameters"
PATH_VARIABLES = "path_variables"

_SYNCHRONIZERS: dict[str, type[UrlFieldSynchronizer]] = {
    QUERY_PARAMETERS: QuerySynchronizer,
    PATH_VARIABLES: PathVariableSynchronizer,
}


def create_synchronizer(
    form: FormState, list_name: str, prefix: str = ""
) -> UrlFieldSynchronizer:
    """Build the synchronizer for *list_name*.

    Raises:
        ValueError: If *list_name* is not bound to the url.
    """
    try:
        cls = _SYNCHRONIZERS[list_name]
    except KeyError:
        valid = ", ".join(sorted(_SYNCHRONIZERS))
        raise ValueError(
            f"Field list '{list_name}' is not bound to the url. "
            f"Valid lists: {valid}"
        ) from None
    return cls(form, f"{prefix}config.url", f"{prefix}config.{list_name}")


class SyncEngine:
    """Drive synchronization passes for one url-bound field list.

    Args:
        form: The form state owner.
        list_name: ``query_parameters`` or ``path_variables``.
        prefix: Form path prefix (``""`` or ``"tools.0."``).
        debounce_ms: Quiet window before a pass runs.
        tracker: Origin tracker; a fresh one defaults to ``url``.
        gate: Gate shared by the engines of one form.
    """

    def __init__(
        self,
        form: FormState,
        list_name: str,
        *,
        prefix: str = "",
        debounce_ms: int = DEFAULT_DELAY_MS,
        tracker: OriginTracker | None = None,
        gate: SyncGate | None = None,
    ) -> None:
        self.form = form
        self.list_name = list_name
        self.prefix = prefix
        self.synchronizer = create_synchronizer(form, list_name, prefix)
        self.tracker = tracker or OriginTracker()
        self.gate = gate or SyncGate()
        self.debouncer: Debouncer[Snapshot] = Debouncer(
            self._on_settled, delay_ms=debounce_ms
        )

        self.passes: list[SyncPass] = []
        self.skipped = 0
        self._echo: Snapshot | None = None
        self._unsubscribe: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    @property
    def watched_paths(self) -> list[str]:
        return [
            f"{self.prefix}config.url",
            f"{self.prefix}config.{QUERY_PARAMETERS}",
            f"{self.prefix}config.{PATH_VARIABLES}",
        ]

    def start(self) -> None:
        """Subscribe to form changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.form.subscribe(self._on_change)

    def stop(self) -> None:
        """Unsubscribe and drop any pending snapshot."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.debouncer.cancel()

    def snapshot(self) -> Snapshot:
        url, query, path = self.form.watch(self.watched_paths)
        return Snapshot(
            url=url or "",
            query_parameters=query or [],
            path_variables=path or [],
        )

    def _on_change(self, path: str) -> None:
        for watched in self.watched_paths:
            if (
                path == watched
                or path.startswith(watched + ".")
                or watched.startswith(path + ".")
            ):
                self.debouncer.push(self.snapshot())
                return

    def _on_settled(self, snapshot: Snapshot) -> None:
        if snapshot == self._echo:
            self.skipped += 1
            logger.debug("Skipping echo of own %s write", self.list_name)
            return
        self.run_pass(snapshot)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def run_pass(
        self,
        snapshot: Snapshot | None = None,
        origin: SyncOrigin | str | None = None,
    ) -> SyncPass:
        """Run one synchronization pass now.

        Args:
            snapshot: Values to synchronize; read from the form when omitted.
            origin: Direction; the tracker's current origin when omitted.

        Returns:
            The recorded ``SyncPass``.
        """
        if snapshot is None:
            snapshot = self.snapshot()
        if origin is None:
            origin = self.tracker.current
        fields = getattr(snapshot, self.list_name)

        with self.gate.enter(origin) as direction:
            mutations = self.synchronizer.sync(direction, snapshot.url, fields)

        after = self.snapshot()
        self._echo = after
        record = SyncPass(
            list_name=self.list_name,
            origin=direction,
            url_before=snapshot.url,
            url_after=after.url,
            fields_before=len(fields),
            fields_after=len(getattr(after, self.list_name)),
            mutations=mutations,
        )
        self.passes.append(record)
        logger.debug(
            "%s pass (%s): %d mutation(s), url %r -> %r",
            self.list_name,
            direction.value,
            mutations,
            record.url_before,
            record.url_after,
        )
        return record
