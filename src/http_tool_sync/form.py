"""In-memory form state owner.

Holds the values of an HTTP tool form as a nested ``dict`` addressed by
dotted paths such as ``config.url`` or ``tools.0.config.query_parameters``
(numeric parts index into lists).  The synchronizers only talk to this
through a small surface:

* ``watch(paths)`` -- batched read of several paths.
* ``get_values(path)`` -- point read.
* ``set_value(path, value, should_validate=..., should_dirty=...)`` --
  point write.
* ``field_array(path)`` -- ``append`` / ``insert`` / ``remove`` /
  ``update`` primitives for one field list.

Every write notifies subscribers synchronously with the written path.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from http_tool_sync.sync.models import ParamField

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


@dataclass(frozen=True)
class FormWrite:
    """One recorded write, kept for inspection."""

    path: str
    should_validate: bool
    should_dirty: bool


class FormState:
    """Mutable owner of one form's values.

    Args:
        values: Initial values.  Copied, never aliased.
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(values or {})
        self._dirty: set[str] = set()
        self._listeners: list[Listener] = []
        self.history: list[FormWrite] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_values(self, path: str | None = None) -> Any:
        """Return the value at *path* (whole form when ``None``).

        Lists are returned as shallow copies so callers cannot mutate the
        stored list.  Missing paths read as ``None``.
        """
        if path is None:
            return copy.deepcopy(self._values)
        node: Any = self._values
        for part in path.split("."):
            if isinstance(node, dict):
                node = node.get(part)
            elif isinstance(node, list) and part.isdigit():
                index = int(part)
                node = node[index] if index < len(node) else None
            else:
                return None
            if node is None:
                return None
        if isinstance(node, list):
            return list(node)
        return node

    def watch(self, paths: list[str]) -> list[Any]:
        """Read several paths in one batch."""
        return [self.get_values(path) for path in paths]

    def is_dirty(self, path: str | None = None) -> bool:
        if path is None:
            return bool(self._dirty)
        return path in self._dirty

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_value(
        self,
        path: str,
        value: Any,
        *,
        should_validate: bool = False,
        should_dirty: bool = False,
    ) -> None:
        """Write *value* at *path*, creating intermediate dicts."""
        parts = path.split(".")
        node: Any = self._values
        for part in parts[:-1]:
            if isinstance(node, list):
                node = node[int(part)]
            else:
                node = node.setdefault(part, {})
        last = parts[-1]
        if isinstance(node, list):
            index = int(last)
            if index == len(node):
                node.append(value)
            else:
                node[index] = value
        else:
            node[last] = value

        if should_dirty:
            self._dirty.add(path)
        self.history.append(FormWrite(path, should_validate, should_dirty))
        logger.debug("Form write %s (dirty=%s)", path, should_dirty)
        self._notify(path)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def field_array(self, path: str) -> FieldArray:
        return FieldArray(self, path)

    def _notify(self, path: str) -> None:
        for listener in list(self._listeners):
            listener(path)


class FieldArray:
    """Field-list primitives over one path of a ``FormState``.

    Every primitive rewrites the whole list and marks it dirty.
    """

    def __init__(self, form: FormState, path: str) -> None:
        self.form = form
        self.path = path

    @property
    def fields(self) -> list[ParamField]:
        return self.form.get_values(self.path) or []

    def append(self, field: ParamField) -> None:
        self._write(self.fields + [field])

    def insert(self, index: int, field: ParamField) -> None:
        fields = self.fields
        fields.insert(index, field)
        self._write(fields)

    def remove(self, index: int | None = None) -> None:
        """Remove the field at *index*, or every field when ``None``."""
        if index is None:
            self._write([])
            return
        fields = self.fields
        del fields[index]
        self._write(fields)

    def update(self, index: int, field: ParamField) -> None:
        fields = self.fields
        if index == len(fields):
            fields.append(field)
        elif index > len(fields):
            raise IndexError(
                f"Cannot update {self.path}.{index}: list has {len(fields)} fields"
            )
        else:
            fields[index] = field
        self._write(fields)

    def _write(self, fields: list[ParamField]) -> None:
        self.form.set_value(
            self.path, fields, should_validate=True, should_dirty=True
        )
