"""Positional field-list reconciliation.

Both synchronizers rewrite field lists through ``FieldReconciler`` so the
user-authored metadata of a field (``description``, ``accepted_values``)
survives when the url side renames or re-values it.  The reconciler merges
the url-expressible part of a field onto whatever record already sits at
the target position and only issues a form write when something changed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from http_tool_sync.sync.models import ParamField

if TYPE_CHECKING:
    from http_tool_sync.form import FieldArray


def merge_field(
    existing: ParamField | None,
    key: str,
    value: str | None,
    is_user_provided: bool,
) -> ParamField:
    """Return *existing* with key/value/flag replaced.

    A ``None`` *existing* yields a brand-new field with empty metadata.
    """
    data = existing.model_dump() if existing is not None else {}
    data.update(key=key, value=value, is_user_provided=is_user_provided)
    return ParamField.model_validate(data)


class FieldReconciler:
    """Apply update-at-position edits to one ``FieldArray``.

    Attributes:
        mutations: Number of form writes issued so far.
    """

    def __init__(self, array: FieldArray) -> None:
        self.array = array
        self.mutations = 0

    @property
    def fields(self) -> list[ParamField]:
        return self.array.fields

    def clear(self) -> None:
        if self.fields:
            self.array.remove()
            self.mutations += 1

    def remove_where(self, predicate: Callable[[ParamField], bool]) -> int:
        """Remove every field matching *predicate*; returns the count.

        *predicate* sees the fields in list order, so it may keep state
        (e.g. to drop repeated keys after their first occurrence).
        """
        doomed = [i for i, f in enumerate(self.fields) if predicate(f)]
        for index in reversed(doomed):
            self.array.remove(index)
            self.mutations += 1
        return len(doomed)

    def remove(self, index: int) -> ParamField:
        """Remove and return the field at *index*."""
        field = self.fields[index]
        self.array.remove(index)
        self.mutations += 1
        return field

    def truncate(self, length: int) -> None:
        while len(self.fields) > length:
            self.array.remove(len(self.fields) - 1)
            self.mutations += 1

    def write(
        self,
        index: int,
        key: str,
        value: str | None,
        is_user_provided: bool,
    ) -> bool:
        """Merge the binding onto the field at *index*, or append.

        Returns:
            ``True`` if a write was issued.
        """
        fields = self.fields
        existing = fields[index] if index < len(fields) else None
        merged = merge_field(existing, key, value, is_user_provided)
        if existing is not None and merged == existing:
            return False
        self.array.update(min(index, len(fields)), merged)
        self.mutations += 1
        return True

    def insert(
        self,
        index: int,
        key: str,
        value: str | None,
        is_user_provided: bool,
        carry: ParamField | None = None,
    ) -> None:
        """Insert a field at *index* (clamped to the list end).

        The new field starts from *carry*'s metadata when given.
        """
        field = merge_field(carry, key, value, is_user_provided)
        fields = self.fields
        if index >= len(fields):
            self.array.append(field)
        else:
            self.array.insert(index, field)
        self.mutations += 1
