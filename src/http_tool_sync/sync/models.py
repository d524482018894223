"""Pydantic models for the URL/fields synchronizer.

Defines the core data contracts used across all sync modules:

- ``SyncOrigin``: Which representation the user is editing.
- ``ParamField``: One entry of a query-parameter, path-variable, header or
  body list.
- ``Snapshot``: The url plus both url-bound field lists at one instant.
- ``SyncPass``: Outcome of one synchronization pass.

Field models are frozen; the reconciler produces updated copies instead of
mutating records in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

USER_SENTINEL = "{user}"


class SyncOrigin(str, Enum):
    """Representation that is authoritative for the next pass."""

    URL = "url"
    FIELDS = "fields"


class ParamField(BaseModel):
    """A single keyed entry in a field list.

    Attributes:
        key: Identity of the field within its list.
        value: Literal value; always ``""`` when ``is_user_provided``.
        is_user_provided: The runtime caller supplies the value.
        description: User-authored hint for the caller.
        accepted_values: User-authored list of allowed values.
    """

    key: str = ""
    value: str | None = None
    is_user_provided: bool | None = Field(
        default=None, alias="isUserProvided"
    )
    description: str | None = None
    accepted_values: list[str] | None = Field(
        default=None, alias="acceptedValues"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _blank_user_provided_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and (
            data.get("is_user_provided") or data.get("isUserProvided")
        ):
            data = {**data, "value": ""}
        return data

    @property
    def query_value(self) -> str:
        """Value as written into a query string."""
        if self.is_user_provided:
            return USER_SENTINEL
        return self.value or ""

    @property
    def is_blank(self) -> bool:
        """True for a non-user-provided field without a value."""
        return not self.is_user_provided and not self.value

    def same_binding(self, other: ParamField) -> bool:
        """Compare only the parts the url can express."""
        return (
            self.key == other.key
            and (self.value or "") == (other.value or "")
            and bool(self.is_user_provided) == bool(other.is_user_provided)
        )


class Snapshot(BaseModel):
    """The url and the url-bound field lists read in one batch."""

    url: str = ""
    query_parameters: list[ParamField] = []
    path_variables: list[ParamField] = []

    model_config = {"frozen": True}


class SyncPass(BaseModel):
    """Record of one synchronization pass.

    Attributes:
        list_name: Field list the pass ran for (``query_parameters`` or
            ``path_variables``).
        origin: Direction of the pass.
        url_before: Url at the start of the pass.
        url_after: Url at the end of the pass.
        fields_before: Field count at the start of the pass.
        fields_after: Field count at the end of the pass.
        mutations: Number of writes issued to the form.
    """

    list_name: str
    origin: SyncOrigin
    url_before: str
    url_after: str
    fields_before: int
    fields_after: int
    mutations: int = 0

    model_config = {"frozen": True}

    @property
    def changed(self) -> bool:
        return self.mutations > 0
