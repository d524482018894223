"""Common plumbing for url-bound field list synchronizers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from http_tool_sync.errors import UnknownOriginError
from http_tool_sync.sync.models import ParamField, SyncOrigin
from http_tool_sync.sync.reconciler import FieldReconciler

if TYPE_CHECKING:
    from http_tool_sync.form import FormState

logger = logging.getLogger(__name__)


class UrlFieldSynchronizer:
    """Keep the url at *url_path* and the field list at *list_path* consistent.

    Subclasses implement ``url_to_fields`` and ``fields_to_url``; both
    return the number of form writes they issued.

    Args:
        form: The form state owner.
        url_path: Dotted path of the url value.
        list_path: Dotted path of the field list.
    """

    #: ``should_validate`` flag used for url rewrites.
    validate_url_writes = True

    def __init__(self, form: FormState, url_path: str, list_path: str) -> None:
        self.form = form
        self.url_path = url_path
        self.list_path = list_path

    def sync(
        self, origin: SyncOrigin | str, url: str, fields: list[ParamField]
    ) -> int:
        """Run one pass in the direction given by *origin*.

        Raises:
            UnknownOriginError: If *origin* is neither ``url`` nor ``fields``.
        """
        url = url or ""
        fields = fields or []
        if origin == SyncOrigin.URL:
            return self.url_to_fields(url, fields)
        if origin == SyncOrigin.FIELDS:
            return self.fields_to_url(fields, url)
        raise UnknownOriginError(origin)

    def url_to_fields(self, url: str, fields: list[ParamField]) -> int:
        raise NotImplementedError

    def fields_to_url(self, fields: list[ParamField], url: str) -> int:
        raise NotImplementedError

    def reconciler(self) -> FieldReconciler:
        return FieldReconciler(self.form.field_array(self.list_path))

    def write_url(self, new_url: str, current: str) -> int:
        """Store *new_url* when it differs from *current*; returns writes."""
        if new_url == current:
            return 0
        logger.debug("Rewriting %s: %r -> %r", self.url_path, current, new_url)
        self.form.set_value(
            self.url_path,
            new_url,
            should_validate=self.validate_url_writes,
            should_dirty=True,
        )
        return 1
