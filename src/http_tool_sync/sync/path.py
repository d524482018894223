"""Path variable segments <-> path variable list synchronization.

Path variables are whole ``:name`` segments of the url path.  They are always
user-provided: the caller fills them in at invocation time, so the list
never carries literal values.

url -> fields
    Variable names are extracted left to right (duplicates dropped).  The
    field at position *i* is overwritten with the *i*-th name, which keeps
    its description and accepted values across renames.  Fields whose name
    disappeared are removed only when the number of variables changed.

fields -> url
    The literal part of the path is kept, every ``:name`` segment is dropped
    and ``/:key`` is appended for each field in order.  Without an
    absolute url there is no base path to keep, so the url becomes just
    the ``/:key`` segments.
"""

from __future__ import annotations

import logging

from http_tool_sync.errors import UrlParseError
from http_tool_sync.sync.base import UrlFieldSynchronizer
from http_tool_sync.sync.models import ParamField
from http_tool_sync.sync.urls import (
    literal_base_path,
    parse_absolute_url,
    path_variable_names,
)

logger = logging.getLogger(__name__)


def variable_keys(fields: list[ParamField]) -> list[str]:
    keys: list[str] = []
    for field in fields:
        if field.key and field.key not in keys:
            keys.append(field.key)
    return keys


class PathVariableSynchronizer(UrlFieldSynchronizer):
    """Synchronize ``:name`` path segments with a path variable list."""

    # Path rewrites are cosmetic as far as validation goes.
    validate_url_writes = False

    def url_to_fields(self, url: str, fields: list[ParamField]) -> int:
        reconciler = self.reconciler()
        names = path_variable_names(url)
        if not names:
            reconciler.clear()
            return reconciler.mutations

        if len(names) != len(fields):
            reconciler.remove_where(lambda f: f.key not in names)
            reconciler.truncate(len(names))

        for index, name in enumerate(names):
            reconciler.write(index, key=name, value="", is_user_provided=True)
        return reconciler.mutations

    def fields_to_url(self, fields: list[ParamField], url: str) -> int:
        segments = "".join(f"/:{key}" for key in variable_keys(fields))
        try:
            parsed = parse_absolute_url(url)
        except UrlParseError as exc:
            logger.debug("No base path to keep: %s", exc)
            return self.write_url(segments, url)

        path = literal_base_path(parsed.path) + segments
        return self.write_url(parsed.replace(path=path).geturl(), url)
