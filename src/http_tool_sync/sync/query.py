"""Query string <-> query parameter list synchronization.

url -> fields
    The query string is read into an ordered mapping.  Fields whose key
    left the url are dropped (only when the counts differ; a same-size
    edit is treated as a rename and keeps the old field's metadata), new
    keys are placed at their url position and changed values are updated
    in place.  A renamed key whose position holds a live field takes the
    first leftover orphan's metadata and moves to that position.
    ``{user}`` marks a value the caller provides at run time.

fields -> url
    The query string is rebuilt from the list in order.  Fields without a
    key, and non-user-provided fields without a value, are left out.
    When the url is not absolute the query is built as a bare
    ``?k=v&...`` string instead.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from http_tool_sync.errors import UrlParseError
from http_tool_sync.sync.base import UrlFieldSynchronizer
from http_tool_sync.sync.models import USER_SENTINEL, ParamField
from http_tool_sync.sync.urls import parse_absolute_url, parse_query, serialize_query

logger = logging.getLogger(__name__)


def binding_for(key: str, raw_value: str) -> dict:
    """Translate one query entry into field attributes."""
    if raw_value == USER_SENTINEL:
        return {"key": key, "value": "", "is_user_provided": True}
    return {"key": key, "value": raw_value, "is_user_provided": False}


def query_entries(fields: list[ParamField]) -> OrderedDict[str, str]:
    """Entries to write for *fields*; a repeated key keeps its last value."""
    entries: OrderedDict[str, str] = OrderedDict()
    for field in fields:
        if not field.key or field.is_blank:
            continue
        entries[field.key] = field.query_value
    return entries


def live_index(
    fields: list[ParamField], params: OrderedDict[str, str], position: int
) -> int:
    """List index that puts a new field after *position* live fields.

    Fields whose key is absent from *params* are not counted, so the
    result still holds once those orphans are swept away.
    """
    live = [i for i, f in enumerate(fields) if f.key in params]
    if position < len(live):
        return live[position]
    return live[-1] + 1 if live else 0


class QuerySynchronizer(UrlFieldSynchronizer):
    """Synchronize the url query string with a query parameter list."""

    def url_to_fields(self, url: str, fields: list[ParamField]) -> int:
        reconciler = self.reconciler()
        try:
            parsed = parse_absolute_url(url)
        except UrlParseError as exc:
            if url == "":
                reconciler.clear()
            else:
                logger.debug("Query fields left unchanged: %s", exc)
            return reconciler.mutations

        params = parse_query(parsed.query)
        if not params:
            reconciler.clear()
            return reconciler.mutations

        if len(fields) != len(params):
            reconciler.remove_where(lambda f: f.key not in params)

        for position, (key, raw_value) in enumerate(params.items()):
            binding = binding_for(key, raw_value)
            current = reconciler.fields
            index = next(
                (i for i, f in enumerate(current) if f.key == key), None
            )
            if index is not None:
                reconciler.write(index, **binding)
                continue
            if position < len(current) and current[position].key not in params:
                # Rename: carry the orphan's metadata over.
                reconciler.write(position, **binding)
                continue

            orphan = next(
                (i for i, f in enumerate(current) if f.key not in params), None
            )
            carry = reconciler.remove(orphan) if orphan is not None else None
            target = live_index(reconciler.fields, params, position)
            reconciler.insert(target, carry=carry, **binding)

        seen: set[str] = set()

        def _stale(field: ParamField) -> bool:
            if field.key not in params or field.key in seen:
                return True
            seen.add(field.key)
            return False

        reconciler.remove_where(_stale)
        return reconciler.mutations

    def fields_to_url(self, fields: list[ParamField], url: str) -> int:
        entries = query_entries(fields)
        try:
            parsed = parse_absolute_url(url)
        except UrlParseError as exc:
            logger.debug("Building bare query string: %s", exc)
            new_url = "&".join(f"{k}={v}" for k, v in entries.items())
            if new_url:
                new_url = "?" + new_url
            return self.write_url(new_url, url)

        query = serialize_query(list(entries.items()))
        return self.write_url(parsed.replace(query=query).geturl(), url)
