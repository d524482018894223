"""Bidirectional URL <-> structured fields synchronizer.

Keeps an HTTP tool's url template and its query-parameter and
path-variable lists consistent while the user edits either side.

Architecture
------------
Raw edits are coalesced by a trailing-edge debounce.  When the edits
settle, the origin tracker decides which side is authoritative and one
synchronization pass rewrites the other side.  A pass never writes back
to the side it read from, and the engine ignores the echo of its own
write, so the two views converge on a fixed point instead of
oscillating.

Modules:

- ``engine``     -- ``SyncEngine``: wires form, debounce, origin and
  synchronizer for one field list.
- ``query``      -- ``QuerySynchronizer``: query string <-> query fields.
- ``path``       -- ``PathVariableSynchronizer``: ``:name`` segments <->
  path variable fields.
- ``reconciler`` -- ``FieldReconciler``: positional updates that keep
  field metadata.
- ``urls``       -- url parsing, query serialization, path tokenizer.
- ``debounce``   -- ``Debouncer``: asyncio trailing-edge debounce.
- ``origin``     -- ``OriginTracker`` and ``SyncGate``.
- ``models``     -- ``ParamField``, ``SyncOrigin``, ``Snapshot``,
  ``SyncPass``.

Usage example
-------------
::

    from http_tool_sync.form import FormState
    from http_tool_sync.sync import SyncEngine, SyncOrigin

    form = FormState({"config": {"url": "https://api.example.com?city={user}"}})
    engine = SyncEngine(form, "query_parameters")
    engine.run_pass(origin=SyncOrigin.URL)
    form.get_values("config.query_parameters")
    # [ParamField(key='city', value='', is_user_provided=True, ...)]
"""

from .debounce import Debouncer
from .engine import SyncEngine, create_synchronizer
from .models import ParamField, Snapshot, SyncOrigin, SyncPass
from .origin import OriginTracker, SyncGate
from .path import PathVariableSynchronizer
from .query import QuerySynchronizer
from .reconciler import FieldReconciler

__all__ = [
    "Debouncer",
    "FieldReconciler",
    "OriginTracker",
    "ParamField",
    "PathVariableSynchronizer",
    "QuerySynchronizer",
    "Snapshot",
    "SyncEngine",
    "SyncGate",
    "SyncOrigin",
    "SyncPass",
    "create_synchronizer",
]
