"""HTTP tool configuration and the form that edits it.

``HttpToolConfig`` is the persisted shape of an HTTP tool.  ``HttpToolForm``
holds one config in a ``FormState`` (either standalone under ``config.*``
or inside an agent form under ``tools.0.config.*``), attaches a
``SyncEngine`` to each url-bound list and exposes the editor operations
of the field lists.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from http_tool_sync.form import FormState
from http_tool_sync.sync.debounce import DEFAULT_DELAY_MS
from http_tool_sync.sync.engine import PATH_VARIABLES, QUERY_PARAMETERS, SyncEngine
from http_tool_sync.sync.models import ParamField, SyncOrigin, SyncPass
from http_tool_sync.sync.origin import OriginTracker, SyncGate

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
BODYLESS_METHODS = ("GET", "DELETE")

FIELD_LISTS = (PATH_VARIABLES, "headers", QUERY_PARAMETERS, "body")
URL_BOUND_LISTS = (QUERY_PARAMETERS, PATH_VARIABLES)
# Lists whose new entries start out user-provided.
USER_ONLY_LISTS = (PATH_VARIABLES,)

FORM_PREFIXES = ("", "tools.0.")


class HttpToolConfig(BaseModel):
    """Configuration of one HTTP-calling tool."""

    name: str = ""
    description: str = ""
    url: str = ""
    method: HttpMethod | None = None
    headers: list[ParamField] = []
    query_parameters: list[ParamField] = Field(
        default=[], alias="queryParameters"
    )
    path_variables: list[ParamField] = Field(
        default=[], alias="pathVariables"
    )
    body: list[ParamField] = []
    with_approval: bool = Field(default=False, alias="withApproval")

    model_config = {"populate_by_name": True}

    @property
    def accepts_body(self) -> bool:
        """Body fields only apply to methods that send a body."""
        return (self.method or "GET") not in BODYLESS_METHODS


TEMPLATES: dict[str, HttpToolConfig] = {
    "random-cat-image": HttpToolConfig(
        name="Random Cat Image",
        description="Useful for getting a random cat image",
        url="https://api.thecatapi.com/v1/images/search",
        method="GET",
    ),
}


def _nest(prefix: str, config: dict[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {"config": config}
    for part in reversed([p for p in prefix.split(".") if p]):
        values = {part: values}
    return values


class HttpToolForm:
    """Edit an ``HttpToolConfig`` with url and field lists kept in sync.

    Args:
        config: Initial configuration (empty when omitted).
        prefix: ``""`` for a standalone tool form, ``"tools.0."`` when the
            tool is embedded in an agent form.
        debounce_ms: Quiet window of the engines.
    """

    def __init__(
        self,
        config: HttpToolConfig | None = None,
        *,
        prefix: str = "",
        debounce_ms: int = DEFAULT_DELAY_MS,
    ) -> None:
        if prefix not in FORM_PREFIXES:
            raise ValueError(
                f"Invalid form prefix '{prefix}': must be one of {FORM_PREFIXES}"
            )
        self.prefix = prefix
        config = config or HttpToolConfig()
        self.form = FormState(_nest(prefix, dict(config)))

        gate = SyncGate()
        self.engines: dict[str, SyncEngine] = {
            name: SyncEngine(
                self.form,
                name,
                prefix=prefix,
                debounce_ms=debounce_ms,
                tracker=OriginTracker(),
                gate=gate,
            )
            for name in URL_BOUND_LISTS
        }

    # ------------------------------------------------------------------
    # Paths and values
    # ------------------------------------------------------------------

    def path(self, name: str) -> str:
        return f"{self.prefix}config.{name}"

    @property
    def url(self) -> str:
        return self.form.get_values(self.path("url")) or ""

    def fields(self, list_name: str) -> list[ParamField]:
        self._check_list(list_name)
        return self.form.get_values(self.path(list_name)) or []

    def to_config(self) -> HttpToolConfig:
        return HttpToolConfig.model_validate(
            self.form.get_values(f"{self.prefix}config") or {}
        )

    def tracker(self, list_name: str) -> OriginTracker:
        return self._engine(list_name).tracker

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------

    def start(self) -> None:
        for engine in self.engines.values():
            engine.start()

    def stop(self) -> None:
        for engine in self.engines.values():
            engine.stop()

    def sync_now(self, origin: SyncOrigin | str) -> list[SyncPass]:
        """Run one pass per url-bound list in *origin*'s direction.

        Path variables go first so the query pass sees the rebuilt path.
        """
        return [
            self.engines[name].run_pass(origin=origin)
            for name in (PATH_VARIABLES, QUERY_PARAMETERS)
        ]

    # ------------------------------------------------------------------
    # Editor operations
    # ------------------------------------------------------------------

    def set_url(self, url: str) -> None:
        self.form.set_value(
            self.path("url"), url, should_validate=True, should_dirty=True
        )

    def add_field(self, list_name: str) -> None:
        """Append an empty field; user-only lists start it user-provided."""
        self._check_list(list_name)
        data: dict[str, Any] = {"key": "", "value": ""}
        if list_name in USER_ONLY_LISTS:
            data["is_user_provided"] = True
        self.form.field_array(self.path(list_name)).append(
            ParamField.model_validate(data)
        )

    def remove_field(self, list_name: str, index: int) -> None:
        self._check_list(list_name)
        self.form.field_array(self.path(list_name)).remove(index)

    def set_user_provided(
        self, list_name: str, index: int, checked: bool
    ) -> None:
        """Toggle "provided by user"; the literal value is always cleared."""
        self._check_list(list_name)
        array = self.form.field_array(self.path(list_name))
        existing = array.fields[index]
        array.update(
            index,
            existing.model_copy(
                update={"value": "", "is_user_provided": checked}
            ),
        )

    def ensure_method(self) -> None:
        """Fall back to ``GET`` when no request method is set."""
        if not self.form.get_values(self.path("method")):
            self.form.set_value(
                self.path("method"),
                "GET",
                should_validate=True,
                should_dirty=True,
            )

    def set_method(self, method: HttpMethod) -> None:
        self.form.set_value(
            self.path("method"), method, should_validate=True, should_dirty=True
        )

    def apply_template(self, name: str) -> None:
        """Replace the whole configuration with a starter template.

        Raises:
            KeyError: If *name* is not a known template.
        """
        try:
            template = TEMPLATES[name]
        except KeyError:
            valid = ", ".join(sorted(TEMPLATES))
            raise KeyError(
                f"Unknown template '{name}'. Valid templates: {valid}"
            ) from None
        logger.info("Applying template %s", name)
        self.form.set_value(
            f"{self.prefix}config",
            dict(template.model_copy(deep=True)),
            should_validate=True,
            should_dirty=True,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _engine(self, list_name: str) -> SyncEngine:
        try:
            return self.engines[list_name]
        except KeyError:
            raise ValueError(
                f"Field list '{list_name}' is not bound to the url"
            ) from None

    @staticmethod
    def _check_list(list_name: str) -> None:
        if list_name not in FIELD_LISTS:
            raise ValueError(
                f"Unknown field list '{list_name}'. "
                f"Valid lists: {', '.join(FIELD_LISTS)}"
            )
