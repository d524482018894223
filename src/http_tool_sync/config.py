"""Runtime settings for the http-tool-sync command line.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    HTTP_TOOL_SYNC_DEBOUNCE_MS: Debounce window in ms (optional, default: 50)
    HTTP_TOOL_SYNC_FORM_PREFIX: "" or "tools.0." (optional, default: "")

Range and choice checks live in ``config_schema.SyncSettings``; this module
only decides which source each value comes from.
"""

import logging
import os
from dataclasses import dataclass

from pydantic import ValidationError

from .config_schema import SyncSettings

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    debounce_ms: int = 50
    form_prefix: str = ""
    debug: bool = False


def _env_debounce() -> int | None:
    raw = os.getenv("HTTP_TOOL_SYNC_DEBOUNCE_MS")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid HTTP_TOOL_SYNC_DEBOUNCE_MS '{raw}': must be a number"
        ) from None


def load_settings(
    debounce_ms: int | None = None,
    form_prefix: str | None = None,
    debug: bool = False,
    file_settings: SyncSettings | None = None,
) -> Settings:
    """Load settings with unified precedence.

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        debounce_ms: Override the debounce window (CLI flag).
        form_prefix: Override the form prefix (CLI flag).
        debug: Enable debug logging (CLI flag).
        file_settings: The validated ``sync`` section of the YAML config.

    Returns:
        Settings instance.

    Raises:
        ValueError: If a value is not a number, out of range or not a
            valid prefix (pydantic ``ValidationError`` is a ``ValueError``).
    """
    base = file_settings or SyncSettings()

    if debounce_ms is None:
        debounce_ms = _env_debounce()
    if form_prefix is None:
        form_prefix = os.getenv("HTTP_TOOL_SYNC_FORM_PREFIX")

    overrides = {
        name: value
        for name, value in (
            ("debounce_ms", debounce_ms),
            ("form_prefix", form_prefix),
        )
        if value is not None
    }
    try:
        sync = SyncSettings.model_validate(
            {**base.model_dump(), **overrides}
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid sync settings: {exc}") from None

    settings = Settings(
        debounce_ms=sync.debounce_ms,
        form_prefix=sync.form_prefix,
        debug=debug,
    )
    logger.debug("Loaded settings: %s", settings)
    return settings
