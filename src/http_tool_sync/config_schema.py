"""Unified configuration schema for http_tool_sync.

Defines Pydantic models for the config file structure with dedicated
sections for the synchronizer and logging.

Usage:
    from http_tool_sync.config_loader import load_config
    from http_tool_sync.config_schema import build_config

    raw = load_config()
    unified = build_config(raw)
    unified.sync.debounce_ms
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class SyncSettings(BaseModel):
    """Synchronizer settings.

    Attributes:
        debounce_ms: Quiet window before a synchronization pass runs.
        form_prefix: ``""`` for a standalone tool form, ``"tools.0."`` for a
            tool embedded in an agent form.
    """

    debounce_ms: int = Field(
        default=50,
        ge=1,
        le=10000,
        description="Debounce quiet window in milliseconds (1-10000)",
    )
    form_prefix: Literal["", "tools.0."] = Field(
        default="", description="Form path prefix of the tool config"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` or ``json`` (one JSON object per record).
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log record format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has sensible defaults, so ``UnifiedConfig()``
    (zero-config) is always valid.
    """

    sync: SyncSettings = Field(default_factory=SyncSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_config()``.

    Handles missing sections gracefully -- anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    unknown = set(raw_data) - set(UnifiedConfig.model_fields)
    if unknown:
        logger.warning(
            "Ignoring unknown config sections: %s",
            ", ".join(sorted(unknown)),
        )

    return UnifiedConfig(
        **{k: v for k, v in raw_data.items() if k in UnifiedConfig.model_fields}
    )
