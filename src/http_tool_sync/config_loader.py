"""
Config file discovery and loading for http_tool_sync.

Up to three YAML files are read, lowest precedence first:

    ~/.config/http_tool_sync/config.yml     user defaults
    ./.http_tool_sync/config.yml            project settings
    $HTTP_TOOL_SYNC_CONFIG                  explicit file

A later file replaces whole sections (``sync``, ``logging``) of an earlier
one.  String values may reference the environment as ``${VAR}`` or
``${VAR:-default}``, e.g. ``file: ${HOME}/sync.log``.

Usage:
    from http_tool_sync.config_loader import load_config

    raw = load_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HTTP_TOOL_SYNC_CONFIG"
PROJECT_CONFIG = Path(".http_tool_sync") / "config.yml"
USER_CONFIG = Path(".config") / "http_tool_sync" / "config.yml"

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+?)(?::-(?P<default>.*?))?\}")

_STARTER_CONFIG = """\
# http-tool-sync configuration
#
# The debounce window can also be set via HTTP_TOOL_SYNC_DEBOUNCE_MS.
#
# sync:
#   debounce_ms: 50
#   form_prefix: ""        # "tools.0." for tools embedded in an agent form
#
# logging:
#   level: INFO
#   file: null             # e.g. ${HOME}/http-tool-sync.log
#   format: text           # or json
"""


def expand_env(value: Any) -> Any:
    """Resolve ``${VAR}`` / ``${VAR:-default}`` in every string of *value*.

    An unset or empty variable falls back to the default, else to ``""``.
    """
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if not isinstance(value, str):
        return value
    return _ENV_REF.sub(
        lambda m: os.environ.get(m["name"]) or m["default"] or "", value
    )


def config_paths() -> list[Path]:
    """Existing config files, highest precedence first."""
    candidates = []
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser().resolve())
    candidates.append(Path.cwd() / PROJECT_CONFIG)
    candidates.append(Path.home() / USER_CONFIG)
    return [path for path in candidates if path.is_file()]


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one config file; an empty or non-mapping file yields ``{}``.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        OSError: If the file cannot be read.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Ignoring config file %s: expected a mapping, got %s",
            path,
            type(data).__name__,
        )
        return {}
    return data


def load_config() -> dict[str, Any]:
    """Merge every discovered config file section by section.

    Returns an empty dict when there are no config files.
    """
    merged: dict[str, Any] = {}
    for path in reversed(config_paths()):
        logger.debug("Reading config file %s", path)
        merged.update(read_config_file(path))
    return expand_env(merged)


def ensure_config(target: Path | None = None) -> Path:
    """Return the active config file, writing a commented starter if none.

    Args:
        target: Where to create the starter file; defaults to
            ``./.http_tool_sync/config.yml``.
    """
    existing = config_paths()
    if existing:
        return existing[0]

    path = target or Path.cwd() / PROJECT_CONFIG
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", path)
    return path
