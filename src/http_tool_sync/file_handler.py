"""File handler module: encoding-aware read/write and tool config files.

Tool configs exported from the dashboard are JSON with camelCase keys;
hand-written ones are usually YAML with snake_case keys.  Both load into
``HttpToolConfig``; output keeps the format of the input file.
"""

import json
from pathlib import Path

import yaml
from charset_normalizer import from_bytes

from http_tool_sync.tool import HttpToolConfig

# =============================================================================
# Path Validation
# =============================================================================


def validate_file_path(path_str: str) -> Path:
    """Validate and resolve an input file path.

    Args:
        path_str: Path string to an existing file (relative to CWD or absolute).

    Returns:
        Resolved Path object pointing to the real file.

    Raises:
        ValueError: If path doesn't exist or is not a file.
    """
    resolved = Path(path_str).expanduser().resolve()
    if not resolved.exists():
        raise ValueError(f"File not found: {path_str}")
    if not resolved.is_file():
        raise ValueError(f"Path is not a file: {path_str}")
    return resolved


# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # ascii is a strict subset of utf-8
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def write_file(path: Path, content: str, encoding: str = "utf-8") -> int:
    """Write content to a file, creating parent directories as needed.

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode(encoding)
    path.write_bytes(encoded)
    return len(encoded)


# =============================================================================
# Format Detection
# =============================================================================


_EXTENSION_FORMAT_MAP: dict[str, str] = {
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
}


def detect_file_format(path: Path, content: str) -> str:
    """Detect ``json`` or ``yaml`` from the extension, else from content."""
    suffix = path.suffix.lower()
    if suffix in _EXTENSION_FORMAT_MAP:
        return _EXTENSION_FORMAT_MAP[suffix]
    return "json" if content.lstrip().startswith(("{", "[")) else "yaml"


# =============================================================================
# Tool configs
# =============================================================================


def parse_tool_config(content: str, fmt: str) -> HttpToolConfig:
    """Parse *content* into an ``HttpToolConfig``.

    A top-level ``config`` key (the dashboard's form shape) is unwrapped.

    Raises:
        ValueError: If the content is not a mapping.
        pydantic.ValidationError: If the mapping is not a valid tool config.
    """
    data = json.loads(content) if fmt == "json" else yaml.safe_load(content)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Tool config must be a mapping, got {type(data).__name__}"
        )
    if isinstance(data.get("config"), dict):
        data = data["config"]
    return HttpToolConfig.model_validate(data)


def render_tool_config(config: HttpToolConfig, fmt: str) -> str:
    """Serialize *config*; JSON uses the dashboard's camelCase keys."""
    if fmt == "json":
        data = config.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(data, indent=2) + "\n"
    data = config.model_dump(mode="json", exclude_none=True)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def load_tool_config(path_str: str) -> tuple[HttpToolConfig, str, Path]:
    """Read a tool config file.

    Returns:
        Tuple of (config, format, resolved_path).
    """
    resolved = validate_file_path(path_str)
    content, _encoding = read_file_with_encoding(resolved)
    fmt = detect_file_format(resolved, content)
    return parse_tool_config(content, fmt), fmt, resolved
