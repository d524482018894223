"""Exception hierarchy for http_tool_sync.

Only ``UrlParseError`` is expected at runtime, and it never leaves the
synchronizers: they catch it and fall back to plain string handling.
``UnknownOriginError`` and ``SyncInFlightError`` signal programming errors
and abort the current synchronization pass.
"""


class HttpToolSyncError(Exception):
    """Base class for all http_tool_sync errors."""


class UrlParseError(HttpToolSyncError, ValueError):
    """The URL template is not a well-formed absolute URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot parse URL '{url}': {reason}")


class UnknownOriginError(HttpToolSyncError, RuntimeError):
    """A sync origin outside ``{url, fields}`` reached a synchronizer."""

    def __init__(self, origin: object) -> None:
        self.origin = origin
        super().__init__(f"Unknown sync origin: {origin!r}")


class SyncInFlightError(HttpToolSyncError, RuntimeError):
    """A pass was started while a pass in the other direction was running."""
