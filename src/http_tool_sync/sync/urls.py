"""URL helpers shared by the query and path-variable synchronizers.

Key design choices:

* ``parse_absolute_url`` only accepts URLs with a scheme and a host.
  Anything else raises ``UrlParseError`` so callers can switch to plain
  string handling while the user is still typing.
* Query strings are read into an ``OrderedDict``: a repeated key keeps
  its first position and takes the last value.
* ``serialize_query`` form-encodes entries and then turns the escapes back
  into readable text, except for characters that would change how the
  query splits (``&``, ``=``, ``#`` ...).
* Paths are split into segments and each segment is classified as literal
  or variable, rather than pattern-matching the whole url.
"""

from __future__ import annotations

import re
from collections import OrderedDict
from dataclasses import dataclass, replace
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from http_tool_sync.errors import UrlParseError

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_VARIABLE_PATTERN = re.compile(r":([\w-]+)")
_ESCAPE_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")

# Left percent-encoded when making a query readable.
_KEEP_ESCAPED = frozenset("#$%&+,/:;=?@")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedUrl:
    scheme: str
    netloc: str
    path: str
    query: str
    fragment: str

    @property
    def origin(self) -> str:
        return f"{self.scheme}://{self.netloc}"

    def replace(self, **changes: str) -> ParsedUrl:
        return replace(self, **changes)

    def geturl(self) -> str:
        return urlunsplit(
            (self.scheme, self.netloc, self.path, self.query, self.fragment)
        )


def parse_absolute_url(url: str) -> ParsedUrl:
    """Split *url* into its components.

    Raises:
        UrlParseError: If *url* has no scheme or host, or an invalid port.
    """
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise UrlParseError(url, str(exc)) from None

    if not parts.scheme or not _SCHEME_PATTERN.match(parts.scheme):
        raise UrlParseError(url, "missing scheme")
    if not parts.netloc or not parts.hostname:
        raise UrlParseError(url, "missing host")
    if any(ch.isspace() for ch in parts.netloc):
        raise UrlParseError(url, "whitespace in host")
    try:
        parts.port
    except ValueError:
        raise UrlParseError(url, "invalid port") from None

    return ParsedUrl(
        scheme=parts.scheme,
        netloc=parts.netloc,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
    )


def parse_query(query: str) -> OrderedDict[str, str]:
    """Read a query string into an ordered key -> value mapping."""
    params: OrderedDict[str, str] = OrderedDict()
    for key, value in parse_qsl(query, keep_blank_values=True):
        params[key] = value
    return params


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _readable_run(match: re.Match) -> str:
    escaped = match.group(0)
    try:
        text = unquote(escaped, errors="strict")
    except UnicodeDecodeError:
        return escaped
    return "".join(
        quote(ch, safe="")
        if ch in _KEEP_ESCAPED or ch.isspace() or not ch.isprintable()
        else ch
        for ch in text
    )


def make_readable(encoded: str) -> str:
    """Decode percent-escapes that are safe to show verbatim."""
    return _ESCAPE_RUN.sub(_readable_run, encoded)


def serialize_query(pairs: list[tuple[str, str]]) -> str:
    """Form-encode *pairs* and make the result readable."""
    return make_readable(urlencode(pairs))


# ---------------------------------------------------------------------------
# Path segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PathSegment:
    text: str
    variable: str | None = None

    @property
    def is_variable(self) -> bool:
        return self.variable is not None


def tokenize_path(path: str) -> list[PathSegment]:
    """Split *path* on ``/`` and classify each segment.

    Only a whole ``:name`` segment is a variable; ``:city.json`` or ``a:b``
    stay literal text.
    """
    segments = []
    for text in path.split("/"):
        match = _VARIABLE_PATTERN.fullmatch(text)
        segments.append(
            PathSegment(text=text, variable=match.group(1) if match else None)
        )
    return segments


def path_variable_names(url: str) -> list[str]:
    """Return the distinct ``:name`` variables of *url*, in order."""
    try:
        path = parse_absolute_url(url).path
    except UrlParseError:
        path = re.split(r"[?#]", url, maxsplit=1)[0]

    names: list[str] = []
    for segment in tokenize_path(path):
        if segment.is_variable and segment.variable not in names:
            names.append(segment.variable)
    return names


def literal_base_path(path: str) -> str:
    """Drop trailing slashes and every variable segment."""
    segments = tokenize_path(path.rstrip("/"))
    return "/".join(s.text for s in segments if not s.is_variable)
