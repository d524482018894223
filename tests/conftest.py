"""Shared pytest fixtures for http-tool-sync tests."""

import pytest

from http_tool_sync.form import FormState
from http_tool_sync.sync.models import ParamField


@pytest.fixture
def make_form():
    """Factory fixture for a standalone tool form."""

    def _create(url="", query=None, path=None):
        return FormState(
            {
                "config": {
                    "url": url,
                    "query_parameters": list(query or []),
                    "path_variables": list(path or []),
                }
            }
        )

    return _create


@pytest.fixture
def field():
    """Shorthand ParamField factory."""

    def _create(key, value=None, **kwargs):
        return ParamField(key=key, value=value, **kwargs)

    return _create


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with an empty CWD/HOME and no http-tool-sync env vars."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for var in (
        "HTTP_TOOL_SYNC_CONFIG",
        "HTTP_TOOL_SYNC_DEBOUNCE_MS",
        "HTTP_TOOL_SYNC_FORM_PREFIX",
        "HTTP_TOOL_SYNC_LOG_LEVEL",
        "HTTP_TOOL_SYNC_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)
    return work
