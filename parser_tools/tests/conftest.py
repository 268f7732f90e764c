"""Shared fixtures for the parser_tools test suite."""

from __future__ import annotations

import os

import pytest

from parser_tools.sql_toolkit import reset_toolkit


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Isolate each test from PARSER_TOOLS_* variables and the toolkit singleton."""
    for name in list(os.environ):
        if name.upper().startswith("PARSER_TOOLS_"):
            monkeypatch.delenv(name, raising=False)
    reset_toolkit()
    yield
    reset_toolkit()
