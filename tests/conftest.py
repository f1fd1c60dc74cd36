# Copyright (c) 2026 bootwidgets contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures and helpers for the bootwidgets pytest suite.

import os
import sys

import pytest

# Ensure the modules are importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import bootwidgets  # noqa: E402
from bootterm import Region  # noqa: E402
from bootwidgets import WidgetSet  # noqa: E402

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _default_styles(monkeypatch):
    """Run every test with the built-in default style, ignoring any
    BOOTWIDGETS_STYLE from the environment."""
    monkeypatch.delenv("BOOTWIDGETS_STYLE", raising=False)
    bootwidgets.init_styles()
    yield
    bootwidgets._style.clear()


@pytest.fixture
def win():
    """Free-standing 24x80 region, not attached to a terminal."""
    return Region(None, 24, 80)


@pytest.fixture
def ws(win):
    """Empty widget set bound to 'win'."""
    return WidgetSet(win, win)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def focused(ws):
    """Return the widget that currently has the focus."""
    return ws.widget_for(ws.form.current_field)


def send(ws, *keys):
    """Feed keys (ints, or strings of characters) to ws.process_key() and
    return the list of results."""
    results = []
    for key in keys:
        if isinstance(key, str):
            results.extend(ws.process_key(ord(ch)) for ch in key)
        else:
            results.append(ws.process_key(key))
    return results
