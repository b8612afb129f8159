"""Textual terminal UI."""

from __future__ import annotations

from elastic_browser.tui.app import BrowserApp

__all__ = [
    'BrowserApp',
]
