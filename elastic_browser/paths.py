"""Centralized file paths for elastic-browser.

The browser persists nothing but its debug log; the terminal belongs to the
UI, so logs go to a file.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    'APP_DIR',
    'LOG_PATH',
]

APP_DIR = Path.home() / '.elastic-browser'

LOG_PATH = APP_DIR / 'elastic-browser.log'
