"""Services that run session commands against the backend."""

from __future__ import annotations

from elastic_browser.services.dispatcher import CommandDispatcher

__all__ = [
    'CommandDispatcher',
]
