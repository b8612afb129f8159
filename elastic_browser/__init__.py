"""elastic-browser: an interactive terminal client for Elasticsearch."""

from __future__ import annotations

__version__ = '0.1.0'
