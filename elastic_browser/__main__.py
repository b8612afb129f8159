from __future__ import annotations

from elastic_browser.cli import app

app()
