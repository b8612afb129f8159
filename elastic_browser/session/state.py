"""The single mutable aggregate owned by the session machine."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from elastic_browser.schemas.collections import CollectionSummary
from elastic_browser.schemas.documents import DocumentRecord
from elastic_browser.session.modes import CollectionBrowser, Mode

__all__ = [
    'BODY_TEMPLATE',
    'SessionState',
]

BODY_TEMPLATE = '{\n  "field": "value"\n}'

# Rows taken by the header and the status line around a list.
_LIST_CHROME_ROWS = 2
# Detail view adds a title and a back hint.
_DETAIL_CHROME_ROWS = 4


@dataclasses.dataclass
class SessionState:
    """Everything the UI shows. Mutated only by SessionMachine.handle()."""

    mode: Mode = dataclasses.field(default_factory=CollectionBrowser)

    collections: Sequence[CollectionSummary] = ()
    documents: Sequence[DocumentRecord] = ()
    active_collection: str = ''
    active_query: str = ''

    query_input: str = ''
    id_input: str = ''
    body_input: str = BODY_TEMPLATE

    fields: tuple[str, ...] = ()

    status: str = ''
    error: str = ''

    collection_cursor: int = 0
    document_cursor: int = 0

    width: int = 0
    height: int = 0
    ready: bool = False
    running: bool = True

    @property
    def selected_collection(self) -> CollectionSummary | None:
        return _at(self.collections, self.collection_cursor)

    @property
    def selected_document(self) -> DocumentRecord | None:
        return _at(self.documents, self.document_cursor)

    @property
    def list_rows(self) -> int:
        """Visible list rows for the current viewport (at least 1)."""
        if self.height - _LIST_CHROME_ROWS < 5:
            return max(self.height, 1)
        return self.height - _LIST_CHROME_ROWS

    @property
    def detail_rows(self) -> int:
        """Visible detail rows for the current viewport (at least 1)."""
        rows = self.height - _DETAIL_CHROME_ROWS
        if rows < 3:
            rows = self.height - 1
        return max(rows, 1)


def _at[T](items: Sequence[T], index: int) -> T | None:
    if 0 <= index < len(items):
        return items[index]
    return None
