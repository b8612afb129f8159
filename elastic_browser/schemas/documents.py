"""Document and search-page schemas.

Records are owned by the page that returned them and never mutated; edits go
through a new create/delete followed by a re-query.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Any

import pydantic

from elastic_browser.schemas.base import PermissiveModel, StrictModel

__all__ = [
    'GENERATED_ID_LABEL',
    'DocumentRecord',
    'QueryResult',
    'SearchHit',
    'SearchPage',
    'SearchResponse',
    'display_document_id',
]

GENERATED_ID_LABEL = '<generated id>'


def display_document_id(document_id: str) -> str:
    """Label for a document id; blank ids are assigned by the backend."""
    if not document_id.strip():
        return GENERATED_ID_LABEL
    return document_id


class DocumentRecord(StrictModel):
    """One document: its id (possibly blank) and its `_source` payload."""

    id: str = ''
    source: Mapping[str, Any] = pydantic.Field(default_factory=dict)

    @property
    def title(self) -> str:
        return display_document_id(self.id)


class SearchPage(StrictModel):
    """A page of documents in backend relevance order."""

    documents: Sequence[DocumentRecord] = ()
    took: timedelta = timedelta(0)


class QueryResult(StrictModel):
    """A search page tagged with the collection/query pair it was computed for.

    The tag lets the session discard pages that arrive after the operator has
    moved on to another collection or query.
    """

    collection: str
    query: str
    documents: Sequence[DocumentRecord] = ()
    took: timedelta = timedelta(0)
    fields: Sequence[str] = ()


class SearchHit(PermissiveModel):
    """Raw `hits.hits[]` entry."""

    id: str = pydantic.Field(default='', alias='_id')
    source: Any = pydantic.Field(default=None, alias='_source')


class _Hits(PermissiveModel):
    hits: Sequence[SearchHit] = ()


class SearchResponse(PermissiveModel):
    """Raw `_search` response body - only the parts the browser reads."""

    took: int = 0
    hits: _Hits = pydantic.Field(default_factory=_Hits)
