"""Events consumed by the session machine.

Input events come from the terminal UI; completion events come from the
command dispatcher. Every completion carries either its payload or an error
string, never both.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Literal

from elastic_browser.schemas.collections import CollectionSummary
from elastic_browser.schemas.documents import QueryResult

__all__ = [
    'CollectionsLoaded',
    'DocumentCreated',
    'DocumentDeleted',
    'DocumentsLoaded',
    'Event',
    'FieldsLoaded',
    'InputField',
    'KeyPressed',
    'Resized',
    'TextEdited',
]

type InputField = Literal['query', 'document-id', 'document-body']


@dataclasses.dataclass(frozen=True)
class KeyPressed:
    """A normalized key name: 'enter', 'esc', 'up', 'ctrl+c', 'x', ..."""

    key: str


@dataclasses.dataclass(frozen=True)
class TextEdited:
    """Full new content of an input widget."""

    field: InputField
    value: str


@dataclasses.dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclasses.dataclass(frozen=True)
class CollectionsLoaded:
    collections: Sequence[CollectionSummary] = ()
    error: str | None = None


@dataclasses.dataclass(frozen=True)
class DocumentsLoaded:
    """A search page, tagged with the collection/query it was computed for.

    On failure `result` is None but the tag is still set, so stale failures
    are discarded the same way stale pages are.
    """

    collection: str
    query: str
    result: QueryResult | None = None
    error: str | None = None


@dataclasses.dataclass(frozen=True)
class FieldsLoaded:
    collection: str
    fields: Sequence[str] = ()
    error: str | None = None


@dataclasses.dataclass(frozen=True)
class DocumentCreated:
    document_id: str = ''
    error: str | None = None


@dataclasses.dataclass(frozen=True)
class DocumentDeleted:
    document_id: str = ''
    error: str | None = None


type Event = (
    KeyPressed | TextEdited | Resized | CollectionsLoaded | DocumentsLoaded | FieldsLoaded | DocumentCreated | DocumentDeleted
)
