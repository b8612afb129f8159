"""Session modes as a tagged union.

Each variant carries only the data that belongs to it: the creator its step,
delete confirmation the pending record, the detail view its record and scroll
offset. Browsers and the query editor carry nothing; the data they show lives
on SessionState and survives mode switches.
"""

from __future__ import annotations

import dataclasses
import enum

from elastic_browser.schemas.documents import DocumentRecord

__all__ = [
    'CollectionBrowser',
    'CreatorStep',
    'DeleteConfirmation',
    'DocumentBrowser',
    'DocumentCreator',
    'DocumentDetail',
    'Mode',
    'QueryEditor',
]


class CreatorStep(enum.Enum):
    ID = 'id'
    BODY = 'body'


@dataclasses.dataclass(frozen=True)
class CollectionBrowser:
    pass


@dataclasses.dataclass(frozen=True)
class DocumentBrowser:
    pass


@dataclasses.dataclass(frozen=True)
class QueryEditor:
    pass


@dataclasses.dataclass(frozen=True)
class DocumentCreator:
    step: CreatorStep = CreatorStep.ID
    # Set once the body is sent; further submits wait for the result.
    submitting: bool = False


@dataclasses.dataclass(frozen=True)
class DeleteConfirmation:
    pending: DocumentRecord


@dataclasses.dataclass(frozen=True)
class DocumentDetail:
    document: DocumentRecord
    scroll: int = 0


type Mode = CollectionBrowser | DocumentBrowser | QueryEditor | DocumentCreator | DeleteConfirmation | DocumentDetail
