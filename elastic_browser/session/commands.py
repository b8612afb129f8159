"""Commands emitted by the session machine for the dispatcher to execute."""

from __future__ import annotations

import dataclasses

__all__ = [
    'BackendCommand',
    'Command',
    'CreateDocument',
    'DeleteDocument',
    'LoadCollections',
    'LoadDocuments',
    'LoadFields',
    'Quit',
]


@dataclasses.dataclass(frozen=True)
class LoadCollections:
    pass


@dataclasses.dataclass(frozen=True)
class LoadDocuments:
    collection: str
    query: str
    page_size: int


@dataclasses.dataclass(frozen=True)
class LoadFields:
    collection: str


@dataclasses.dataclass(frozen=True)
class CreateDocument:
    """Index a document; a blank document_id asks the backend to assign one."""

    collection: str
    document_id: str
    body: str


@dataclasses.dataclass(frozen=True)
class DeleteDocument:
    collection: str
    document_id: str


@dataclasses.dataclass(frozen=True)
class Quit:
    """Stop the session. Handled by the runtime, never sent to the backend."""


type BackendCommand = LoadCollections | LoadDocuments | LoadFields | CreateDocument | DeleteDocument

type Command = BackendCommand | Quit
