"""In-memory SearchGateway for dispatcher, runtime and app tests.

Behaves like a tiny cluster: documents live per collection, creates assign
ids, deletes remove them, list_fields reports a fixed mapping. Every call is
recorded in `calls` so tests can assert on what the session asked for.

Usage in tests::

    gateway = FakeGateway(documents={'logs': [DocumentRecord(id='doc-1', source={'a': 1})]})
    gateway.failures['refresh'] = GatewayError('refresh index: boom')
    gateway.delays['search'] = 0.5
"""

from __future__ import annotations

import asyncio
import itertools
import json
from collections.abc import Iterable, Mapping, Sequence
from datetime import timedelta

from elastic_browser.clients.errors import GatewayValidationError
from elastic_browser.schemas.collections import CollectionSummary
from elastic_browser.schemas.documents import DocumentRecord, SearchPage


class FakeGateway:
    """SearchGateway double with recorded calls, injectable failures and delays."""

    def __init__(
        self,
        *,
        collections: Iterable[CollectionSummary] = (),
        documents: Mapping[str, Iterable[DocumentRecord]] | None = None,
        fields: Mapping[str, Sequence[str]] | None = None,
        took: timedelta = timedelta(milliseconds=3),
    ) -> None:
        self.collections = list(collections)
        self.documents: dict[str, list[DocumentRecord]] = {
            name: list(records) for name, records in (documents or {}).items()
        }
        self.fields = dict(fields or {})
        self.took = took
        self.calls: list[tuple[object, ...]] = []
        self.failures: dict[str, BaseException] = {}
        self.delays: dict[str, float] = {}
        self.closed = False
        self._ids = itertools.count(1)

    def calls_to(self, operation: str) -> list[tuple[object, ...]]:
        return [call[1:] for call in self.calls if call[0] == operation]

    async def _enter(self, operation: str, *args: object) -> None:
        self.calls.append((operation, *args))
        if operation in self.delays:
            await asyncio.sleep(self.delays[operation])
        if operation in self.failures:
            raise self.failures[operation]

    async def list_collections(self) -> Sequence[CollectionSummary]:
        await self._enter('list_collections')
        return list(self.collections)

    async def search(self, collection: str, query: str, size: int) -> SearchPage:
        await self._enter('search', collection, query, size)
        records = self.documents.get(collection, [])
        if query:
            records = [record for record in records if query in json.dumps(record.source)]
        return SearchPage(documents=records[:size], took=self.took)

    async def create_document(self, collection: str, document_id: str, body: str) -> str:
        await self._enter('create_document', collection, document_id, body)
        try:
            source = json.loads(body)
        except ValueError as e:
            raise GatewayValidationError('body must be valid JSON') from e
        assigned = document_id or f'generated-{next(self._ids)}'
        self.documents.setdefault(collection, []).append(DocumentRecord(id=assigned, source=source))
        return assigned

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._enter('delete_document', collection, document_id)
        if not document_id.strip():
            raise GatewayValidationError('document id required')
        records = self.documents.get(collection, [])
        self.documents[collection] = [record for record in records if record.id != document_id]

    async def refresh(self, collection: str) -> None:
        await self._enter('refresh', collection)

    async def list_fields(self, collection: str) -> Sequence[str]:
        await self._enter('list_fields', collection)
        return list(self.fields.get(collection, ()))

    async def close(self) -> None:
        self.closed = True
