"""Protocol definition for the search gateway.

The session dispatcher depends on this protocol only. ElasticsearchClient
implements it; tests substitute an in-memory fake.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from elastic_browser.schemas.collections import CollectionSummary
from elastic_browser.schemas.documents import SearchPage

__all__ = [
    'SearchGateway',
]


class SearchGateway(Protocol):
    """Backend operations the browser issues. Every method may raise GatewayError."""

    async def list_collections(self) -> Sequence[CollectionSummary]:
        """List every collection visible to the configured credentials."""
        ...

    async def search(self, collection: str, query: str, size: int) -> SearchPage:
        """Fetch one page of documents. Blank query means match-all.

        Args:
            collection: Collection (index) name.
            query: Query-string text, passed through to the backend unmodified.
            size: Page size.
        """
        ...

    async def create_document(self, collection: str, document_id: str, body: str) -> str:
        """Index a JSON document and return its id.

        A blank document_id lets the backend assign one. Raises
        GatewayValidationError if body is not valid JSON.
        """
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete by id. Raises GatewayValidationError for a blank id."""
        ...

    async def refresh(self, collection: str) -> None:
        """Make recent writes visible to search."""
        ...

    async def list_fields(self, collection: str) -> Sequence[str]:
        """Sorted, flattened field paths from the collection's mapping."""
        ...

    async def close(self) -> None:
        """Release connections."""
        ...
