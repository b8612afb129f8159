"""Low-level Elasticsearch REST client.

Thin wrapper around the REST API over httpx. Handles API calls and response
decoding only - no session logic. Implements the SearchGateway protocol.

Uses httpx.AsyncClient so concurrent commands share one connection pool.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Any
from urllib.parse import quote

import circuitbreaker
import httpx
import pydantic
import tenacity

from elastic_browser.clients import _retry
from elastic_browser.clients.errors import GatewayError, GatewayValidationError
from elastic_browser.schemas.collections import CatIndexRow, CollectionSummary
from elastic_browser.schemas.config import BrowserConfig
from elastic_browser.schemas.documents import DocumentRecord, SearchPage, SearchResponse

logger = logging.getLogger(__name__)

__all__ = [
    'ElasticsearchClient',
    'collect_mapping_fields',
]

_cat_rows_adapter: pydantic.TypeAdapter[list[CatIndexRow]] = pydantic.TypeAdapter(list[CatIndexRow])


class ElasticsearchClient:
    """Async Elasticsearch client for the browser's six operations.

    Collection name is passed explicitly to each method - no default index.
    """

    DEFAULT_URL = 'http://localhost:9200'
    DEFAULT_PAGE_SIZE = 20

    # Per-request HTTP timeout in seconds. The dispatcher bounds the whole
    # command (retries included) separately.
    DEFAULT_TIMEOUT = 10.0
    DEFAULT_MAX_CONNECTIONS = 10
    DEFAULT_RETRY_ATTEMPTS = 3

    def __init__(
        self,
        url: str = DEFAULT_URL,
        *,
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_tls: bool = True,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            url: Cluster base URL.
            username: Basic auth user. Ignored when api_key is set.
            password: Basic auth password.
            api_key: Encoded API key, sent as 'Authorization: ApiKey <key>'.
            timeout: HTTP timeout in seconds.
            verify_tls: Verify the server certificate for https URLs.
            max_connections: Connection pool size.
            retry_attempts: Attempts for retryable read operations (1 disables retry).
            transport: Replacement transport (httpx.MockTransport in tests).
        """
        self._url = url.rstrip('/')

        headers = {'Accept': 'application/json'}
        auth: httpx.Auth | None = None
        if api_key:
            headers['Authorization'] = f'ApiKey {api_key}'
        elif username:
            auth = httpx.BasicAuth(username, password or '')

        limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_connections)
        self._client = httpx.AsyncClient(
            base_url=self._url,
            headers=headers,
            auth=auth,
            timeout=timeout,
            verify=verify_tls,
            limits=limits,
            transport=transport,
        )

        breaker = _retry.create_elasticsearch_breaker()
        retrying = tenacity.retry(
            retry=tenacity.retry_if_exception(_retry.is_retryable_elasticsearch_error),
            stop=tenacity.stop_after_attempt(retry_attempts),
            wait=tenacity.wait_exponential(multiplier=0.5, max=5),
            before_sleep=_retry.log_elasticsearch_retry,
            reraise=True,
        )
        self._send_with_retry = breaker(retrying(self._send))
        self._send_once = breaker(self._send)

    @classmethod
    def from_config(cls, config: BrowserConfig, **kwargs: Any) -> ElasticsearchClient:
        """Build a client from validated configuration."""
        return cls(
            config.base_url,
            username=config.username,
            password=config.password,
            api_key=config.api_key,
            timeout=config.timeout,
            verify_tls=config.verify_tls,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return self._url

    async def list_collections(self) -> Sequence[CollectionSummary]:
        """List indices via _cat/indices with byte-exact sizes."""
        response = await self._request(
            'list indices',
            'GET',
            '/_cat/indices',
            retry=True,
            params={'format': 'json', 'bytes': 'b'},
        )
        try:
            rows = _cat_rows_adapter.validate_python(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise GatewayError(f'list indices: unexpected response: {e}') from e

        return [CollectionSummary.from_cat_row(row) for row in rows]

    async def search(self, collection: str, query: str, size: int = DEFAULT_PAGE_SIZE) -> SearchPage:
        """Fetch one page of documents in relevance order.

        Blank query runs match_all; anything else is a query_string query.
        """
        if size <= 0:
            size = self.DEFAULT_PAGE_SIZE

        body: dict[str, object] = {'size': size}
        if not query.strip():
            body['query'] = {'match_all': {}}
        else:
            body['query'] = {'query_string': {'query': query}}

        start = time.perf_counter()
        response = await self._request(
            f'search {collection}',
            'POST',
            f'/{_segment(collection)}/_search',
            retry=True,
            params={'track_total_hits': 'false'},
            json=body,
        )
        elapsed = timedelta(seconds=time.perf_counter() - start)

        try:
            decoded = SearchResponse.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise GatewayError(f'search {collection}: unexpected response: {e}') from e

        documents = [DocumentRecord(id=hit.id, source=_coerce_source(hit.source)) for hit in decoded.hits.hits]

        # Backend-reported time; fall back to wall clock when it reports 0
        took = timedelta(milliseconds=decoded.took) if decoded.took > 0 else elapsed
        return SearchPage(documents=documents, took=took)

    async def create_document(self, collection: str, document_id: str, body: str) -> str:
        """Index a document. Blank document_id lets Elasticsearch assign one.

        Returns:
            The id of the indexed document.

        Raises:
            GatewayValidationError: If body is not valid JSON.
            GatewayError: On any backend failure (never retried).
        """
        try:
            json.loads(body)
        except ValueError as e:
            raise GatewayValidationError('body must be valid JSON') from e

        if document_id.strip():
            method, path = 'PUT', f'/{_segment(collection)}/_doc/{_segment(document_id)}'
        else:
            method, path = 'POST', f'/{_segment(collection)}/_doc'

        response = await self._request(
            'create doc',
            method,
            path,
            retry=False,
            content=body.encode('utf-8'),
            headers={'Content-Type': 'application/json'},
        )
        try:
            created = response.json()
            return str(created['_id'])
        except (ValueError, KeyError, TypeError) as e:
            raise GatewayError(f'create doc: unexpected response: {response.text}') from e

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document by id (never retried)."""
        if not document_id.strip():
            raise GatewayValidationError('document id required')

        await self._request(
            'delete doc',
            'DELETE',
            f'/{_segment(collection)}/_doc/{_segment(document_id)}',
            retry=False,
        )

    async def refresh(self, collection: str) -> None:
        """Refresh the index so recent writes are searchable."""
        await self._request('refresh index', 'POST', f'/{_segment(collection)}/_refresh', retry=True)

    async def list_fields(self, collection: str) -> Sequence[str]:
        """Flattened field paths from the index mapping, sorted.

        Walks `properties` (object fields) and `fields` (multi-fields such as
        `title.keyword`) of every index the name resolves to.
        """
        response = await self._request(f'fields {collection}', 'GET', f'/{_segment(collection)}/_mapping', retry=True)
        try:
            decoded = response.json()
        except ValueError as e:
            raise GatewayError(f'fields {collection}: unexpected response: {e}') from e

        fields: set[str] = set()
        if isinstance(decoded, Mapping):
            for index_data in decoded.values():
                if not isinstance(index_data, Mapping):
                    continue
                mappings = index_data.get('mappings')
                if isinstance(mappings, Mapping):
                    collect_mapping_fields('', mappings, fields)

        return sorted(fields)

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> ElasticsearchClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Async context manager exit."""
        await self.close()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        retry: bool,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and translate every failure into GatewayError.

        Args:
            operation: Prefix for error messages, e.g. 'search logs'.
            method: HTTP method.
            path: Path relative to the cluster URL.
            retry: Retry transient failures (read-only operations only).
            **kwargs: Passed through to httpx (params, json, content, headers).
        """
        send = self._send_with_retry if retry else self._send_once
        try:
            response: httpx.Response = await send(method, path, **kwargs)
        except httpx.HTTPStatusError as e:
            raise GatewayError(f'{operation}: {e.response.text}', status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise GatewayError(f'{operation}: {type(e).__name__}: {e}') from e
        except circuitbreaker.CircuitBreakerError as e:
            raise GatewayError(f'{operation}: cluster unavailable ({e})') from e

        if response.is_error:
            raise GatewayError(f'{operation}: {response.text}', status_code=response.status_code)
        return response

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Single HTTP exchange. Raises HTTPStatusError only for retryable statuses."""
        response = await self._client.request(method, path, **kwargs)
        if response.status_code in _retry.RETRYABLE_STATUS_CODES:
            response.raise_for_status()
        logger.debug(f'[HTTP] {method} {path} -> {response.status_code}')
        return response


def collect_mapping_fields(prefix: str, node: Mapping[str, Any], out: set[str]) -> None:
    """Add dotted field paths from a mapping node to `out`.

    Recurses through `properties` (sub-objects) and `fields` (multi-fields).
    """
    for section in ('properties', 'fields'):
        children = node.get(section)
        if not isinstance(children, Mapping):
            continue
        for key, child in children.items():
            field = f'{prefix}.{key}' if prefix else key
            out.add(field)
            if isinstance(child, Mapping):
                collect_mapping_fields(field, child, out)


def _segment(value: str) -> str:
    """Percent-encode one path segment (index names and ids may contain '/')."""
    return quote(value, safe='')


def _coerce_source(source: object) -> Mapping[str, Any]:
    """Normalize `_source`: objects pass through, absent becomes {}, anything else is kept as JSON text."""
    if isinstance(source, dict):
        return source
    if source is None:
        return {}
    return {'_source': json.dumps(source, ensure_ascii=False)}
