"""Tests for ElasticsearchClient request shapes, decoding and error mapping.

Uses httpx.MockTransport, so no cluster is needed. Retries are disabled
(retry_attempts=1) except in the retry tests.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import timedelta

import httpx
import pytest

from elastic_browser.clients.elasticsearch import ElasticsearchClient, collect_mapping_fields
from elastic_browser.clients.errors import GatewayError, GatewayValidationError
from elastic_browser.schemas.config import BrowserConfig

type Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses: httpx.Response | Handler) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if callable(response):
            return response(request)
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(recorder: Recorder, **kwargs: object) -> ElasticsearchClient:
    options: dict[str, object] = {'retry_attempts': 1, **kwargs}
    return ElasticsearchClient(
        'http://es.test:9200', transport=httpx.MockTransport(recorder), **options  # type: ignore[arg-type]
    )


def body_of(request: httpx.Request) -> object:
    return json.loads(request.content)


class TestListCollections:
    async def test_decodes_cat_rows(self) -> None:
        recorder = Recorder(
            httpx.Response(
                200,
                json=[
                    {'index': 'logs', 'health': 'yellow', 'status': 'open', 'docs.count': '3', 'store.size': '2048'},
                    {'index': 'closed', 'health': None, 'status': 'close', 'docs.count': None, 'store.size': None},
                ],
            )
        )
        async with make_client(recorder) as client:
            collections = await client.list_collections()

        assert recorder.last.method == 'GET'
        assert recorder.last.url.path == '/_cat/indices'
        assert recorder.last.url.params['format'] == 'json'
        assert recorder.last.url.params['bytes'] == 'b'
        assert [c.name for c in collections] == ['logs', 'closed']
        assert collections[0].store_bytes == 2048
        assert collections[0].health == 'yellow'
        assert collections[1].health == 'unknown'
        assert collections[1].docs_count == 0

    async def test_unexpected_body(self) -> None:
        recorder = Recorder(httpx.Response(200, json={'not': 'a list'}))
        async with make_client(recorder) as client:
            with pytest.raises(GatewayError, match='list indices: unexpected response'):
                await client.list_collections()


class TestSearch:
    """Verify query shapes and page decoding."""

    @staticmethod
    def hits(*hits: dict[str, object], took: int = 5) -> httpx.Response:
        return httpx.Response(200, json={'took': took, 'hits': {'hits': list(hits)}})

    async def test_blank_query_is_match_all(self) -> None:
        recorder = Recorder(self.hits())
        async with make_client(recorder) as client:
            await client.search('logs', '', 20)

        assert recorder.last.method == 'POST'
        assert recorder.last.url.path == '/logs/_search'
        assert recorder.last.url.params['track_total_hits'] == 'false'
        assert body_of(recorder.last) == {'size': 20, 'query': {'match_all': {}}}

    async def test_query_string(self) -> None:
        recorder = Recorder(self.hits())
        async with make_client(recorder) as client:
            await client.search('logs', 'status:200 AND host:api*', 5)

        assert body_of(recorder.last) == {'size': 5, 'query': {'query_string': {'query': 'status:200 AND host:api*'}}}

    async def test_documents_in_backend_order(self) -> None:
        recorder = Recorder(
            self.hits(
                {'_id': 'b', '_source': {'n': 2}},
                {'_id': 'a', '_source': {'n': 1}},
                {'_id': 'c'},
                {'_id': 'd', '_source': [1, 2]},
                took=7,
            )
        )
        async with make_client(recorder) as client:
            page = await client.search('logs', '', 20)

        assert [d.id for d in page.documents] == ['b', 'a', 'c', 'd']
        assert page.documents[0].source == {'n': 2}
        assert page.documents[2].source == {}
        assert page.documents[3].source == {'_source': '[1, 2]'}
        assert page.took == timedelta(milliseconds=7)

    async def test_zero_took_falls_back_to_elapsed(self) -> None:
        recorder = Recorder(self.hits(took=0))
        async with make_client(recorder) as client:
            page = await client.search('logs', '', 20)
        assert page.took > timedelta(0)

    async def test_index_name_is_escaped(self) -> None:
        recorder = Recorder(self.hits())
        async with make_client(recorder) as client:
            await client.search('odd/name', '', 1)
        assert recorder.last.url.raw_path.startswith(b'/odd%2Fname/_search')

    async def test_error_body_surfaces(self) -> None:
        recorder = Recorder(httpx.Response(400, text='{"error":"parse_exception"}'))
        async with make_client(recorder) as client:
            with pytest.raises(GatewayError) as exc_info:
                await client.search('logs', 'status:', 20)
        assert str(exc_info.value) == 'search logs: {"error":"parse_exception"}'
        assert exc_info.value.status_code == 400


class TestCreateDocument:
    async def test_auto_id_uses_post(self) -> None:
        recorder = Recorder(httpx.Response(201, json={'_id': 'generated', 'result': 'created'}))
        async with make_client(recorder) as client:
            assigned = await client.create_document('logs', '', '{"a":1}')

        assert assigned == 'generated'
        assert recorder.last.method == 'POST'
        assert recorder.last.url.path == '/logs/_doc'
        assert recorder.last.headers['Content-Type'] == 'application/json'
        assert body_of(recorder.last) == {'a': 1}

    async def test_explicit_id_uses_put(self) -> None:
        recorder = Recorder(httpx.Response(201, json={'_id': 'doc-1'}))
        async with make_client(recorder) as client:
            assigned = await client.create_document('logs', 'doc-1', '{"a":1}')

        assert assigned == 'doc-1'
        assert recorder.last.method == 'PUT'
        assert recorder.last.url.path == '/logs/_doc/doc-1'

    async def test_invalid_json_is_rejected_before_sending(self) -> None:
        recorder = Recorder(httpx.Response(201, json={'_id': 'x'}))
        async with make_client(recorder) as client:
            with pytest.raises(GatewayValidationError, match='body must be valid JSON'):
                await client.create_document('logs', '', '{not json')
        assert recorder.requests == []

    async def test_never_retried(self) -> None:
        recorder = Recorder(httpx.Response(503, text='unavailable'))
        async with make_client(recorder, retry_attempts=3) as client:
            with pytest.raises(GatewayError, match='create doc: unavailable'):
                await client.create_document('logs', '', '{}')
        assert len(recorder.requests) == 1


class TestDeleteDocument:
    async def test_deletes_by_id(self) -> None:
        recorder = Recorder(httpx.Response(200, json={'result': 'deleted'}))
        async with make_client(recorder) as client:
            await client.delete_document('logs', 'doc-1')
        assert recorder.last.method == 'DELETE'
        assert recorder.last.url.path == '/logs/_doc/doc-1'

    @pytest.mark.parametrize('document_id', ['', '   '])
    async def test_blank_id_is_rejected(self, document_id: str) -> None:
        recorder = Recorder(httpx.Response(200))
        async with make_client(recorder) as client:
            with pytest.raises(GatewayValidationError, match='document id required'):
                await client.delete_document('logs', document_id)
        assert recorder.requests == []

    async def test_not_found(self) -> None:
        recorder = Recorder(httpx.Response(404, text='{"result":"not_found"}'))
        async with make_client(recorder) as client:
            with pytest.raises(GatewayError, match='delete doc'):
                await client.delete_document('logs', 'missing')


class TestRefreshAndFields:
    async def test_refresh(self) -> None:
        recorder = Recorder(httpx.Response(200, json={'_shards': {}}))
        async with make_client(recorder) as client:
            await client.refresh('logs')
        assert (recorder.last.method, recorder.last.url.path) == ('POST', '/logs/_refresh')

    async def test_list_fields_walks_properties_and_multi_fields(self) -> None:
        mapping = {
            'logs-000001': {
                'mappings': {
                    'properties': {
                        'message': {'type': 'text', 'fields': {'keyword': {'type': 'keyword'}}},
                        'http': {'properties': {'status': {'type': 'integer'}}},
                    }
                }
            },
            'logs-000002': {'mappings': {'properties': {'host': {'type': 'keyword'}}}},
        }
        recorder = Recorder(httpx.Response(200, json=mapping))
        async with make_client(recorder) as client:
            fields = await client.list_fields('logs-*')

        assert recorder.last.url.raw_path == b'/logs-%2A/_mapping'
        assert fields == ['host', 'http', 'http.status', 'message', 'message.keyword']

    def test_collect_mapping_fields_with_prefix(self) -> None:
        out: set[str] = set()
        collect_mapping_fields('root', {'properties': {'a': {'type': 'long'}}, 'fields': 'ignored'}, out)
        assert out == {'root.a'}


class TestTransport:
    """Verify auth headers, retries and transport error mapping."""

    async def test_api_key_header(self) -> None:
        recorder = Recorder(httpx.Response(200, json=[]))
        async with make_client(recorder, api_key='abc', username='ignored', password='x') as client:
            await client.list_collections()
        assert recorder.last.headers['Authorization'] == 'ApiKey abc'

    async def test_basic_auth(self) -> None:
        recorder = Recorder(httpx.Response(200, json=[]))
        async with make_client(recorder, username='elastic', password='changeme') as client:
            await client.list_collections()
        assert recorder.last.headers['Authorization'].startswith('Basic ')

    async def test_from_config(self) -> None:
        config = BrowserConfig(url='https://es.example:9200/', api_key='k')
        client = ElasticsearchClient.from_config(config)
        try:
            assert client.url == 'https://es.example:9200'
        finally:
            await client.close()

    async def test_reads_retry_transient_status(self) -> None:
        recorder = Recorder(httpx.Response(503, text='busy'), httpx.Response(200, json=[]))
        async with make_client(recorder, retry_attempts=2) as client:
            collections = await client.list_collections()
        assert collections == []
        assert len(recorder.requests) == 2

    async def test_transport_error_becomes_gateway_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        async with make_client(Recorder(refuse)) as client:
            with pytest.raises(GatewayError, match='list indices: ConnectError: connection refused'):
                await client.list_collections()
