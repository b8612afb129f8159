"""Tests for the transient-error predicate that drives Elasticsearch retries."""

from __future__ import annotations

import httpx
import pytest

from elastic_browser.clients._retry import is_retryable_elasticsearch_error

REQUEST = httpx.Request('GET', 'http://es.test:9200/_cat/indices')


def status_error(status: int) -> httpx.HTTPStatusError:
    response = httpx.Response(status, request=REQUEST)
    return httpx.HTTPStatusError(f'status {status}', request=REQUEST, response=response)


class TestIsRetryableElasticsearchError:
    @pytest.mark.parametrize(
        'exc',
        [
            httpx.ConnectError('refused', request=REQUEST),
            httpx.ReadTimeout('slow', request=REQUEST),
            httpx.RemoteProtocolError('peer closed connection', request=REQUEST),
            status_error(429),
            status_error(503),
        ],
        ids=['connect', 'read-timeout', 'remote-protocol', '429', '503'],
    )
    def test_transient_errors_retry(self, exc: BaseException) -> None:
        assert is_retryable_elasticsearch_error(exc)

    @pytest.mark.parametrize(
        'exc',
        [
            httpx.LocalProtocolError('bad request line', request=REQUEST),
            httpx.UnsupportedProtocol('ftp'),
            status_error(400),
            status_error(404),
            ValueError('not a transport error'),
        ],
        ids=['local-protocol', 'unsupported-protocol', '400', '404', 'value-error'],
    )
    def test_permanent_errors_propagate(self, exc: BaseException) -> None:
        assert not is_retryable_elasticsearch_error(exc)
