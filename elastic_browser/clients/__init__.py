"""Search backend clients."""

from __future__ import annotations

from elastic_browser.clients.elasticsearch import ElasticsearchClient
from elastic_browser.clients.errors import GatewayError, GatewayValidationError
from elastic_browser.clients.protocols import SearchGateway

__all__ = [
    'ElasticsearchClient',
    'GatewayError',
    'GatewayValidationError',
    'SearchGateway',
]
