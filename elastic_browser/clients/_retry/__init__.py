"""Retry helpers for transient Elasticsearch failures.

Private submodule - not exported by the package.

Retry Policy
------------
- **RETRY** = transport errors (timeouts, refused/reset connections, invalid
  HTTP from the server) and HTTP 429/502/503/504, for list indices, search,
  mapping and refresh.
- **PROPAGATE** = everything else, and every failure of create or delete. A
  retried POST after a read timeout could index twice; a retried DELETE
  reports 404 for a document the first attempt removed.

Each client owns one circuit breaker; only retryable errors count toward it.
"""

from __future__ import annotations

from elastic_browser.clients._retry.elasticsearch import (
    RETRYABLE_STATUS_CODES,
    create_elasticsearch_breaker,
    is_retryable_elasticsearch_error,
    log_elasticsearch_retry,
)

__all__ = [
    'RETRYABLE_STATUS_CODES',
    'create_elasticsearch_breaker',
    'is_retryable_elasticsearch_error',
    'log_elasticsearch_retry',
]
