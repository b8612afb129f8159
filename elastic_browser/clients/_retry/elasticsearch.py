"""Elasticsearch retry and circuit breaker helpers.

Private module - import from _retry package.
"""

from __future__ import annotations

import logging

import circuitbreaker
import httpx
import tenacity


__all__ = [
    'create_elasticsearch_breaker',
    'is_retryable_elasticsearch_error',
    'log_elasticsearch_retry',
]

logger = logging.getLogger(__name__)

# 429: search thread pool rejections
# 502/503/504: proxy in front of the cluster or a node restarting
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})

# Opens after consecutive transient failures so a dead cluster fails fast
# instead of burning the whole command timeout on every keypress.
ELASTICSEARCH_FAILURE_THRESHOLD = 5
ELASTICSEARCH_RECOVERY_TIMEOUT = 30


def is_retryable_elasticsearch_error(exc: BaseException) -> bool:
    """Check if exception is a retryable transient error from Elasticsearch.

    Retries on:
    - httpx timeouts and network errors (refused, reset, closed connections)
    - httpx.RemoteProtocolError (a node or proxy sent broken HTTP mid-restart)
    - HTTP 429/502/503/504

    Propagates LocalProtocolError, ProxyError and UnsupportedProtocol: those
    come from our configuration and fail the same way every time.
    """
    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)):
        return True

    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code in RETRYABLE_STATUS_CODES


def log_elasticsearch_retry(retry_state: tenacity.RetryCallState) -> None:
    """Log retry attempt with exception details."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if exc is None:
        return

    exc_msg = str(exc)
    if isinstance(exc, httpx.HTTPStatusError):
        exc_msg = f'HTTP {exc.response.status_code}: {exc_msg}'

    # Positional args of the wrapped send are (method, path)
    target = ' '.join(str(arg) for arg in retry_state.args[:2]) or 'request'
    logger.warning(
        f'[RETRY] Elasticsearch {target} attempt {retry_state.attempt_number} failed: '
        f'{type(exc).__name__}: {exc_msg}'
    )


def _elasticsearch_circuit_filter(thrown_type: type, thrown_value: BaseException) -> bool:  # noqa: ARG001
    """Only count transient errors toward the circuit breaker."""
    return is_retryable_elasticsearch_error(thrown_value)


def create_elasticsearch_breaker(name: str = 'elasticsearch') -> circuitbreaker.CircuitBreaker:
    """Create a breaker for one client instance.

    One breaker per client keeps the failure count scoped to a single cluster
    connection.
    """
    return circuitbreaker.CircuitBreaker(
        failure_threshold=ELASTICSEARCH_FAILURE_THRESHOLD,
        recovery_timeout=ELASTICSEARCH_RECOVERY_TIMEOUT,
        expected_exception=_elasticsearch_circuit_filter,
        name=name,
    )
