"""Gateway exception types.

GatewayError messages are shown verbatim on the session's error line, so they
are written for the operator: '<operation>: <backend response body>'.
"""

from __future__ import annotations

__all__ = [
    'GatewayError',
    'GatewayValidationError',
]


class GatewayError(Exception):
    """Backend or transport failure for one gateway operation."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GatewayValidationError(GatewayError):
    """Rejected before any request was sent (blank id, invalid JSON body)."""
