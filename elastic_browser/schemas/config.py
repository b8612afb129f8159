"""Connection and session configuration.

Built once by the CLI from flags and ELASTICSEARCH_* / ELASTIC_BROWSER_*
environment variables. Invalid values fail startup.
"""

from __future__ import annotations

import logging
from typing import Literal

import pydantic

from elastic_browser.schemas.base import StrictModel

__all__ = [
    'DEFAULT_PAGE_SIZE',
    'DEFAULT_TIMEOUT',
    'DEFAULT_URL',
    'BrowserConfig',
    'LogLevel',
]

logger = logging.getLogger(__name__)

DEFAULT_URL = 'http://localhost:9200'
DEFAULT_PAGE_SIZE = 20
# Seconds per backend command, including retries
DEFAULT_TIMEOUT = 10.0

type LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR']


class BrowserConfig(StrictModel):
    """Everything needed to construct the gateway and the session.

    api_key takes precedence over username/password when both are set.
    """

    url: str = DEFAULT_URL
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    page_size: int = pydantic.Field(default=DEFAULT_PAGE_SIZE, ge=1, le=10_000)
    timeout: float = pydantic.Field(default=DEFAULT_TIMEOUT, gt=0, strict=False)
    verify_tls: bool = True
    log_level: LogLevel = 'INFO'

    @pydantic.field_validator('url')
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        value = value.strip() or DEFAULT_URL
        if not value.startswith(('http://', 'https://')):
            raise ValueError(f'url must start with http:// or https://, got {value!r}')
        return value

    @pydantic.field_validator('username', 'password', 'api_key')
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    @property
    def base_url(self) -> str:
        return self.url.rstrip('/')

    @property
    def auth_mode(self) -> Literal['api_key', 'basic', 'none']:
        if self.api_key:
            return 'api_key'
        if self.username:
            return 'basic'
        return 'none'

    def log_summary(self) -> None:
        """Log the effective configuration without secrets."""
        logger.info(
            f'[CONFIG] url={self.base_url} auth={self.auth_mode} page_size={self.page_size} '
            f'timeout={self.timeout}s verify_tls={self.verify_tls}'
        )
