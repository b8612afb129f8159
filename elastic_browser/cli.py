"""Command-line entrypoint: elastic-browser.

Builds BrowserConfig from flags and environment, configures file logging
(the terminal belongs to the UI), constructs the gateway and runs the app.
Startup failures are reported as an error panel on stderr with exit status 1.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
import pydantic
import rich.console
import rich.panel
import typer

from elastic_browser import paths
from elastic_browser.clients.elasticsearch import ElasticsearchClient
from elastic_browser.error_boundary import ErrorBoundary
from elastic_browser.schemas.config import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT, DEFAULT_URL, BrowserConfig
from elastic_browser.tui.app import BrowserApp

__all__ = [
    'app',
    'configure_logging',
    'main',
    'run_browser',
]

logger = logging.getLogger(__name__)

boundary = ErrorBoundary(exit_code=1)


def print_error(message: str) -> None:
    console = rich.console.Console(stderr=True)
    console.print(rich.panel.Panel(message, border_style='red', title='Error', title_align='left'))


@boundary.handler(pydantic.ValidationError)
def _invalid_config(exc: pydantic.ValidationError) -> None:
    problems = '\n'.join(f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors())
    print_error(f'Invalid configuration:\n{problems}')


@boundary.handler(httpx.InvalidURL)
def _invalid_url(exc: httpx.InvalidURL) -> None:
    print_error(f'Invalid cluster URL: {exc}')


@boundary.handler(OSError)
def _os_failed(exc: OSError) -> None:
    print_error(f'{type(exc).__name__}: {exc}')


def configure_logging(level: str) -> None:
    """Append to the log file; the terminal is owned by the UI."""
    paths.APP_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format='%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        filename=paths.LOG_PATH,
    )
    # Silence noisy third-party loggers
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


app = typer.Typer(help='Browse, query, create and delete Elasticsearch documents.', add_completion=False)


@app.command()
@boundary
def main(
    url: str = typer.Option(DEFAULT_URL, '--url', envvar='ELASTICSEARCH_URL', help='Cluster URL'),
    username: str | None = typer.Option(None, '--username', envvar='ELASTICSEARCH_USERNAME', help='Basic auth user'),
    password: str | None = typer.Option(
        None, '--password', envvar='ELASTICSEARCH_PASSWORD', help='Basic auth password'
    ),
    api_key: str | None = typer.Option(
        None, '--api-key', envvar='ELASTICSEARCH_API_KEY', help='API key (overrides basic auth)'
    ),
    page_size: int = typer.Option(
        DEFAULT_PAGE_SIZE, '--page-size', envvar='ELASTIC_BROWSER_PAGE_SIZE', help='Documents per search'
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT, '--timeout', envvar='ELASTIC_BROWSER_TIMEOUT', help='Seconds per backend command'
    ),
    verify_tls: bool = typer.Option(True, '--verify-tls/--insecure', help='Verify TLS certificates'),
    log_level: str = typer.Option('INFO', '--log-level', envvar='ELASTIC_BROWSER_LOG_LEVEL', help='Log file level'),
) -> None:
    """Open the interactive browser."""
    config = BrowserConfig(
        url=url,
        username=username,
        password=password,
        api_key=api_key,
        page_size=page_size,
        timeout=timeout,
        verify_tls=verify_tls,
        log_level=log_level.upper(),
    )
    configure_logging(config.log_level)
    config.log_summary()

    asyncio.run(run_browser(config))
    logger.info('Session ended')


async def run_browser(config: BrowserConfig) -> None:
    """Run the app with a gateway that lives exactly as long as it does."""
    async with ElasticsearchClient.from_config(config) as client:
        await BrowserApp(client, page_size=config.page_size, timeout=config.timeout).run_async()
