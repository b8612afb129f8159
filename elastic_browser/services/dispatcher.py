"""Command dispatcher - runs backend commands off the event loop's critical path.

Each submitted command becomes one background task that produces exactly one
completion event, successful or not, and hands it to the deliver callback
(the session runtime's queue). Nothing here touches session state.

Time budget: every command gets `timeout` seconds. For create/delete the
follow-up index refresh shares that budget; its failure (including running
out of time) is logged and swallowed, never reported as the write's outcome.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import assert_never

from elastic_browser.background_tasks import BackgroundTaskGroup
from elastic_browser.clients.errors import GatewayError
from elastic_browser.clients.protocols import SearchGateway
from elastic_browser.rendering import extract_fields
from elastic_browser.schemas.config import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT
from elastic_browser.schemas.documents import QueryResult
from elastic_browser.session.commands import (
    BackendCommand,
    CreateDocument,
    DeleteDocument,
    LoadCollections,
    LoadDocuments,
    LoadFields,
)
from elastic_browser.session.events import (
    CollectionsLoaded,
    DocumentCreated,
    DocumentDeleted,
    DocumentsLoaded,
    Event,
    FieldsLoaded,
)

__all__ = [
    'CommandDispatcher',
]

logger = logging.getLogger(__name__)

type Deliver = Callable[[Event], object]


class CommandDispatcher:
    """Execute session commands against a SearchGateway.

    Args:
        gateway: Shared backend handle; safe for concurrent calls.
        deliver: Receives each completion event, called from the event loop.
        timeout: Seconds allowed per command.
        page_size: Fallback page size for searches that do not carry one.
    """

    def __init__(
        self,
        gateway: SearchGateway,
        deliver: Deliver,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._gateway = gateway
        self._deliver = deliver
        self._timeout = timeout
        self._page_size = page_size
        self._tasks = BackgroundTaskGroup('dispatcher')

    def submit(self, command: BackendCommand) -> asyncio.Task[object]:
        """Start command in the background. Its event goes to deliver."""
        logger.debug(f'[DISPATCH] Submitting {command}')
        return self._tasks.submit(self._execute_and_deliver(command), label=type(command).__name__)

    async def execute(self, command: BackendCommand) -> Event:
        """Run one command to completion and return its single event.

        Never raises for backend, transport, validation or timeout failures:
        those become the event's error string.
        """
        started = time.perf_counter()
        deadline = asyncio.get_running_loop().time() + self._timeout

        try:
            async with asyncio.timeout_at(deadline):
                event = await self._run(command)
        except TimeoutError:
            event = _failure(command, f'{_describe(command)}: timed out after {self._timeout:g}s')
        except GatewayError as e:
            event = _failure(command, str(e))
        except Exception as e:
            logger.exception(f'[DISPATCH] Unexpected failure in {_describe(command)}')
            event = _failure(command, f'{_describe(command)}: {type(e).__name__}: {e}')

        match command, event:
            case CreateDocument(collection=collection), DocumentCreated(error=None):
                await self._refresh_quietly(collection, deadline)
            case DeleteDocument(collection=collection), DocumentDeleted(error=None):
                await self._refresh_quietly(collection, deadline)

        elapsed_ms = (time.perf_counter() - started) * 1000
        outcome = 'ok' if getattr(event, 'error', None) is None else 'failed'
        logger.info(f'[DISPATCH] {_describe(command)} {outcome} in {elapsed_ms:.0f}ms')
        return event

    async def drain(self) -> None:
        """Wait for every in-flight command to deliver its event."""
        await self._tasks.drain()

    def close(self) -> None:
        """Cancel in-flight commands; their events are never delivered."""
        if self._tasks.pending_count:
            logger.info(f'[DISPATCH] Cancelling {self._tasks.pending_count} in-flight command(s)')
        self._tasks.cancel_all()

    @property
    def pending_count(self) -> int:
        return self._tasks.pending_count

    async def _execute_and_deliver(self, command: BackendCommand) -> None:
        event = await self.execute(command)
        self._deliver(event)

    async def _run(self, command: BackendCommand) -> Event:
        gateway = self._gateway
        match command:
            case LoadCollections():
                return CollectionsLoaded(collections=tuple(await gateway.list_collections()))
            case LoadDocuments(collection=collection, query=query, page_size=page_size):
                page = await gateway.search(collection, query, page_size or self._page_size)
                documents = tuple(page.documents)
                result = QueryResult(
                    collection=collection,
                    query=query,
                    documents=documents,
                    took=page.took,
                    fields=tuple(extract_fields(document.source for document in documents)),
                )
                return DocumentsLoaded(collection=collection, query=query, result=result)
            case LoadFields(collection=collection):
                return FieldsLoaded(collection=collection, fields=tuple(await gateway.list_fields(collection)))
            case CreateDocument(collection=collection, document_id=document_id, body=body):
                assigned_id = await gateway.create_document(collection, document_id, body)
                return DocumentCreated(document_id=assigned_id)
            case DeleteDocument(collection=collection, document_id=document_id):
                await gateway.delete_document(collection, document_id)
                return DocumentDeleted(document_id=document_id)
            case _:
                assert_never(command)

    async def _refresh_quietly(self, collection: str, deadline: float) -> None:
        try:
            async with asyncio.timeout_at(deadline):
                await self._gateway.refresh(collection)
        except TimeoutError:
            logger.warning(f'[DISPATCH] Refresh of {collection!r} after write ran out of time')
        except Exception as e:
            logger.warning(f'[DISPATCH] Refresh of {collection!r} after write failed: {e}')


def _failure(command: BackendCommand, message: str) -> Event:
    match command:
        case LoadCollections():
            return CollectionsLoaded(error=message)
        case LoadDocuments(collection=collection, query=query):
            return DocumentsLoaded(collection=collection, query=query, error=message)
        case LoadFields(collection=collection):
            return FieldsLoaded(collection=collection, error=message)
        case CreateDocument(document_id=document_id):
            return DocumentCreated(document_id=document_id, error=message)
        case DeleteDocument(document_id=document_id):
            return DocumentDeleted(document_id=document_id, error=message)
        case _:
            assert_never(command)


def _describe(command: BackendCommand) -> str:
    match command:
        case LoadCollections():
            return 'list indices'
        case LoadDocuments(collection=collection):
            return f'search {collection}'
        case LoadFields(collection=collection):
            return f'mapping {collection}'
        case CreateDocument(collection=collection):
            return f'create document in {collection}'
        case DeleteDocument(collection=collection, document_id=document_id):
            return f'delete {document_id} from {collection}'
        case _:
            assert_never(command)
