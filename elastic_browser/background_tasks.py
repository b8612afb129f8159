"""Fire-and-forget tracking for in-flight backend commands.

Holds strong references to submitted tasks so they are not garbage collected
mid-flight, and cancels whatever is still running at shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

__all__ = [
    'BackgroundTaskGroup',
]

logger = logging.getLogger(__name__)


class BackgroundTaskGroup:
    """Track background tasks that report their own outcome.

    Submitted coroutines are expected to deliver results themselves (the
    dispatcher turns every failure into a completion event). An exception that
    still escapes is a bug: it is logged with its traceback and counted, never
    re-raised into the event loop.

    Lifecycle: one group per session runtime; cancel_all() on shutdown.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._tasks: set[asyncio.Task[object]] = set()
        self._escaped_errors = 0

    def submit(self, coro: Coroutine[Any, Any, Any], *, label: str | None = None) -> asyncio.Task[object]:
        """Schedule a coroutine and return immediately."""
        task = asyncio.create_task(coro, name=f'{self._name}:{label}' if label else None)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[object]) -> None:
        """Callback: drop completed tasks, log anything that escaped."""
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._escaped_errors += 1
            logger.error(f'[{self._name}] Background task {task.get_name()} failed: {exc!r}', exc_info=exc)

    async def drain(self) -> None:
        """Await all outstanding tasks."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def cancel_all(self) -> None:
        """Cancel all outstanding tasks."""
        for task in self._tasks:
            task.cancel()

    @property
    def pending_count(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)

    @property
    def escaped_errors(self) -> int:
        """Number of tasks that ended with an unhandled exception."""
        return self._escaped_errors
