"""Session runtime - the single consumer that owns the machine.

All events (keys, edits, resizes, command completions) go through one
asyncio.Queue. run() takes them one at a time, lets the machine handle each,
forwards emitted commands to the dispatcher and tells the view to redraw.
Nothing else touches SessionState while run() is alive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from elastic_browser.clients.protocols import SearchGateway
from elastic_browser.schemas.config import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT
from elastic_browser.services.dispatcher import CommandDispatcher
from elastic_browser.session.commands import Command, Quit
from elastic_browser.session.events import Event
from elastic_browser.session.machine import SessionMachine
from elastic_browser.session.state import SessionState

__all__ = [
    'SessionRuntime',
]

logger = logging.getLogger(__name__)

type StateListener = Callable[[SessionState], object]


class SessionRuntime:
    """Actor wrapping SessionMachine and CommandDispatcher.

    Usage::

        runtime = SessionRuntime(gateway, on_change=view.refresh)
        task = asyncio.create_task(runtime.run())
        runtime.post(KeyPressed('enter'))

    run() returns once the machine clears state.running (its Quit command);
    in-flight commands are cancelled.
    """

    def __init__(
        self,
        gateway: SearchGateway,
        *,
        on_change: StateListener | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.machine = SessionMachine(page_size=page_size)
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._dispatcher = CommandDispatcher(gateway, self.post, timeout=timeout, page_size=page_size)
        self._on_change = on_change
        self._stopped = asyncio.Event()

    @property
    def state(self) -> SessionState:
        return self.machine.state

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    def post(self, event: Event) -> None:
        """Enqueue an event. Safe to call from any task on the loop."""
        self._queue.put_nowait(event)

    async def run(self) -> None:
        """Consume events until the session quits."""
        logger.info('[SESSION] Runtime started')
        try:
            self._issue(self.machine.start())
            self._notify()
            while self.state.running:
                event = await self._queue.get()
                commands = self.machine.handle(event)
                self._notify()
                self._issue(commands)
        finally:
            self._dispatcher.close()
            self._stopped.set()
            logger.info('[SESSION] Runtime stopped')

    @property
    def idle(self) -> bool:
        """No queued events and no command in flight."""
        return self._queue.empty() and self._dispatcher.pending_count == 0

    async def wait_stopped(self) -> None:
        await self._stopped.wait()

    def _issue(self, commands: Sequence[Command]) -> None:
        """Hand backend commands to the dispatcher. Quit is handled by run()."""
        for command in commands:
            if isinstance(command, Quit):
                logger.info('[SESSION] Quit requested')
                continue
            self._dispatcher.submit(command)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.machine.state)
