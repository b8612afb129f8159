"""Tests for BackgroundTaskGroup."""

from __future__ import annotations

import asyncio
import logging

import pytest

from elastic_browser.background_tasks import BackgroundTaskGroup


class TestBackgroundTaskGroup:
    async def test_drain_waits_for_everything(self) -> None:
        group = BackgroundTaskGroup('test')
        done: list[int] = []

        async def work(n: int) -> None:
            await asyncio.sleep(0.01 * n)
            done.append(n)

        for n in (3, 1, 2):
            group.submit(work(n), label=f'work-{n}')
        assert group.pending_count == 3

        await group.drain()

        assert done == [1, 2, 3]
        assert group.pending_count == 0

    async def test_escaped_exception_is_logged_and_counted(self, caplog: pytest.LogCaptureFixture) -> None:
        group = BackgroundTaskGroup('test')

        async def broken() -> None:
            raise RuntimeError('escaped')

        with caplog.at_level(logging.ERROR, logger='elastic_browser.background_tasks'):
            task = group.submit(broken(), label='broken')
            await group.drain()

        assert task.get_name() == 'test:broken'
        assert group.escaped_errors == 1
        assert 'escaped' in caplog.text

    async def test_cancel_all(self) -> None:
        group = BackgroundTaskGroup('test')
        task = group.submit(asyncio.sleep(10))

        group.cancel_all()
        await group.drain()

        assert task.cancelled()
        assert group.pending_count == 0
        assert group.escaped_errors == 0
