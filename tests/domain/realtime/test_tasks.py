from __future__ import annotations

import asyncio

import pytest

from instarelay.domain.realtime import TaskScheduler


def test_wait_idle_includes_tasks_scheduled_by_tasks() -> None:
    async def scenario() -> list[str]:
        scheduler = TaskScheduler()
        order: list[str] = []

        async def child() -> None:
            await asyncio.sleep(0)
            order.append("child")

        async def parent() -> None:
            order.append("parent")
            scheduler.schedule(child(), name="child")

        scheduler.schedule(parent(), name="parent")
        assert scheduler.pending == 1
        await scheduler.wait_idle()
        assert scheduler.pending == 0
        return order

    assert asyncio.run(scenario()) == ["parent", "child"]


def test_failed_task_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    async def scenario() -> None:
        scheduler = TaskScheduler()

        async def broken() -> None:
            raise RuntimeError("nope")

        scheduler.schedule(broken(), name="broken-task")
        await scheduler.wait_idle()

    with caplog.at_level("ERROR"):
        asyncio.run(scenario())

    assert "Task broken-task failed" in caplog.text


def test_schedule_requires_running_loop() -> None:
    scheduler = TaskScheduler()

    async def noop() -> None:
        return None

    coro = noop()
    with pytest.raises(RuntimeError):
        scheduler.schedule(coro)
    coro.close()
