from __future__ import annotations

import asyncio
import logging

import pytest

from app.core.scheduler import PeriodicTask

pytestmark = pytest.mark.unit


def test_run_once_logs_and_swallows_callback_errors(caplog: pytest.LogCaptureFixture) -> None:
    def explode() -> None:
        raise RuntimeError("boom")

    task = PeriodicTask("exploding", 60, explode)

    with caplog.at_level(logging.ERROR, logger="jobboard.scheduler"):
        asyncio.run(task.run_once())

    assert "Task exploding failed" in caplog.text


def test_periodic_task_runs_repeatedly_until_stopped() -> None:
    calls: list[int] = []

    async def scenario() -> None:
        task = PeriodicTask("counter", 0.01, lambda: calls.append(1))
        task.start()
        await asyncio.sleep(0.2)
        await task.stop()
        seen = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == seen

    asyncio.run(scenario())

    assert len(calls) >= 2
