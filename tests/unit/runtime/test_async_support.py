# tests/unit/runtime/test_async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
import inspect
import logging

import pytest

from flowstate.runtime.async_support import drain, invoke, resolve, schedule


@pytest.mark.asyncio
async def test_resolve_plain_and_awaitable_values():
    async def coro():
        return "awaited"

    assert await resolve(3) == 3
    assert await resolve(coro()) == "awaited"


@pytest.mark.asyncio
async def test_invoke_missing_callback_is_noop():
    assert await invoke(None, {"a": 1}) is None


@pytest.mark.asyncio
async def test_invoke_passes_arguments():
    async def add(a, b):
        return a + b

    assert await invoke(add, 1, 2) == 3
    assert await invoke(lambda ctx: ctx["x"], {"x": 9}) == 9


def test_schedule_ignores_plain_values():
    assert schedule(None) is None
    assert schedule(42) is None


def test_schedule_requires_running_loop():
    async def handler():
        return None

    coro = handler()
    with pytest.raises(RuntimeError):
        schedule(coro)

    assert inspect.getcoroutinestate(coro) == inspect.CORO_CLOSED


@pytest.mark.asyncio
async def test_schedule_runs_in_background():
    done = asyncio.Event()

    async def handler():
        done.set()

    task = schedule(handler())
    assert isinstance(task, asyncio.Task)

    await drain()
    assert done.is_set()


@pytest.mark.asyncio
async def test_failed_background_handler_is_logged(caplog: pytest.LogCaptureFixture):
    async def handler():
        raise ValueError("handler broke")

    with caplog.at_level(logging.ERROR, logger="flowstate.runtime.async_support"):
        schedule(handler())
        await drain()

    assert any("Async workflow handler failed" in rec.getMessage() for rec in caplog.records)
