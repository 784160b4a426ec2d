# tests/unit/core/test_actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from flowstate.core.actions import (
    call_service,
    conditional,
    log,
    parallel,
    retry,
    sequence,
    timeout,
    update_context,
)
from flowstate.core.errors import ActionTimeoutError, WorkflowError

# -----------------------------------------------------------------------------
# LOG
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_log_string_message(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.INFO, logger="flowstate.core.actions"):
        await log("Processing order")({"order_id": "1"})

    assert any("[Workflow] Processing order" in rec.getMessage() for rec in caplog.records)
    assert "'order_id': '1'" in caplog.records[-1].getMessage()


@pytest.mark.asyncio
async def test_log_message_from_context(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.INFO, logger="flowstate.core.actions"):
        await log(lambda ctx: f"Order {ctx['order_id']}")({"order_id": "42"})

    assert "[Workflow] Order 42" in caplog.records[-1].getMessage()


# -----------------------------------------------------------------------------
# UPDATE_CONTEXT / CALL_SERVICE
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_context_merges_in_place():
    context = {"keep": 1, "status": "new"}

    await update_context({"status": "processing"})(context)

    assert context == {"keep": 1, "status": "processing"}


@pytest.mark.asyncio
async def test_update_context_from_function():
    context = {"count": 1}

    await update_context(lambda ctx: {"count": ctx["count"] + 1})(context)

    assert context == {"count": 2}


@pytest.mark.asyncio
async def test_call_service_async_and_sync():
    async_service = AsyncMock()
    sync_service = Mock(return_value=None)
    context = {"id": 7}

    await call_service(async_service)(context)
    await call_service(sync_service)(context)

    async_service.assert_awaited_once_with(context)
    sync_service.assert_called_once_with(context)


# -----------------------------------------------------------------------------
# SEQUENCE / PARALLEL / CONDITIONAL
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_sequence_runs_in_order():
    order = []

    async def slow(ctx):
        await asyncio.sleep(0.01)
        order.append("slow")

    await sequence(slow, lambda ctx: order.append("fast"))({})

    assert order == ["slow", "fast"]


@pytest.mark.asyncio
async def test_sequence_of_nothing():
    await sequence()({})


@pytest.mark.asyncio
async def test_parallel_runs_concurrently():
    started = []
    release = asyncio.Event()

    async def first(ctx):
        started.append("first")
        await release.wait()

    async def second(ctx):
        started.append("second")
        release.set()

    await asyncio.wait_for(parallel(first, second)({}), timeout=1.0)

    assert started == ["first", "second"]


@pytest.mark.asyncio
async def test_parallel_of_nothing():
    await parallel()({})


@pytest.mark.asyncio
async def test_conditional_branches():
    yes, no = AsyncMock(), AsyncMock()

    await conditional(lambda ctx: ctx["ok"], yes, no)({"ok": True})
    await conditional(lambda ctx: ctx["ok"], yes, no)({"ok": False})

    yes.assert_awaited_once()
    no.assert_awaited_once()


@pytest.mark.asyncio
async def test_conditional_without_false_branch():
    yes = AsyncMock()

    async def condition(ctx):
        return False

    await conditional(condition, yes)({})

    yes.assert_not_awaited()


# -----------------------------------------------------------------------------
# RETRY / TIMEOUT
# -----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_retry_succeeds_after_failures():
    action = AsyncMock(side_effect=[RuntimeError("one"), RuntimeError("two"), None])

    await retry(action, max_attempts=3, delay=0)({})

    assert action.await_count == 3


@pytest.mark.asyncio
async def test_retry_reraises_last_error():
    action = AsyncMock(side_effect=[RuntimeError("one"), ValueError("last")])

    with pytest.raises(ValueError, match="last"):
        await retry(action, max_attempts=2, delay=0)({})


def test_retry_rejects_zero_attempts():
    with pytest.raises(ValueError):
        retry(AsyncMock(), max_attempts=0)


@pytest.mark.asyncio
async def test_timeout_passes_fast_actions():
    action = AsyncMock()

    await timeout(action, 1.0)({})

    action.assert_awaited_once()


@pytest.mark.asyncio
async def test_timeout_raises_for_slow_actions():
    async def slow(ctx):
        await asyncio.sleep(1)

    with pytest.raises(ActionTimeoutError) as exc_info:
        await timeout(slow, 0.01)({})

    assert isinstance(exc_info.value, WorkflowError)
    assert isinstance(exc_info.value, asyncio.TimeoutError)
    assert exc_info.value.seconds == 0.01
