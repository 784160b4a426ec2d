# flowstate/runtime/async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

logger = logging.getLogger(__name__)

# Strong references to handler tasks so they are not collected mid-flight.
_background_tasks: Set[asyncio.Task] = set()


async def resolve(value: Any) -> Any:
    """
    Await ``value`` if it is awaitable, otherwise return it unchanged. Lets guards,
    actions and hooks be plain functions or coroutine functions interchangeably.
    """
    if inspect.isawaitable(value):
        return await value
    return value


async def invoke(fn: Optional[Callable[..., Any]], *args: Any) -> Any:
    """
    Call an optional callback and await its result. A missing callback is a no-op.
    """
    if fn is None:
        return None
    return await resolve(fn(*args))


def schedule(value: Any) -> Optional[asyncio.Task]:
    """
    Run the awaitable returned by a synchronously-invoked handler in the background.

    Snapshot delivery is synchronous, so an async handler cannot be awaited by the
    publisher; its coroutine is handed to the running loop instead. Non-awaitable
    values are ignored.

    :raises RuntimeError: If ``value`` is awaitable and no event loop is running. A
        coroutine is closed first.
    """
    if not inspect.isawaitable(value):
        return None

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # Nothing will ever await it.
        if inspect.iscoroutine(value):
            value.close()
        raise
    task = asyncio.ensure_future(value, loop=loop)
    _background_tasks.add(task)
    task.add_done_callback(_on_task_done)
    return task


def _on_task_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Async workflow handler failed", exc_info=error)


async def drain() -> None:
    """
    Wait until every handler task scheduled so far has finished.
    """
    while _background_tasks:
        await asyncio.gather(*list(_background_tasks), return_exceptions=True)
