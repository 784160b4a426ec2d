# flowstate/core/actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Helpers that build workflow actions.

Every helper returns an async action taking the live context::

    action = sequence(
        log("Processing order"),
        update_context({"status": "processing"}),
        call_service(lambda ctx: order_service.process(ctx["order_id"])),
    )
"""

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional, Union

from flowstate.core.errors import ActionTimeoutError
from flowstate.interfaces.types import Action, Context, Guard
from flowstate.runtime.async_support import invoke, resolve

logger = logging.getLogger(__name__)


def log(message: Union[str, Callable[[Context], str]], level: int = logging.INFO) -> Action:
    """Log ``message`` (or ``message(context)``) together with the context."""

    async def _action(context: Context) -> None:
        text = message(context) if callable(message) else message
        logger.log(level, "[Workflow] %s %r", text, context)

    return _action


def update_context(
    updates: Union[Mapping[str, Any], Callable[[Context], Mapping[str, Any]]]
) -> Action:
    """
    Merge ``updates`` into the live context in place. Use
    ``WorkflowManager.update_context`` instead when a snapshot should be published.
    """

    async def _action(context: Context) -> None:
        context.update(updates(context) if callable(updates) else updates)

    return _action


def call_service(service_fn: Callable[[Context], Any]) -> Action:
    """Call a plain or async function with the context and wait for it."""

    async def _action(context: Context) -> None:
        await resolve(service_fn(context))

    return _action


def sequence(*actions: Action) -> Action:
    async def _action(context: Context) -> None:
        for action in actions:
            await resolve(action(context))

    return _action


def parallel(*actions: Action) -> Action:
    """Run all actions concurrently; the first failure propagates."""

    async def _action(context: Context) -> None:
        await asyncio.gather(*(resolve(action(context)) for action in actions))

    return _action


def conditional(condition: Guard, true_action: Action, false_action: Optional[Action] = None) -> Action:
    async def _action(context: Context) -> None:
        if await resolve(condition(context)):
            await resolve(true_action(context))
        else:
            await invoke(false_action, context)

    return _action


def retry(action: Action, max_attempts: int = 3, delay: float = 1.0) -> Action:
    """
    Run ``action`` up to ``max_attempts`` times, sleeping ``delay`` seconds between
    attempts. The last error is re-raised.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    async def _action(context: Context) -> None:
        for attempt in range(1, max_attempts + 1):
            try:
                await resolve(action(context))
                return
            except Exception:
                if attempt == max_attempts:
                    raise
                logger.debug("Action failed on attempt %d/%d, retrying", attempt, max_attempts)
                await asyncio.sleep(delay)

    return _action


def timeout(action: Action, seconds: float) -> Action:
    """
    Fail with ActionTimeoutError if ``action`` takes longer than ``seconds``.
    The action is cancelled when the deadline passes.
    """

    async def _action(context: Context) -> None:
        try:
            await asyncio.wait_for(resolve(action(context)), timeout=seconds)
        except asyncio.TimeoutError as e:
            raise ActionTimeoutError(seconds) from e

    return _action
