# flowstate/core/guards.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Guard combinators.

Each function returns a new async guard. Input guards may be plain functions or
coroutine functions. Guards hold no state and can be shared between workflows::

    guard = and_(
        equals("user_role", "admin"),
        or_(matches("order_amount", lambda amount: amount > 1000), equals("is_vip", True)),
    )
"""

from typing import Any

from flowstate.interfaces.types import Context, Guard, Predicate
from flowstate.runtime.async_support import resolve


def _scalar_kind(value: Any) -> Any:
    if isinstance(value, bool):
        return bool
    if isinstance(value, (int, float)):
        return float
    if isinstance(value, (str, bytes)):
        return type(value)
    return None


def and_(*guards: Guard) -> Guard:
    """Pass only if every guard passes. Evaluated left to right, stops at the first failure."""

    async def _guard(context: Context) -> bool:
        for guard in guards:
            if not await resolve(guard(context)):
                return False
        return True

    return _guard


def or_(*guards: Guard) -> Guard:
    """Pass if any guard passes. Evaluated left to right, stops at the first success."""

    async def _guard(context: Context) -> bool:
        for guard in guards:
            if await resolve(guard(context)):
                return True
        return False

    return _guard


def not_(guard: Guard) -> Guard:
    async def _guard(context: Context) -> bool:
        return not await resolve(guard(context))

    return _guard


def always() -> Guard:
    async def _guard(context: Context) -> bool:
        return True

    return _guard


def never() -> Guard:
    async def _guard(context: Context) -> bool:
        return False

    return _guard


def _strict_equals(left: Any, right: Any) -> bool:
    if left is right:
        return True
    # No deep comparison: only scalars of the same kind compare by value.
    kind = _scalar_kind(left)
    return kind is not None and kind is _scalar_kind(right) and left == right


def equals(key: str, value: Any) -> Guard:
    """Pass if ``context[key]`` strictly equals ``value``. ``True`` does not equal ``1``."""

    async def _guard(context: Context) -> bool:
        return _strict_equals(context.get(key), value)

    return _guard


def exists(key: str) -> Guard:
    """Pass if ``key`` is present and not None. ``0``, ``False`` and ``""`` exist."""

    async def _guard(context: Context) -> bool:
        return context.get(key) is not None

    return _guard


def matches(key: str, predicate: Predicate) -> Guard:
    """
    Pass if ``predicate(context[key])`` is truthy. A missing key is passed to the
    predicate as None.
    """

    async def _guard(context: Context) -> bool:
        return bool(predicate(context.get(key)))

    return _guard
