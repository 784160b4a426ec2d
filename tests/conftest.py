# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, List

import pytest


@pytest.fixture
def simple_definition() -> Dict[str, Any]:
    """idle --start--> active --complete--> done"""
    return {
        "id": "simple",
        "initial_state": "idle",
        "states": {
            "idle": {"id": "idle", "transitions": {"start": {"target": "active"}}},
            "active": {"id": "active", "transitions": {"complete": {"target": "done"}}},
            "done": {"id": "done", "transitions": {}},
        },
    }


@pytest.fixture
def order_definition() -> Dict[str, Any]:
    """An approval workflow with a guarded transition and entry/exit hooks."""

    async def is_admin(ctx):
        return ctx.get("user_role") == "admin"

    async def enter_pending(ctx):
        ctx["entered_pending"] = True

    async def exit_pending(ctx):
        ctx["exited_pending"] = True

    async def enter_approved(ctx):
        ctx["entered_approved"] = True

    return {
        "id": "order",
        "initial_state": "pending",
        "states": {
            "pending": {
                "id": "pending",
                "transitions": {
                    "approve": {"target": "approved", "guard": is_admin},
                    "reject": {"target": "rejected"},
                },
                "on_enter": enter_pending,
                "on_exit": exit_pending,
            },
            "approved": {
                "id": "approved",
                "transitions": {"ship": {"target": "shipped"}},
                "on_enter": enter_approved,
            },
            "rejected": {"id": "rejected", "transitions": {}},
            "shipped": {"id": "shipped", "transitions": {}},
        },
    }


@pytest.fixture
def call_log() -> List[str]:
    """A shared list that hooks append to, for asserting call order."""
    return []


@pytest.fixture
def recording_definition(call_log: List[str]) -> Dict[str, Any]:
    """A -go-> B -go-> C where every callback records itself in call_log."""

    def record(name, result=None):
        async def _callback(ctx):
            call_log.append(name)
            return result

        return _callback

    return {
        "id": "recording",
        "initial_state": "A",
        "states": {
            "A": {
                "id": "A",
                "transitions": {
                    "go": {"target": "B", "guard": record("guard:A->B", True), "action": record("action:A->B")},
                },
                "on_enter": record("enter:A"),
                "on_exit": record("exit:A"),
            },
            "B": {
                "id": "B",
                "transitions": {"go": {"target": "C", "action": record("action:B->C")}},
                "on_enter": record("enter:B"),
                "on_exit": record("exit:B"),
            },
            "C": {"id": "C", "transitions": {}, "on_enter": record("enter:C")},
        },
    }
