# flowstate/testing.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Helpers for driving workflows from tests.

    tester = WorkflowTester(workflow)
    await tester.dispatch("approve")
    assert [s.current_state for s in tester.get_state_history()] == ["pending", "approved"]
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Mapping, Optional

from flowstate.core.definition import WorkflowTransition
from flowstate.core.snapshot import WorkflowSnapshot
from flowstate.core.workflow_manager import WorkflowManager
from flowstate.interfaces.types import EventID, StateID, Unsubscribe


class WorkflowTester:
    """
    Wraps a WorkflowManager and records every snapshot it publishes, starting with
    the one current at construction.
    """

    def __init__(self, workflow: WorkflowManager) -> None:
        self.workflow = workflow
        self._history: List[WorkflowSnapshot] = [workflow.get_state()]
        self._unsubscribe: Optional[Unsubscribe] = workflow.subscribe(self._history.append)

    def get_state(self) -> WorkflowSnapshot:
        return self.workflow.get_state()

    def get_current_state(self) -> StateID:
        return self.workflow.get_state().current_state

    def get_state_history(self) -> List[WorkflowSnapshot]:
        return list(self._history)

    async def dispatch(self, event: EventID, payload: Any = None) -> bool:
        return await self.workflow.dispatch(event, payload)

    def can_transition(self, event: EventID) -> bool:
        return self.workflow.can_transition(event)

    async def reset(self) -> None:
        await self.workflow.reset()

    def update_context(self, partial: Mapping[str, Any]) -> None:
        self.workflow.update_context(partial)

    def get_available_transitions(self) -> Mapping[EventID, WorkflowTransition]:
        return self.workflow.get_available_transitions()

    def cleanup(self) -> None:
        """Stop recording. Safe to call more than once."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


async def wait_for_workflow_state(
    workflow: WorkflowManager, state_id: StateID, timeout: float = 5.0
) -> WorkflowSnapshot:
    """
    Return the first snapshot in ``state_id``; immediately if the workflow is
    already there.

    :raises asyncio.TimeoutError: If the state is not reached within ``timeout`` seconds.
    """
    current = workflow.get_state()
    if current.current_state == state_id:
        return current

    reached: asyncio.Future = asyncio.get_running_loop().create_future()

    def _listener(snapshot: WorkflowSnapshot) -> None:
        if snapshot.current_state == state_id and not reached.done():
            reached.set_result(snapshot)

    workflow.subscribe(_listener)
    try:
        return await asyncio.wait_for(reached, timeout=timeout)
    finally:
        workflow.unsubscribe(_listener)
