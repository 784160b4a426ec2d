"""flowstate: declarative asynchronous workflow state machines

A workflow is a finite state machine with exactly one active state, a mutable
shared context, async guards and entry/exit/transition callbacks. Every change
is published as an immutable snapshot to subscribers, and the effects module
turns that stream into enter/exit/transition/final notifications.

Example:
    workflow = await WorkflowManager.create(definition, {"user_role": "admin"})
    if await workflow.dispatch("approve"):
        print(workflow.get_state().current_state)
"""

from flowstate.core import (
    WorkflowDefinition,
    WorkflowError,
    WorkflowManager,
    WorkflowOptions,
    WorkflowSnapshot,
    WorkflowState,
    WorkflowTransition,
)

__version__ = "0.1.0"

__all__ = [
    "WorkflowDefinition",
    "WorkflowError",
    "WorkflowManager",
    "WorkflowOptions",
    "WorkflowSnapshot",
    "WorkflowState",
    "WorkflowTransition",
]
