# flowstate/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flowstate.core.snapshot import WorkflowSnapshot


@runtime_checkable
class WorkflowObservable(Protocol):
    """
    The minimal capability an effect needs from a workflow.

    Methods:
        subscribe(listener): Register a listener for every published snapshot.
        unsubscribe(listener): Remove a previously registered listener.
        get_state(): Return the most recently published snapshot.

    Runtime Invariants:
    - Listeners receive snapshots synchronously, in publication order.
    - get_state() never suspends.
    """

    def subscribe(self, listener: Callable[["WorkflowSnapshot"], Any]) -> Any:
        """Register a listener."""
        ...

    def unsubscribe(self, listener: Callable[["WorkflowSnapshot"], Any]) -> None:
        """Remove a listener. Removing an unknown listener is a no-op."""
        ...

    def get_state(self) -> "WorkflowSnapshot":
        """Get the current snapshot."""
        ...
