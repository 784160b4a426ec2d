# flowstate/core/effects.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Named observation patterns over a workflow's snapshot stream.

Each factory returns a function that attaches the effect to a workflow and
returns an unsubscribe callable::

    stop = create_effects(
        workflow,
        on_state_enter("approved", notify_customer),
        on_transition(lambda src, dst, snapshot: audit.record(src, dst)),
    )
    ...
    stop()

Handlers run synchronously during publication. A coroutine-function handler is
scheduled on the running loop instead of being awaited.
"""

from typing import Any, Callable, List

from flowstate.core.snapshot import WorkflowSnapshot
from flowstate.interfaces.protocols import WorkflowObservable
from flowstate.interfaces.types import StateID, Unsubscribe
from flowstate.runtime.async_support import schedule

EffectHandler = Callable[[WorkflowSnapshot], Any]
TransitionEffectHandler = Callable[[StateID, StateID, WorkflowSnapshot], Any]
Effect = Callable[[WorkflowObservable], Unsubscribe]


def _attach(workflow: WorkflowObservable, listener: Callable[[WorkflowSnapshot], None]) -> Unsubscribe:
    workflow.subscribe(listener)

    def _unsubscribe() -> None:
        workflow.unsubscribe(listener)

    return _unsubscribe


def on_state_enter(state_id: StateID, handler: EffectHandler) -> Effect:
    """
    Run ``handler(snapshot)`` each time the workflow moves into ``state_id``.
    Not triggered by the state the workflow is in when the effect is attached, nor
    by re-publications (such as context updates) while it stays there.
    """

    def _effect(workflow: WorkflowObservable) -> Unsubscribe:
        previous = workflow.get_state().current_state

        def _listener(snapshot: WorkflowSnapshot) -> None:
            nonlocal previous
            entered = previous != state_id and snapshot.current_state == state_id
            previous = snapshot.current_state
            if entered:
                schedule(handler(snapshot))

        return _attach(workflow, _listener)

    return _effect


def on_state_exit(state_id: StateID, handler: EffectHandler) -> Effect:
    """Run ``handler(snapshot)`` each time the workflow leaves ``state_id``."""

    def _effect(workflow: WorkflowObservable) -> Unsubscribe:
        previous = workflow.get_state().current_state

        def _listener(snapshot: WorkflowSnapshot) -> None:
            nonlocal previous
            exited = previous == state_id and snapshot.current_state != state_id
            previous = snapshot.current_state
            if exited:
                schedule(handler(snapshot))

        return _attach(workflow, _listener)

    return _effect


def on_transition(handler: TransitionEffectHandler) -> Effect:
    """Run ``handler(from_state, to_state, snapshot)`` whenever the current state changes."""

    def _effect(workflow: WorkflowObservable) -> Unsubscribe:
        previous = workflow.get_state().current_state

        def _listener(snapshot: WorkflowSnapshot) -> None:
            nonlocal previous
            from_state, previous = previous, snapshot.current_state
            if from_state != snapshot.current_state:
                schedule(handler(from_state, snapshot.current_state, snapshot))

        return _attach(workflow, _listener)

    return _effect


def on_final_state(handler: EffectHandler) -> Effect:
    """Run ``handler(snapshot)`` for every snapshot published while in a final state."""

    def _effect(workflow: WorkflowObservable) -> Unsubscribe:
        def _listener(snapshot: WorkflowSnapshot) -> None:
            if snapshot.is_final:
                schedule(handler(snapshot))

        return _attach(workflow, _listener)

    return _effect


def on_state_change(handler: EffectHandler) -> Effect:
    """
    Run ``handler(snapshot)`` for every snapshot, starting immediately with the
    current one.
    """

    def _effect(workflow: WorkflowObservable) -> Unsubscribe:
        current = workflow.get_state()
        if current is not None:
            schedule(handler(current))

        def _listener(snapshot: WorkflowSnapshot) -> None:
            schedule(handler(snapshot))

        return _attach(workflow, _listener)

    return _effect


def create_effect(workflow: WorkflowObservable, effect: Effect) -> Unsubscribe:
    return effect(workflow)


def create_effects(workflow: WorkflowObservable, *effects: Effect) -> Unsubscribe:
    """
    Attach several effects and return one callable that detaches all of them.
    Calling it more than once has no further effect.
    """
    subscriptions: List[Unsubscribe] = [effect(workflow) for effect in effects]

    def _unsubscribe_all() -> None:
        while subscriptions:
            subscriptions.pop()()

    return _unsubscribe_all
