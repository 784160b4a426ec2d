# flowstate/core/definition.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from flowstate.interfaces.types import Action, EventID, Guard, StateID


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first key present in ``raw``; definitions may use snake_case or camelCase."""
    for key in keys:
        if key in raw:
            return raw[key]
    return None


@dataclass(frozen=True)
class WorkflowTransition:
    """
    An edge leaving a state in response to one event.

    :param target: Identifier of the state entered when the transition fires.
    :param guard: Optional predicate over the context; the transition is skipped
        when it returns (or resolves to) a falsy value.
    :param action: Optional callback run between the source's exit hook and the
        target's entry hook.
    """

    target: StateID
    guard: Optional[Guard] = None
    action: Optional[Action] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "WorkflowTransition":
        if isinstance(raw, WorkflowTransition):
            return raw
        return cls(target=raw["target"], guard=raw.get("guard"), action=raw.get("action"))


@dataclass(frozen=True)
class WorkflowState:
    """
    A node of the workflow. A state without transitions is final.
    """

    id: StateID
    transitions: Mapping[EventID, WorkflowTransition] = field(default_factory=dict)
    on_enter: Optional[Action] = None
    on_exit: Optional[Action] = None
    label: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "transitions", _freeze(self.transitions))

    @property
    def is_final(self) -> bool:
        return len(self.transitions) == 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], state_id: Optional[StateID] = None) -> "WorkflowState":
        if isinstance(raw, WorkflowState):
            return raw
        transitions = {
            event: WorkflowTransition.from_dict(transition)
            for event, transition in (raw.get("transitions") or {}).items()
        }
        return cls(
            id=raw.get("id", state_id),
            transitions=transitions,
            on_enter=_pick(raw, "on_enter", "onEnter"),
            on_exit=_pick(raw, "on_exit", "onExit"),
            label=raw.get("label"),
        )


@dataclass(frozen=True)
class WorkflowDefinition:
    """
    Immutable description of a workflow: its states and where it starts.

    The definition holds no behaviour of its own; a WorkflowManager interprets it.
    Both ``states`` and each state's ``transitions`` are exposed as read-only
    mappings.
    """

    id: str
    initial_state: StateID
    states: Mapping[StateID, WorkflowState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "states", _freeze(self.states))

    def get_state(self, state_id: StateID) -> Optional[WorkflowState]:
        return self.states.get(state_id)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "WorkflowDefinition":
        """
        Build a definition from its plain mapping form::

            {
                "id": "order",
                "initial_state": "pending",
                "states": {
                    "pending": {
                        "id": "pending",
                        "transitions": {"approve": {"target": "approved", "guard": is_admin}},
                        "on_enter": notify,
                    },
                    "approved": {"id": "approved", "transitions": {}},
                },
            }

        ``initialState``, ``onEnter`` and ``onExit`` are accepted as aliases.
        """
        if isinstance(raw, WorkflowDefinition):
            return raw
        states = {
            state_id: WorkflowState.from_dict(state, state_id)
            for state_id, state in (raw.get("states") or {}).items()
        }
        return cls(
            id=raw.get("id", ""),
            initial_state=_pick(raw, "initial_state", "initialState"),
            states=states,
        )
