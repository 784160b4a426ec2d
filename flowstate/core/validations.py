# flowstate/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, List, Mapping, Union

from flowstate.core.definition import WorkflowDefinition
from flowstate.core.errors import ValidationError


class Validator:
    """
    Checks a workflow definition for structural problems before it is run.
    Can be subclassed to add project-specific rules via ``extra_rules``.
    """

    def validate_definition(self, definition: Union[WorkflowDefinition, Mapping[str, Any]]) -> None:
        """
        :param definition: The definition, or its plain mapping form.
        :raises ValidationError: Listing every problem found.
        """
        definition = WorkflowDefinition.from_dict(definition)
        errors = _DefaultValidationRules.collect(definition)
        errors.extend(self.extra_rules(definition))
        if errors:
            raise ValidationError(errors)

    def extra_rules(self, definition: WorkflowDefinition) -> List[str]:
        return []


class _DefaultValidationRules:
    """
    Built-in rules:
    - the initial state exists;
    - every transition targets an existing state;
    - each state's ``id`` matches its key;
    - guards, actions and hooks are callable when present.
    """

    @staticmethod
    def collect(definition: WorkflowDefinition) -> List[str]:
        errors: List[str] = []

        if definition.initial_state not in definition.states:
            errors.append(f"Initial state {definition.initial_state!r} is not defined")

        for key, state in definition.states.items():
            if state.id != key:
                errors.append(f"State registered as {key!r} declares id {state.id!r}")
            for hook_name in ("on_enter", "on_exit"):
                hook = getattr(state, hook_name)
                if hook is not None and not callable(hook):
                    errors.append(f"State {key!r} has a non-callable {hook_name}")

            for event, transition in state.transitions.items():
                if transition.target not in definition.states:
                    errors.append(
                        f"Transition {event!r} from {key!r} targets undefined state {transition.target!r}"
                    )
                if transition.guard is not None and not callable(transition.guard):
                    errors.append(f"Transition {event!r} from {key!r} has a non-callable guard")
                if transition.action is not None and not callable(transition.action):
                    errors.append(f"Transition {event!r} from {key!r} has a non-callable action")

        return errors


def validate_definition(definition: Union[WorkflowDefinition, Mapping[str, Any]]) -> None:
    """Validate with the default rules; raises ValidationError on any problem."""
    Validator().validate_definition(definition)
