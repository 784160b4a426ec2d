# flowstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
from typing import List, Optional


class WorkflowError(Exception):
    """
    Base exception class for errors raised by the workflow engine itself.
    Exceptions raised by user guards, actions and hooks are never wrapped in it.
    """


class StateNotFoundError(WorkflowError):
    """
    Raised when a definition references a state that does not exist, either as
    the initial state or as the target of a transition.
    """

    def __init__(self, state_id: object, message: Optional[str] = None) -> None:
        self.state_id = state_id
        super().__init__(message or f"State {state_id!r} is not defined in the workflow")


class ValidationError(WorkflowError):
    """
    Raised when definition validation detects one or more structural problems.
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class ReentrantDispatchError(WorkflowError):
    """
    Raised when a serialized workflow is driven again from inside one of its own
    guards, actions or hooks.
    """


class ActionTimeoutError(WorkflowError, asyncio.TimeoutError):
    """
    Raised by the timeout action helper when the wrapped action does not finish in time.
    """

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        super().__init__(f"Action timed out after {seconds}s")
