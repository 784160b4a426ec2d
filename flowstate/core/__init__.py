"""
Core package: the workflow engine and the pieces it is built from.

Architecture:
- definition / snapshot: immutable data describing a workflow and its position
- ploc: single-value reactive cell the engine publishes through
- workflow_manager: interprets a definition against a live context
- guards / actions: composable callbacks for transitions and hooks
- effects: named observation patterns over the snapshot stream
- validations: structural checks on definitions

Cross-cutting:
- Errors derive from WorkflowError; user callback errors pass through untouched
- Debug logging through the standard logging module
"""

from .config import WorkflowOptions
from .definition import WorkflowDefinition, WorkflowState, WorkflowTransition
from .errors import (
    ActionTimeoutError,
    ReentrantDispatchError,
    StateNotFoundError,
    ValidationError,
    WorkflowError,
)
from .ploc import Ploc
from .snapshot import WorkflowSnapshot
from .validations import Validator, validate_definition
from .workflow_manager import WorkflowManager

__all__ = [
    # Definition classes
    "WorkflowDefinition",
    "WorkflowState",
    "WorkflowTransition",
    "WorkflowSnapshot",
    # Engine
    "Ploc",
    "WorkflowManager",
    "WorkflowOptions",
    # Validation
    "Validator",
    "validate_definition",
    # Errors
    "WorkflowError",
    "StateNotFoundError",
    "ValidationError",
    "ReentrantDispatchError",
    "ActionTimeoutError",
]
