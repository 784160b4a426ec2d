# flowstate/core/snapshot.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass, field
from typing import Any, Dict

from flowstate.interfaces.types import StateID


@dataclass(frozen=True)
class WorkflowSnapshot:
    """
    The workflow's position at one instant. ``context`` is a copy taken when the
    snapshot was published, so mutating it never reaches the engine.
    """

    current_state: StateID
    context: Dict[str, Any] = field(default_factory=dict)
    is_final: bool = False
