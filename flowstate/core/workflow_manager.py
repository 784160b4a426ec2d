# flowstate/core/workflow_manager.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from types import MappingProxyType
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Union

from flowstate.core.config import WorkflowOptions
from flowstate.core.definition import WorkflowDefinition, WorkflowState, WorkflowTransition
from flowstate.core.errors import ReentrantDispatchError, StateNotFoundError
from flowstate.core.ploc import Ploc
from flowstate.core.snapshot import WorkflowSnapshot
from flowstate.core.validations import validate_definition
from flowstate.interfaces.types import EventID, StateID
from flowstate.runtime.async_support import invoke


class WorkflowManager(Ploc[WorkflowSnapshot]):
    """
    Runs a WorkflowDefinition against a live context and publishes a
    WorkflowSnapshot after every change.

    A successful dispatch runs, in this order: the transition's guard, the
    current state's ``on_exit``, the payload merge, the transition's ``action``,
    the target's ``on_enter``, and finally the publication of the new snapshot.
    Exceptions from any of these callbacks propagate unchanged and nothing that
    already ran is undone.

    Entering the initial state is asynchronous. When the manager is created inside
    a running event loop it is scheduled immediately; otherwise it runs on the first
    awaited call. ``dispatch``, ``reset`` and ``wait_until_ready`` always wait for it.
    The synchronous methods cannot wait, so a bare constructor call followed by
    ``update_context`` merges before the initial ``on_enter`` has run. Build with
    ``await WorkflowManager.create(...)`` to rule that out.
    """

    def __init__(
        self,
        definition: Union[WorkflowDefinition, Mapping[str, Any]],
        initial_context: Optional[Mapping[str, Any]] = None,
        options: Optional[WorkflowOptions] = None,
    ) -> None:
        """
        :param definition: A WorkflowDefinition or its plain mapping form.
        :param initial_context: Starting context; copied, never shared.
        :param options: Engine configuration.
        :raises StateNotFoundError: If the initial state is not defined.
        :raises ValidationError: If ``options.validate`` is set and the definition is malformed.
        """
        self._definition = WorkflowDefinition.from_dict(definition)
        self._options = options or WorkflowOptions()
        self._logger = logging.getLogger(self._options.logger_name)

        if self._options.validate:
            validate_definition(self._definition)
        if self._definition.initial_state not in self._definition.states:
            raise StateNotFoundError(
                self._definition.initial_state,
                f"Initial state {self._definition.initial_state!r} is not defined "
                f"in workflow {self._definition.id!r}",
            )

        self._context: Dict[str, Any] = dict(initial_context or {})
        super().__init__(
            WorkflowSnapshot(
                current_state=self._definition.initial_state,
                context=dict(self._context),
                is_final=False,
            )
        )

        # Created on first use so it binds to the loop that drives the workflow.
        self._lock: Optional[asyncio.Lock] = None
        self._lock_owner: Optional[asyncio.Task] = None
        self._init_task: Optional[asyncio.Future] = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._init_task = loop.create_task(self._initialize())

    @classmethod
    async def create(
        cls,
        definition: Union[WorkflowDefinition, Mapping[str, Any]],
        initial_context: Optional[Mapping[str, Any]] = None,
        options: Optional[WorkflowOptions] = None,
    ) -> "WorkflowManager":
        """
        Construct a manager and wait until its initial state has been entered.

        This is the supported way to build a manager: once it returns, every
        operation, synchronous ones included, observes the initial ``on_enter``.
        """
        manager = cls(definition, initial_context, options)
        await manager.wait_until_ready()
        return manager

    def __repr__(self) -> str:
        return f"<WorkflowManager {self._definition.id!r} state={self.state.current_state!r}>"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self._init_task is not None and self._init_task.done()

    async def wait_until_ready(self) -> None:
        """
        Wait for the initial state's ``on_enter`` and the first snapshot.
        Re-raises whatever the initial ``on_enter`` raised.
        """
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        if self._init_task is asyncio.current_task():
            # Called from the initial on_enter itself.
            return
        await self._init_task

    async def _initialize(self) -> None:
        state_id = self.state.current_state
        initial = self._definition.states[state_id]
        await invoke(initial.on_enter, self._context)
        self._publish(state_id, initial.is_final)
        self._logger.debug("Workflow %r entered initial state %r", self._definition.id, state_id)

    @asynccontextmanager
    async def _serialized(self) -> AsyncIterator[None]:
        if not self._options.serialize:
            yield
            return

        task = asyncio.current_task()
        if task is not None and task is self._lock_owner:
            raise ReentrantDispatchError(
                f"Workflow {self._definition.id!r} was driven from inside one of its own callbacks"
            )
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            self._lock_owner = task
            try:
                yield
            finally:
                self._lock_owner = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_state(self) -> WorkflowSnapshot:
        return self.state

    async def dispatch(self, event: EventID, payload: Any = None) -> bool:
        """
        Attempt the transition labelled ``event`` from the current state.

        :param event: The event identifier.
        :param payload: Optional data stored in the context under ``str(event)``.
        :return: True if the workflow moved, False if there was no such transition
            or its guard rejected it.
        :raises StateNotFoundError: If the transition targets an undefined state.
        """
        await self.wait_until_ready()
        async with self._serialized():
            return await self._dispatch(event, payload)

    async def _dispatch(self, event: EventID, payload: Any) -> bool:
        source_id = self.state.current_state
        source = self._definition.get_state(source_id)
        if source is None:
            self._logger.debug("Ignoring %r: current state %r has no definition", event, source_id)
            return False

        transition: Optional[WorkflowTransition] = source.transitions.get(event)
        if transition is None:
            self._logger.debug("Ignoring %r: no transition from %r", event, source_id)
            return False

        if transition.guard is not None and not await invoke(transition.guard, self._context):
            self._logger.debug("Guard rejected %r from %r", event, source_id)
            return False

        await invoke(source.on_exit, self._context)

        if payload is not None:
            self._context = {**self._context, str(event): payload}

        await invoke(transition.action, self._context)

        target = self._definition.get_state(transition.target)
        if target is None:
            raise StateNotFoundError(
                transition.target,
                f"Transition {event!r} from {source_id!r} targets undefined state {transition.target!r}",
            )

        await invoke(target.on_enter, self._context)

        self._publish(transition.target, target.is_final)
        self._logger.debug(
            "Workflow %r: %r --%r--> %r", self._definition.id, source_id, event, transition.target
        )
        return True

    def can_transition(self, event: EventID) -> bool:
        """
        Whether the current state has a transition for ``event``. Guards are not
        evaluated, so a dispatch may still return False.
        """
        current = self.get_current_state_definition()
        return current is not None and event in current.transitions

    async def reset(self) -> None:
        """
        Exit the current state, clear the context and re-enter the initial state.

        The published snapshot always reports ``is_final=False``, even when the
        initial state has no transitions.
        """
        await self.wait_until_ready()
        async with self._serialized():
            current = self.get_current_state_definition()
            if current is not None:
                await invoke(current.on_exit, self._context)

            self._context = {}

            initial_id = self._definition.initial_state
            await invoke(self._definition.states[initial_id].on_enter, self._context)

            self.change_state(WorkflowSnapshot(current_state=initial_id, context={}, is_final=False))
            self._logger.debug("Workflow %r reset to %r", self._definition.id, initial_id)

    def update_context(self, partial: Mapping[str, Any]) -> None:
        """Merge ``partial`` into the context and publish. Hooks are not run."""
        self._context = {**self._context, **partial}
        self.change_state(replace(self.state, context=dict(self._context)))

    def get_definition(self) -> WorkflowDefinition:
        return self._definition

    def get_current_state_definition(self) -> Optional[WorkflowState]:
        return self._definition.get_state(self.state.current_state)

    def get_available_transitions(self) -> Mapping[EventID, WorkflowTransition]:
        current = self.get_current_state_definition()
        if current is None:
            return MappingProxyType({})
        return current.transitions

    # ------------------------------------------------------------------

    def _publish(self, state_id: StateID, is_final: bool) -> None:
        self.change_state(
            WorkflowSnapshot(current_state=state_id, context=dict(self._context), is_final=is_final)
        )
