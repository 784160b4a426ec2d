# flowstate/core/ploc.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Callable, Dict, Generic, TypeVar

from flowstate.runtime.async_support import schedule

S = TypeVar("S")

Listener = Callable[[S], Any]


class Ploc(Generic[S]):
    """
    A single reactive value with synchronous broadcast.

    Every call to ``change_state`` replaces the held value and notifies all
    listeners registered at that moment, in registration order, before returning.
    Listeners that return an awaitable have it scheduled on the running loop.
    Without a running loop that raises RuntimeError and the coroutine is closed.
    """

    def __init__(self, state: S) -> None:
        self._state = state
        # dict keeps insertion order and gives set-like membership
        self._listeners: Dict[Listener, None] = {}

    @property
    def state(self) -> S:
        return self._state

    def change_state(self, state: S) -> None:
        self._state = state
        for listener in list(self._listeners):
            schedule(listener(state))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener and return a callable that removes it again.
        """
        self._listeners[listener] = None
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.pop(listener, None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
