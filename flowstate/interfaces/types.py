# flowstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Awaitable, Callable, Dict, Hashable, Union

StateID = Hashable
EventID = Hashable

Context = Dict[str, Any]

# Callback Types
Guard = Callable[[Context], Union[bool, Awaitable[bool]]]
Action = Callable[[Context], Union[None, Awaitable[None]]]
Predicate = Callable[[Any], bool]
Unsubscribe = Callable[[], None]
