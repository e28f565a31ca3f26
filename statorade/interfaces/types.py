# statorade/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable

StateName = str
EventName = str
EventPayload = Any
TransitionPayload = Any

# Callback Types
Hook = Callable[..., Any]
Handler = Callable[..., Any]
Middleware = Callable[..., Any]
ChangeState = Callable[..., Any]
HandlePrivate = Callable[..., Any]
StateChangeListener = Callable[..., None]
ErrorListener = Callable[[Exception], None]
ReadActiveStateName = Callable[[], Any]
WriteActiveStateName = Callable[[StateName], Any]
