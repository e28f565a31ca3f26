"""
Core package providing the state, dispatch and transition machinery.

Architecture:
- State owns one state's hooks, middleware and handler table
- StateMachine owns the registry, the active-state pointer, the version
  counter, the dispatch queue and the notification channels

Design Patterns:
- Observer Pattern for state change and error notification
- Command Pattern for queued event requests
"""

# Import order matters to avoid circular dependencies
from .errors import (
    AlreadyInitializedError,
    ConfigurationError,
    DispatchError,
    DuplicateHandlerError,
    DuplicateStateError,
    InvalidTransitionError,
    NotInitializedError,
    StaleDispatchError,
    StatoradeError,
    StorageInconsistencyError,
    VisibilityViolation,
)
from .events import EventRequest, HandlerContext, HandlerDescriptor
from .transitions import HookOutcome, TransitionContext, TransitionResult
from .states import State
from .state_machine import BOOT_STATE_NAME, DispatchOutcome, StateMachine

__all__ = [
    "AlreadyInitializedError",
    "ConfigurationError",
    "DispatchError",
    "DuplicateHandlerError",
    "DuplicateStateError",
    "InvalidTransitionError",
    "NotInitializedError",
    "StaleDispatchError",
    "StatoradeError",
    "StorageInconsistencyError",
    "VisibilityViolation",
    "EventRequest",
    "HandlerContext",
    "HandlerDescriptor",
    "HookOutcome",
    "TransitionContext",
    "TransitionResult",
    "State",
    "BOOT_STATE_NAME",
    "DispatchOutcome",
    "StateMachine",
]
