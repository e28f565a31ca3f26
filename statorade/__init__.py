"""statorade: event-driven finite state machine for asyncio applications

Applications register named states, each with entry/exit hooks and event
handlers, and drive transitions by dispatching named events.

Responsibilities:
    - State registration and handler visibility
    - Deferred, FIFO event dispatch on the running event loop
    - Version-checked transitions (stale events never run)
    - Pluggable storage of the active state name
    - State change and error notification

Cross-cutting Concerns:
    Concurrency:
        - Single-threaded and cooperative; no locks
        - Staleness is detected by comparing transition counts

    Error Handling:
        - Structured error hierarchy rooted at StatoradeError
        - Registration errors raise; dispatch errors are published

    Logging:
        - Standard library logging under the "statorade" logger
"""

from statorade.core import (
    BOOT_STATE_NAME,
    AlreadyInitializedError,
    ConfigurationError,
    DispatchError,
    DispatchOutcome,
    DuplicateHandlerError,
    DuplicateStateError,
    EventRequest,
    HandlerContext,
    HandlerDescriptor,
    HookOutcome,
    InvalidTransitionError,
    NotInitializedError,
    StaleDispatchError,
    State,
    StateMachine,
    StatoradeError,
    StorageInconsistencyError,
    TransitionContext,
    TransitionResult,
    VisibilityViolation,
)
from statorade.interfaces import ActiveStateStore
from statorade.runtime import CallbackStore, InMemoryStore

__version__ = "0.1.0"

__all__ = [
    "BOOT_STATE_NAME",
    "ActiveStateStore",
    "AlreadyInitializedError",
    "CallbackStore",
    "ConfigurationError",
    "DispatchError",
    "DispatchOutcome",
    "DuplicateHandlerError",
    "DuplicateStateError",
    "EventRequest",
    "HandlerContext",
    "HandlerDescriptor",
    "HookOutcome",
    "InMemoryStore",
    "InvalidTransitionError",
    "NotInitializedError",
    "StaleDispatchError",
    "State",
    "StateMachine",
    "StatoradeError",
    "StorageInconsistencyError",
    "TransitionContext",
    "TransitionResult",
    "VisibilityViolation",
]
