# statorade/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Optional


class StatoradeError(Exception):
    """
    Base exception class for errors within the state machine library.
    """


class ConfigurationError(StatoradeError):
    """
    Raised synchronously when a state or machine is configured incorrectly.
    """


class DuplicateStateError(ConfigurationError):
    """
    Raised when a state name is registered twice on the same machine.
    """


class DuplicateHandlerError(ConfigurationError):
    """
    Raised when a state declares more than one handler for the same event.
    """


class NotInitializedError(StatoradeError):
    """
    Raised when dispatch machinery is used before ``init``.
    """


class AlreadyInitializedError(StatoradeError):
    """
    Raised by a second call to ``init``.
    """


class DispatchError(StatoradeError):
    """
    Base class for errors discovered while a queued event is resolved.

    These are delivered through the machine's error channel rather than raised
    back through ``handle``.
    """

    def __init__(self, message: str, event_name: Optional[str] = None, state_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.event_name = event_name
        self.state_name = state_name


class VisibilityViolation(DispatchError):
    """
    Raised when a public dispatch matches a handler registered as private.
    """


class StaleDispatchError(DispatchError):
    """
    Raised when one or more transitions happened between the submission of an
    event and its resolution (or its handler's transition request).
    """

    def __init__(
        self,
        message: str,
        event_name: Optional[str] = None,
        state_name: Optional[str] = None,
        changes_since: int = 0,
    ) -> None:
        super().__init__(message, event_name=event_name, state_name=state_name)
        self.changes_since = changes_since


class InvalidTransitionError(DispatchError):
    """
    Raised when a transition targets the bootstrap state, an undefined state,
    or is requested from a state the machine is no longer in.
    """


class StorageInconsistencyError(DispatchError):
    """
    Raised when the active-state store does not read back the value that was
    just written to it.
    """

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        event_name: Optional[str] = None,
        state_name: Optional[str] = None,
    ) -> None:
        super().__init__(message, event_name=event_name, state_name=state_name)
        self.expected = expected
        self.actual = actual
