"""
Runtime context management for state machines: where the active state name
lives and what the previous one was.
"""

import logging
from typing import Optional

from ..core.errors import ConfigurationError, StorageInconsistencyError
from ..interfaces.protocols import ActiveStateStore
from ..interfaces.types import ReadActiveStateName, StateName, WriteActiveStateName

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Default store keeping the active state name on the instance."""

    def __init__(self) -> None:
        self._state_name: Optional[StateName] = None

    def read(self) -> Optional[StateName]:
        return self._state_name

    def write(self, state_name: StateName) -> None:
        self._state_name = state_name


class CallbackStore:
    """
    Adapts a read/write function pair (for example a redux-like store or a
    database row) to the ActiveStateStore protocol.
    """

    def __init__(self, read: ReadActiveStateName, write: WriteActiveStateName) -> None:
        if not callable(read) or not callable(write):
            raise ConfigurationError("Active state read/write functions must be callable")
        self._read = read
        self._write = write

    def read(self) -> Optional[StateName]:
        return self._read()

    def write(self, state_name: StateName) -> None:
        self._write(state_name)


def build_store(
    store: Optional[ActiveStateStore] = None,
    read_active_state_name: Optional[ReadActiveStateName] = None,
    write_active_state_name: Optional[WriteActiveStateName] = None,
) -> ActiveStateStore:
    """
    Resolve the store a machine should use from its constructor arguments.

    :param store: An object implementing ActiveStateStore.
    :param read_active_state_name: Read half of a callback pair.
    :param write_active_state_name: Write half of a callback pair.
    :raises ConfigurationError: If both forms are given, or only half a pair.
    """
    has_pair = read_active_state_name is not None or write_active_state_name is not None
    if store is not None and has_pair:
        raise ConfigurationError("Provide either a store or a read/write function pair, not both")
    if has_pair:
        if read_active_state_name is None or write_active_state_name is None:
            raise ConfigurationError("read_active_state_name and write_active_state_name must be provided together")
        return CallbackStore(read_active_state_name, write_active_state_name)
    if store is None:
        return InMemoryStore()
    if not isinstance(store, ActiveStateStore):
        raise ConfigurationError(f"{type(store).__name__} does not implement read() and write()")
    return store


class RuntimeContext:
    """
    Manages the runtime state of a state machine: the active state name,
    delegated to a pluggable store, and the previous state name.
    """

    def __init__(self, store: ActiveStateStore) -> None:
        self._store = store
        self._previous_state_name: Optional[StateName] = None

    @property
    def store(self) -> ActiveStateStore:
        return self._store

    @property
    def previous_state_name(self) -> Optional[StateName]:
        return self._previous_state_name

    def read_active_state_name(self) -> Optional[StateName]:
        """Get the currently active state name from the store."""
        return self._store.read()

    def write_active_state_name(self, state_name: StateName) -> StateName:
        """
        Write the active state name and read it straight back.

        :param state_name: The name to store.
        :return: The name read back from the store.
        :raises StorageInconsistencyError: If the read-back value differs.
        """
        self._store.write(state_name)
        read_back = self._store.read()
        if read_back != state_name:
            logger.warning("Active state store read back %r after writing %r", read_back, state_name)
            raise StorageInconsistencyError(
                f"The active state store did not return the expected state name immediately "
                f"following a write. Got {read_back!r}, expected {state_name!r}.",
                expected=state_name,
                actual=read_back,
            )
        return read_back

    def restore_active_state_name(self, state_name: Optional[StateName]) -> None:
        """
        Write back the name that was active before a rejected write. The store
        is not read back; a store that also rejects this is only logged.
        """
        self._store.write(state_name)
        if self._store.read() != state_name:
            logger.warning("Active state store did not accept restored name %r", state_name)

    def record_previous_state_name(self, state_name: Optional[StateName]) -> None:
        self._previous_state_name = state_name
