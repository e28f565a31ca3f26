# statorade/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Optional, Protocol, runtime_checkable

from statorade.interfaces.types import StateName


@runtime_checkable
class ActiveStateStore(Protocol):
    """
    Storage protocol for the machine's active state name.

    Methods:
        read(): Returns the stored state name, or None before anything was written.
        write(state_name): Stores a new state name.

    Runtime Invariants:
    - A read immediately following a write returns the written name.

    Error Handling:
    - The machine re-reads after every write and reports a
      StorageInconsistencyError when the invariant above does not hold.
      Implementations should not try to detect this themselves.
    """

    def read(self) -> Optional[StateName]:
        """Return the currently stored active state name."""
        ...

    def write(self, state_name: StateName) -> None:
        """Persist a new active state name."""
        ...
