"""
Runtime package for dispatch scheduling and active-state storage.

Architecture:
- DispatchQueue defers each submitted event to a later loop iteration
- RuntimeContext reads and writes the active state name through a store
"""

from .context import CallbackStore, InMemoryStore, RuntimeContext
from .event_queue import DispatchQueue

__all__ = ["CallbackStore", "DispatchQueue", "InMemoryStore", "RuntimeContext"]
