# statorade/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass
from typing import Optional

from statorade.interfaces.types import ChangeState, EventName, EventPayload, HandlePrivate, Handler, StateName


@dataclass(frozen=True)
class EventRequest:
    """
    Snapshot of one submitted event, taken when ``handle`` is called and
    resolved later by the machine's dispatch queue.

    ``initialized`` records whether the machine had been initialized when the
    event was submitted; a request made before ``init`` never resolves against
    whatever the store holds afterwards.
    """

    state_name: Optional[StateName]
    event_name: EventName
    payload: EventPayload = None
    is_private: bool = False
    version: int = 0
    initialized: bool = True


@dataclass(frozen=True)
class HandlerDescriptor:
    """A registered handler and whether only private dispatches may reach it."""

    fn: Handler
    is_private: bool = False


@dataclass
class HandlerContext:
    """
    Passed to an event handler when it runs.

    ``change_state(to_state_name, payload=None)`` requests a transition out of
    ``state_name``. ``handle_private(event_name, payload=None)`` queues a
    private dispatch scoped to ``state_name`` and returns its future.
    """

    state_name: StateName
    event_name: EventName
    payload: EventPayload
    change_state: ChangeState
    handle_private: HandlePrivate
    is_private: bool = False
