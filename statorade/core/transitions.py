# statorade/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from statorade.interfaces.types import EventPayload, HandlePrivate, StateName, TransitionPayload


@dataclass
class TransitionContext:
    """
    Information handed to entry and exit hooks while a transition runs.

    ``handle_private`` is only set for entry hooks; it queues a private
    dispatch scoped to the state being entered.
    """

    from_state: Optional[StateName]
    to_state: StateName
    event_payload: EventPayload = None
    transition_payload: TransitionPayload = None
    handle_private: Optional[HandlePrivate] = None


@dataclass
class HookOutcome:
    """
    Return values of the hooks run on entry to (or exit from) one state.

    :ivar result: What the unconditional hook returned.
    :ivar keyed_state: The predecessor (entry) or successor (exit) whose
                       specific hook ran, or None if no such hook was registered.
    :ivar keyed_result: What that specific hook returned.
    """

    result: Any = None
    keyed_state: Optional[StateName] = None
    keyed_result: Any = None


@dataclass
class TransitionResult:
    """
    Record of one completed transition.
    """

    from_state: Optional[StateName]
    to_state: StateName
    enter: HookOutcome
    exit: Optional[HookOutcome] = None
    transition_payload: TransitionPayload = None
    version: int = 0
