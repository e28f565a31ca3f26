# statorade/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
import logging
from dataclasses import dataclass, replace
from functools import partial
from typing import Any, Dict, Optional, Tuple

from statorade.core.errors import (
    AlreadyInitializedError,
    ConfigurationError,
    DispatchError,
    DuplicateStateError,
    InvalidTransitionError,
    NotInitializedError,
    StaleDispatchError,
    StatoradeError,
    StorageInconsistencyError,
    VisibilityViolation,
)
from statorade.core.events import EventRequest, HandlerContext
from statorade.core.hooks import NotificationChannel
from statorade.core.states import State
from statorade.core.transitions import TransitionContext, TransitionResult
from statorade.interfaces.protocols import ActiveStateStore
from statorade.interfaces.types import (
    ErrorListener,
    EventName,
    EventPayload,
    ReadActiveStateName,
    StateChangeListener,
    StateName,
    TransitionPayload,
    WriteActiveStateName,
)
from statorade.runtime.context import RuntimeContext, build_store
from statorade.runtime.event_queue import DispatchQueue

logger = logging.getLogger(__name__)

BOOT_STATE_NAME = "_boot"
BOOT_EVENT_NAME = "initialize"

_STATE_OPTIONS = frozenset(
    {
        "on_enter",
        "on_exit",
        "on_enter_from",
        "on_exit_to",
        "handlers",
        "private_handlers",
        "before_handle",
        "after_handle",
    }
)


@dataclass
class DispatchOutcome:
    """
    Result of resolving one queued event. The same object is passed to the
    state's ``before_handle``/``after_handle`` middleware while it is being
    filled in, and published to state-change listeners when a transition
    occurred.
    """

    state_name: Optional[StateName]
    event_name: EventName
    payload: EventPayload = None
    is_private: bool = False
    version: int = 0
    has_handler: bool = False
    handler_is_private: Optional[bool] = None
    vetoed: bool = False
    before_handle_result: Any = None
    handler_result: Any = None
    after_handle_result: Any = None
    transition: Optional[TransitionResult] = None
    error: Optional[StatoradeError] = None

    @classmethod
    def from_request(cls, request: EventRequest) -> "DispatchOutcome":
        return cls(
            state_name=request.state_name,
            event_name=request.event_name,
            payload=request.payload,
            is_private=request.is_private,
            version=request.version,
        )

    @property
    def changed_state(self) -> bool:
        return self.transition is not None


class StateMachine:
    """
    A finite state machine driven by named events.

    Events submitted through ``handle`` are queued and resolved on later
    iterations of the running asyncio loop, one at a time and in submission
    order. Each submission records the machine's version (the number of
    completed transitions) so that a request resolved after the machine has
    moved on is rejected instead of running against a state it has left.
    Errors found while resolving a request are published on the error
    channel; ``handle`` itself only raises for misuse it can detect up front.
    """

    def __init__(
        self,
        store: Optional[ActiveStateStore] = None,
        *,
        read_active_state_name: Optional[ReadActiveStateName] = None,
        write_active_state_name: Optional[WriteActiveStateName] = None,
    ) -> None:
        """
        :param store: Where the active state name is kept. Defaults to memory.
        :param read_active_state_name: Read half of a function pair used
                                       instead of ``store``.
        :param write_active_state_name: Write half of that pair.
        :raises ConfigurationError: If the storage arguments are inconsistent.
        """
        self._states: Dict[StateName, State] = {}
        self._boot_state: Optional[State] = None
        self._context = RuntimeContext(build_store(store, read_active_state_name, write_active_state_name))
        self._queue = DispatchQueue(self._resolve)
        self._state_changes = NotificationChannel("state_change")
        self._errors = NotificationChannel("error")
        self._version = 0
        self._initialized = False

    def __repr__(self) -> str:
        return (
            f"StateMachine(active={self.get_active_state_name()!r}, "
            f"states={list(self._states)!r}, version={self._version})"
        )

    @property
    def version(self) -> int:
        """Number of transitions completed so far."""
        return self._version

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def state_names(self) -> Tuple[StateName, ...]:
        """Registered state names in registration order."""
        return tuple(self._states)

    @property
    def pending_dispatches(self) -> int:
        """Number of queued events not yet resolved."""
        return len(self._queue)

    def get_state(self, name: StateName) -> Optional[State]:
        return self._states.get(name)

    def get_active_state_name(self) -> Optional[StateName]:
        return self._context.read_active_state_name()

    def get_previous_state_name(self) -> Optional[StateName]:
        return self._context.previous_state_name

    def on_state_change(self, callback: StateChangeListener) -> StateChangeListener:
        """
        Subscribe to completed transitions. The callback receives the
        DispatchOutcome of the dispatch that caused the transition.
        """
        return self._state_changes.subscribe(callback)

    def remove_state_change_listener(self, callback: StateChangeListener) -> bool:
        return self._state_changes.unsubscribe(callback)

    def on_error(self, callback: ErrorListener) -> ErrorListener:
        """
        Subscribe to dispatch-time errors (staleness, visibility, invalid
        transitions, storage inconsistencies, dispatch before init).
        """
        return self._errors.subscribe(callback)

    def remove_error_listener(self, callback: ErrorListener) -> bool:
        return self._errors.unsubscribe(callback)

    def add_state(self, name: StateName, **config: Any) -> State:
        """
        Register a new state.

        :param name: Unique, non-empty state name.
        :param config: Keyword options accepted by State (on_enter, on_exit,
                       on_enter_from, on_exit_to, handlers, private_handlers,
                       before_handle, after_handle).
        :return: The registered State.
        :raises ConfigurationError: On an empty or reserved name, or an
                                    unknown option.
        :raises DuplicateStateError: If the name is already registered.
        """
        if not name:
            raise ConfigurationError("Cannot add state, no state name provided.")
        if name == BOOT_STATE_NAME:
            raise ConfigurationError(f"Cannot add state {name!r}, it is a reserved state name.")
        if name in self._states:
            raise DuplicateStateError(
                f"Cannot add state {name!r} to state machine, a state with that name already exists."
            )
        unknown = set(config) - _STATE_OPTIONS
        if unknown:
            raise ConfigurationError(f"Cannot add state {name!r}, unknown option(s): {', '.join(sorted(unknown))}")

        state = State(name, **config)
        self._states[name] = state
        logger.debug("Added state %r", name)
        return state

    def init(self, start_state_name: StateName) -> asyncio.Future:
        """
        Enter the bootstrap state and queue the transition into
        ``start_state_name``. The first real entry runs through the same
        pipeline as every later transition.

        :return: Future resolving to the DispatchOutcome of the bootstrap event.
        :raises AlreadyInitializedError: If called more than once.
        :raises StorageInconsistencyError: If the store rejects the bootstrap name.
        :raises RuntimeError: If no event loop is running.
        """
        if self._initialized:
            raise AlreadyInitializedError("Unable to initialize state machine, it has already been initialized.")
        # fail before touching the store
        asyncio.get_running_loop()

        self._context.write_active_state_name(BOOT_STATE_NAME)
        self._boot_state = State(
            BOOT_STATE_NAME,
            handlers={BOOT_EVENT_NAME: lambda ctx: ctx.change_state(start_state_name)},
        )
        self._initialized = True
        logger.debug("Initializing state machine into %r", start_state_name)
        return self.handle(BOOT_EVENT_NAME)

    def handle(self, event_name: EventName, payload: EventPayload = None) -> asyncio.Future:
        """
        Queue an event for the active state.

        The active state name and version are captured now; the handler runs
        on a later loop iteration, and only if no transition happened in
        between.

        :param event_name: The event to dispatch.
        :param payload: Passed to the handler as ``context.payload``.
        :return: Future resolving to a DispatchOutcome.
        :raises RuntimeError: If no event loop is running.
        """
        request = EventRequest(
            state_name=self._context.read_active_state_name(),
            event_name=event_name,
            payload=payload,
            is_private=False,
            version=self._version,
            initialized=self._initialized,
        )
        return self._queue.submit(request)

    async def join(self) -> None:
        """Wait until all queued events, including ones they queue, are resolved."""
        await self._queue.join()

    def _handle_private(
        self, state_name: StateName, version: int, event_name: EventName, payload: EventPayload = None
    ) -> asyncio.Future:
        request = EventRequest(
            state_name=state_name,
            event_name=event_name,
            payload=payload,
            is_private=True,
            version=version,
        )
        return self._queue.submit(request)

    def _get_state(self, name: Optional[StateName]) -> Optional[State]:
        if name == BOOT_STATE_NAME:
            return self._boot_state
        return self._states.get(name)

    def _report(self, error: StatoradeError) -> None:
        logger.warning("%s: %s", type(error).__name__, error)
        self._errors.publish(error)

    def _reject(self, outcome: DispatchOutcome, error: StatoradeError) -> DispatchOutcome:
        outcome.error = error
        self._report(error)
        return outcome

    def _resolve(self, request: EventRequest) -> DispatchOutcome:
        """Resolve one queued request. Called by the dispatch queue."""
        outcome = DispatchOutcome.from_request(request)
        event_name = request.event_name

        if not (self._initialized and request.initialized):
            return self._reject(
                outcome,
                NotInitializedError(f"Unable to handle {event_name!r}, state machine has not yet been initialized."),
            )

        state = self._get_state(request.state_name)
        if state is None:
            return self._reject(
                outcome,
                StorageInconsistencyError(
                    f"Unable to handle {event_name!r}, active state {request.state_name!r} is not a defined state.",
                    actual=request.state_name,
                    event_name=event_name,
                    state_name=request.state_name,
                ),
            )

        handler = state.get_handler(event_name)
        if handler is None:
            logger.debug("No handler for %r in %r", event_name, request.state_name)
            return outcome
        outcome.has_handler = True
        outcome.handler_is_private = handler.is_private

        if handler.is_private and not request.is_private:
            return self._reject(
                outcome,
                VisibilityViolation(
                    f"Unable to handle {event_name!r}, the handler defined for this event in "
                    f"{request.state_name!r} is private. It can only be triggered from a private "
                    f"dispatch issued by the state's own hooks or handlers.",
                    event_name=event_name,
                    state_name=request.state_name,
                ),
            )

        changes_since = self._version - request.version
        if changes_since:
            return self._reject(
                outcome,
                StaleDispatchError(
                    f"Unable to handle {event_name!r}, {changes_since} state change(s) have occurred "
                    f"since it was dispatched.",
                    event_name=event_name,
                    state_name=request.state_name,
                    changes_since=changes_since,
                ),
            )

        outcome.before_handle_result = state.before_handle(outcome)
        if outcome.before_handle_result is False:
            outcome.vetoed = True
            logger.debug("before_handle of %r vetoed %r", request.state_name, event_name)
            return outcome

        resolved = False

        def change_state(to_state_name: StateName, transition_payload: TransitionPayload = None):
            try:
                result = self._change_state(request, to_state_name, transition_payload)
            except DispatchError as exc:
                outcome.error = exc
                self._report(exc)
                return None
            outcome.transition = result
            if resolved:
                # requested after this dispatch already finished, so notify here
                self._state_changes.publish(outcome)
            return result

        context = HandlerContext(
            state_name=request.state_name,
            event_name=event_name,
            payload=request.payload,
            change_state=change_state,
            handle_private=partial(self._handle_private, request.state_name, self._version),
            is_private=request.is_private,
        )
        outcome.handler_result = handler.fn(context)
        outcome.after_handle_result = state.after_handle(outcome)
        resolved = True

        if outcome.transition is not None:
            self._state_changes.publish(outcome)
        return outcome

    def _validate_transition(
        self, request: EventRequest, active_state_name: Optional[StateName], to_state_name: StateName
    ) -> None:
        from_state_name = request.state_name
        common = {"event_name": request.event_name, "state_name": from_state_name}

        if to_state_name == BOOT_STATE_NAME:
            raise InvalidTransitionError(
                f"Cannot change state to the boot state. {BOOT_STATE_NAME!r} is a reserved state name.", **common
            )

        changes_since = self._version - request.version
        if changes_since:
            raise StaleDispatchError(
                f"Unable to change state from {from_state_name!r} to {to_state_name!r}, {changes_since} "
                f"state change(s) have occurred since the enclosing event handler was dispatched.",
                changes_since=changes_since,
                **common,
            )

        if active_state_name != from_state_name:
            raise InvalidTransitionError(
                f"Cannot change state from {from_state_name!r} to {to_state_name!r}, "
                f"currently in {active_state_name!r}.",
                **common,
            )

        if to_state_name not in self._states:
            raise InvalidTransitionError(
                f"Cannot change state from {from_state_name!r} to {to_state_name!r}, "
                f"{to_state_name!r} is not a defined state.",
                **common,
            )

    def _change_state(
        self, request: EventRequest, to_state_name: StateName, transition_payload: TransitionPayload
    ) -> TransitionResult:
        """
        Validate and perform a transition requested by a handler.

        :raises InvalidTransitionError: If the target or source state is wrong.
        :raises StaleDispatchError: If the machine moved on since the request.
        :raises StorageInconsistencyError: If the store rejects the new name. The
                                           previous name is written back and the
                                           version is left unchanged.
        """
        active_state_name = self._context.read_active_state_name()
        self._validate_transition(request, active_state_name, to_state_name)

        from_state_name = request.state_name
        current_state = self._states.get(active_state_name)
        next_state = self._states[to_state_name]
        context = TransitionContext(
            from_state=from_state_name,
            to_state=to_state_name,
            event_payload=request.payload,
            transition_payload=transition_payload,
        )

        # the bootstrap state is never registered, so there is nothing to exit
        exit_outcome = current_state.exit(context) if current_state is not None else None

        try:
            self._context.write_active_state_name(to_state_name)
        except StorageInconsistencyError as exc:
            # the transition did not happen: put the old name back, keep the version
            self._context.restore_active_state_name(active_state_name)
            exc.event_name = request.event_name
            exc.state_name = from_state_name
            raise
        self._version += 1
        version = self._version
        self._context.record_previous_state_name(active_state_name if current_state is not None else None)

        enter_context = replace(context, handle_private=partial(self._handle_private, to_state_name, version))
        enter_outcome = next_state.enter(enter_context)
        logger.debug("Transitioned %r -> %r (version %d)", from_state_name, to_state_name, version)

        return TransitionResult(
            from_state=from_state_name,
            to_state=to_state_name,
            enter=enter_outcome,
            exit=exit_outcome,
            transition_payload=transition_payload,
            version=version,
        )
