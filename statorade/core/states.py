# statorade/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from statorade.core.errors import ConfigurationError, DuplicateHandlerError
from statorade.core.events import HandlerDescriptor
from statorade.core.transitions import HookOutcome, TransitionContext
from statorade.interfaces.types import EventName, Handler, Hook, Middleware, StateName

logger = logging.getLogger(__name__)


def _check_callable(state_name: str, kind: str, fn: Any) -> None:
    if fn is not None and not callable(fn):
        raise ConfigurationError(f"State {state_name!r}: {kind} must be callable, got {type(fn).__name__}")


def _check_hook_map(state_name: str, kind: str, hooks: Optional[Mapping[str, Hook]]) -> Dict[str, Hook]:
    checked = dict(hooks or {})
    for key, fn in checked.items():
        if fn is None:
            raise ConfigurationError(f"State {state_name!r}: {kind}[{key!r}] must be callable, got NoneType")
        _check_callable(state_name, f"{kind}[{key!r}]", fn)
    return checked


class State:
    """
    Represents one named state of a machine. Owns the state's entry/exit hooks,
    its handler table and optional handler middleware.

    A State never references other states or the machine that owns it; the
    machine passes in everything a hook or handler needs (including the
    capability to dispatch private events) through the context objects.
    """

    def __init__(
        self,
        name: StateName,
        on_enter: Optional[Hook] = None,
        on_exit: Optional[Hook] = None,
        on_enter_from: Optional[Mapping[StateName, Hook]] = None,
        on_exit_to: Optional[Mapping[StateName, Hook]] = None,
        handlers: Optional[Mapping[EventName, Handler]] = None,
        private_handlers: Optional[Mapping[EventName, Handler]] = None,
        before_handle: Optional[Middleware] = None,
        after_handle: Optional[Middleware] = None,
    ) -> None:
        """
        Initialize a state with its name and optional behavior.

        :param name: Name identifying this state within its machine.
        :param on_enter: Hook run on every entry, after any ``on_enter_from`` hook.
        :param on_exit: Hook run on every exit, after any ``on_exit_to`` hook.
        :param on_enter_from: Hooks keyed by the state being arrived from.
        :param on_exit_to: Hooks keyed by the state being left for.
        :param handlers: Event handlers reachable from ``StateMachine.handle``.
        :param private_handlers: Event handlers reachable only from private
                                 dispatches issued by this state's own hooks
                                 and handlers.
        :param before_handle: Middleware run before a matched handler; returning
                              ``False`` vetoes the handler.
        :param after_handle: Middleware run after a matched handler.
        :raises ConfigurationError: If the name is empty or a hook is not callable.
        :raises DuplicateHandlerError: If an event has more than one handler.
        """
        if not name or not isinstance(name, str):
            raise ConfigurationError("State name must be a non-empty string")

        self._name = name
        for kind, fn in (
            ("on_enter", on_enter),
            ("on_exit", on_exit),
            ("before_handle", before_handle),
            ("after_handle", after_handle),
        ):
            _check_callable(name, kind, fn)

        self._on_enter = on_enter
        self._on_exit = on_exit
        self._on_enter_from = _check_hook_map(name, "on_enter_from", on_enter_from)
        self._on_exit_to = _check_hook_map(name, "on_exit_to", on_exit_to)
        self._before_handle = before_handle
        self._after_handle = after_handle
        self._handlers: Dict[EventName, HandlerDescriptor] = {}
        self._sealed = False
        self.register_handlers(handlers or {}, private_handlers or {})
        self._sealed = True

    def __repr__(self) -> str:
        return f"State({self._name!r})"

    @property
    def name(self) -> StateName:
        """The state name."""
        return self._name

    @property
    def handlers(self) -> Dict[EventName, HandlerDescriptor]:
        """A copy of the handler table."""
        return self._handlers.copy()

    def register_handlers(
        self,
        public: Mapping[EventName, Handler],
        private: Mapping[EventName, Handler],
    ) -> None:
        """
        Merge public and private handler maps into the handler table.
        Only called while the state is being constructed; the table is fixed
        afterwards.

        :param public: Handlers any dispatch may reach.
        :param private: Handlers only private dispatches may reach.
        :raises ConfigurationError: If the state has already been constructed.
        :raises DuplicateHandlerError: If an event name is already registered
                                       or appears in both maps.
        """
        if self._sealed:
            raise ConfigurationError(f"Cannot register handlers on {self._name!r}, its configuration is fixed.")
        for is_private, table in ((False, public), (True, private)):
            for event_name, fn in table.items():
                if event_name in self._handlers:
                    raise DuplicateHandlerError(
                        f"Attempted to add multiple handlers to {self._name!r} for {event_name!r}"
                    )
                if not callable(fn):
                    raise ConfigurationError(
                        f"State {self._name!r}: handler for {event_name!r} must be callable, got {type(fn).__name__}"
                    )
                self._handlers[event_name] = HandlerDescriptor(fn=fn, is_private=is_private)
                logger.debug("State %r registered %s handler for %r", self._name, "private" if is_private else "public", event_name)

    def get_handler(self, event_name: EventName) -> Optional[HandlerDescriptor]:
        """Return the handler registered for ``event_name``, if any."""
        return self._handlers.get(event_name)

    def enter(self, context: TransitionContext) -> HookOutcome:
        """
        Run the entry hook keyed by ``context.from_state`` (if any), then the
        unconditional entry hook.
        """
        return self._run_hooks(self._on_enter_from, context.from_state, self._on_enter, context)

    def exit(self, context: TransitionContext) -> HookOutcome:
        """
        Run the exit hook keyed by ``context.to_state`` (if any), then the
        unconditional exit hook.
        """
        return self._run_hooks(self._on_exit_to, context.to_state, self._on_exit, context)

    def before_handle(self, meta: Any) -> Any:
        if self._before_handle is None:
            return None
        return self._before_handle(meta)

    def after_handle(self, meta: Any) -> Any:
        if self._after_handle is None:
            return None
        return self._after_handle(meta)

    @staticmethod
    def _run_hooks(
        keyed_hooks: Dict[StateName, Hook],
        key: Optional[StateName],
        hook: Optional[Callable[[TransitionContext], Any]],
        context: TransitionContext,
    ) -> HookOutcome:
        outcome = HookOutcome()
        keyed = keyed_hooks.get(key) if key is not None else None
        if keyed is not None:
            outcome.keyed_state = key
            outcome.keyed_result = keyed(context)
        if hook is not None:
            outcome.result = hook(context)
        return outcome
