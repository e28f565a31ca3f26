# tests/unit/core/test_states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from statorade.core.errors import ConfigurationError, DuplicateHandlerError
from statorade.core.states import State
from statorade.core.transitions import HookOutcome


def test_state_creation():
    """Test basic state creation and properties."""
    state = State("idle")
    assert state.name == "idle"
    assert state.handlers == {}
    assert repr(state) == "State('idle')"


@pytest.mark.parametrize("name", ["", None, 42])
def test_state_requires_name(name):
    with pytest.raises(ConfigurationError, match="non-empty string"):
        State(name)


def test_register_handlers_merges_public_and_private():
    on_go = MagicMock()
    on_done = MagicMock()
    state = State("idle", handlers={"go": on_go}, private_handlers={"done": on_done})

    go = state.get_handler("go")
    done = state.get_handler("done")
    assert go.fn is on_go and go.is_private is False
    assert done.fn is on_done and done.is_private is True
    assert state.get_handler("missing") is None


def test_duplicate_handler_across_maps_raises():
    with pytest.raises(DuplicateHandlerError, match="multiple handlers"):
        State("idle", handlers={"go": MagicMock()}, private_handlers={"go": MagicMock()})


def test_register_handlers_after_construction_raises():
    state = State("idle", handlers={"go": MagicMock()})
    with pytest.raises(ConfigurationError, match="configuration is fixed"):
        state.register_handlers({"stop": MagicMock()}, {})
    assert list(state.handlers) == ["go"]


def test_non_callable_handler_raises():
    with pytest.raises(ConfigurationError, match="handler for 'go' must be callable"):
        State("idle", handlers={"go": "nope"})


@pytest.mark.parametrize("option", ["on_enter", "on_exit", "before_handle", "after_handle"])
def test_non_callable_hook_raises(option):
    with pytest.raises(ConfigurationError, match=option):
        State("idle", **{option: 1})


def test_non_callable_keyed_hook_raises():
    with pytest.raises(ConfigurationError, match="on_enter_from"):
        State("idle", on_enter_from={"red": None})


def test_handlers_property_is_a_copy():
    state = State("idle", handlers={"go": MagicMock()})
    state.handlers.clear()
    assert state.get_handler("go") is not None


def test_enter_runs_keyed_hook_before_unconditional(dummy_context):
    order = []
    state = State(
        "target",
        on_enter=lambda ctx: order.append("enter") or "entered",
        on_enter_from={"source": lambda ctx: order.append("from_source") or "keyed"},
    )

    outcome = state.enter(dummy_context)

    assert order == ["from_source", "enter"]
    assert outcome == HookOutcome(result="entered", keyed_state="source", keyed_result="keyed")


def test_enter_skips_hooks_for_other_predecessors(dummy_context):
    keyed = MagicMock()
    on_enter = MagicMock(return_value=3)
    state = State("target", on_enter=on_enter, on_enter_from={"elsewhere": keyed})

    outcome = state.enter(dummy_context)

    keyed.assert_not_called()
    on_enter.assert_called_once_with(dummy_context)
    assert outcome.result == 3
    assert outcome.keyed_state is None


def test_exit_runs_keyed_hook_before_unconditional(dummy_context):
    order = []
    state = State(
        "source",
        on_exit=lambda ctx: order.append("exit"),
        on_exit_to={"target": lambda ctx: order.append("to_target")},
    )

    outcome = state.exit(dummy_context)

    assert order == ["to_target", "exit"]
    assert outcome.keyed_state == "target"


def test_missing_hooks_are_no_ops(dummy_context):
    state = State("idle")
    assert state.enter(dummy_context) == HookOutcome()
    assert state.exit(dummy_context) == HookOutcome()
    assert state.before_handle({}) is None
    assert state.after_handle({}) is None


def test_middleware_results_are_returned():
    state = State("idle", before_handle=lambda meta: False, after_handle=lambda meta: meta["x"])
    assert state.before_handle({}) is False
    assert state.after_handle({"x": 7}) == 7
