# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from statorade import StateMachine


@pytest.fixture
def machine():
    """An empty machine using the default in-memory store."""
    return StateMachine()


@pytest.fixture
def errors(machine):
    """Collects every error published on the machine's error channel."""
    collected = []
    machine.on_error(collected.append)
    return collected


@pytest.fixture
def changes(machine):
    """Collects every outcome published on the machine's state change channel."""
    collected = []
    machine.on_state_change(collected.append)
    return collected


@pytest.fixture
def traffic_light(machine):
    """red -> green -> yellow -> red, with spies on every entry hook."""
    spies = {name: MagicMock(name=f"{name}_enter") for name in ("red", "green", "yellow")}
    machine.add_state(
        "red",
        on_enter=spies["red"],
        handlers={"green": lambda ctx: ctx.change_state("green")},
    )
    machine.add_state(
        "green",
        on_enter=spies["green"],
        handlers={"yellow": lambda ctx: ctx.change_state("yellow")},
    )
    machine.add_state(
        "yellow",
        on_enter=spies["yellow"],
        handlers={"red": lambda ctx: ctx.change_state("red")},
    )
    return machine, spies


@pytest.fixture
def dummy_context():
    """A transition context from 'source' to 'target' for hook tests."""
    from statorade.core.transitions import TransitionContext

    return TransitionContext(from_state="source", to_state="target", event_payload={"n": 1})
