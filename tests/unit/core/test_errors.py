# tests/unit/core/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statorade.core.errors import (
    AlreadyInitializedError,
    ConfigurationError,
    DispatchError,
    DuplicateHandlerError,
    DuplicateStateError,
    InvalidTransitionError,
    NotInitializedError,
    StaleDispatchError,
    StatoradeError,
    StorageInconsistencyError,
    VisibilityViolation,
)


@pytest.mark.parametrize(
    "error_class",
    [
        ConfigurationError,
        DuplicateStateError,
        DuplicateHandlerError,
        NotInitializedError,
        AlreadyInitializedError,
        DispatchError,
        VisibilityViolation,
        StaleDispatchError,
        InvalidTransitionError,
        StorageInconsistencyError,
    ],
)
def test_error_hierarchy(error_class):
    assert issubclass(error_class, StatoradeError)
    assert issubclass(error_class, Exception)


def test_configuration_subclasses():
    assert issubclass(DuplicateStateError, ConfigurationError)
    assert issubclass(DuplicateHandlerError, ConfigurationError)


def test_dispatch_time_errors_share_a_base():
    for error_class in (VisibilityViolation, StaleDispatchError, InvalidTransitionError, StorageInconsistencyError):
        assert issubclass(error_class, DispatchError)
    assert not issubclass(ConfigurationError, DispatchError)


def test_dispatch_error_context():
    error = VisibilityViolation("private", event_name="tick", state_name="idle")
    assert str(error) == "private"
    assert error.event_name == "tick"
    assert error.state_name == "idle"


def test_stale_error_counts_changes():
    error = StaleDispatchError("stale", event_name="go", state_name="a", changes_since=2)
    assert error.changes_since == 2
    assert StaleDispatchError("stale").changes_since == 0


def test_storage_error_records_values():
    error = StorageInconsistencyError("mismatch", expected="red", actual="RED")
    assert error.expected == "red"
    assert error.actual == "RED"
    assert error.event_name is None


def test_error_empty_messages():
    assert str(StatoradeError()) == ""
    assert str(ConfigurationError()) == ""
