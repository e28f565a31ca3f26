# tests/unit/core/test_hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock, call

import pytest

from statorade.core.hooks import NotificationChannel


def test_channel_publishes_to_listeners_in_order():
    order = []
    channel = NotificationChannel("test")
    channel.subscribe(lambda value: order.append(("first", value)))
    channel.subscribe(lambda value: order.append(("second", value)))

    channel.publish(1)

    assert order == [("first", 1), ("second", 1)]


def test_channel_init_with_listeners():
    listener = MagicMock()
    channel = NotificationChannel("test", listeners=[listener])
    assert len(channel) == 1
    channel.publish("a", "b")
    listener.assert_called_once_with("a", "b")


def test_subscribe_returns_listener_for_decorator_use():
    channel = NotificationChannel("test")

    @channel.subscribe
    def listener(value):
        pass

    assert listener is not None
    assert len(channel) == 1


def test_subscribe_rejects_non_callable():
    channel = NotificationChannel("test")
    with pytest.raises(TypeError):
        channel.subscribe("not callable")


def test_unsubscribe():
    listener = MagicMock()
    channel = NotificationChannel("test")
    channel.subscribe(listener)

    assert channel.unsubscribe(listener) is True
    assert channel.unsubscribe(listener) is False
    channel.publish(1)
    listener.assert_not_called()


def test_listener_error_propagates():
    channel = NotificationChannel("test")
    after = MagicMock()
    channel.subscribe(MagicMock(side_effect=RuntimeError("boom")))
    channel.subscribe(after)

    with pytest.raises(RuntimeError, match="boom"):
        channel.publish(1)
    after.assert_not_called()


def test_listener_may_unsubscribe_while_publishing():
    channel = NotificationChannel("test")
    other = MagicMock()

    def once(value):
        channel.unsubscribe(once)

    channel.subscribe(once)
    channel.subscribe(other)
    channel.publish(1)
    channel.publish(2)

    assert other.call_args_list == [call(1), call(2)]
    assert len(channel) == 1
