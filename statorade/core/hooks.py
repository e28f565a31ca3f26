import logging
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class NotificationChannel:
    """
    Manages the registration and execution of listeners for one kind of machine
    notification (state changes, errors). Users can attach logging, monitoring,
    or custom side effects without altering core logic.
    """

    def __init__(self, name: str, listeners: Optional[List[Callable[..., Any]]] = None) -> None:
        """
        Initialize with an optional list of listeners.

        :param name: Channel name, used in log messages.
        :param listeners: Callables invoked, in subscription order, on publish.
        """
        self._name = name
        self._listeners: List[Callable[..., Any]] = list(listeners or [])

    @property
    def name(self) -> str:
        return self._name

    def subscribe(self, listener: Callable[..., Any]) -> Callable[..., Any]:
        """
        Add a listener to the channel.

        :param listener: Callable receiving whatever is published.
        :return: The listener, so this can be used as a decorator.
        :raises TypeError: If the listener is not callable.
        """
        if not callable(listener):
            raise TypeError(f"{self._name} listener must be callable")
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Callable[..., Any]) -> bool:
        """
        Remove the first registration of ``listener``.

        :return: True if the listener was subscribed.
        """
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def publish(self, *args: Any) -> None:
        """
        Call every listener with ``args``. A listener that raises stops the
        publish and the exception propagates to the caller.
        """
        logger.debug("Publishing on %s to %d listener(s)", self._name, len(self._listeners))
        for listener in list(self._listeners):
            listener(*args)

    def __len__(self) -> int:
        return len(self._listeners)
