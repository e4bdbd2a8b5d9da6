"""Caller-facing notifications: data, error and close."""

from collections.abc import Callable
from enum import Enum
from typing import Any

__all__ = ["ClientEvent", "EventChannel"]


class ClientEvent(Enum):
    """Kinds of notification an ``NtripClient`` publishes.

    DATA carries one decoded payload (``bytes`` for the default decoder),
    ERROR carries the exception describing the fault, CLOSE carries nothing.
    """

    DATA = "data"
    ERROR = "error"
    CLOSE = "close"


class EventChannel:
    """Per-event listener lists.

    A listener subscribed twice is called twice; ``unsubscribe`` removes
    one registration.
    """

    def __init__(self) -> None:
        self._listeners: dict[ClientEvent, list[Callable[..., Any]]] = {
            event: [] for event in ClientEvent
        }

    def subscribe(self, event: ClientEvent, listener: Callable[..., Any]) -> None:
        self._listeners[event].append(listener)

    def unsubscribe(self, event: ClientEvent, listener: Callable[..., Any]) -> None:
        """Remove a listener.

        Raises:
            ValueError: If ``listener`` is not subscribed to ``event``.
        """
        self._listeners[event].remove(listener)

    def emit(self, event: ClientEvent, *args: Any) -> None:
        """Call every listener of ``event`` in subscription order.

        Listeners may subscribe or unsubscribe while being notified; the
        change takes effect from the next ``emit``.
        """
        for listener in list(self._listeners[event]):
            listener(*args)
