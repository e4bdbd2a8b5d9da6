"""Manages active WebSocket subscriber queues and message broadcasting."""

import asyncio

__all__ = ["add_subscriber", "broadcast_message", "remove_subscriber"]

_subscriber_queues: list[asyncio.Queue[bytes]] = []


def add_subscriber(queue: asyncio.Queue[bytes]) -> None:
    """Add a new subscriber queue to the global broadcast list."""
    _subscriber_queues.append(queue)


def remove_subscriber(queue: asyncio.Queue[bytes]) -> None:
    """Remove a subscriber queue from the global broadcast list."""
    _subscriber_queues.remove(queue)


def _enqueue_message(queue: asyncio.Queue[bytes], message: bytes) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


def broadcast_message(message: bytes) -> None:
    """Dispatch a message to all active subscriber queues.

    Must be called on the event loop that owns the queues.
    """
    for queue in list(_subscriber_queues):
        _enqueue_message(queue, message)
