"""Pytest fixtures for server module testing."""

from collections.abc import Callable, Iterator, Sequence
from typing import Any
from unittest.mock import patch

import pytest

from ntrip.client import ClientConfig, ClientEvent, ConnectionState


class ControlledNtripClient:
    """Stands in for ``NtripClient`` so tests decide what the caster sends."""

    def __init__(self) -> None:
        self.config = ClientConfig(host="caster.example.com", mountpoint="TEST")
        self.state = ConnectionState.IDLE
        self.position: tuple[float, float, float] = (0.0, 0.0, 0.0)
        self.closed = False
        self._listeners: dict[ClientEvent, list[Callable[..., Any]]] = {
            event: [] for event in ClientEvent
        }

    @property
    def is_ready(self) -> bool:
        return self.state is ConnectionState.READY

    def subscribe(self, event: ClientEvent, listener: Callable[..., Any]) -> None:
        self._listeners[event].append(listener)

    def run(self) -> None:
        self.state = ConnectionState.READY

    def close(self) -> None:
        self.closed = True
        self.state = ConnectionState.CLOSED

    def set_position(self, position: Sequence[float]) -> None:
        self.position = (float(position[0]), float(position[1]), float(position[2]))

    def emit(self, event: ClientEvent, *args: Any) -> None:
        for listener in self._listeners[event]:
            listener(*args)


@pytest.fixture(autouse=True)
def ntrip_controller() -> Iterator[ControlledNtripClient]:
    controller = ControlledNtripClient()
    with patch("server.main.NtripClient", return_value=controller):
        yield controller
