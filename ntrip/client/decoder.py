"""Stream decoders turn raw caster bytes into the records handed to callers.

A decoder is attached to exactly one connection. The client feeds it every
inbound chunk; the decoder reports results through the two callbacks given
to ``attach``. Errors must be reported through ``on_error``, not raised
from ``feed``, so that they follow the same teardown and reconnect path as
transport faults.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

__all__ = ["PassthroughDecoder", "StreamDecoder"]


class StreamDecoder(ABC):
    """Base class for correction-stream decoders."""

    def __init__(self) -> None:
        self._on_data: Callable[[Any], None] | None = None
        self._on_error: Callable[[BaseException], None] | None = None

    def attach(
        self,
        on_data: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        """Register the callbacks that receive decoded records and faults."""
        self._on_data = on_data
        self._on_error = on_error

    def detach(self) -> None:
        """Drop both callbacks; later output is discarded."""
        self._on_data = None
        self._on_error = None

    @abstractmethod
    def feed(self, chunk: bytes) -> None:
        """Consume one chunk of inbound bytes."""

    def close(self) -> None:
        """Release decoder state. The decoder is not reused afterwards."""
        self.detach()

    def _emit_data(self, record: Any) -> None:
        if self._on_data is not None:
            self._on_data(record)

    def _emit_error(self, error: BaseException) -> None:
        if self._on_error is not None:
            self._on_error(error)


class PassthroughDecoder(StreamDecoder):
    """Hands every inbound chunk to the caller unchanged.

    The caster's reply banner is part of the first chunk and is passed on
    with it.
    """

    def feed(self, chunk: bytes) -> None:
        self._emit_data(chunk)
