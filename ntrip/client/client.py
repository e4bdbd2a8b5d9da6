"""NtripClient: a self-healing connection to an NTRIP caster mountpoint.

The client runs entirely on the asyncio event loop that called ``run()``.
Transport callbacks, timers and the position reporter all execute on that
loop, so the client's state is only ever touched from one place at a time
and needs no locking.

Connection lifecycle:
    1. ``run()`` opens a TCP connection and, once connected, sends the
       mountpoint request with Basic authentication.
    2. Inbound bytes are fed to the stream decoder and re-published as
       ``ClientEvent.DATA``. The first chunk starting with ``ICY 200 OK``
       marks the connection ``READY``; only then are position reports sent.
    3. Any fault (idle timeout, EOF, lost connection, socket or decoder
       error) goes through one handler. It tears down the transport and
       decoder, publishes ``ClientEvent.ERROR`` and schedules a reconnect.
       Faults arriving while one is being handled are ignored.
    4. ``close()`` is final: it publishes ``ClientEvent.CLOSE``, aborts the
       transport, and no reconnect runs afterwards.

Readiness is a literal prefix check on the raw bytes. A caster that accepts
the request with any other banner (e.g. an NTRIP v2 ``HTTP/1.1 200 OK``)
still streams data, but the client never becomes ``READY`` and so never
reports its position.
"""

import asyncio
import base64
import logging
import math
from collections.abc import Callable, Sequence
from typing import Any, cast

from ntrip.client.config import CASTER_REPLY, ClientConfig
from ntrip.client.decoder import PassthroughDecoder, StreamDecoder
from ntrip.client.events import ClientEvent, EventChannel
from ntrip.client.reporter import PositionReporter
from ntrip.client.state import ConnectionState, transition
from ntrip.errors import CasterDisconnectedError, CasterTimeoutError

__all__ = ["NtripClient", "build_request"]

logger = logging.getLogger(__name__)


def build_request(config: ClientConfig) -> bytes:
    """Build the HTTP-style request for ``config.mountpoint``.

    The Authorization header is always present, even with empty
    credentials; casters that do not require a login ignore it.

    Example:
        >>> build_request(ClientConfig(mountpoint="RTCM3", username="u", password="p"))
        b'GET /RTCM3 HTTP/1.1\\r\\nUser-Agent: NTRIP NtripClientPy/0.1.0\\r\\nAuthorization: Basic dTpw\\r\\n\\r\\n'
    """
    credentials = f"{config.username}:{config.password}".encode()
    authorization = base64.b64encode(credentials).decode("ascii")
    custom_headers = "".join(
        f"{key}: {value}\r\n" for key, value in config.headers.items()
    )
    request = (
        f"GET /{config.mountpoint} HTTP/1.1\r\n"
        f"User-Agent: {config.user_agent}\r\n"
        f"{custom_headers}"
        f"Authorization: Basic {authorization}\r\n"
        "\r\n"
    )
    return request.encode()


class _CasterProtocol(asyncio.Protocol):
    """Relays transport callbacks to the client until detached.

    Once detached the protocol swallows every further callback, so a
    transport being torn down cannot call back into the client.
    """

    def __init__(
        self,
        on_connected: Callable[[asyncio.Transport], None],
        on_data: Callable[[bytes], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        self._on_connected: Callable[[asyncio.Transport], None] | None = on_connected
        self._on_data: Callable[[bytes], None] | None = on_data
        self._on_error: Callable[[BaseException], None] | None = on_error

    def detach(self) -> None:
        self._on_connected = None
        self._on_data = None
        self._on_error = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        if self._on_connected is not None:
            self._on_connected(cast(asyncio.Transport, transport))

    def data_received(self, data: bytes) -> None:
        if self._on_data is not None:
            self._on_data(data)

    def eof_received(self) -> bool | None:
        if self._on_error is not None:
            self._on_error(CasterDisconnectedError("socket ended"))
        return None

    def connection_lost(self, exc: Exception | None) -> None:
        if self._on_error is not None:
            self._on_error(exc or CasterDisconnectedError("socket closed"))


class NtripClient:
    """Streams corrections from one caster mountpoint and reports position.

    Usage::

        async def main():
            client = NtripClient(ClientConfig(host="rtk2go.com", mountpoint="ACACU",
                                              username="me@example.com",
                                              report_interval=2.0))
            client.subscribe(ClientEvent.DATA, handle_corrections)
            client.set_position((-1983430.2, -4937492.4, 3505683.8))
            client.run()
            ...
            client.close()

    Args:
        config: Connection settings.
        decoder_factory: Builds a fresh stream decoder for every connection.
    """

    def __init__(
        self,
        config: ClientConfig,
        decoder_factory: Callable[[], StreamDecoder] = PassthroughDecoder,
    ) -> None:
        self._config = config
        self._decoder_factory = decoder_factory
        self._position: tuple[float, float, float] = (0.0, 0.0, 0.0)
        self.set_position(config.position)
        self._state = ConnectionState.IDLE
        self._closing = False
        self._events = EventChannel()
        self._reporter = PositionReporter(self, config.report_interval)

        # Resources of the current connection; at most one set is alive
        self._transport: asyncio.Transport | None = None
        self._protocol: _CasterProtocol | None = None
        self._decoder: StreamDecoder | None = None
        self._connect_task: asyncio.Task[None] | None = None
        self._idle_timer: asyncio.TimerHandle | None = None
        self._reconnect_timer: asyncio.TimerHandle | None = None

    # --- public API -----------------------------------------------------------

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def position(self) -> tuple[float, float, float]:
        return self._position

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.READY

    @property
    def is_closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    def subscribe(self, event: ClientEvent, listener: Callable[..., Any]) -> None:
        """Register ``listener`` for ``event``."""
        self._events.subscribe(event, listener)

    def unsubscribe(self, event: ClientEvent, listener: Callable[..., Any]) -> None:
        """Remove a listener registered with ``subscribe``."""
        self._events.unsubscribe(event, listener)

    def run(self) -> None:
        """Start connecting and start the position reporter.

        Must be called once, from inside a running event loop.
        """
        self._connect()
        self._reporter.start()

    def close(self) -> None:
        """Shut the client down for good.

        Publishes ``ClientEvent.CLOSE``, then aborts the transport. A
        pending reconnect is cancelled; the position reporter stops on its
        next tick. Closing an already closed client does nothing.
        """
        if self._state is ConnectionState.CLOSED or self._closing:
            return

        self._closing = True
        self._events.emit(ClientEvent.CLOSE)
        self._state = transition(self._state, ConnectionState.CLOSED)
        logger.info("Closing connection to %s", self._describe())

        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None
        self._release_connection()

    def write(self, data: bytes | str) -> None:
        """Send ``data`` to the caster.

        The data is dropped without notice when the client is closed, is
        handling a fault, or has no open transport.
        """
        if self._state in (ConnectionState.CLOSED, ConnectionState.ERRORING):
            return
        if self._transport is None:
            return

        if isinstance(data, str):
            data = data.encode("ascii")
        self._transport.write(data)

    def set_position(self, position: Sequence[float]) -> None:
        """Replace the receiver position used by the next report.

        Args:
            position: ECEF (X, Y, Z) in metres.

        Raises:
            ValueError: If ``position`` does not have three finite components.
        """
        if len(position) != 3:
            raise ValueError(f"Position must have 3 components, got {len(position)}")
        x, y, z = (float(axis) for axis in position)
        if not all(math.isfinite(axis) for axis in (x, y, z)):
            raise ValueError(f"Position components must be finite, got {(x, y, z)}")
        self._position = (x, y, z)

    # --- connection -----------------------------------------------------------

    def _describe(self) -> str:
        return f"{self._config.host}:{self._config.port}/{self._config.mountpoint}"

    def _connect(self) -> None:
        self._reconnect_timer = None
        if self._state is ConnectionState.CLOSED:
            return

        self._state = transition(self._state, ConnectionState.CONNECTING)
        logger.info("Connecting to %s", self._describe())

        decoder = self._decoder_factory()
        decoder.attach(self._on_decoded, self._handle_error)
        self._decoder = decoder

        self._protocol = _CasterProtocol(
            self._on_connected, self._on_received, self._handle_error
        )
        self._arm_idle_timer()
        loop = asyncio.get_running_loop()
        self._connect_task = loop.create_task(self._open_transport(self._protocol))

    async def _open_transport(self, protocol: _CasterProtocol) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.create_connection(
                lambda: protocol, self._config.host, self._config.port
            )
        except OSError as error:
            self._connect_task = None
            if protocol is self._protocol:
                self._handle_error(error)
            return
        self._connect_task = None

    def _on_connected(self, transport: asyncio.Transport) -> None:
        self._transport = transport
        logger.debug("Connected to %s, sending request", self._describe())
        transport.write(build_request(self._config))

    def _on_received(self, chunk: bytes) -> None:
        self._arm_idle_timer()

        if self._state is ConnectionState.CONNECTING and chunk.startswith(CASTER_REPLY):
            self._state = transition(self._state, ConnectionState.READY)
            logger.info("Caster accepted request for %s", self._describe())

        if self._decoder is not None:
            self._decoder.feed(chunk)

    def _on_decoded(self, record: Any) -> None:
        self._events.emit(ClientEvent.DATA, record)

    # --- timeouts -------------------------------------------------------------

    def _arm_idle_timer(self) -> None:
        self._cancel_idle_timer()
        if self._config.timeout > 0:
            loop = asyncio.get_running_loop()
            self._idle_timer = loop.call_later(self._config.timeout, self._on_idle_timeout)

    def _cancel_idle_timer(self) -> None:
        if self._idle_timer is not None:
            self._idle_timer.cancel()
            self._idle_timer = None

    def _on_idle_timeout(self) -> None:
        self._idle_timer = None
        self._handle_error(
            CasterTimeoutError(f"no data for {self._config.timeout:g} seconds")
        )

    # --- faults ---------------------------------------------------------------

    def _handle_error(self, error: BaseException) -> None:
        if self._state is ConnectionState.ERRORING:
            return

        if self._state is ConnectionState.CLOSED:
            self._release_connection()
            return

        self._state = transition(self._state, ConnectionState.ERRORING)
        self._release_connection()

        logger.warning("Connection to %s failed: %s", self._describe(), error)
        self._events.emit(ClientEvent.ERROR, error)
        self._reconnect()

    def _release_connection(self) -> None:
        """Tear down the transport and decoder of the current connection."""
        self._cancel_idle_timer()

        if self._connect_task is not None:
            self._connect_task.cancel()
            self._connect_task = None

        if self._protocol is not None:
            self._protocol.detach()
            self._protocol = None

        if self._transport is not None:
            self._transport.abort()
            self._transport = None

        if self._decoder is not None:
            self._decoder.detach()
            self._decoder.close()
            self._decoder = None

    def _reconnect(self) -> None:
        # An ERROR listener may have closed the client
        if self._state is ConnectionState.CLOSED:
            return

        if self._config.reconnect_interval <= 0:
            logger.info("Reconnect disabled; staying disconnected from %s", self._describe())
            return

        logger.info(
            "Reconnecting to %s in %g seconds",
            self._describe(),
            self._config.reconnect_interval,
        )
        loop = asyncio.get_running_loop()
        self._reconnect_timer = loop.call_later(
            self._config.reconnect_interval, self._connect
        )
