"""NTRIP client configuration."""

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from ntrip._version import __version__

__all__ = [
    "CASTER_REPLY",
    "DEFAULT_PORT",
    "RECONNECT_INTERVAL",
    "SOCKET_TIMEOUT",
    "USER_AGENT",
    "ClientConfig",
]

# --- caster defaults ----------------------------------------------------------

DEFAULT_PORT = 2101
SOCKET_TIMEOUT = 15.0  # seconds without inbound data before the link is dropped
RECONNECT_INTERVAL = 2.0  # seconds between a fault and the next connect attempt
USER_AGENT = f"NTRIP NtripClientPy/{__version__}"

# Banner an NTRIP v1 caster sends once it accepts the mountpoint request
CASTER_REPLY = b"ICY 200 OK"

_ENV_PREFIX = "NTRIP_"


def _parse_position(value: str) -> tuple[float, float, float]:
    """Parse an ``"x,y,z"`` string into an ECEF tuple."""
    parts = [float(part) for part in value.split(",")]
    if len(parts) != 3:
        raise ValueError(f"Position must have 3 components, got {value!r}")
    if not all(math.isfinite(part) for part in parts):
        raise ValueError(f"Position components must be finite, got {value!r}")
    return parts[0], parts[1], parts[2]


def _parse_headers(value: str) -> dict[str, str]:
    """Parse ``"Key: Value;Other: Value"`` into a header mapping."""
    headers = {}
    for item in value.split(";"):
        if not item.strip():
            continue
        key, _, header_value = item.partition(":")
        headers[key.strip()] = header_value.strip()
    return headers


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for an ``NtripClient``.

    The configuration never changes once built. The receiver position
    starts at ``position`` but is owned by the client afterwards and updated
    with ``NtripClient.set_position``.

    Attributes:
        host: Caster host name or address.
        port: Caster TCP port.
        mountpoint: Stream to request; empty requests the source table.
        user_agent: Sent in the ``User-Agent`` header.
        username: Basic-auth user name (may be empty).
        password: Basic-auth password (may be empty).
        headers: Extra request headers, sent in order between
            ``User-Agent`` and ``Authorization``.
        timeout: Seconds without inbound data before the connection is
            treated as failed.
        reconnect_interval: Seconds to wait after a fault before
            reconnecting. Zero or negative disables reconnection.
        report_interval: Seconds between GGA position reports. Zero or
            negative disables reporting.
        position: Initial receiver position as ECEF (X, Y, Z) metres. The
            origin means "no fix yet" and is never reported.
    """

    host: str = ""
    port: int = DEFAULT_PORT
    mountpoint: str = ""
    user_agent: str = USER_AGENT
    username: str = ""
    password: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = SOCKET_TIMEOUT
    reconnect_interval: float = RECONNECT_INTERVAL
    report_interval: float = 0.0
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Build a configuration from ``NTRIP_*`` environment variables.

        Recognised variables: ``NTRIP_HOST``, ``NTRIP_PORT``,
        ``NTRIP_MOUNTPOINT``, ``NTRIP_USER_AGENT``, ``NTRIP_USERNAME``,
        ``NTRIP_PASSWORD``, ``NTRIP_HEADERS`` (``"Key: Value;..."``),
        ``NTRIP_TIMEOUT``, ``NTRIP_RECONNECT_INTERVAL``,
        ``NTRIP_REPORT_INTERVAL`` and ``NTRIP_POSITION`` (``"x,y,z"``).
        Unset variables keep their defaults.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(_ENV_PREFIX + name)

        defaults = cls()
        headers = get("HEADERS")
        position = get("POSITION")
        return cls(
            host=get("HOST") or defaults.host,
            port=int(get("PORT") or defaults.port),
            mountpoint=get("MOUNTPOINT") or defaults.mountpoint,
            user_agent=get("USER_AGENT") or defaults.user_agent,
            username=get("USERNAME") or defaults.username,
            password=get("PASSWORD") or defaults.password,
            headers=_parse_headers(headers) if headers else {},
            timeout=float(get("TIMEOUT") or defaults.timeout),
            reconnect_interval=float(
                get("RECONNECT_INTERVAL") or defaults.reconnect_interval
            ),
            report_interval=float(get("REPORT_INTERVAL") or defaults.report_interval),
            position=_parse_position(position) if position else defaults.position,
        )
