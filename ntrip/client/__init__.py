"""NTRIP caster client: connection lifecycle and position reporting."""

from ntrip.client.client import NtripClient, build_request
from ntrip.client.config import ClientConfig
from ntrip.client.decoder import PassthroughDecoder, StreamDecoder
from ntrip.client.events import ClientEvent
from ntrip.client.reporter import PositionReporter, build_position_report, has_fix
from ntrip.client.state import ConnectionState

__all__ = [
    "ClientConfig",
    "ClientEvent",
    "ConnectionState",
    "NtripClient",
    "PassthroughDecoder",
    "PositionReporter",
    "StreamDecoder",
    "build_position_report",
    "build_request",
    "has_fix",
]
