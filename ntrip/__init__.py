"""NTRIP client for streaming GNSS corrections from a caster."""

from ntrip._version import __version__
from ntrip.client import (
    ClientConfig,
    ClientEvent,
    ConnectionState,
    NtripClient,
    PassthroughDecoder,
    StreamDecoder,
)
from ntrip.errors import NtripError
from ntrip.geodesy import ecef_to_geodetic, geodetic_to_ecef
from ntrip.nmea import GGASentence, Location, decode, encode
from ntrip.sourcetable import fetch_source_table, parse_source_table

__all__ = [
    "ClientConfig",
    "ClientEvent",
    "ConnectionState",
    "GGASentence",
    "Location",
    "NtripClient",
    "NtripError",
    "PassthroughDecoder",
    "StreamDecoder",
    "__version__",
    "decode",
    "ecef_to_geodetic",
    "encode",
    "fetch_source_table",
    "geodetic_to_ecef",
    "parse_source_table",
]
