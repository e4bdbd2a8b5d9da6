"""NTRIP source-table parsing and retrieval.

Requesting the root mountpoint ("/") makes a caster answer with its source
table instead of a stream: one record per line, fields separated by ';',
terminated by an ``ENDSOURCETABLE`` line. Three record types exist:

    STR;<mountpoint>;<identifier>;<format>;...   a data stream
    CAS;<host>;<port>;<identifier>;...           another caster
    NET;<identifier>;<operator>;...              a network of streams

Each record is returned as a dict keyed by the type's field names. A record
with fewer fields than the type defines simply lacks the trailing keys;
missing fields are never filled with defaults.
"""

import asyncio
import logging
from dataclasses import replace

from ntrip.client.client import build_request
from ntrip.client.config import ClientConfig
from ntrip.errors import SourceTableError

__all__ = ["SourceTableEntry", "fetch_source_table", "parse_source_table"]

logger = logging.getLogger(__name__)

SourceTableEntry = dict[str, str]

STR_KEYS = (
    "type",
    "mountpoint",
    "identifier",
    "format",
    "format_details",
    "carrier",
    "nav_system",
    "network",
    "country",
    "latitude",
    "longitude",
    "nmea",
    "solution",
    "generator",
    "compr_encryp",
    "authentication",
    "fee",
    "bitrate",
)
CAS_KEYS = (
    "type",
    "host",
    "port",
    "identifier",
    "operator",
    "nmea",
    "country",
    "latitude",
    "longitude",
    "fallback_host",
    "fallback_port",
)
NET_KEYS = (
    "type",
    "identifier",
    "operator",
    "authentication",
    "fee",
    "web_net",
    "web_str",
    "web_reg",
)

_KEYS_BY_PREFIX = {"STR;": STR_KEYS, "CAS;": CAS_KEYS, "NET;": NET_KEYS}

_END_MARKER = b"ENDSOURCETABLE"
_ACCEPTED_REPLIES = (b"SOURCETABLE 200 OK", b"HTTP/1.1 200", b"HTTP/1.0 200")
_READ_SIZE = 4096


def _parse_record(line: str, keys: tuple[str, ...]) -> SourceTableEntry:
    return dict(zip(keys, line.split(";")))


def parse_source_table(data: bytes | str) -> list[SourceTableEntry]:
    """Parse source-table text into records.

    Lines that are not STR, CAS or NET records (response headers, blank
    lines, ``ENDSOURCETABLE``) are skipped.

    Example:
        >>> parse_source_table("STR;ACACU;Acacia;RTCM 3.2")
        [{'type': 'STR', 'mountpoint': 'ACACU', 'identifier': 'Acacia', 'format': 'RTCM 3.2'}]
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")

    entries = []
    for line in data.split("\n"):
        line = line.strip()
        for prefix, keys in _KEYS_BY_PREFIX.items():
            if line.startswith(prefix):
                entries.append(_parse_record(line, keys))
                break
    return entries


async def _read_source_table(reader: asyncio.StreamReader) -> bytes:
    data = b""
    while _END_MARKER not in data:
        chunk = await reader.read(_READ_SIZE)
        if not chunk:
            break
        data += chunk
    return data


async def fetch_source_table(config: ClientConfig) -> list[SourceTableEntry]:
    """Download and parse the source table of the caster in ``config``.

    The request carries the same User-Agent, custom headers and credentials
    as a stream request; ``config.mountpoint`` is ignored.

    Raises:
        SourceTableError: If the caster answers with anything but a table.
        TimeoutError: If the table is not complete within ``config.timeout``.
        OSError: If the caster cannot be reached.
    """
    reader, writer = await asyncio.wait_for(
        asyncio.open_connection(config.host, config.port), config.timeout
    )
    try:
        writer.write(build_request(replace(config, mountpoint="")))
        await writer.drain()
        data = await asyncio.wait_for(_read_source_table(reader), config.timeout)
    finally:
        writer.close()

    if not data.startswith(_ACCEPTED_REPLIES):
        status = data.split(b"\r\n", 1)[0].decode("utf-8", errors="replace")
        raise SourceTableError(f"Caster did not send a source table: {status!r}")

    entries = parse_source_table(data)
    logger.info("Read %d source-table entries from %s", len(entries), config.host)
    return entries
