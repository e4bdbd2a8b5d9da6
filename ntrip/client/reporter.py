"""Periodic GGA position reports for VRS casters.

A VRS caster builds a virtual base station near the client, so it needs to
be told where the client is. The reporter writes one GPGGA sentence per
interval while the connection is ready and the position holds a fix.
"""

import asyncio
import logging
import math
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ntrip.client.state import ConnectionState
from ntrip.nmea import GGASentence, Location, encode

if TYPE_CHECKING:
    from ntrip.client.client import NtripClient

__all__ = ["PositionReporter", "build_position_report", "has_fix"]

logger = logging.getLogger(__name__)

_REPORT_SENTENCE_TYPE = "GPGGA"


def has_fix(position: Sequence[float]) -> bool:
    """Return True if ``position`` can be reported.

    A zero on any axis is taken to mean the receiver has no fix yet. Real
    ECEF positions practically never sit exactly on a coordinate plane.
    NaN and infinite components cannot be encoded and never count as a fix.
    """
    return len(position) == 3 and all(
        axis != 0.0 and math.isfinite(axis) for axis in position
    )


def build_position_report(
    position: Sequence[float],
    timestamp: datetime | None = None,
) -> str:
    """Encode ``position`` as a CRLF-terminated GPGGA sentence.

    Args:
        position: ECEF (X, Y, Z) in metres.
        timestamp: Time of the report; defaults to now.
    """
    sentence = GGASentence(
        sentence_type=_REPORT_SENTENCE_TYPE,
        timestamp=timestamp or datetime.now(timezone.utc),
        location=Location(ecef=(position[0], position[1], position[2])),
        fix_quality=1,
        satellites=0,
        hdop=0.0,
        altitude=0.0,
        geoidal_separation=0.0,
        age_of_differential=1.0,
        reference_station_id=1,
    )
    return encode(sentence) + "\r\n"


class PositionReporter:
    """Writes the client's position to the caster on a fixed interval.

    The reporter never stops the client. Once the client is closed it
    notices on its next tick, exits, and drops its task handle.

    Args:
        client: The client whose position is reported and whose connection
            carries the reports.
        interval: Seconds between reports; zero or negative disables the
            reporter entirely.
    """

    def __init__(self, client: "NtripClient", interval: float) -> None:
        self._client = client
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Start the reporting task on the running event loop."""
        if self._interval <= 0 or self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self) -> bool:
        """Send one report if possible.

        Returns:
            False once the client is closed and reporting should stop.
        """
        position = self._client.position
        if has_fix(position) and self._client.state is ConnectionState.READY:
            report = build_position_report(position)
            logger.debug("Reporting position: %s", report.strip())
            self._client.write(report)
        return not self._client.is_closed

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval)
                if not self.tick():
                    break
        finally:
            self._task = None
