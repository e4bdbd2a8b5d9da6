"""NMEA data types for decoded and encodable GGA sentences.

Design Decisions:
    1. Optional fields (float | None): NMEA fields may be empty, indicated by
       consecutive commas. Using None distinguishes "no data received" from
       "measured zero".

    2. The valid flag is checksum validity, NOT navigation validity. A
       sentence that fails its checksum is still returned (never raised),
       carrying only ``raw`` and ``valid=False``; every other field stays
       at its default.

    3. The ECEF position is the source of truth for encoding. ``Location``
       keeps the decoded degrees and DMM strings for inspection, but the
       encoder derives latitude and longitude from ``ecef`` alone, so a
       position can be reported by setting nothing but ``ecef``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class DMMCoordinates:
    """A position in NMEA degrees-decimal-minutes text form.

    Attributes:
        latitude: Latitude and hemisphere as they appear on the wire,
            e.g. "3723.1018333,N".
        longitude: Longitude and hemisphere, e.g. "12205.3972723,W".
    """

    latitude: str
    longitude: str


@dataclass
class Location:
    """Position of a GGA fix.

    Attributes:
        ecef: Earth-Centered-Earth-Fixed (X, Y, Z) in metres. Derived from
            the decoded latitude/longitude at zero ellipsoidal height; it is
            the only field the encoder reads.

        point: GeoJSON-style point, ``{"type": "Point", "coordinates":
            [latitude, longitude]}`` in decimal degrees. None when the
            location was built from ECEF alone.

        dmm: The coordinates as decoded from the wire. None when the
            location was built from ECEF alone.
    """

    ecef: tuple[float, float, float]
    point: dict[str, Any] | None = None
    dmm: DMMCoordinates | None = None


@dataclass
class GGASentence:
    """A GGA (Global Positioning System Fix Data) sentence.

    Attributes:
        raw: The sentence text as it was passed to the decoder (empty for a
            sentence built in code).

        valid: True only if the checksum matched. When False, no other
            field was populated.

        sentence_type: Talker ID plus sentence type, e.g. "GPGGA" or "GNGGA".
            A bare "GGA" (no talker) is also accepted.

        timestamp: UTC time of the fix. GGA carries no date, so the decoder
            places the time on the current UTC calendar day.

        location: Position of the fix, or None if the receiver sent empty
            coordinate fields.

        fix_quality: GPS quality indicator:
            0 = Fix not available
            1 = GPS fix
            2 = Differential GPS fix
            3 = PPS fix
            4 = Real Time Kinematic
            5 = Float RTK
            6 = Estimated (dead reckoning)
            7 = Manual input mode
            8 = Simulation mode

        satellites: Number of satellites in use.

        hdop: Horizontal dilution of precision.

        altitude: Antenna altitude above mean sea level.

        altitude_unit: Unit of ``altitude`` (normally "M").

        geoidal_separation: Geoid height above the WGS84 ellipsoid.

        geoidal_separation_unit: Unit of ``geoidal_separation``.

        age_of_differential: Seconds since the last differential update;
            None when not supplied.

        reference_station_id: Differential reference station ID (0000-1023);
            None when not supplied.

    Example:
        >>> gga = decode("$GPGGA,053204.02,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,*40")
        >>> gga.valid, gga.fix_quality, gga.satellites
        (True, 1, 0)
    """

    raw: str = ""
    valid: bool = False
    sentence_type: str | None = None
    timestamp: datetime | None = None
    location: Location | None = None
    fix_quality: int | None = None
    satellites: int | None = None
    hdop: float | None = None
    altitude: float | None = None
    altitude_unit: str | None = None
    geoidal_separation: float | None = None
    geoidal_separation_unit: str | None = None
    age_of_differential: float | None = None
    reference_station_id: int | None = None
