"""GGA sentence decoder and encoder.

GGA (Global Positioning System Fix Data) is the sentence an NTRIP client
sends upstream so that a VRS caster can synthesise corrections for the
client's location. The decoder is used on sentences received from a GNSS
receiver; the encoder builds the position reports.

GGA Sentence Format:
    $GPGGA,053204.02,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,*40
           |         |            | |             | | |  |   |      | |       | |   |
           |         |            | |             | | |  |   |      | |       | |   +-- Reference station ID (optional)
           |         |            | |             | | |  |   |      | |       | +-- Age of differential data (optional)
           |         |            | |             | | |  |   |      | +-------+-- Geoidal separation + unit
           |         |            | |             | | |  |   +------+-- Altitude above MSL + unit
           |         |            | |             | | |  +-- HDOP
           |         |            | |             | | +-- Number of satellites
           |         |            | |             | +-- Fix quality (0-8)
           |         |            | +-------------+-- Longitude + E/W
           |         +------------+-- Latitude + N/S
           +-- UTC time (hhmmss.sss)

The optional trailing fields are only read when the sentence is long enough:
the age needs at least 15 comma-separated fields and the station ID at
least 16 (counting the sentence type as the first field).
"""

import re
from datetime import datetime, time, timezone

from ntrip.geodesy import ecef_to_geodetic, geodetic_to_ecef
from ntrip.nmea.checksum import calculate_checksum, format_checksum, validate_checksum
from ntrip.nmea.fields import (
    dmm_to_decimal_degrees,
    format_number,
    latitude_to_dmm,
    longitude_to_dmm,
    parse_float_field,
    parse_int_field,
    parse_string_field,
)
from ntrip.nmea.types import DMMCoordinates, GGASentence, Location

# Sentence type through geoidal separation unit (indices 0-12)
_MINIMUM_FIELD_COUNT = 13
_AGE_FIELD_COUNT = 15
_STATION_FIELD_COUNT = 16

_UTC_TIME_PATTERN = re.compile(r"(\d{2})(\d{2})(\d{2})(?:\.(\d+))?")


def _extract_fields(sentence: str) -> list[str]:
    """Split the checksummed content of a sentence into its fields.

    Raises:
        ValueError: If the sentence has fewer than 13 fields.

    Example:
        Input: "$GPGGA,053204.02,3723.1018333,N,...*40"
        Output: ["GPGGA", "053204.02", "3723.1018333", "N", ...]
    """
    content = sentence[1 : sentence.index("*")]
    fields = content.split(",")

    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(f"GGA sentence has only {len(fields)} fields")

    return fields


def _parse_utc_time(value: str, today: datetime) -> datetime | None:
    """Place an ``hhmmss.sss`` time of day on the calendar day of ``today``."""
    if not value:
        return None

    match = _UTC_TIME_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(f"Not a UTC time: {value}")

    hours, minutes, seconds, fraction = match.groups()
    microseconds = round(float(f"0.{fraction}") * 1_000_000) if fraction else 0
    return datetime.combine(
        today.date(),
        time(int(hours), int(minutes), int(seconds), min(microseconds, 999_999)),
        tzinfo=timezone.utc,
    )


def _format_utc_time(timestamp: datetime | None) -> str:
    """Render a timestamp as ``hhmmss.mmm`` in UTC."""
    if timestamp is None:
        return ""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    milliseconds = timestamp.microsecond // 1000
    return f"{timestamp:%H%M%S}.{milliseconds:03d}"


def _build_location(fields: list[str]) -> Location | None:
    latitude = dmm_to_decimal_degrees(fields[2], fields[3])
    longitude = dmm_to_decimal_degrees(fields[4], fields[5])
    if latitude is None or longitude is None:
        return None

    return Location(
        ecef=geodetic_to_ecef(latitude, longitude),
        point={"type": "Point", "coordinates": [latitude, longitude]},
        dmm=DMMCoordinates(
            latitude=f"{fields[2]},{fields[3]}",
            longitude=f"{fields[4]},{fields[5]}",
        ),
    )


def _build_sentence(raw: str, fields: list[str]) -> GGASentence:
    """Construct a GGASentence from checksum-verified fields.

    Maps NMEA field indices to GGASentence attributes:
        fields[0]      -> sentence_type (talker + "GGA")
        fields[1]      -> timestamp (hhmmss.sss on today's UTC date)
        fields[2..5]   -> location (latitude, N/S, longitude, E/W)
        fields[6]      -> fix_quality
        fields[7]      -> satellites
        fields[8]      -> hdop
        fields[9..10]  -> altitude, altitude_unit
        fields[11..12] -> geoidal_separation, geoidal_separation_unit
        fields[13]     -> age_of_differential (15+ fields only)
        fields[14]     -> reference_station_id (16+ fields only)
    """
    age_of_differential = None
    if len(fields) >= _AGE_FIELD_COUNT:
        age_of_differential = parse_float_field(fields[13])

    reference_station_id = None
    if len(fields) >= _STATION_FIELD_COUNT:
        reference_station_id = parse_int_field(fields[14])

    return GGASentence(
        raw=raw,
        valid=True,
        sentence_type=fields[0],
        timestamp=_parse_utc_time(fields[1], datetime.now(timezone.utc)),
        location=_build_location(fields),
        # An empty quality field means no fix, the same as 0
        fix_quality=parse_int_field(fields[6]) or 0,
        satellites=parse_int_field(fields[7]),
        hdop=parse_float_field(fields[8]),
        altitude=parse_float_field(fields[9]),
        altitude_unit=parse_string_field(fields[10]),
        geoidal_separation=parse_float_field(fields[11]),
        geoidal_separation_unit=parse_string_field(fields[12]),
        age_of_differential=age_of_differential,
        reference_station_id=reference_station_id,
    )


def decode_gga(sentence: str) -> GGASentence:
    """Decode a GGA sentence.

    The checksum is verified first. A sentence with a bad checksum comes
    back with ``valid=False`` and nothing else populated, and so does a
    checksum-valid sentence whose fields cannot be parsed. Nothing is
    raised for bad input.

    Args:
        sentence: Raw NMEA GGA sentence; a trailing CRLF is ignored.

    Returns:
        The decoded sentence. ``raw`` always holds the input unchanged.

    Example:
        >>> gga = decode_gga("$GPGGA,053204.02,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,*40")
        >>> gga.location.point["coordinates"]
        [37.38503055..., -122.08995453...]
    """
    text = sentence.strip()

    if not validate_checksum(text):
        return GGASentence(raw=sentence, valid=False)

    try:
        return _build_sentence(sentence, _extract_fields(text))
    except (ValueError, IndexError):
        return GGASentence(raw=sentence, valid=False)


def encode_gga(sentence: GGASentence) -> str:
    """Encode a GGA sentence, appending a freshly computed checksum.

    Latitude and longitude are derived from ``sentence.location.ecef``;
    the decoded ``point`` and ``dmm`` forms are ignored, so updating the
    ECEF position is enough to move the reported fix. Missing units default
    to metres. The age of differential data is written when it is non-zero
    or a station ID follows it; the station ID is written when non-zero.

    Raises:
        ValueError: If the sentence has no location.
    """
    if sentence.location is None:
        raise ValueError("GGA sentence has no location to encode")

    latitude, longitude, _ = ecef_to_geodetic(*sentence.location.ecef)

    fields = [
        f"${sentence.sentence_type}",
        _format_utc_time(sentence.timestamp),
        *latitude_to_dmm(latitude),
        *longitude_to_dmm(longitude),
        format_number(sentence.fix_quality),
        f"{sentence.satellites:02d}" if sentence.satellites is not None else "",
        f"{sentence.hdop:.3f}" if sentence.hdop is not None else "",
        format_number(sentence.altitude),
        sentence.altitude_unit or "M",
        format_number(sentence.geoidal_separation),
        sentence.geoidal_separation_unit or "M",
    ]

    age = sentence.age_of_differential
    station = sentence.reference_station_id
    if age or station:
        fields.append(f"{age:.3f}" if age is not None else "")
    if station:
        fields.append(f"{station:04d}")

    body = ",".join(fields)
    return f"{body}*{format_checksum(calculate_checksum(body[1:]))}"
