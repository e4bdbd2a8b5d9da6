"""NMEA field parsing and formatting utilities.

NMEA fields are comma-separated and may be empty (consecutive commas mean
missing data). The parsers here return None for an empty field so callers
can tell "no data" from "zero value". A field that is present but malformed
raises ``ValueError``; the sentence decoders turn that into an invalid
result instead of letting it escape.
"""

import re

# Degrees (2-3 digits), then 2-digit minutes with a fractional part, then
# the hemisphere letter, e.g. "3723.1018333,N" or "12205.3972723,W".
_DMM_PATTERN = re.compile(r"(\d{2,3})(\d{2}\.\d+),([NSEW])")

# Decimal places used for the minutes part when encoding
_MINUTES_PRECISION = 6


def parse_float_field(value: str) -> float | None:
    """Parse a string field to float, returning None if empty.

    Example:
        >>> parse_float_field("39.662")
        39.662
        >>> parse_float_field("")  # empty field
        None
    """
    if not value:
        return None
    return float(value)


def parse_int_field(value: str) -> int | None:
    """Parse a string field to int, returning None if empty.

    Example:
        >>> parse_int_field("08")
        8
        >>> parse_int_field("")
        None
    """
    if not value:
        return None
    return int(value)


def parse_string_field(value: str) -> str | None:
    """Return the field unchanged, or None if it is empty."""
    if not value:
        return None
    return value


def dmm_to_decimal_degrees(value: str, hemisphere: str) -> float | None:
    """Convert an NMEA degrees-decimal-minutes coordinate to decimal degrees.

    The conversion formula is:
        decimal_degrees = degrees + (minutes / 60)

    North and east are positive; south and west are negative.

    Args:
        value: Coordinate in DDMM.MMMM or DDDMM.MMMM format
        hemisphere: Hemisphere indicator ("N", "S", "E", or "W")

    Returns:
        Decimal degrees, or None if either field is empty

    Raises:
        ValueError: If the fields do not form a DMM coordinate.

    Example:
        >>> dmm_to_decimal_degrees("3723.1018333", "N")
        37.38503055...
        >>> dmm_to_decimal_degrees("12205.3972723", "W")
        -122.08995453...
    """
    if not value or not hemisphere:
        return None

    match = _DMM_PATTERN.search(f"{value},{hemisphere}")
    if match is None:
        raise ValueError(f"Not a DMM coordinate: {value},{hemisphere}")

    degrees, minutes, sign = match.groups()
    decimal_degrees = float(degrees) + float(minutes) / 60.0

    if sign in ("S", "W"):
        return -decimal_degrees

    return decimal_degrees


def _decimal_to_dmm(value: float, degree_width: int) -> str:
    """Format the magnitude of ``value`` as zero-padded DMM text."""
    magnitude = abs(value)
    degrees = int(magnitude)
    minutes = round((magnitude - degrees) * 60.0, _MINUTES_PRECISION)
    # Rounding can carry the minutes up to a full degree
    if minutes >= 60.0:
        degrees += 1
        minutes -= 60.0
    width = 3 + _MINUTES_PRECISION
    return f"{degrees:0{degree_width}d}{minutes:0{width}.{_MINUTES_PRECISION}f}"


def latitude_to_dmm(latitude: float) -> tuple[str, str]:
    """Encode a decimal latitude as (DDMM.MMMMMM, N|S).

    Example:
        >>> latitude_to_dmm(-33.5)
        ('3330.000000', 'S')
    """
    return _decimal_to_dmm(latitude, 2), "S" if latitude < 0 else "N"


def longitude_to_dmm(longitude: float) -> tuple[str, str]:
    """Encode a decimal longitude as (DDDMM.MMMMMM, E|W).

    Example:
        >>> longitude_to_dmm(-122.0899545)
        ('12205.397270', 'W')
    """
    return _decimal_to_dmm(longitude, 3), "W" if longitude < 0 else "E"


def format_number(value: float | int | None) -> str:
    """Render an optional number as an NMEA field; None becomes empty."""
    if value is None:
        return ""
    return str(value)
