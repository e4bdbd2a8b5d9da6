"""NMEA 0183 GGA codec."""

from ntrip.nmea.checksum import calculate_checksum, format_checksum, validate_checksum
from ntrip.nmea.codec import decode, encode, is_gga_sentence
from ntrip.nmea.gga import decode_gga, encode_gga
from ntrip.nmea.types import DMMCoordinates, GGASentence, Location

__all__ = [
    "DMMCoordinates",
    "GGASentence",
    "Location",
    "calculate_checksum",
    "decode",
    "decode_gga",
    "encode",
    "encode_gga",
    "format_checksum",
    "is_gga_sentence",
    "validate_checksum",
]
