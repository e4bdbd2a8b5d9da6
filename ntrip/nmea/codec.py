"""Sentence-level NMEA decode/encode dispatch.

Decoding is staged: a cheap predicate decides whether the text looks like
a GGA sentence at all, and only then is the strict decoder run. Anything
else comes back as an invalid sentence rather than an error.
"""

from ntrip.nmea.gga import decode_gga, encode_gga
from ntrip.nmea.types import GGASentence

_SENTENCE_TYPE = "GGA"
_TALKER_ID_LENGTH = 2


def is_gga_sentence(text: str) -> bool:
    """Return True if ``text`` starts like a GGA sentence.

    Accepts "$GGA" and "$" followed by a two-letter talker ID and "GGA"
    ("$GPGGA", "$GNGGA", ...). Nothing after the sentence type is examined.

    Example:
        >>> is_gga_sentence("$GNGGA,123519.00,...")
        True
        >>> is_gga_sentence("$GNVTG,054.7,T,...")
        False
    """
    if not text.startswith("$"):
        return False

    head = text[1:]
    if head.startswith(_SENTENCE_TYPE):
        return True

    talker = head[:_TALKER_ID_LENGTH]
    return (
        len(talker) == _TALKER_ID_LENGTH
        and talker.isalpha()
        and talker.isupper()
        and head[_TALKER_ID_LENGTH:].startswith(_SENTENCE_TYPE)
    )


def decode(text: str) -> GGASentence:
    """Decode an NMEA sentence.

    Returns:
        The decoded sentence for GGA input; for any other sentence type an
        invalid ``GGASentence`` holding only the raw text.
    """
    if not is_gga_sentence(text):
        return GGASentence(raw=text, valid=False)
    return decode_gga(text)


def encode(sentence: GGASentence) -> str:
    """Encode a sentence to NMEA text.

    Returns:
        The sentence with its checksum, or ``""`` when the sentence type is
        not one this codec can encode (anything not ending in "GGA").
    """
    if not sentence.sentence_type or not sentence.sentence_type.endswith(_SENTENCE_TYPE):
        return ""
    return encode_gga(sentence)
