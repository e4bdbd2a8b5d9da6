"""NMEA checksum computation and validation.

NMEA 0183 sentences carry a simple XOR checksum for integrity checking.
It is computed over every character strictly between '$' and '*' and is
written after the '*' as two uppercase hexadecimal digits.

Example sentence structure:
    $GPGGA,053204.02,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,*40
    ^                            checksum content                                   ^^
    start                                                               checksum (0x40)
"""


def _extract_checksum_parts(sentence: str) -> tuple[str, str] | None:
    """Split an NMEA sentence into its checksummed content and checksum digits.

    Args:
        sentence: Raw NMEA sentence string (e.g., "$GPGGA,...*40")

    Returns:
        A tuple of (content, checksum_hex), or None if the '$' or '*'
        delimiter is missing or fewer than 2 checksum digits follow '*'.

    Example:
        >>> _extract_checksum_parts("$GPGGA,053204.02*7B")
        ('GPGGA,053204.02', '7B')
    """
    if not sentence.startswith("$") or "*" not in sentence:
        return None

    end = sentence.index("*")
    content = sentence[1:end]
    provided = sentence[end + 1 : end + 3]

    if len(provided) != 2:
        return None

    return content, provided


def calculate_checksum(content: str) -> int:
    """XOR the character codes of ``content``.

    Args:
        content: The text between '$' and '*' (exclusive)

    Returns:
        Integer checksum value (0-255)
    """
    result = 0
    for character in content:
        result ^= ord(character)
    return result


def format_checksum(checksum: int) -> str:
    """Render a checksum as the two uppercase hex digits NMEA expects.

    Only the low byte is kept, so the result is always two characters long.

    Example:
        >>> format_checksum(0x0A)
        '0A'
    """
    return f"{checksum & 0xFF:02X}"


def validate_checksum(sentence: str) -> bool:
    """Validate the checksum of an NMEA sentence.

    Args:
        sentence: Complete NMEA sentence including '$', '*', and checksum.
                  Trailing whitespace and CRLF are ignored.

    Returns:
        True if the checksum is valid, False if:
        - Sentence is malformed (missing delimiters)
        - Checksum is truncated or non-hexadecimal
        - Calculated checksum doesn't match provided checksum
    """
    parts = _extract_checksum_parts(sentence.strip())
    if parts is None:
        return False

    content, provided = parts

    try:
        return calculate_checksum(content) == int(provided, 16)
    except ValueError:
        return False
