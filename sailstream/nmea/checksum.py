"""NMEA checksum validation.

NMEA 0183 sentences use a simple XOR checksum for data integrity verification.
The checksum is calculated over all characters between the start delimiter
('$' for parametric sentences, '!' for encapsulated ones) and '*' (exclusive),
then represented as a two-digit hexadecimal number after the '*'.

Example sentence structure:
    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47
    ^                         checksum content                     ^^
    start                                                checksum (0x47 = 71)
"""

import string

START_DELIMITERS = ("$", "!")


def _extract_checksum_parts(sentence: str) -> tuple[str, str] | None:
    """Extract the payload content and provided checksum from an NMEA sentence.

    NMEA sentences follow the format: $<content>*<checksum>
    This function separates these components for validation.

    Args:
        sentence: Raw NMEA sentence string (e.g., "$GPGGA,...*47")

    Returns:
        A tuple of (content, checksum_hex) if the sentence has valid structure,
        or None if:
        - Missing '$' or '!' start delimiter
        - Missing '*' checksum delimiter
        - Checksum is not exactly 2 characters (truncated sentence)

    Example:
        >>> _extract_checksum_parts("$GPGGA,123519*47")
        ('GPGGA,123519', '47')
    """
    if not sentence.startswith(START_DELIMITERS) or "*" not in sentence:
        return None

    end = sentence.index("*")
    content = sentence[1:end]
    provided = sentence[end + 1 : end + 3]

    if len(provided) != 2 or len(sentence) > end + 3:
        return None

    if not all(character in string.hexdigits for character in provided):
        return None

    return content, provided


def _calculate_xor_checksum(content: str) -> int:
    """Calculate the XOR checksum of a content string.

    Args:
        content: The string between the start delimiter and '*' (exclusive)

    Returns:
        Integer checksum value (0-255)
    """
    result = 0
    for character in content:
        result ^= ord(character)
    return result


def compute_checksum(sentence: str) -> str:
    """Return the expected checksum of a sentence as two uppercase hex digits.

    Accepts the sentence with or without its start delimiter and with or
    without an existing '*hh' suffix; only the payload is hashed.

    Example:
        >>> compute_checksum("$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,")
        '47'
    """
    sentence = sentence.strip()
    if sentence.startswith(START_DELIMITERS):
        sentence = sentence[1:]
    content = sentence.split("*", 1)[0]
    return f"{_calculate_xor_checksum(content):02X}"


def validate_checksum(sentence: str) -> bool:
    """Validate the checksum of an NMEA sentence.

    Performs end-to-end validation by:
    1. Extracting the content between the start delimiter and '*'
    2. Computing the XOR of all content bytes
    3. Comparing against the provided 2-digit hex checksum

    Args:
        sentence: Complete NMEA sentence including '$' (or '!'), '*', and
                  checksum. May include trailing whitespace/newlines (will be
                  stripped).

    Returns:
        True if the checksum is valid, False if:
        - Sentence is malformed (missing delimiters)
        - Checksum is truncated or non-hexadecimal
        - Calculated checksum doesn't match provided checksum

    Example:
        >>> validate_checksum("$GPGGA,123519,...*47")
        True
        >>> validate_checksum("$GPGGA,123519,...*FF")  # wrong checksum
        False
    """
    sentence = sentence.strip()

    parts = _extract_checksum_parts(sentence)
    if parts is None:
        return False

    content, provided = parts

    try:
        calculated = _calculate_xor_checksum(content)
        return calculated == int(provided, 16)
    except ValueError:
        return False
