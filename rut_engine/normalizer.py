"""
RUT input normalization.

Turns any textual representation ("12.345.678-5", "12345678-5",
" 12345678k ", "123456785") into its correlative and verifier parts.
"""

import re
from typing import Tuple

from .checksum import VERIFIER_SYMBOLS
from .errors import MalformedRutError

_DIGITS = re.compile(r"[0-9]+")


def clean_rut(raw: str) -> str:
    """
    Strip every non-alphanumeric character and uppercase the rest.

    Examples:
        >>> clean_rut(" 12.345.678-k ")
        '12345678K'
    """
    if not isinstance(raw, str):
        raise MalformedRutError(
            f"RUT must be a string, got {type(raw).__name__}", raw=raw
        )

    return "".join(ch for ch in raw if ch.isalnum()).upper()


def split_rut(raw: str) -> Tuple[int, str]:
    """
    Split a raw RUT string into (correlative, verifier).

    The last alphanumeric character is the verifier, everything before it
    is the correlative.

    Args:
        raw: RUT string in any format (with/without dots, hyphens, spaces)

    Returns:
        Tuple of (correlative, verifier)

    Raises:
        MalformedRutError: If the input can't be split into a numeric
            correlative and a legal verifier

    Examples:
        >>> split_rut("12.345.678-5")
        (12345678, '5')
        >>> split_rut("1000005k")
        (1000005, 'K')
    """
    cleaned = clean_rut(raw)

    if len(cleaned) < 2:
        raise MalformedRutError(f"RUT too short: {raw!r}", raw=raw)

    body, verifier = cleaned[:-1], cleaned[-1]

    if not _DIGITS.fullmatch(body):
        raise MalformedRutError(f"RUT body is not numeric: {raw!r}", raw=raw)

    if verifier not in VERIFIER_SYMBOLS:
        raise MalformedRutError(f"Invalid verifier {verifier!r} in {raw!r}", raw=raw)

    correlative = int(body)
    if correlative < 1:
        raise MalformedRutError(f"RUT correlative must be positive: {raw!r}", raw=raw)

    return correlative, verifier
