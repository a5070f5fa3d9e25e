"""
String layouts for RUT values.
"""

from enum import Enum
from typing import List


class RutFormat(str, Enum):
    """Output layouts supported by format_rut()."""

    CLEAR = "clear"         # 342442234
    READABLE = "readable"   # 34.244.223-4
    HYPHENED = "hyphened"   # 34244223-4
    HIDDEN = "hidden"       # 34.***.***-4


def _group_thousands(body: str) -> List[str]:
    """Split a digit string into groups of 3 counted from the right."""
    head = len(body) % 3 or 3
    groups = [body[:head]]
    groups.extend(body[i:i + 3] for i in range(head, len(body), 3))
    return groups


def format_rut(rut, mode: RutFormat = RutFormat.READABLE) -> str:
    """
    Render a RUT in the requested layout.

    Formatting never validates: a well-formed RUT with a wrong verifier
    is rendered with the verifier it carries.

    Args:
        rut: Object exposing ``correlative`` and ``verifier``
        mode: A RutFormat member or its string value

    Returns:
        Formatted RUT string

    Raises:
        ValueError: If mode is not a known format

    Examples:
        >>> from rut_engine.rut import Rut
        >>> format_rut(Rut.from_parts(34244223, "4"), RutFormat.HIDDEN)
        '34.***.***-4'
    """
    mode = RutFormat(mode)
    body = str(rut.correlative)
    verifier = rut.verifier

    if mode is RutFormat.CLEAR:
        return f"{body}{verifier}"

    if mode is RutFormat.HYPHENED:
        return f"{body}-{verifier}"

    groups = _group_thousands(body)
    if mode is RutFormat.HIDDEN:
        groups = [groups[0]] + ["*" * len(group) for group in groups[1:]]

    return f"{'.'.join(groups)}-{verifier}"
