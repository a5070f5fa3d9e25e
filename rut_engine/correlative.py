"""
Helpers that work from a bare correlative: verifier derivation and
synthetic RUT generation (fixtures, test data, demos).
"""

import random
from typing import Optional

from .checksum import compute_verifier
from .rut import Rut
from .settings import settings


def verifier_for(correlative: int) -> str:
    """Return the módulo 11 verifier for a correlative."""
    return compute_verifier(correlative)


def valid_rut_from_correlative(correlative: int) -> Rut:
    """
    Build a checksum-valid Rut from a correlative.

    Examples:
        >>> valid_rut_from_correlative(12345678)
        Rut(correlative=12345678, verifier='5')
    """
    return Rut.from_parts(correlative, verifier_for(correlative))


def generate_valid_rut(
    rng: Optional[random.Random] = None,
    low: Optional[int] = None,
    high: Optional[int] = None,
) -> Rut:
    """
    Generate a random checksum-valid Rut.

    Args:
        rng: Randomness source; pass a seeded random.Random for
            reproducible output
        low: Smallest correlative (defaults to settings)
        high: Largest correlative, inclusive (defaults to settings)

    Returns:
        Rut with a random correlative in [low, high]

    Raises:
        ValueError: If the range is empty or starts below 1
    """
    if low is None or high is None:
        config = settings()
        low = config.generator_min_correlative if low is None else low
        high = config.generator_max_correlative if high is None else high

    if low < 1:
        raise ValueError(f"low must be >= 1, got {low}")
    if low > high:
        raise ValueError(f"empty correlative range [{low}, {high}]")

    rng = rng or random.Random()
    return valid_rut_from_correlative(rng.randint(low, high))
