"""
Módulo 11 check digit computation for Chilean RUTs.

The algorithm:
1. Multiply each digit (from right to left) by sequence 2,3,4,5,6,7,2,3,4...
2. Sum all products
3. Calculate 11 - (sum % 11)
4. If result is 11, DV is 0; if 10, DV is K; otherwise DV is the result
"""

VERIFIER_SYMBOLS = frozenset("0123456789K")

WEIGHTS = (2, 3, 4, 5, 6, 7)


def compute_verifier(correlative: int) -> str:
    """
    Compute the verifier character for a correlative.

    Args:
        correlative: Positive integer body of the RUT

    Returns:
        Verifier character, '0'-'9' or 'K'

    Raises:
        ValueError: If correlative is not a positive integer

    Examples:
        >>> compute_verifier(12345678)
        '5'
        >>> compute_verifier(1000005)
        'K'
        >>> compute_verifier(1000013)
        '0'
    """
    if isinstance(correlative, bool) or not isinstance(correlative, int):
        raise ValueError(f"correlative must be an integer, got {type(correlative).__name__}")
    if correlative < 1:
        raise ValueError(f"correlative must be positive, got {correlative}")

    total = 0
    for position, digit in enumerate(reversed(str(correlative))):
        total += int(digit) * WEIGHTS[position % len(WEIGHTS)]

    remainder = 11 - (total % 11)

    if remainder == 11:
        return "0"
    if remainder == 10:
        return "K"
    return str(remainder)
