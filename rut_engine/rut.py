"""
The Rut value object.

A Rut is an immutable (correlative, verifier) pair. Construction only
guarantees it is well formed; whether the verifier matches the módulo 11
checksum is checked on demand or by passing a validator to Rut.parse().
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .checksum import VERIFIER_SYMBOLS, compute_verifier
from .errors import MalformedRutError
from .formatter import RutFormat, format_rut
from .normalizer import split_rut

if TYPE_CHECKING:
    from .validators import Validator


@dataclass(frozen=True)
class Rut:
    """Chilean RUT: numeric correlative plus a checksum verifier."""

    correlative: int
    verifier: str

    def __post_init__(self):
        if isinstance(self.correlative, bool) or not isinstance(self.correlative, int):
            raise MalformedRutError(
                f"correlative must be an integer, got {type(self.correlative).__name__}",
                raw=self.correlative,
            )
        if self.correlative < 1:
            raise MalformedRutError(
                f"correlative must be positive, got {self.correlative}",
                raw=self.correlative,
            )

        verifier = self.verifier.upper() if isinstance(self.verifier, str) else self.verifier
        if verifier not in VERIFIER_SYMBOLS:
            raise MalformedRutError(f"Invalid verifier {self.verifier!r}", raw=self.verifier)
        # frozen: canonicalise 'k' -> 'K'
        object.__setattr__(self, "verifier", verifier)

    @classmethod
    def parse(cls, raw: str, validator: Optional["Validator"] = None) -> "Rut":
        """
        Build a Rut from any textual representation.

        Args:
            raw: RUT string ("12.345.678-5", "12345678-5", "123456785", ...)
            validator: Optional validator run right after construction

        Returns:
            The parsed Rut (checked by validator when one is given)

        Raises:
            MalformedRutError: If raw cannot be normalized
            InvalidRutError: If the validator rejects the parsed Rut

        Examples:
            >>> Rut.parse(" 12.345.678-k ")
            Rut(correlative=12345678, verifier='K')
        """
        correlative, verifier = split_rut(raw)
        rut = cls(correlative, verifier)

        if validator is not None:
            from .validators import run_validator
            run_validator(validator, rut)

        return rut

    @classmethod
    def from_parts(cls, correlative: int, verifier: str) -> "Rut":
        """Build a Rut from components without normalization or checksum validation."""
        return cls(correlative, verifier)

    def is_checksum_valid(self) -> bool:
        """Return True if the verifier matches the módulo 11 checksum."""
        return compute_verifier(self.correlative) == self.verifier

    def format(self, mode: RutFormat = RutFormat.READABLE) -> str:
        """Render this Rut with format_rut()."""
        return format_rut(self, mode)

    def __str__(self) -> str:
        return format_rut(self, RutFormat.READABLE)
