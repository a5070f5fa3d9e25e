"""
rut_engine

Chilean RUT (Rol Único Tributario) value engine:
- Parsing of any textual representation into a Rut value
- Módulo 11 verifier computation and validation
- Chainable, pluggable validators (checksum, registry lookup, custom)
- Canonical formatting (clear, readable, hyphened, hidden)
- Synthetic valid RUT generation
"""

__version__ = "0.1.0"

from .checksum import compute_verifier
from .correlative import generate_valid_rut, valid_rut_from_correlative, verifier_for
from .errors import InvalidRutError, MalformedRutError, RegistryUnavailableError, RutError
from .formatter import RutFormat, format_rut
from .normalizer import clean_rut, split_rut
from .rut import Rut
from .validators import (
    AsyncChainValidator,
    ChainValidator,
    ChecksumValidator,
    SimpleValidator,
    Validator,
)

__all__ = [
    "__version__",
    "AsyncChainValidator",
    "ChainValidator",
    "ChecksumValidator",
    "InvalidRutError",
    "MalformedRutError",
    "RegistryUnavailableError",
    "Rut",
    "RutError",
    "RutFormat",
    "SimpleValidator",
    "Validator",
    "clean_rut",
    "compute_verifier",
    "format_rut",
    "generate_valid_rut",
    "split_rut",
    "valid_rut_from_correlative",
    "verifier_for",
]
