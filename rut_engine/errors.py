"""
Exception hierarchy for RUT parsing and validation.
"""

from typing import Any


class RutError(Exception):
    """Base exception for rut_engine errors."""
    pass


class MalformedRutError(RutError, ValueError):
    """Raw input cannot be normalized into a (correlative, verifier) pair."""

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.raw = raw


class InvalidRutError(RutError, ValueError):
    """
    A well-formed RUT was rejected by a validator.

    Attributes:
        rut: The rejected Rut instance
        reason: Human-readable rejection reason
    """

    def __init__(self, rut, reason: str):
        super().__init__(f"{rut}: {reason}")
        self.rut = rut
        self.reason = reason


class RegistryUnavailableError(RutError):
    """The registry lookup could not be completed (transport or payload error)."""
    pass
