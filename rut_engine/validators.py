"""
Pluggable RUT validators.

A validator is any object with a ``validate(rut)`` method that raises
InvalidRutError to reject a RUT. Completing without an exception is the
only way to accept: return values are ignored, so a validator returning
False still accepts. Sync entry points (ChainValidator, Rut.parse) raise
TypeError for async validators instead of dropping the coroutine.

Validators compose with ChainValidator (or AsyncChainValidator for
asyncio code), which runs them in insertion order and stops at the first
rejection. Put cheap checks (checksum) before expensive ones (registry
lookups) so malformed input never triggers I/O.
"""

import inspect
from typing import Any, Iterable, Iterator, List, Protocol, runtime_checkable

import structlog

from .checksum import compute_verifier
from .errors import InvalidRutError
from .rut import Rut

logger = structlog.get_logger(__name__)


def run_validator(validator, rut: Rut) -> None:
    """
    Run a sync validator, refusing coroutine-returning ones.

    An un-awaited coroutine would never raise, so the RUT would be
    accepted without being checked.

    Raises:
        TypeError: If validator.validate returned an awaitable
    """
    result = validator.validate(rut)
    if inspect.isawaitable(result):
        close = getattr(result, "close", None)
        if close is not None:
            close()
        raise TypeError(
            f"async validator {type(validator).__name__} used in a sync context; "
            "use AsyncChainValidator"
        )


@runtime_checkable
class Validator(Protocol):
    """Protocol for RUT validators."""

    def validate(self, rut: Rut) -> None:
        """Raise InvalidRutError if rut is not acceptable."""
        ...


class SimpleValidator:
    """Checks the verifier against the módulo 11 checksum."""

    def validate(self, rut: Rut) -> None:
        expected = compute_verifier(rut.correlative)
        if rut.verifier != expected:
            raise InvalidRutError(
                rut, f"verifier {rut.verifier} does not match checksum {expected}"
            )


ChecksumValidator = SimpleValidator


class ChainValidator:
    """
    Ordered, fail-fast composition of validators.

    Example:
        >>> chain = ChainValidator().append(SimpleValidator()).append(my_registry)
        >>> chain.validate(Rut.parse("12.345.678-5"))
    """

    def __init__(self, validators: Iterable[Validator] = ()):
        self._validators: List[Validator] = list(validators)

    def append(self, validator: Validator) -> "ChainValidator":
        """Add a validator at the end of the chain and return the chain."""
        self._validators.append(validator)
        return self

    def validate(self, rut: Rut) -> None:
        """
        Run every validator in order.

        Raises:
            InvalidRutError: The first rejection, unchanged
        """
        for position, validator in enumerate(self._validators):
            try:
                run_validator(validator, rut)
            except InvalidRutError as exc:
                logger.debug(
                    "RUT rejected by chain",
                    rut=str(rut),
                    validator=type(validator).__name__,
                    position=position,
                    reason=exc.reason,
                )
                raise

    def __len__(self) -> int:
        return len(self._validators)

    def __iter__(self) -> Iterator[Validator]:
        return iter(self._validators)


class AsyncChainValidator:
    """
    Fail-fast chain for asyncio code.

    Members may be sync validators or validators whose ``validate`` is a
    coroutine; each result is awaited before the next member starts.
    """

    def __init__(self, validators: Iterable[Any] = ()):
        self._validators: List[Any] = list(validators)

    def append(self, validator: Any) -> "AsyncChainValidator":
        """Add a validator at the end of the chain and return the chain."""
        self._validators.append(validator)
        return self

    async def validate(self, rut: Rut) -> None:
        """
        Run every validator in order, awaiting async ones.

        Raises:
            InvalidRutError: The first rejection, unchanged
        """
        for position, validator in enumerate(self._validators):
            try:
                result = validator.validate(rut)
                if inspect.isawaitable(result):
                    await result
            except InvalidRutError as exc:
                logger.debug(
                    "RUT rejected by async chain",
                    rut=str(rut),
                    validator=type(validator).__name__,
                    position=position,
                    reason=exc.reason,
                )
                raise

    def __len__(self) -> int:
        return len(self._validators)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._validators)
