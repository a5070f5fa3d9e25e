"""
Command line interface for rut_engine.

Examples:
    python -m rut_engine check 12.345.678-5 11111111-2
    python -m rut_engine format 123456785 --mode hidden
    python -m rut_engine verifier 12345678
    python -m rut_engine generate --count 5 --seed 42
"""

import argparse
import random
import sys
import time
from typing import List, Optional

from . import __version__
from .correlative import generate_valid_rut, verifier_for
from .errors import InvalidRutError, MalformedRutError, RegistryUnavailableError
from .formatter import RutFormat
from .log_config import configure_logging, get_logger, log_validation_batch
from .rut import Rut
from .settings import settings
from .validators import ChainValidator, SimpleValidator

logger = get_logger(__name__)

FORMAT_CHOICES = [mode.value for mode in RutFormat]


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_validator(use_registry: bool = False) -> ChainValidator:
    """Checksum validation, followed by a registry lookup when requested."""
    chain = ChainValidator().append(SimpleValidator())
    if use_registry:
        from .registry import RegistryValidator
        chain.append(RegistryValidator())
    return chain


def check_ruts(raw_ruts: List[str], validator) -> int:
    """
    Parse and validate each RUT, printing one result line per input.

    Returns:
        Number of RUTs that were malformed or rejected
    """
    valid = 0
    invalid = 0
    start = time.monotonic()

    for raw in raw_ruts:
        try:
            rut = Rut.parse(raw, validator=validator)
        except (MalformedRutError, InvalidRutError) as e:
            reason = e.reason if isinstance(e, InvalidRutError) else str(e)
            print(f"{raw}\tINVALID: {reason}")
            invalid += 1
        else:
            print(f"{rut}\tOK")
            valid += 1

    log_validation_batch(
        logger,
        items_valid=valid,
        items_invalid=invalid,
        duration_ms=(time.monotonic() - start) * 1000,
    )
    return invalid


def cmd_check(args) -> int:
    validator = build_validator(args.registry)
    try:
        invalid = check_ruts(args.ruts, validator)
    finally:
        for member in validator:
            close = getattr(member, "close", None)
            if close is not None:
                close()
    return 1 if invalid else 0


def cmd_format(args) -> int:
    try:
        rut = Rut.parse(args.rut)
    except MalformedRutError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(rut.format(args.mode or settings().default_format))
    return 0


def cmd_verifier(args) -> int:
    print(verifier_for(args.correlative))
    return 0


def cmd_generate(args) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None
    mode = args.mode or settings().default_format
    for _ in range(args.count):
        print(generate_valid_rut(rng).format(mode))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="rut-engine",
        description="Parse, validate, format and generate Chilean RUTs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rut-engine check 12.345.678-5 11111111-2
  rut-engine check 12.345.678-5 --registry
  rut-engine check -- 12.345.678-5 ----    (inputs starting with "-")
  rut-engine format 123456785 --mode hidden
  rut-engine verifier 12345678
  rut-engine generate --count 5 --seed 42
        """
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Override log format from configuration"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"rut-engine {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate one or more RUTs")
    check.add_argument("ruts", nargs="+", metavar="RUT")
    check.add_argument(
        "--registry",
        action="store_true",
        help="Also look each RUT up in the registry (REGISTRY_BASE_URL)"
    )
    check.set_defaults(func=cmd_check)

    fmt = subparsers.add_parser("format", help="Format a RUT (no validation)")
    fmt.add_argument("rut", metavar="RUT")
    fmt.add_argument("--mode", choices=FORMAT_CHOICES, help="Output layout")
    fmt.set_defaults(func=cmd_format)

    verifier = subparsers.add_parser("verifier", help="Compute the verifier for a correlative")
    verifier.add_argument("correlative", type=positive_int)
    verifier.set_defaults(func=cmd_verifier)

    generate = subparsers.add_parser("generate", help="Generate random valid RUTs")
    generate.add_argument("--count", type=positive_int, default=1)
    generate.add_argument("--seed", type=int, help="Seed for reproducible output")
    generate.add_argument("--mode", choices=FORMAT_CHOICES, help="Output layout")
    generate.set_defaults(func=cmd_generate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for invalid input or failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, args.log_format)

    try:
        return args.func(args)
    except RegistryUnavailableError as e:
        logger.error("Registry unavailable", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Misconfiguration, e.g. --registry without REGISTRY_BASE_URL
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1


def cli_main():
    """Synchronous entry point for console scripts."""
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
