"""
Structured logging configuration using structlog.

Provides JSON logging with ISO timestamps and stdlib compatibility.
Library modules only call structlog.get_logger(); configure_logging()
is invoked by the CLI entry point.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.typing import FilteringBoundLogger

from .settings import settings


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog with JSON output and stdlib compatibility.

    Args:
        log_level: Override log level from settings
        log_format: Override log format from settings
    """
    config = settings()
    level = (log_level or config.log_level).upper()
    format_type = (log_format or config.log_format).lower()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
    )

    def add_service_metadata(_, __, event_dict):
        event_dict.setdefault("service", config.service_name)
        event_dict.setdefault("environment", config.environment)
        return event_dict

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service_metadata,
    ]

    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> FilteringBoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_registry_lookup(
    logger: FilteringBoundLogger,
    rut: str,
    url: str,
    status_code: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **extra_context
) -> None:
    """
    Log a registry lookup with structured information.

    Args:
        logger: Logger instance
        rut: RUT being looked up (formatted)
        url: Request URL
        status_code: Response status code
        duration_ms: Request duration in milliseconds
        **extra_context: Additional context to include
    """
    context = {
        "rut": rut,
        "url": url,
        **extra_context
    }

    if status_code is not None:
        context["status_code"] = status_code

    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 2)

    # 404 is an answer (unknown RUT), not a failure
    if status_code is None or status_code >= 500:
        logger.error("Registry lookup failed", **context)
    elif status_code >= 400 and status_code != 404:
        logger.warning("Registry lookup client error", **context)
    else:
        logger.info("Registry lookup completed", **context)


def log_validation_batch(
    logger: FilteringBoundLogger,
    items_valid: int,
    items_invalid: int = 0,
    duration_ms: Optional[float] = None,
    **extra_context
) -> None:
    """
    Log the outcome of validating a batch of RUTs.

    Args:
        logger: Logger instance
        items_valid: Number of RUTs accepted
        items_invalid: Number of RUTs malformed or rejected
        duration_ms: Processing duration in milliseconds
        **extra_context: Additional context to include
    """
    total = items_valid + items_invalid
    context = {
        "items_valid": items_valid,
        "items_invalid": items_invalid,
        "valid_rate": round(items_valid / total * 100, 2) if total > 0 else 0,
        **extra_context
    }

    if duration_ms is not None:
        context["duration_ms"] = round(duration_ms, 2)

    if items_invalid > 0:
        logger.warning("RUT batch validated with rejections", **context)
    else:
        logger.info("RUT batch validated successfully", **context)
