"""
Registry-backed RUT validators.

Asks an external registry API whether a RUT belongs to a registered
person or company:

    GET {base_url}/ruts/{correlative}-{verifier}

- 200: accepted, unless the JSON body says {"valid": false, "reason": ...}
- 404: rejected (unknown RUT)
- anything else, exhausted retries or a bad payload:
  RegistryUnavailableError. A failed lookup never counts as acceptance.

These validators do network I/O; chain them after SimpleValidator so
malformed RUTs are rejected before any request is made.
"""

import asyncio
import time
from typing import Dict, Optional

import httpx
import structlog

from .client import (
    HTTPClient,
    RetryableHTTPError,
    calculate_backoff_delay,
    is_retryable,
)
from .errors import InvalidRutError, RegistryUnavailableError
from .formatter import RutFormat, format_rut
from .log_config import log_registry_lookup
from .rut import Rut
from .settings import settings

logger = structlog.get_logger(__name__)

NOT_FOUND_REASON = "not found in registry"
DEFAULT_REJECT_REASON = "rejected by registry"


def _resolve_base_url(base_url: Optional[str]) -> str:
    base_url = base_url or settings().registry_base_url
    if not base_url:
        raise ValueError("registry base URL is not configured (set REGISTRY_BASE_URL)")
    return base_url.rstrip("/")


def _lookup_url(base_url: str, rut: Rut) -> str:
    return f"{base_url}/ruts/{format_rut(rut, RutFormat.HYPHENED)}"


def interpret_response(rut: Rut, response: httpx.Response) -> None:
    """
    Turn a registry response into accept (return) or reject (raise).

    Raises:
        InvalidRutError: The registry rejected the RUT
        RegistryUnavailableError: The response is not a usable answer
    """
    if response.status_code == 404:
        raise InvalidRutError(rut, NOT_FOUND_REASON)

    if response.status_code != 200:
        raise RegistryUnavailableError(
            f"Unexpected registry status {response.status_code} for {rut}"
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise RegistryUnavailableError(f"Invalid JSON from registry for {rut}") from exc

    if not isinstance(body, dict):
        raise RegistryUnavailableError(f"Unexpected registry payload for {rut}")

    valid = body.get("valid", True)
    if not isinstance(valid, bool):
        raise RegistryUnavailableError(
            f"Unexpected registry payload for {rut}: valid={valid!r}"
        )

    if valid is False:
        raise InvalidRutError(rut, body.get("reason") or DEFAULT_REJECT_REASON)


class RegistryValidator:
    """
    Validator that looks RUTs up in the registry API (blocking).

    Args:
        base_url: Registry base URL (defaults to settings.registry_base_url)
        client: HTTPClient to use; one is built from settings when omitted
        headers: Request headers (defaults to settings.get_registry_headers())
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[HTTPClient] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        config = settings()
        self.base_url = _resolve_base_url(base_url)
        self.headers = headers if headers is not None else config.get_registry_headers()
        self._client = client or HTTPClient(
            max_retries=config.registry_max_retries,
            timeout=config.registry_timeout,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying HTTP client."""
        self._client.close()

    def validate(self, rut: Rut) -> None:
        url = _lookup_url(self.base_url, rut)
        start = time.monotonic()

        try:
            response = self._client.get(url, headers=self.headers)
        except (RetryableHTTPError, httpx.HTTPError, httpx.InvalidURL) as exc:
            log_registry_lookup(
                logger, str(rut), url,
                duration_ms=(time.monotonic() - start) * 1000,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise RegistryUnavailableError(f"Registry lookup failed for {rut}: {exc}") from exc

        log_registry_lookup(
            logger, str(rut), url,
            status_code=response.status_code,
            duration_ms=(time.monotonic() - start) * 1000,
        )
        interpret_response(rut, response)


class AsyncRegistryValidator:
    """
    Validator that looks RUTs up in the registry API (asyncio).

    Same answers as RegistryValidator; use it inside AsyncChainValidator.

    Args:
        base_url: Registry base URL (defaults to settings.registry_base_url)
        client: httpx.AsyncClient to use; one is built from settings when omitted
        headers: Request headers (defaults to settings.get_registry_headers())
        max_retries: Retry attempts for transient failures
        base_delay: Base delay for exponential backoff (seconds)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
        max_retries: Optional[int] = None,
        base_delay: float = 0.5,
    ):
        config = settings()
        self.base_url = _resolve_base_url(base_url)
        self.headers = headers if headers is not None else config.get_registry_headers()
        self.max_retries = max(0, config.registry_max_retries if max_retries is None else max_retries)
        self.base_delay = base_delay
        self._client = client or httpx.AsyncClient(timeout=config.registry_timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _get(self, url: str) -> httpx.Response:
        for attempt in range(self.max_retries + 1):
            last_attempt = attempt == self.max_retries
            try:
                response = await self._client.get(url, headers=self.headers)
            except httpx.HTTPError as exc:
                if not is_retryable(exception=exc) or last_attempt:
                    raise
                reason = str(exc)
            else:
                if not is_retryable(response=response):
                    return response
                if last_attempt:
                    raise RetryableHTTPError(f"Max retries exceeded: HTTP {response.status_code}")
                reason = f"HTTP {response.status_code}"

            delay = calculate_backoff_delay(attempt, self.base_delay)
            logger.warning(
                "Registry request failed, retrying",
                url=url,
                reason=reason,
                attempt=attempt + 1,
                retry_after=round(delay, 3)
            )
            await asyncio.sleep(delay)

    async def validate(self, rut: Rut) -> None:
        url = _lookup_url(self.base_url, rut)
        start = time.monotonic()

        try:
            response = await self._get(url)
        except (RetryableHTTPError, httpx.HTTPError, httpx.InvalidURL) as exc:
            log_registry_lookup(
                logger, str(rut), url,
                duration_ms=(time.monotonic() - start) * 1000,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise RegistryUnavailableError(f"Registry lookup failed for {rut}: {exc}") from exc

        log_registry_lookup(
            logger, str(rut), url,
            status_code=response.status_code,
            duration_ms=(time.monotonic() - start) * 1000,
        )
        interpret_response(rut, response)
