"""
HTTPX client with retries and exponential backoff + jitter.

Used by the registry validators. Handles transient errors (5xx, timeouts)
with a configurable retry strategy.
"""

import random
import time
from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

# Retryable status codes (5xx server errors)
RETRYABLE_STATUS_CODES = {500, 502, 503, 504}

# Retryable exceptions (connection and timeout errors)
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectTimeout,
    httpx.ConnectError,
    httpx.ReadTimeout,
)


class RetryableHTTPError(Exception):
    """Raised when max retries are exceeded."""
    pass


def calculate_backoff_delay(attempt: int, base_delay: float = 0.5, max_delay: float = 30.0) -> float:
    """
    Calculate exponential backoff delay with jitter.

    Args:
        attempt: Current retry attempt (0-based)
        base_delay: Base delay in seconds
        max_delay: Maximum delay in seconds

    Returns:
        Delay in seconds with up to 20% jitter applied
    """
    delay = min(base_delay * (2 ** attempt), max_delay)
    return delay + random.uniform(0, 0.2 * delay)


def is_retryable(response: Optional[httpx.Response] = None,
                 exception: Optional[Exception] = None) -> bool:
    """Check if a response or exception warrants another attempt."""
    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)

    if response is not None:
        return response.status_code in RETRYABLE_STATUS_CODES

    return False


class HTTPClient:
    """
    Synchronous HTTP client with automatic retries and exponential backoff.

    Retries 5xx responses and connection/timeout errors; any other
    response is returned to the caller as is.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 30.0,
        timeout: float = 10.0,
        **client_kwargs
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        client_kwargs.setdefault("timeout", timeout)
        self._client = httpx.Client(**client_kwargs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying HTTP client."""
        self._client.close()

    def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request, retrying transient failures.

        Raises:
            RetryableHTTPError: When max retries are exceeded
            httpx.HTTPError: For non-retryable transport errors
        """
        last_exception = None
        last_response = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self._client.request(method, url, **kwargs)
            except Exception as exc:
                if not is_retryable(exception=exc):
                    logger.error(
                        "HTTP request failed with non-retryable exception",
                        method=method,
                        url=url,
                        exception=str(exc)
                    )
                    raise
                last_exception, last_response = exc, None
            else:
                if not is_retryable(response=response):
                    return response
                last_exception, last_response = None, response

            if attempt < self.max_retries:
                delay = calculate_backoff_delay(attempt, self.base_delay, self.max_delay)
                logger.warning(
                    "HTTP request failed, retrying",
                    method=method,
                    url=url,
                    status_code=last_response.status_code if last_response is not None else None,
                    exception=str(last_exception) if last_exception else None,
                    attempt=attempt + 1,
                    retry_after=round(delay, 3)
                )
                time.sleep(delay)

        if last_exception is not None:
            raise RetryableHTTPError(f"Max retries exceeded: {last_exception}") from last_exception

        raise RetryableHTTPError(f"Max retries exceeded: HTTP {last_response.status_code}")

    def get(self, url: str, **kwargs) -> httpx.Response:
        """Make GET request."""
        return self.request("GET", url, **kwargs)
