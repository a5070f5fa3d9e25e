"""
Tests for HTTP client with retries and backoff.
"""

import pytest
from unittest.mock import Mock, patch
import httpx

from rut_engine.client import (
    HTTPClient,
    RetryableHTTPError,
    calculate_backoff_delay,
    is_retryable,
    RETRYABLE_STATUS_CODES,
    RETRYABLE_EXCEPTIONS,
)


class TestBackoffCalculation:
    """Test exponential backoff calculation."""

    def test_basic_backoff(self):
        """Test basic exponential backoff."""
        delay = calculate_backoff_delay(0, base_delay=1.0)
        assert 1.0 <= delay <= 1.2  # 1.0 + jitter (0-20%)

        delay = calculate_backoff_delay(1, base_delay=1.0)
        assert 2.0 <= delay <= 2.4

        delay = calculate_backoff_delay(2, base_delay=1.0)
        assert 4.0 <= delay <= 4.8

    def test_max_delay_respected(self):
        """Test that max delay is respected."""
        delay = calculate_backoff_delay(10, base_delay=1.0, max_delay=5.0)
        assert delay <= 6.0  # max_delay + max jitter (20%)


class TestRetryClassification:
    """Test which responses and exceptions are retried."""

    def test_retryable_status_codes(self):
        for code in RETRYABLE_STATUS_CODES:
            assert is_retryable(response=Mock(status_code=code)) is True

        for code in [200, 400, 404]:
            assert is_retryable(response=Mock(status_code=code)) is False

    def test_retryable_exceptions(self):
        for exc_class in RETRYABLE_EXCEPTIONS:
            assert is_retryable(exception=exc_class("Test error")) is True

        assert is_retryable(exception=ValueError("Not retryable")) is False

    def test_nothing_to_classify(self):
        assert is_retryable() is False


class TestHTTPClient:
    """Test HTTP client functionality."""

    @patch('httpx.Client')
    def test_successful_request(self, mock_client_class):
        """Test successful HTTP request."""
        mock_client = Mock()
        mock_client.request.return_value = Mock(status_code=200)
        mock_client_class.return_value = mock_client

        with HTTPClient() as client:
            response = client.get("https://registry.example.com/ruts/12345678-5")

        assert response.status_code == 200
        mock_client.request.assert_called_once_with(
            "GET", "https://registry.example.com/ruts/12345678-5"
        )
        mock_client.close.assert_called_once()

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_retry_on_server_error(self, mock_sleep, mock_client_class):
        """Test retry behavior on 5xx errors."""
        mock_client = Mock()
        mock_client.request.return_value = Mock(status_code=503)
        mock_client_class.return_value = mock_client

        with HTTPClient(max_retries=2) as client:
            with pytest.raises(RetryableHTTPError, match="HTTP 503"):
                client.get("https://registry.example.com/ruts/1-9")

        # initial + 2 retries
        assert mock_client.request.call_count == 3
        assert mock_sleep.call_count == 2

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_no_retry_on_not_found(self, mock_sleep, mock_client_class):
        """A 404 is an answer, returned without retrying."""
        mock_client = Mock()
        mock_client.request.return_value = Mock(status_code=404)
        mock_client_class.return_value = mock_client

        with HTTPClient(max_retries=2) as client:
            response = client.get("https://registry.example.com/ruts/1-9")

        assert response.status_code == 404
        assert mock_client.request.call_count == 1
        mock_sleep.assert_not_called()

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_retry_on_timeout(self, mock_sleep, mock_client_class):
        """Test retry behavior on timeout errors."""
        mock_client = Mock()
        mock_client.request.side_effect = httpx.ConnectTimeout("Timeout")
        mock_client_class.return_value = mock_client

        with HTTPClient(max_retries=2) as client:
            with pytest.raises(RetryableHTTPError) as exc_info:
                client.get("https://registry.example.com/ruts/1-9")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectTimeout)
        assert mock_client.request.call_count == 3
        assert mock_sleep.call_count == 2

    @patch('httpx.Client')
    def test_non_retryable_exception_propagates(self, mock_client_class):
        mock_client = Mock()
        mock_client.request.side_effect = httpx.UnsupportedProtocol("bad scheme")
        mock_client_class.return_value = mock_client

        with HTTPClient(max_retries=3) as client:
            with pytest.raises(httpx.UnsupportedProtocol):
                client.get("ftp://registry.example.com")

        assert mock_client.request.call_count == 1

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_eventual_success_after_retries(self, mock_sleep, mock_client_class):
        """Test eventual success after some failures."""
        mock_client = Mock()
        mock_client.request.side_effect = [
            Mock(status_code=500),
            Mock(status_code=502),
            Mock(status_code=200),
        ]
        mock_client_class.return_value = mock_client

        with HTTPClient(max_retries=3) as client:
            response = client.get("https://registry.example.com/ruts/1-9")

        assert response.status_code == 200
        assert mock_client.request.call_count == 3
        assert mock_sleep.call_count == 2

    def test_mock_transport(self):
        """Extra httpx.Client kwargs are passed through."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))

        with HTTPClient(transport=transport) as client:
            response = client.get("https://registry.example.com/ruts/1-9")

        assert response.json() == {"ok": True}
