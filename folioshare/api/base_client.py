"""
Base API client with common HTTP functionality.

Both outbound integrations (the quote source and the external record API)
share this class:
- HTTP session management with connection pooling
- Retry with exponential backoff for timeouts, network errors and 5xx
- A bounded per-request timeout
- Context-manager cleanup

Subclasses set BASE_URL and add domain methods on top of request().
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for API clients with common HTTP functionality.

    Example:
        class RecordClient(BaseAPIClient):
            BASE_URL = "https://records.example.com"

            def fetch(self, record_id: str) -> Dict[str, Any]:
                return self.get(f"/records/{record_id}").json()
    """

    BASE_URL: str = ""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize base API client.

        Args:
            max_retries: Maximum number of retry attempts for transient errors
            retry_delay: Base delay in seconds between retries (exponential backoff)
            timeout: Request timeout in seconds
            headers: Extra default headers sent with every request
        """
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = requests.Session()

        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": f"{self.__class__.__name__}/1.0",
        })
        if headers:
            self.session.headers.update(headers)

        logger.debug(f"{self.__class__.__name__} initialized")

    def _get_full_url(self, endpoint: str) -> str:
        """
        Construct full API URL from endpoint path.

        Args:
            endpoint: API endpoint path (e.g., "/resource/123")

        Returns:
            Full URL with base URL
        """
        if not self.BASE_URL:
            raise ValueError(f"{self.__class__.__name__} must set BASE_URL")

        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        return f"{self.BASE_URL.rstrip('/')}{endpoint}"

    def _calculate_backoff_delay(self, retry_count: int) -> float:
        """Exponential backoff delay for the given 0-indexed attempt."""
        return self.retry_delay * (2 ** retry_count)

    def _handle_error_response(self, response: requests.Response) -> None:
        """
        Handle a 5xx response that survived every retry.

        Subclasses may override to raise a domain-specific error.

        Raises:
            requests.exceptions.HTTPError: For unhandled errors
        """
        response.raise_for_status()

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Make an HTTP request with exponential backoff retry logic.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: API endpoint path
            params: Query parameters
            json_data: JSON request body
            headers: Additional request headers

        Returns:
            HTTP response object (4xx responses are returned, not raised)

        Raises:
            requests.exceptions.RequestException: If all retry attempts fail
        """
        url = self._get_full_url(endpoint)
        retry_count = 0

        while True:
            logger.debug(f"{method} {url}")
            try:
                response = self.session.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json_data,
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                if retry_count >= self.max_retries:
                    logger.error(
                        f"{method} {url} failed after {self.max_retries} retries: {e}"
                    )
                    raise
                delay = self._calculate_backoff_delay(retry_count)
                logger.warning(
                    f"Network error: {e}. Retrying in {delay}s "
                    f"(attempt {retry_count + 1}/{self.max_retries})"
                )
                time.sleep(delay)
                retry_count += 1
                continue

            if response.status_code >= 500:
                if retry_count < self.max_retries:
                    delay = self._calculate_backoff_delay(retry_count)
                    logger.warning(
                        f"Server error ({response.status_code}). "
                        f"Retrying in {delay}s (attempt {retry_count + 1}/{self.max_retries})"
                    )
                    time.sleep(delay)
                    retry_count += 1
                    continue
                logger.error(
                    f"Server error ({response.status_code}) after {self.max_retries} retries"
                )
                self._handle_error_response(response)

            logger.debug(f"Response: {response.status_code}")
            return response

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Make a GET request."""
        return self.request("GET", endpoint, params=params, headers=headers)

    def post(
        self,
        endpoint: str,
        json_data: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Make a POST request with a JSON body."""
        post_headers = {"Content-Type": "application/json"}
        if headers:
            post_headers.update(headers)
        return self.request(
            "POST", endpoint, params=params, json_data=json_data, headers=post_headers
        )

    def delete(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Make a DELETE request."""
        return self.request("DELETE", endpoint, params=params, headers=headers)

    def close(self) -> None:
        """Close the HTTP session and release pooled connections."""
        self.session.close()
        logger.debug(f"{self.__class__.__name__} closed")

    def __enter__(self) -> "BaseAPIClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - ensures cleanup."""
        self.close()
