"""disease.sh HTTP client with retry handling.

Async HTTP client for the disease.sh API with retry logic for server
errors, timeouts and transport failures.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from covid_trends import __version__

logger = logging.getLogger(__name__)


@dataclass
class ProviderResponse:
    """Provider API response with parsed data and metadata."""

    status_code: int
    data: Any
    url: str = ""

    @property
    def is_success(self) -> bool:
        """Check if response was successful (2xx status code)."""
        return 200 <= self.status_code < 300


class ProviderHTTPError(Exception):
    """Base exception for provider request failures."""


class ProviderStatusError(ProviderHTTPError):
    """Raised when the provider answers with a non-2xx status."""

    def __init__(self, status_code: int, url: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        detail = f": {message}" if message else ""
        super().__init__(f"Provider returned {status_code} for {url}{detail}")


class ProviderDataError(ProviderHTTPError):
    """Raised when a provider payload does not have the expected shape."""


class ProviderClient:
    """Async HTTP client for the disease.sh API.

    Features:
    - Retry logic with exponential backoff
    - Request/response logging
    - Configurable timeouts and retries
    """

    BASE_URL = "https://disease.sh/v3/covid-19"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_MAX_RETRIES = 3
    INITIAL_BACKOFF = 1.0
    BACKOFF_MULTIPLIER = 2.0

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_url: str = BASE_URL,
    ) -> None:
        """Initialize provider HTTP client.

        Args:
            timeout: Request timeout in seconds.
            max_retries: Maximum number of retries for failed requests.
            base_url: Base URL for the provider API.
        """
        self._timeout = timeout
        self._max_retries = max_retries
        self._base_url = base_url.rstrip("/")

        self._client: httpx.AsyncClient | None = None

    def url_for(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build the absolute URL for a request.

        Args:
            path: API path (e.g., "/countries").
            params: Optional query parameters.

        Returns:
            Absolute URL string.
        """
        url = httpx.URL(f"{self._base_url}/{path.lstrip('/')}")
        if params:
            url = url.copy_merge_params(params)
        return str(url)

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": f"covid-trends/{__version__}",
        }

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure async client is initialized.

        Returns:
            Active httpx.AsyncClient instance.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._get_headers(),
                follow_redirects=True,
            )
        return self._client

    async def _retry_request(
        self,
        method: str,
        url: str,
        retry_count: int,
        **kwargs: Any,
    ) -> httpx.Response:
        """Retry a request with exponential backoff.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            retry_count: Current retry attempt.
            **kwargs: Additional arguments for request.

        Returns:
            HTTP response.
        """
        wait_seconds = self.INITIAL_BACKOFF * (self.BACKOFF_MULTIPLIER**retry_count)
        logger.debug(
            "Retry %d/%d for %s %s after %.1fs",
            retry_count + 1,
            self._max_retries,
            method,
            url,
            wait_seconds,
        )
        await asyncio.sleep(wait_seconds)

        return await self._do_request(method, url, retry_count + 1, **kwargs)

    async def _do_request(
        self,
        method: str,
        url: str,
        retry_count: int = 0,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Absolute request URL.
            retry_count: Current retry attempt number.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            HTTP response. 4xx responses are returned, not raised.

        Raises:
            ProviderHTTPError: On request failure after retries.
        """
        client = await self._ensure_client()

        logger.debug("%s %s (attempt %d)", method, url, retry_count + 1)

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("Timeout for %s %s", method, url)
            if retry_count < self._max_retries:
                return await self._retry_request(method, url, retry_count, **kwargs)
            raise ProviderHTTPError(f"Request timeout: {e}") from e

        except httpx.TransportError as e:
            logger.warning("Transport error for %s %s: %s", method, url, e)
            if retry_count < self._max_retries:
                return await self._retry_request(method, url, retry_count, **kwargs)
            raise ProviderHTTPError(f"Transport error: {e}") from e

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProviderHTTPError(f"Request failed: {e}") from e

        # Retry on server errors (5xx)
        if 500 <= response.status_code < 600:
            logger.warning("Server error %d for %s %s", response.status_code, method, url)
            if retry_count >= self._max_retries:
                message = f"max retries ({self._max_retries}) exceeded"
                raise ProviderStatusError(response.status_code, url, message)
            return await self._retry_request(method, url, retry_count, **kwargs)

        return response

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> ProviderResponse:
        """Make an HTTP request to the provider API.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: API path (e.g., "/countries" or "historical/all").
            params: Optional query parameters.
            **kwargs: Additional arguments passed to httpx (json, etc.).

        Returns:
            ProviderResponse with parsed data and metadata.

        Raises:
            ProviderHTTPError: On request failure.
        """
        response = await self._do_request(method, self.url_for(path, params), **kwargs)

        data = None
        if response.content:
            try:
                data = response.json()
            except ValueError as e:
                logger.warning("Failed to parse JSON response: %s", e)
                data = response.text

        return ProviderResponse(
            status_code=response.status_code,
            data=data,
            url=str(response.url),
        )

    async def get(self, path: str, params: dict[str, Any] | None = None) -> ProviderResponse:
        """Make a GET request.

        Args:
            path: API path.
            params: Optional query parameters.

        Returns:
            ProviderResponse with parsed data.
        """
        return await self.request("GET", path, params=params)

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ProviderClient":
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
