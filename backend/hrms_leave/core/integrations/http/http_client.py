"""
Async HTTP client wrapper using aiohttp.
Used to reach the HR backend; retries idempotent requests with backoff.
"""

import asyncio
from typing import Optional, Dict, Any
import aiohttp
import logging

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class HttpClient:
    """
    Async HTTP client wrapper using aiohttp.
    Provides get/post methods with retry/backoff support.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Optional base URL for all requests
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per request
            retry_delay: Initial delay between retries in seconds
            headers: Headers sent with every request (e.g. Authorization)
        """
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.headers = dict(headers or {})
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        return endpoint

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any:
        """
        Make HTTP request with retry logic and return the decoded JSON body.

        Only idempotent methods are retried, and only on transport failures,
        timeouts and 5xx responses. A 4xx response returns the backend's JSON
        error envelope when it sends one.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for aiohttp request

        Returns:
            Decoded JSON body

        Raises:
            aiohttp.ClientError: If every attempt failed, or on a 4xx without a JSON body
            asyncio.TimeoutError: If the last attempt timed out
            ValueError: If a successful response carries malformed JSON
        """
        session = await self._get_session()
        attempts = self.max_retries if method in IDEMPOTENT_METHODS else 1
        last_exception: Optional[BaseException] = None

        for attempt in range(attempts):
            try:
                async with session.request(method, url, **kwargs) as response:
                    if 400 <= response.status < 500:
                        return await self._read_error_body(response)
                    response.raise_for_status()
                    return await response.json()
            except aiohttp.ClientResponseError as e:
                # 4xx and undecodable 2xx bodies will not change on retry
                if e.status < 500:
                    raise
                last_exception = e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e

            if attempt < attempts - 1:
                delay = self.retry_delay * (2 ** attempt)  # Exponential backoff
                logger.warning(
                    f"Request failed (attempt {attempt + 1}/{attempts}): {last_exception}. Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
            else:
                logger.error(f"{method} {url} failed after {attempts} attempt(s): {last_exception}")

        raise last_exception

    @staticmethod
    async def _read_error_body(response: aiohttp.ClientResponse) -> Any:
        try:
            body = await response.json()
        except (aiohttp.ContentTypeError, ValueError):
            body = None
        if not isinstance(body, dict):
            response.raise_for_status()
        logger.warning(f"{response.method} {response.url} returned {response.status}")
        return body

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters
            headers: Request headers

        Returns:
            JSON response
        """
        url = self._build_url(endpoint)
        return await self._request_with_retry("GET", url, params=params, headers=headers)

    async def post(
        self,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make POST request.

        Args:
            endpoint: API endpoint
            json: JSON data
            headers: Request headers

        Returns:
            JSON response
        """
        url = self._build_url(endpoint)
        return await self._request_with_retry("POST", url, json=json, headers=headers)
