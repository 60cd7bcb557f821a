"""
Async HTTP client with rate limiting and bounded timeouts.

Built on httpx with:
- Per-domain rate limiting
- A single bounded timeout per request
- Failures surfaced as FetchError (no retries)
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

import httpx
import structlog

from .exceptions import FetchError

logger = structlog.get_logger(__name__)


USER_AGENT = "benefit-rates-updater/0.1 (+https://www.gov.uk/api/content)"


@dataclass
class RateLimiter:
    """Per-domain rate limiter."""
    requests_per_second: float = 5.0
    last_request: float = 0.0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def acquire(self) -> None:
        """Wait for rate limit slot."""
        if self.requests_per_second <= 0:
            return

        async with self.lock:
            now = time.monotonic()
            min_interval = 1.0 / self.requests_per_second
            elapsed = now - self.last_request

            if elapsed < min_interval:
                await asyncio.sleep(min_interval - elapsed)

            self.last_request = time.monotonic()


class HttpClient:
    """
    Async HTTP client with rate limiting.

    Usage:
        async with HttpClient() as client:
            payload = await client.get_json("https://www.gov.uk/api/content/pip")
    """

    def __init__(
        self,
        requests_per_second: float = 5.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            requests_per_second: Rate limit per domain (0 disables limiting)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.requests_per_second = requests_per_second
        self.timeout = timeout
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None
        self._rate_limiters: dict[str, RateLimiter] = {}

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_rate_limiter(self, url: str) -> RateLimiter:
        """Get or create rate limiter for domain."""
        domain = urlparse(url).netloc
        if domain not in self._rate_limiters:
            self._rate_limiters[domain] = RateLimiter(
                requests_per_second=self.requests_per_second
            )
        return self._rate_limiters[domain]

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """
        GET request with rate limiting.

        Args:
            url: URL to fetch
            **kwargs: Additional httpx arguments

        Returns:
            httpx.Response with a 2xx status

        Raises:
            FetchError: On non-2xx status, timeout or transport failure
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        limiter = self._get_rate_limiter(url)
        await limiter.acquire()

        logger.debug("http_get", url=url)

        try:
            response = await self._client.get(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, "unsuccessful response", e.response.status_code) from e
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or e.__class__.__name__) from e

        return response

    async def get_json(self, url: str, **kwargs) -> dict:
        """GET request returning a decoded JSON object."""
        response = await self.get(url, **kwargs)
        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(url, "response is not valid JSON") from e

        if not isinstance(payload, dict):
            raise FetchError(url, "response is not a JSON object")
        return payload
