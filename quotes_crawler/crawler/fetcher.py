"""
Web page fetcher implementation with fixed-delay retries.
"""

import asyncio
import aiohttp
import logging
import time
from typing import Awaitable, Callable, Dict, Optional
from dataclasses import dataclass
from aiohttp import ClientSession, ClientTimeout, ClientError
from bs4 import BeautifulSoup

from .parser import parse_html


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    content: Optional[str] = None
    error: Optional[str] = None
    fetch_time: float = 0.0
    encoding: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None


class FetchFailure(Exception):
    """Raised when a URL could not be fetched after every attempt."""

    def __init__(self, url: str, error: Optional[str], attempts: int = 1):
        self.url = url
        self.error = error
        self.attempts = attempts
        super().__init__(f"Failed to fetch {url} after {attempts} attempt(s): {error}")


class WebFetcher:
    """
    Performs plain HTTP GET requests over a shared aiohttp session.

    Network errors, timeouts and error status codes are reported through
    FetchResult.error; nothing is retried here.
    """

    def __init__(self, user_agent: Optional[str] = None, request_timeout: float = 30,
                 max_concurrent_requests: Optional[int] = None):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_concurrent_requests = max_concurrent_requests

        self.logger = logging.getLogger(__name__)

        # Session management
        self.session: Optional[ClientSession] = None
        self.semaphore = (asyncio.Semaphore(max_concurrent_requests)
                          if max_concurrent_requests else None)

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {'User-Agent': self.user_agent} if self.user_agent else None

            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers,
                connector=aiohttp.TCPConnector(
                    limit=0,
                    ttl_dns_cache=300,
                    use_dns_cache=True
                )
            )
            self.logger.debug("WebFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("WebFetcher session closed")

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult object containing the response body or error information
        """
        if self.session is None:
            await self.start()

        if self.semaphore is None:
            return await self._fetch(url)
        async with self.semaphore:
            return await self._fetch(url)

    async def _fetch(self, url: str) -> FetchResult:
        start_time = time.time()
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url) as response:
                body = await response.read()
                fetch_time = time.time() - start_time

                if response.status >= 400:
                    self.stats['failed_requests'] += 1
                    self.logger.debug(f"HTTP {response.status} fetching {url}")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        error=f"HTTP status {response.status}",
                        fetch_time=fetch_time
                    )

                self.stats['successful_requests'] += 1
                self.stats['total_bytes_downloaded'] += len(body)
                self.logger.debug(f"Fetched {url}: {response.status} ({len(body)} bytes)")

                return FetchResult(
                    url=url,
                    status_code=response.status,
                    content=self._decode(body, response.charset),
                    encoding=response.charset,
                    fetch_time=fetch_time
                )

        except asyncio.TimeoutError:
            error_msg = "Request timeout"
        except ClientError as e:
            error_msg = f"Client error: {e}"

        self.stats['failed_requests'] += 1
        self.logger.debug(f"Error fetching {url}: {error_msg}")
        return FetchResult(
            url=url,
            status_code=0,
            error=error_msg,
            fetch_time=time.time() - start_time
        )

    @staticmethod
    def _decode(body: bytes, charset: Optional[str]) -> str:
        """Decode a response body, falling back to common encodings."""
        encoding = charset or 'utf-8'
        try:
            return body.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            for fallback_encoding in ['utf-8', 'cp1252']:
                try:
                    return body.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue
            return body.decode('latin-1')

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()


class RetryingFetcher:
    """
    Fetches and parses pages, retrying failures with a fixed delay.

    A URL gets one immediate attempt plus ``retry_attempts`` more, with
    ``retry_delay`` seconds slept before each retry. Fetch and parse errors
    share the same attempt budget.
    """

    def __init__(self, fetcher: WebFetcher, retry_attempts: int = 5,
                 retry_delay: float = 1.0,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.fetcher = fetcher
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep
        self.logger = logging.getLogger(__name__)

    async def fetch_document(self, url: str) -> BeautifulSoup:
        """
        Fetch and parse ``url``.

        Raises:
            FetchFailure: every attempt failed; carries the last error.
        """
        last_error: Optional[str] = None
        attempts = 0

        for attempt in range(self.retry_attempts + 1):
            if attempt > 0:
                await self._sleep(self.retry_delay)
            attempts += 1

            result = await self.fetcher.fetch(url)
            if not result.ok:
                last_error = result.error or "Empty response body"
                self.logger.debug(f"Attempt {attempts} failed for {url}: {last_error}")
                continue

            try:
                return parse_html(result.content)
            except Exception as e:
                last_error = f"Parse error: {e}"
                self.logger.debug(f"Attempt {attempts} failed for {url}: {last_error}")

        raise FetchFailure(url, last_error, attempts)

    async def fetch_document_once(self, url: str) -> BeautifulSoup:
        """Fetch and parse ``url`` with a single attempt."""
        result = await self.fetcher.fetch(url)
        if not result.ok:
            raise FetchFailure(url, result.error or "Empty response body")
        try:
            return parse_html(result.content)
        except Exception as e:
            raise FetchFailure(url, f"Parse error: {e}") from e
