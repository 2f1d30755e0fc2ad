"""
Asset fetcher for retrieving pages and their resources.

Uses aiohttp so that every asset of a page can be fetched concurrently.
"""

import asyncio
from typing import Optional, Tuple

import aiohttp
from aiohttp import ClientTimeout, ClientError

from ..utils.constants import DEFAULT_USER_AGENT
from ..utils.errors import FetchError
from ..utils.log import get_logger


class AssetFetcher:
    """
    Fetches page and asset bodies over HTTP.

    A failed fetch raises FetchError and is never retried. Without an
    explicit timeout the aiohttp session default applies; without a
    concurrency limit every request runs at once.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        concurrency: Optional[int] = None,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the asset fetcher.

        Args:
            timeout: Total request timeout in seconds, None for the default
            concurrency: Maximum simultaneous requests, None for unbounded
            user_agent: User agent string for requests
        """
        if concurrency is not None and concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        self.timeout = ClientTimeout(total=timeout) if timeout else None
        self.concurrency = concurrency
        self.user_agent = user_agent
        self.logger = get_logger("fetcher")

        self.session: Optional[aiohttp.ClientSession] = None
        self._semaphore = asyncio.Semaphore(concurrency) if concurrency else None

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0,
        }

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        """Open the HTTP session."""
        if self.session is None:
            kwargs = {'headers': {'User-Agent': self.user_agent}}
            if self.timeout is not None:
                kwargs['timeout'] = self.timeout
            self.session = aiohttp.ClientSession(**kwargs)
            self.logger.debug("Fetcher session started")

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("Fetcher session closed")

    async def fetch_bytes(self, url: str) -> bytes:
        """
        Fetch the raw body of a URL.

        Args:
            url: Fully-qualified URL

        Returns:
            Response body

        Raises:
            FetchError: On transport failure or a non-2xx status
        """
        content, _ = await self._fetch(url)
        return content

    async def fetch_text(self, url: str) -> str:
        """
        Fetch the body of a URL decoded as text.

        The response charset is used when declared, UTF-8 otherwise.

        Raises:
            FetchError: On transport failure or a non-2xx status
        """
        content, charset = await self._fetch(url)
        try:
            return content.decode(charset or 'utf-8', errors='replace')
        except LookupError:
            # Unknown charset label
            return content.decode('utf-8', errors='replace')

    async def _fetch(self, url: str) -> Tuple[bytes, Optional[str]]:
        if self.session is None:
            await self.start()

        if self._semaphore is None:
            return await self._request(url)

        async with self._semaphore:
            return await self._request(url)

    async def _request(self, url: str) -> Tuple[bytes, Optional[str]]:
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status < 300:
                    self.stats['failed_requests'] += 1
                    raise FetchError(
                        f"HTTP {response.status} for {url}",
                        url=url,
                        status=response.status
                    )

                content = await response.read()

                self.stats['successful_requests'] += 1
                self.stats['total_bytes_downloaded'] += len(content)
                self.logger.debug(f"Fetched {url} ({len(content)} bytes)")

                return content, response.charset

        except ClientError as e:
            self.stats['failed_requests'] += 1
            raise FetchError(f"Client error fetching {url}: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            self.stats['failed_requests'] += 1
            raise FetchError(f"Timeout fetching {url}", url=url) from e

    def get_stats(self) -> dict:
        """Get fetcher statistics."""
        return self.stats.copy()
