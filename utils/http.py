"""
HTTP Client - Async JSON GET over aiohttp

Thin wrapper around an aiohttp session. Every failure is translated into the
extractor's error taxonomy:
- connection errors, timeouts and non-2xx statuses -> TransportError
- bodies that are not valid JSON -> DeserializationError

Usage:
    from utils.http import HTTPClient

    async with HTTPClient(timeout=30) as client:
        payload = await client.get_json("https://www.fema.gov/api/open/v1/...")
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp
import orjson

from utils.errors import DeserializationError, TransportError

logger = logging.getLogger(__name__)


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get_json(self, url: str) -> Any:
        """GET a URL and decode the JSON body.

        Raises:
            TransportError: On connection failure, timeout or non-2xx status
            DeserializationError: If the body is not valid JSON
        """
        logger.debug("GET %s", url)
        try:
            async with self.session.get(url) as response:
                response.raise_for_status()
                body = await response.read()
        except aiohttp.ClientResponseError as e:
            raise TransportError(
                f"HTTP {e.status} from server: {e.message}", url=url, status_code=e.status
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Request failed: {e!r}", url=url) from e

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise DeserializationError(f"Response is not valid JSON: {e}", url=url) from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HTTPClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
