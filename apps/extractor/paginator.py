"""
Pagination Engine - Complete, Ordered Retrieval of a Query

Retrieves every FemaWebDeclarationAreas record matching a query:

1. Page 0 is requested with metadata on; its `count` fixes the page total.
2. Pages 1..total_pages-1 are requested with metadata off.
3. Entries are accumulated in server page order.

Any transport or deserialization failure aborts the whole retrieval; no
partial result is returned and nothing is retried.

Pages after the first may optionally be fetched concurrently (bounded by a
semaphore). Each page then writes its own slot and slots are concatenated in
page order, so the result is identical to the sequential run.

Usage:
    async with HTTPClient() as client:
        paginator = DeclarationPaginator(client, settings.API_BASE)
        entries = await paginator.fetch_all(query)
"""

import asyncio
import logging
from typing import Optional, Union

from pydantic import ValidationError

from apps.extractor.uri import build_page_uri
from utils.errors import DeserializationError
from utils.http import HTTPClient
from utils.schemas import Entry, MetadataResponse, PlainResponse

# Maximum (and default) page size accepted by the OpenFEMA API
PAGE_SIZE = 1000


def total_pages(count: int, page_size: int) -> int:
    """
    Number of pages to request for `count` results.

    Always one more than the number of full pages, so an exact multiple of
    `page_size` yields a trailing request that may come back empty.
    """
    return count // page_size + 1


class DeclarationPaginator:
    """
    Drives the page requests for one query.

    Handles:
    - First-page metadata request and page count computation
    - Sequential or bounded-concurrent retrieval of the remaining pages
    - Order-preserving accumulation
    """

    def __init__(
        self,
        client: HTTPClient,
        base_url: str,
        page_size: int = PAGE_SIZE,
        max_concurrency: int = 1,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize paginator.

        Args:
            client: Transport exposing `async get_json(url)`
            base_url: Endpoint URL
            page_size: Records per page ($top)
            max_concurrency: Pages fetched at once after the first; 1 is sequential
            logger: Logger to report progress on, defaults to this module's logger
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.client = client
        self.base_url = base_url
        self.page_size = page_size
        self.max_concurrency = max_concurrency
        self.logger = logger or logging.getLogger(__name__)

    async def fetch_all(self, query: str) -> list[Entry]:
        """
        Retrieve all entries matching `query`, in server order.

        Raises:
            TransportError: If any page request fails
            DeserializationError: If any page body has the wrong shape
        """
        self.logger.debug("Requesting first page with metadata")
        first = await self._fetch_page(query, 0, with_metadata=True)

        count = first.metadata.count
        self.logger.info("Server has %d matching results", count)

        entries: list[Entry] = list(first.entries)

        pages = range(1, total_pages(count, self.page_size))
        if self.max_concurrency > 1 and len(pages) > 1:
            for chunk in await self._fetch_concurrently(query, pages, count):
                entries.extend(chunk)
        else:
            for page in pages:
                response = await self._fetch_logged(query, page, count)
                entries.extend(response.entries)

        self.logger.info("Number of results collected: %d", len(entries))
        return entries

    async def _fetch_concurrently(self, query: str, pages: range, count: int) -> list[list[Entry]]:
        """Fetch `pages` with bounded concurrency; returns one slot per page, in page order."""
        slots: list[list[Entry]] = [[] for _ in pages]
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def worker(slot: int, page: int) -> None:
            async with semaphore:
                response = await self._fetch_logged(query, page, count)
            slots[slot] = response.entries

        tasks = [asyncio.create_task(worker(slot, page)) for slot, page in enumerate(pages)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            # First failure wins; stop the rest before propagating
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return slots

    async def _fetch_logged(self, query: str, page: int, count: int) -> PlainResponse:
        start = page * self.page_size
        end = min((page + 1) * self.page_size, count)

        self.logger.debug("Requesting results %d through %d", start, end)
        response = await self._fetch_page(query, page, with_metadata=False)
        self.logger.debug("Received results %d through %d from server", start, end)

        return response

    async def _fetch_page(
        self, query: str, page: int, with_metadata: bool
    ) -> Union[MetadataResponse, PlainResponse]:
        url = build_page_uri(with_metadata, self.base_url, query, page, self.page_size)
        payload = await self.client.get_json(url)

        model = MetadataResponse if with_metadata else PlainResponse
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DeserializationError(
                f"Page {page} does not match {model.__name__}: {e}", url=url
            ) from e
