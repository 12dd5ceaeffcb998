"""
Extraction Job - One Complete Retrieve-and-Export Run

Computes the rolling cutoff, retrieves every matching declaration area and
exports the collection. The export only starts after every page has been
retrieved, so a failed run leaves the output destination untouched.

Usage:
    from apps.extractor.extractor_job import run_extraction

    output_file = await run_extraction(settings)
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from apps.extractor.exporter import export_entries
from apps.extractor.paginator import DeclarationPaginator
from apps.extractor.query import build_query, compute_cutoff, format_cutoff
from utils.config import Settings
from utils.http import HTTPClient
from utils.schemas import Entry

logger = logging.getLogger(__name__)


async def run_extraction(
    settings: Settings,
    now: Optional[datetime] = None,
    client: Optional[HTTPClient] = None,
) -> Optional[Path]:
    """
    Run one extraction.

    Args:
        settings: Application settings
        now: Reference time for the cutoff, defaults to the current UTC time
        client: Transport to use; a new HTTPClient is created and closed when omitted

    Returns:
        Path of the written file, or None if export is disabled

    Raises:
        ExtractorError: On any transport, deserialization or export failure
    """
    now = now or datetime.now(timezone.utc)
    cutoff = compute_cutoff(now, settings.NUM_YEARS_PREVIOUS)
    logger.info("Filtering for dates after %s", format_cutoff(cutoff))

    query = build_query(cutoff)
    logger.debug("Base URI: %s", settings.API_BASE)

    if client is None:
        async with HTTPClient(timeout=settings.API_TIMEOUT) as owned_client:
            entries = await _collect(owned_client, settings, query)
    else:
        entries = await _collect(client, settings, query)

    return export_entries(entries, settings.CSV_PATH)


async def _collect(client: HTTPClient, settings: Settings, query: str) -> list[Entry]:
    paginator = DeclarationPaginator(
        client,
        settings.API_BASE,
        page_size=settings.PAGE_SIZE,
        max_concurrency=settings.MAX_CONCURRENT_PAGES,
        logger=logger.getChild("paginator"),
    )
    return await paginator.fetch_all(query)
