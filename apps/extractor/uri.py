"""
Page URI Builder

Builds OpenFEMA request URLs for one page of a query. Inputs are concatenated
as-is; a malformed base or query yields a malformed URL and the failure shows
up at the transport layer.
"""

from typing import Optional


def build_page_uri(
    metadata: bool,
    base: str,
    query: str,
    page: int,
    size: Optional[int] = None,
) -> str:
    """
    Build the request URL for a page.

    Args:
        metadata: Request the metadata block ($metadata=on)
        base: Endpoint URL
        query: Query string without the leading '?'
        page: Zero-based page index
        size: Page size; when omitted no $skip/$top is sent and page is ignored

    Returns:
        Request URL

    Example:
        >>> build_page_uri(True, "https://x", "q=1", 2, 500)
        'https://x?q=1&$skip=1000&$top=500&$metadata=on'
    """
    md_str = "on" if metadata else "off"

    if size is not None:
        return f"{base}?{query}&$skip={page * size}&$top={size}&$metadata={md_str}"

    return f"{base}?{query}&$metadata={md_str}"
