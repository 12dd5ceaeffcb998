"""
Exception Hierarchy - Extraction Failure Categories

Every failure the extractor can hit maps onto one of four categories. All of
them are fatal for a run: nothing is retried and no partial export is written.

Usage:
    from utils.errors import ExtractorError, TransportError

    try:
        await run_extraction(settings)
    except ExtractorError as e:
        logger.error("Extraction failed: %s", str(e))
"""

from pathlib import Path
from typing import Optional


class ExtractorError(Exception):
    """Base exception for all extractor errors."""

    pass


class ConfigurationError(ExtractorError):
    """Configuration directory could not be resolved or settings are invalid."""

    pass


class TransportError(ExtractorError):
    """Request failed to complete or returned a non-success status."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DeserializationError(ExtractorError):
    """Response body is not valid JSON or does not match the expected shape."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class ExportError(ExtractorError):
    """Output file could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
