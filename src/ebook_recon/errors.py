"""
Exception types raised by the reconstruction pipeline.
"""

from typing import Optional


class EbookReconError(Exception):
    """Base class for all pipeline errors."""


class ManifestMalformed(EbookReconError, ValueError):
    """Book manifest or page descriptor is missing fields or has the wrong shape."""


class FetchFailure(EbookReconError):
    """A page could not be retrieved or decoded."""

    def __init__(self, message: str, page_number: Optional[int] = None):
        super().__init__(message)
        self.page_number = page_number


class RunCancelled(EbookReconError):
    """The run was stopped between two pages."""

    def __init__(self, completed_pages: int):
        super().__init__(f"Cancelled after {completed_pages} page(s)")
        self.completed_pages = completed_pages


class DocumentStateError(EbookReconError, RuntimeError):
    """The output document was used after finalize, or finalized while empty."""
