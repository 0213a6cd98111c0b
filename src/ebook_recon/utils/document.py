"""
PDF accumulation of recovered pages.

Each recovered page becomes one PDF page of exactly the image's pixel size
(1 px = 1 pt), with the image filling the page edge to edge.
"""

import io
import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from ..errors import DocumentStateError
from .io import encode_jpeg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageHandle:
    """Reference to a page already embedded in the document."""
    index: int  # 1-based
    width: int
    height: int


class PdfDocument:
    """Append-only PDF built one page image at a time."""

    def __init__(self, jpeg_quality: int = 92):
        from fpdf import FPDF

        self.jpeg_quality = jpeg_quality
        self._pdf = FPDF(unit="pt")
        self._pdf.set_margin(0)
        self._pdf.set_auto_page_break(False)
        self._pages: List[PageHandle] = []
        self._finalized = False

    @property
    def pages(self) -> List[PageHandle]:
        return list(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def append_page(self, page: np.ndarray) -> PageHandle:
        """
        Add a page sized to the image and draw the image over all of it.

        Args:
            page: Recovered page, BGR array of shape (height, width, 3)

        Returns:
            Handle describing the new page
        """
        if self._finalized:
            raise DocumentStateError("Cannot append a page to a finalized document")

        height, width = page.shape[:2]
        jpeg = encode_jpeg(page, quality=self.jpeg_quality)

        self._pdf.add_page(format=(width, height))
        self._pdf.image(io.BytesIO(jpeg), x=0, y=0, w=width, h=height)

        handle = PageHandle(index=len(self._pages) + 1, width=width, height=height)
        self._pages.append(handle)
        logger.debug(f"Appended page {handle.index} ({width}x{height}, {len(jpeg)} bytes JPEG)")
        return handle

    def finalize(self) -> bytes:
        """Serialize the document. May only be called once."""
        if self._finalized:
            raise DocumentStateError("Document has already been finalized")
        if not self._pages:
            raise DocumentStateError("Cannot finalize a document with no pages")

        data = bytes(self._pdf.output())
        self._finalized = True
        logger.info(f"Finalized PDF: {self.page_count} page(s), {len(data)} bytes")
        return data
