"""
HTTP client for the e-book service.

Provides the three retrieval operations the pipeline needs:
- the book page (parsed into a BookManifest)
- the scrambled image of a page
- the permutation descriptor of a page
"""

import logging
from typing import Optional

import requests

from ..config import HttpConfig, PipelineConfig, get_config
from ..errors import FetchFailure, ManifestMalformed
from .descramble import PermutationDescriptor
from .manifest import BookManifest, parse_book_page

logger = logging.getLogger(__name__)

DESCRIPTOR_PATH = "/api_getebookpagebyid_websiteapp/"


class RekhtaClient:
    """Thin wrapper over a requests.Session for the e-book endpoints."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        session: Optional[requests.Session] = None
    ):
        self.config = config or get_config()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.http.user_agent})

    @property
    def http(self) -> HttpConfig:
        return self.config.http

    def image_url(self, book_id: str, page_ref: str) -> str:
        return f"{self.http.api_base}/images/{book_id}/{page_ref}"

    def _get(self, url: str, what: str, **kwargs) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.http.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchFailure(f"Could not fetch {what}: {e}") from e
        return response

    def fetch_manifest(self, book_url: str) -> BookManifest:
        """Download the book page and parse its page lists."""
        response = self._get(book_url, "book page")
        return parse_book_page(response.text)

    def fetch_scrambled_image(self, book_id: str, page_ref: str) -> bytes:
        """Download the raw scrambled image for one page."""
        response = self._get(self.image_url(book_id, page_ref), f"image {page_ref}")
        if not response.content:
            raise FetchFailure(f"Empty image for page {page_ref}")
        return response.content

    def fetch_descriptor(self, page_id: str) -> PermutationDescriptor:
        """Download and parse the tile permutation for one page."""
        response = self._get(
            self.http.api_base + DESCRIPTOR_PATH,
            f"descriptor {page_id}",
            params={"wref": "from-site", "pgid": page_id},
        )
        try:
            data = response.json()
        except ValueError as e:
            raise FetchFailure(f"Descriptor for page {page_id} is not JSON") from e

        try:
            return PermutationDescriptor.from_dict(data, tile_size=self.config.tile.tile_size)
        except ManifestMalformed as e:
            raise ManifestMalformed(f"Descriptor for page {page_id}: {e}") from e
