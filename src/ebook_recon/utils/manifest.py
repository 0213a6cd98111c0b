"""
Book manifest model and parsing of the book reader page.

The reader page embeds the book id and the page lists as JavaScript
variable assignments inside <script> tags:

    var bookId = "…";
    var pages = ["…", "…"];
    var pageIds = ["…", "…"];

The assigned values are JSON literals, so they are decoded with a JSON
decoder starting at the assignment rather than pattern-matched.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List

from ..errors import ManifestMalformed

logger = logging.getLogger(__name__)

INVALID_BOOK_MESSAGE = "Invalid url. You must use a book url from rekhta.org"

_decoder = json.JSONDecoder()


@dataclass
class BookManifest:
    """Book id plus the per-page image references and metadata ids."""
    book_id: str
    page_image_refs: List[str]
    page_metadata_ids: List[str]

    def __post_init__(self):
        if not isinstance(self.book_id, str) or not self.book_id:
            raise ManifestMalformed(f"Invalid book id: {self.book_id!r}")
        for name in ("page_image_refs", "page_metadata_ids"):
            values = getattr(self, name)
            if not isinstance(values, (list, tuple)) or not all(isinstance(v, str) for v in values):
                raise ManifestMalformed(f"{name} must be a list of strings")
            setattr(self, name, list(values))
        if not self.page_image_refs:
            raise ManifestMalformed("Book has no pages")
        if len(self.page_image_refs) != len(self.page_metadata_ids):
            raise ManifestMalformed(
                f"Page list mismatch: {len(self.page_image_refs)} images, "
                f"{len(self.page_metadata_ids)} metadata ids"
            )

    @property
    def page_count(self) -> int:
        return len(self.page_image_refs)


def _script_text(html: str) -> str:
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(html, "html.parser")
    return "\n".join(script.get_text() for script in soup.find_all("script"))


def extract_js_value(source: str, name: str) -> Any:
    """
    Decode the JSON literal assigned to `var <name>` in a script.

    Raises:
        ManifestMalformed: If the variable is missing or not valid JSON
    """
    match = re.search(rf"\bvar\s+{re.escape(name)}\s*=\s*", source)
    if match is None:
        raise ManifestMalformed(f"{INVALID_BOOK_MESSAGE} (missing '{name}')")

    try:
        value, _ = _decoder.raw_decode(source, match.end())
    except json.JSONDecodeError as e:
        raise ManifestMalformed(f"{INVALID_BOOK_MESSAGE} (unreadable '{name}': {e.msg})") from e
    return value


def parse_book_page(html: str) -> BookManifest:
    """
    Parse a book reader page into a BookManifest.

    Args:
        html: HTML of the book page

    Returns:
        Manifest with the book id and ordered page lists

    Raises:
        ManifestMalformed: If any of the expected values is missing or mistyped
    """
    scripts = _script_text(html)

    book_id = extract_js_value(scripts, "bookId")
    pages = extract_js_value(scripts, "pages")
    page_ids = extract_js_value(scripts, "pageIds")

    try:
        manifest = BookManifest(book_id=book_id, page_image_refs=pages, page_metadata_ids=page_ids)
    except ManifestMalformed as e:
        raise ManifestMalformed(f"{INVALID_BOOK_MESSAGE} ({e})") from e

    logger.info(f"Found book {manifest.book_id} with {manifest.page_count} page(s)")
    return manifest
