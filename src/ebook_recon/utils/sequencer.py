"""
Page sequencing: fetch, descramble and append every page of a book in order.

The sequencer does no I/O of its own. Retrieval is injected as two callables
so the same loop runs against the live service or in-memory fakes.
"""

import logging
import time
from typing import Callable, Optional

from ..config import TileConfig
from ..errors import EbookReconError, FetchFailure, RunCancelled
from .descramble import PermutationDescriptor, descramble
from .document import PdfDocument
from .io import decode_image
from .manifest import BookManifest

logger = logging.getLogger(__name__)

FetchImage = Callable[[str, str], bytes]
FetchDescriptor = Callable[[str], PermutationDescriptor]
ProgressCallback = Callable[[int, int, float], None]


def build_document(
    manifest: BookManifest,
    fetch_scrambled_image: FetchImage,
    fetch_descriptor: FetchDescriptor,
    progress: Optional[ProgressCallback] = None,
    document: Optional[PdfDocument] = None,
    tile_config: Optional[TileConfig] = None,
    should_stop: Optional[Callable[[], bool]] = None
) -> PdfDocument:
    """
    Reconstruct every page of a book into a PDF document.

    Pages are processed strictly one after another in manifest order. The
    returned document is not finalized.

    Args:
        manifest: Book id and ordered page references
        fetch_scrambled_image: (book_id, page_ref) -> raw image bytes
        fetch_descriptor: page_metadata_id -> PermutationDescriptor
        progress: Called with (current, total, elapsed_seconds) after each page
        document: Document to append to (a new one by default)
        tile_config: Tile geometry (defaults to TileConfig())
        should_stop: Checked before each page; True aborts with RunCancelled

    Raises:
        FetchFailure: If a page cannot be fetched, decoded, redrawn or embedded
        ManifestMalformed: If a page descriptor is malformed
        RunCancelled: If should_stop asked to stop
    """
    tile_config = tile_config or TileConfig()
    document = document if document is not None else PdfDocument()
    total = manifest.page_count
    start_time = time.time()

    logger.info(f"Reconstructing book {manifest.book_id}: {total} page(s)")

    for page_number in range(1, total + 1):
        if should_stop is not None and should_stop():
            raise RunCancelled(page_number - 1)

        page_ref = manifest.page_image_refs[page_number - 1]
        metadata_id = manifest.page_metadata_ids[page_number - 1]

        try:
            image_bytes = fetch_scrambled_image(manifest.book_id, page_ref)
            descriptor = fetch_descriptor(metadata_id)
            source = decode_image(image_bytes)

            recovered = descramble(
                source,
                descriptor,
                tile_size=tile_config.tile_size,
                gap=tile_config.gap,
                background=tile_config.background
            )
            document.append_page(recovered)
        except FetchFailure as e:
            if e.page_number is None:
                e.page_number = page_number
            raise
        except EbookReconError:
            raise
        except Exception as e:
            raise FetchFailure(f"Page {page_number}/{total} ({page_ref}) failed: {e}", page_number) from e

        logger.debug(
            f"Page {page_number}/{total}: {len(descriptor.tiles)} tiles -> "
            f"{descriptor.target_width}x{descriptor.target_height}"
        )

        if progress is not None:
            progress(page_number, total, time.time() - start_time)

    logger.info(f"Reconstructed {total} page(s) in {time.time() - start_time:.2f}s")
    return document
