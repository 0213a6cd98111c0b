#!/usr/bin/env python
"""
Command-line interface for the e-book page reconstruction pipeline.

Usage:
    ebook-recon --url <book-url> [options]

Examples:
    # Download a book into the current directory
    ebook-recon --url https://www.rekhta.org/ebooks/some-book-ebooks

    # Write the PDF somewhere else, with debug logging
    ebook-recon --url https://www.rekhta.org/ebooks/some-book-ebooks -o ./books -v
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

from . import __version__
from .config import get_config
from .errors import EbookReconError, RunCancelled

logger = logging.getLogger("ebook_recon")


def normalize_book_url(url: str, host_suffix: str = "rekhta.org") -> str:
    """
    Validate a book URL and rewrite detail pages to the reader page.

    Raises:
        ValueError: If the URL is not an http(s) URL on the expected site
    """
    parts = urlsplit(url.strip())
    host = (parts.hostname or "").lower()

    if parts.scheme not in ("http", "https") or not (
        host == host_suffix or host.endswith("." + host_suffix)
    ):
        raise ValueError(f"Invalid url. You must use a book url from {host_suffix}")

    path = parts.path
    if path.startswith("/ebooks/detail/"):
        path = path.replace("/ebooks/detail/", "/ebooks/", 1)

    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def _book_url(value: str) -> str:
    try:
        return normalize_book_url(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def setup_argparser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="ebook-recon",
        description="Download a tile-scrambled e-book and rebuild it as a PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Download a book:
    ebook-recon --url https://www.rekhta.org/ebooks/some-book-ebooks

  Save into another directory:
    ebook-recon --url https://www.rekhta.org/ebooks/some-book-ebooks --output ./books
        """
    )

    parser.add_argument(
        "--url", "-u",
        required=True,
        type=_book_url,
        help="Url of the rekhta e-book you wish to download"
    )

    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Directory to write the PDF into (default: current directory)"
    )

    parser.add_argument(
        "--jpeg-quality",
        type=int,
        default=None,
        help="JPEG quality of embedded pages, 1-100 (default: 92)"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not print the per-page progress line"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def run_pipeline(args, client=None) -> int:
    """Download, rebuild and save one book."""
    from .utils.client import RekhtaClient
    from .utils.document import PdfDocument
    from .utils.io import save_bytes
    from .utils.progress import ConsoleProgress
    from .utils.sequencer import build_document

    start_time = time.time()
    config = get_config()
    if args.jpeg_quality is not None:
        config.export.jpeg_quality = max(1, min(100, args.jpeg_quality))

    client = client or RekhtaClient(config)

    logger.info(f"Fetching book page: {args.url}")
    manifest = client.fetch_manifest(args.url)

    progress = None if (args.quiet or args.no_progress) else ConsoleProgress()
    document = build_document(
        manifest,
        client.fetch_scrambled_image,
        client.fetch_descriptor,
        progress=progress,
        document=PdfDocument(jpeg_quality=config.export.jpeg_quality),
        tile_config=config.tile,
    )
    pdf_bytes = document.finalize()

    filename = config.export.filename_template.format(book_id=manifest.book_id)
    output_path = save_bytes(pdf_bytes, Path(args.output) / filename)

    logger.info(f"File saved successfully: {output_path}")
    logger.info(f"Pages: {document.page_count}, time: {time.time() - start_time:.2f}s")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = setup_argparser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.ERROR)

    try:
        exit_code = run_pipeline(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except RunCancelled as e:
        logger.warning(str(e))
        sys.exit(130)
    except EbookReconError as e:
        cause = f" (caused by {e.__cause__!r})" if e.__cause__ is not None else ""
        logger.error(f"Download failed: {e}{cause}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
