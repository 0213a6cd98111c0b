"""
Utility modules for the page reconstruction pipeline.
"""

from .io import decode_image, encode_jpeg, save_bytes, ensure_dir
from .descramble import TileMapping, PermutationDescriptor, descramble
from .document import PdfDocument, PageHandle
from .manifest import BookManifest, parse_book_page
from .sequencer import build_document
from .progress import ConsoleProgress, format_eta, format_status
from .client import RekhtaClient

__all__ = [
    # IO
    "decode_image", "encode_jpeg", "save_bytes", "ensure_dir",
    # Descrambling
    "TileMapping", "PermutationDescriptor", "descramble",
    # Document
    "PdfDocument", "PageHandle",
    # Manifest / sequencing
    "BookManifest", "parse_book_page", "build_document",
    # Progress
    "ConsoleProgress", "format_eta", "format_status",
    # Retrieval
    "RekhtaClient",
]
