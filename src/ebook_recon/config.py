"""
Configuration and constants for the page reconstruction pipeline.

This module provides:
- Tile geometry used by the scrambling scheme
- HTTP endpoints and client settings
- Export settings for the output PDF
- Environment variable overrides
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Tuple

logger = logging.getLogger("ebook_recon")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class TileConfig:
    """Tile grid geometry."""
    tile_size: int = 50
    # Scrambled images keep a spacer between neighbouring tiles
    gap: int = 16
    background: Tuple[int, int, int] = (0, 0, 0)  # BGR

    @property
    def source_pitch(self) -> int:
        return self.tile_size + self.gap


@dataclass
class HttpConfig:
    """Remote service configuration."""
    api_base: str = "https://ebooksapi.rekhta.org"
    timeout: float = 30.0
    user_agent: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    )
    allowed_host_suffix: str = "rekhta.org"


@dataclass
class ExportConfig:
    """Export configuration."""
    # Same default as a browser canvas JPEG export
    jpeg_quality: int = 92
    filename_template: str = "book-{book_id}.pdf"


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    tile: TileConfig = field(default_factory=TileConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    debug_mode: bool = False


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    api_base = os.environ.get("EBOOK_RECON_API_BASE")
    if api_base:
        config.http.api_base = api_base.rstrip("/")

    timeout = os.environ.get("EBOOK_RECON_TIMEOUT")
    if timeout:
        try:
            config.http.timeout = float(timeout)
        except ValueError:
            logger.warning(f"Ignoring invalid EBOOK_RECON_TIMEOUT: {timeout!r}")

    quality = os.environ.get("EBOOK_RECON_JPEG_QUALITY")
    if quality:
        try:
            config.export.jpeg_quality = max(1, min(100, int(quality)))
        except ValueError:
            logger.warning(f"Ignoring invalid EBOOK_RECON_JPEG_QUALITY: {quality!r}")

    if os.environ.get("EBOOK_RECON_DEBUG", "").lower() == "true":
        config.debug_mode = True

    return config
