"""
Tile descrambling for obfuscated page images.

A scrambled page is a grid of 50x50 tiles separated by a 16px spacer and
shuffled out of order. The permutation descriptor served alongside each page
says where every source tile belongs in the real page.

Provides:
- TileMapping / PermutationDescriptor data model
- Parsing of the JSON descriptor returned by the page service
- descramble(): redraw the tiles onto a blank canvas
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..config import TileConfig
from ..errors import ManifestMalformed
from .io import to_bgr

logger = logging.getLogger(__name__)

TILE_SIZE = TileConfig.tile_size
TILE_GAP = TileConfig.gap


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class TileMapping:
    """One tile move: source grid cell -> destination grid cell."""
    source_col: int
    source_row: int
    dest_col: int
    dest_row: int

    def __post_init__(self):
        for name in ("source_col", "source_row", "dest_col", "dest_row"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ManifestMalformed(f"Tile mapping {name} must be a non-negative integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TileMapping":
        """Build from the service's {X1, Y1, X2, Y2} object."""
        if not isinstance(data, dict):
            raise ManifestMalformed(f"Tile mapping must be an object, got {type(data).__name__}")

        values = []
        for key in ("X1", "Y1", "X2", "Y2"):
            value = data.get(key)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ManifestMalformed(f"Tile mapping field {key} must be a non-negative integer: {data!r}")
            values.append(value)

        return cls(*values)


@dataclass(frozen=True)
class PermutationDescriptor:
    """Target page size plus the ordered tile mappings for one page."""
    target_width: int
    target_height: int
    tiles: Tuple[TileMapping, ...] = ()

    def __post_init__(self):
        if self.target_width <= 0 or self.target_height <= 0:
            raise ManifestMalformed(
                f"Target size must be positive, got {self.target_width}x{self.target_height}"
            )
        # Stored as a tuple; callers may pass a list
        object.__setattr__(self, "tiles", tuple(self.tiles))

    @property
    def size(self) -> Tuple[int, int]:
        return self.target_width, self.target_height

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        tile_size: int = TILE_SIZE
    ) -> "PermutationDescriptor":
        """
        Parse the page service's JSON descriptor.

        Expected keys: PageWidth, PageHeight (pixels, may be 0), X, Y (grid
        column/row counts, sometimes sent as strings) and Sub (tile list).

        Raises:
            ManifestMalformed: If no usable size can be found or a tile is invalid
        """
        if not isinstance(data, dict):
            raise ManifestMalformed(f"Descriptor must be an object, got {type(data).__name__}")

        width = resolve_dimension(data.get("PageWidth"), data.get("X"), tile_size)
        height = resolve_dimension(data.get("PageHeight"), data.get("Y"), tile_size)
        if width is None or height is None:
            raise ManifestMalformed(
                "Descriptor has neither a page size nor a grid size: "
                f"PageWidth={data.get('PageWidth')!r} PageHeight={data.get('PageHeight')!r} "
                f"X={data.get('X')!r} Y={data.get('Y')!r}"
            )

        raw_tiles = data.get("Sub")
        if raw_tiles is None:
            raw_tiles = []
        if not isinstance(raw_tiles, list):
            raise ManifestMalformed(f"Descriptor field Sub must be a list, got {type(raw_tiles).__name__}")

        tiles = tuple(TileMapping.from_dict(t) for t in raw_tiles)
        return cls(target_width=width, target_height=height, tiles=tiles)


# ============================================================================
# Size Resolution
# ============================================================================

def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # NaN / inf cannot be turned into a pixel count
    return number if math.isfinite(number) else None


def resolve_dimension(
    explicit: Any,
    grid_count: Any,
    tile_size: int = TILE_SIZE
) -> Optional[int]:
    """
    Resolve one page dimension.

    An explicit positive pixel size wins; otherwise the size is
    tile_size * grid_count, with the count truncated toward zero.
    Returns None if neither yields a positive size.
    """
    pixels = _as_number(explicit)
    if pixels is not None and pixels > 0:
        return int(pixels)

    count = _as_number(grid_count)
    if count is None:
        return None
    size = tile_size * int(count)
    return size if size > 0 else None


# ============================================================================
# Core Transform
# ============================================================================

def descramble(
    source_image: np.ndarray,
    descriptor: PermutationDescriptor,
    tile_size: int = TILE_SIZE,
    gap: int = TILE_GAP,
    background: Tuple[int, int, int] = (0, 0, 0)
) -> np.ndarray:
    """
    Redraw scrambled tiles into their correct positions.

    Args:
        source_image: Decoded scrambled image (BGR, grayscale or BGRA)
        descriptor: Target size and tile mappings for this page
        tile_size: Edge length of one tile in pixels
        gap: Spacer between tiles in the scrambled image
        background: Fill colour for cells no tile maps to (BGR)

    Returns:
        BGR array of shape (target_height, target_width, 3)
    """
    source = to_bgr(source_image)
    src_h, src_w = source.shape[:2]
    dst_w, dst_h = descriptor.size

    canvas = np.empty((dst_h, dst_w, 3), dtype=np.uint8)
    canvas[:, :] = background

    pitch = tile_size + gap
    clipped = 0

    for tile in descriptor.tiles:
        sx, sy = tile.source_col * pitch, tile.source_row * pitch
        dx, dy = tile.dest_col * tile_size, tile.dest_row * tile_size

        # Clip to whatever part of the tile exists in both images
        w = min(tile_size, src_w - sx, dst_w - dx)
        h = min(tile_size, src_h - sy, dst_h - dy)

        if w < tile_size or h < tile_size:
            clipped += 1
            logger.debug(
                f"Tile {tile} clipped to {max(w, 0)}x{max(h, 0)} "
                f"(source {src_w}x{src_h}, target {dst_w}x{dst_h})"
            )
        if w <= 0 or h <= 0:
            continue

        canvas[dy:dy + h, dx:dx + w] = source[sy:sy + h, sx:sx + w]

    if clipped:
        logger.debug(f"{clipped} of {len(descriptor.tiles)} tiles were out of range")

    return canvas
