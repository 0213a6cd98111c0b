"""
I/O utilities for the page reconstruction pipeline.

Handles:
- Decoding downloaded image bytes
- JPEG encoding of recovered pages
- Writing the finished document
- Directory management
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np

logger = logging.getLogger(__name__)


# ============================================================================
# Image Decoding / Encoding
# ============================================================================

def decode_image(data: bytes) -> np.ndarray:
    """
    Decode image bytes into a BGR array.

    Args:
        data: Raw bytes of a JPEG/PNG/... image

    Returns:
        Numpy array of shape (height, width, 3), BGR

    Raises:
        ValueError: If the bytes are empty or cannot be decoded
    """
    import cv2

    if not data:
        raise ValueError("Could not decode image: no data")

    buffer = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buffer, cv2.IMREAD_COLOR)

    if img is None:
        raise ValueError(f"Could not decode image ({len(data)} bytes)")

    logger.debug(f"Decoded image, shape: {img.shape}")
    return img


def to_bgr(image: np.ndarray) -> np.ndarray:
    """Convert grayscale or BGRA images to 3-channel BGR."""
    import cv2

    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    elif len(image.shape) == 3:
        if image.shape[2] == 3:
            return image
        elif image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
        elif image.shape[2] == 1:
            return cv2.cvtColor(image.squeeze(axis=2), cv2.COLOR_GRAY2BGR)

    raise ValueError(f"Unexpected image shape: {image.shape}")


def encode_jpeg(image: np.ndarray, quality: int = 92) -> bytes:
    """
    Encode a BGR image as JPEG.

    Args:
        image: Numpy array representing the image
        quality: JPEG quality (1-100)

    Returns:
        JPEG bytes
    """
    import cv2

    ok, encoded = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise ValueError(f"Could not encode image of shape {image.shape}")
    return encoded.tobytes()


# ============================================================================
# File Output
# ============================================================================

def ensure_dir(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_bytes(data: bytes, output_path: Union[str, Path]) -> Path:
    """
    Write a finished byte stream to disk.

    Written to a ".part" sibling first, then renamed into place. If either
    step fails the ".part" file is removed and the error re-raised.
    """
    output_path = Path(output_path)
    ensure_dir(output_path.parent)

    tmp_path = output_path.with_name(output_path.name + ".part")
    try:
        tmp_path.write_bytes(data)
        tmp_path.replace(output_path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Saved {len(data)} bytes: {output_path}")
    return output_path
