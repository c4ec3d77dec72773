"""
I/O Utilities

Image file input/output operations.
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode an encoded image (PNG, JPEG, ...) into a BGR array.

    Args:
        data: Encoded image bytes.

    Returns:
        Decoded image as numpy array (H, W, 3).

    Raises:
        ValueError: If the bytes cannot be decoded.
    """
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
    if image is None:
        raise ValueError("Could not decode image data")
    return image


def load_image(file_path: Union[str, Path]) -> np.ndarray:
    """
    Load an image file into a BGR array.

    Reads the bytes first so non-ASCII paths work on every platform.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a decodable image.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Image not found: {file_path}")
    image = decode_image(file_path.read_bytes())
    logger.debug(f"Loaded {file_path} ({image.shape[1]}x{image.shape[0]})")
    return image


def save_image(image: np.ndarray, file_path: Union[str, Path]) -> None:
    """Save image to a file; the format follows the file extension."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    ok, encoded = cv2.imencode(file_path.suffix or ".png", image)
    if not ok:
        raise ValueError(f"Could not encode image as {file_path.suffix}")
    file_path.write_bytes(encoded.tobytes())
    logger.info(f"Saved image to {file_path}")
