"""
Shared Utilities

Common functions used across all modules.
"""

from src.utils.io import decode_image, load_image, save_image
from src.utils.visualization import draw_detection_overlay

__all__ = [
    "decode_image",
    "load_image",
    "save_image",
    "draw_detection_overlay",
]
