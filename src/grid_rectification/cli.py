"""
Command-line entry point for grid rectification.

Usage:
    grid-rectify --image sheet.jpg --rows 10 --cols 4 --output rectified.png
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from src.grid_rectification.config_loader import get_default_config, load_config
from src.grid_rectification.processor import GridRectificationProcessor
from src.utils.io import load_image, save_image
from src.utils.visualization import draw_detection_overlay

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Detect a grid in an image, reorient its cells and crop it",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--image", type=str, required=True, help="Input image path")
    parser.add_argument("--rows", type=int, required=True, help="Number of grid rows")
    parser.add_argument("--cols", type=int, required=True, help="Number of grid columns")
    parser.add_argument(
        "--output", type=str, required=True, help="Path of the rectified image"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration YAML (defaults to the bundled config.yaml)",
    )
    parser.add_argument(
        "--overlay",
        type=str,
        default=None,
        help="Optional path for a debug image with the detected boundary and grid",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.rows < 1 or args.cols < 1:
        logger.error(f"rows and cols must be at least 1, got {args.rows}x{args.cols}")
        return 2

    try:
        config = load_config(Path(args.config)) if args.config else get_default_config()
        image = load_image(args.image)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load input: {e}")
        return 2

    processor = GridRectificationProcessor(config=config)
    result = processor.process(image, rows=args.rows, cols=args.cols)

    if args.overlay and result.quadrilateral is not None:
        overlay = draw_detection_overlay(image, result.quadrilateral, result.grid)
        save_image(overlay, args.overlay)

    if not result.is_pass():
        print(result.get_error_message())
        return 1

    save_image(result.rectified_image, args.output)
    if result.used_bounding_rect_fallback:
        logger.warning(
            f"Boundary had {result.vertex_count} vertices; "
            "used its bounding rectangle instead"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
