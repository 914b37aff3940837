"""
Image preprocessing using Pillow.

Downsamples uploaded images before they are sent to the AI model.
"""

import io
import logging
import os

from PIL import Image, UnidentifiedImageError

# Handle both package imports and standalone imports
try:
    from .file_types import resolve_file_path
except ImportError:
    from services.file_types import resolve_file_path

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1024


class ImageProcessingError(Exception):
    """Raised when an image cannot be read or re-encoded."""

    pass


def optimize_image(
    image_path: str | os.PathLike, max_size: int = DEFAULT_MAX_SIZE
) -> bytes:
    """
    Resize an image to fit inside a max_size x max_size box.

    Aspect ratio is kept and smaller images are never enlarged. The result
    is re-encoded in the source format (PNG if the source format is unknown).

    Args:
        image_path: Path to the image file.
        max_size: Maximum width and height in pixels.

    Returns:
        Encoded image bytes.

    Raises:
        ImageProcessingError: If the file cannot be read or decoded.
    """
    resolved_path = resolve_file_path(image_path)
    try:
        with Image.open(resolved_path) as image:
            image_format = image.format or "PNG"
            original_size = image.size
            image.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            image.save(buffer, format=image_format)

        logger.info(
            "Optimized image %s: %dx%d -> %dx%d (%s)",
            resolved_path.name,
            original_size[0],
            original_size[1],
            image.size[0],
            image.size[1],
            image_format,
        )
        return buffer.getvalue()

    except (OSError, UnidentifiedImageError, KeyError, ValueError) as e:
        logger.error("Image optimization error for %s: %s", resolved_path, e)
        raise ImageProcessingError(f"Failed to optimize image: {e}") from e
