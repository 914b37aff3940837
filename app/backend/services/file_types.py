"""
File type detection and path helpers.

Maps file extensions to the coarse categories the analyzer dispatches on.
"""

import logging
import os
from pathlib import Path

# Handle both package imports and standalone imports
try:
    from ..models import FileCategory
except ImportError:
    from models import FileCategory

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp", "tiff"})
PDF_EXTENSIONS = frozenset({"pdf"})

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "pdf": "application/pdf",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


class FileAccessError(Exception):
    """Raised when a stored file cannot be read."""

    pass


def get_extension(file_path: str | os.PathLike) -> str:
    """Return the lower-cased extension of a path, without the dot."""
    return Path(file_path).suffix.lower().lstrip(".")


def detect_file_type(file_path: str | os.PathLike) -> FileCategory:
    """
    Detect the category of a file from its extension.

    Args:
        file_path: Path or filename to inspect.

    Returns:
        FileCategory.IMAGE, FileCategory.PDF or FileCategory.UNKNOWN.
    """
    extension = get_extension(file_path)
    if extension in IMAGE_EXTENSIONS:
        return FileCategory.IMAGE
    if extension in PDF_EXTENSIONS:
        return FileCategory.PDF
    return FileCategory.UNKNOWN


def get_mime_type(file_path: str | os.PathLike) -> str:
    """Guess the MIME type of a file from its extension."""
    return MIME_TYPES.get(get_extension(file_path), DEFAULT_MIME_TYPE)


def resolve_file_path(file_path: str | os.PathLike) -> Path:
    """Resolve relative paths against the current working directory."""
    path = Path(file_path)
    return path if path.is_absolute() else Path.cwd() / path


def read_file(file_path: str | os.PathLike) -> bytes:
    """
    Read a stored file.

    Raises:
        FileAccessError: If the file is missing or unreadable.
    """
    resolved_path = resolve_file_path(file_path)
    try:
        return resolved_path.read_bytes()
    except OSError as e:
        logger.error("File access error: %s (%s)", resolved_path, e)
        raise FileAccessError(f"Cannot read file: {resolved_path}. {e}") from e
