"""
Upload handling: validates multipart files and stores them on disk.

The acceptors are FastAPI dependencies, so a rejected upload never reaches
the route handler.
"""

import logging
import random
import time
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request, status
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

# Handle both package imports and standalone imports
try:
    from ..config import get_settings
    from ..models import UploadedFile
except ImportError:
    from config import get_settings
    from models import UploadedFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class UploadError(Exception):
    """Raised when an upload is rejected. Carries the HTTP status to answer with."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidFileTypeError(UploadError):
    """Raised when the declared content type is not allowed."""

    def __init__(self, mime_type: str | None = None):
        super().__init__("Invalid file type, please upload png, jpg, svg, or pdf instead.")
        self.mime_type = mime_type


class FileTooLargeError(UploadError):
    """Raised when a file exceeds the size limit."""

    status_code = status.HTTP_413_CONTENT_TOO_LARGE

    def __init__(self, max_size: int):
        super().__init__(f"File too large (limit is {max_size} bytes)")
        self.max_size = max_size


class TooManyFilesError(UploadError):
    """Raised when more files arrive than a route accepts."""

    def __init__(self, max_count: int):
        super().__init__(f"Too many files (limit is {max_count})")
        self.max_count = max_count


class UploadStorage:
    """
    Stores uploaded files under a single directory.

    Filenames are made unique as ``<fieldname>-<epoch ms>-<random>.<ext>``.
    """

    def __init__(
        self,
        upload_dir: Path,
        allowed_mime_types: list[str],
        max_file_size: int,
    ):
        self.upload_dir = Path(upload_dir)
        self.allowed_mime_types = set(allowed_mime_types)
        self.max_file_size = max_file_size

    def generate_filename(self, fieldname: str, original_name: str) -> str:
        """Build a collision-resistant filename keeping the original extension."""
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{fieldname}-{unique_suffix}{Path(original_name).suffix}"

    def check_mime_type(self, mime_type: str | None) -> None:
        """
        Raises:
            InvalidFileTypeError: If the content type is not in the allow-list.
        """
        if mime_type not in self.allowed_mime_types:
            logger.warning("Rejected upload with content type %s", mime_type)
            raise InvalidFileTypeError(mime_type)

    async def save(self, fieldname: str, upload: UploadFile) -> UploadedFile:
        """
        Validate and write one uploaded file.

        Args:
            fieldname: Multipart field the file arrived under.
            upload: The uploaded file.

        Returns:
            The stored file record.

        Raises:
            InvalidFileTypeError: If the content type is not allowed.
            FileTooLargeError: If the payload exceeds the size limit.
        """
        original_name = upload.filename or ""
        self.check_mime_type(upload.content_type)

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        stored_filename = self.generate_filename(fieldname, original_name)
        stored_path = self.upload_dir / stored_filename

        size = 0
        try:
            out = await run_in_threadpool(open, stored_path, "wb")
            try:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_file_size:
                        raise FileTooLargeError(self.max_file_size)
                    await run_in_threadpool(out.write, chunk)
            finally:
                await run_in_threadpool(out.close)
        except FileTooLargeError:
            logger.warning("Rejected %s: exceeds %d bytes", original_name, self.max_file_size)
            stored_path.unlink(missing_ok=True)
            raise
        finally:
            await upload.close()

        logger.info("Stored upload %s as %s (%d bytes)", original_name, stored_path, size)
        return UploadedFile(
            fieldname=fieldname,
            original_name=original_name,
            stored_filename=stored_filename,
            stored_path=stored_path,
            mime_type=upload.content_type or "",
            size=size,
        )

    def discard(self, uploaded: list[UploadedFile]) -> None:
        """Remove files stored earlier in a request that was later rejected."""
        for item in uploaded:
            item.stored_path.unlink(missing_ok=True)


@lru_cache
def get_upload_storage() -> UploadStorage:
    """Get the upload storage configured from settings."""
    settings = get_settings()
    return UploadStorage(
        upload_dir=settings.upload_dir,
        allowed_mime_types=settings.allowed_mime_types,
        max_file_size=settings.max_upload_size,
    )


def _form_files(form, fieldname: str) -> list[UploadFile]:
    """Return the files sent under a field, ignoring empty file inputs."""
    return [
        value
        for value in form.getlist(fieldname)
        if isinstance(value, UploadFile) and value.filename
    ]


def single_file(fieldname: str):
    """
    Dependency accepting one file under ``fieldname``.

    Resolves to None when the field is absent.
    """

    async def accept_single(
        request: Request,
        storage: UploadStorage = Depends(get_upload_storage),
    ) -> UploadedFile | None:
        form = await request.form()
        files = _form_files(form, fieldname)
        if not files:
            return None
        if len(files) > 1:
            raise TooManyFilesError(1)
        return await storage.save(fieldname, files[0])

    return accept_single


def file_array(fieldname: str, max_count: int | None = None):
    """
    Dependency accepting up to ``max_count`` files under ``fieldname``.

    The count is checked before anything is written to disk.
    """

    async def accept_array(
        request: Request,
        storage: UploadStorage = Depends(get_upload_storage),
    ) -> list[UploadedFile]:
        limit = max_count if max_count is not None else get_settings().max_upload_files
        form = await request.form()
        files = _form_files(form, fieldname)
        if len(files) > limit:
            logger.warning("Rejected %d files on field %s (limit %d)", len(files), fieldname, limit)
            raise TooManyFilesError(limit)

        stored: list[UploadedFile] = []
        try:
            for upload in files:
                stored.append(await storage.save(fieldname, upload))
        except UploadError:
            storage.discard(stored)
            raise
        return stored

    return accept_array
