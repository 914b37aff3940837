"""
Router for file upload endpoints.

Handles:
- Single file upload with analysis
- Multiple file upload (stored only, not analyzed)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse

# Handle both package imports and standalone imports
try:
    from ..models import (
        ErrorResponse,
        StoredFileInfo,
        UploadedFile,
        UploadMultipleResponse,
        UploadSingleResponse,
    )
    from ..services.analyzer import DocumentAnalyzer
    from ..services.uploads import file_array, single_file
except ImportError:
    from models import (
        ErrorResponse,
        StoredFileInfo,
        UploadedFile,
        UploadMultipleResponse,
        UploadSingleResponse,
    )
    from services.analyzer import DocumentAnalyzer
    from services.uploads import file_array, single_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["upload"])


def get_document_analyzer(request: Request) -> DocumentAnalyzer:
    """Return the analyzer built at application startup."""
    return request.app.state.analyzer


@router.post(
    "/upload-single",
    response_model=UploadSingleResponse,
    responses={
        400: {"description": "No file uploaded or invalid file type"},
        413: {"model": ErrorResponse, "description": "File too large"},
    },
)
async def upload_single(
    uploaded: Annotated[UploadedFile | None, Depends(single_file("file"))],
    analyzer: Annotated[DocumentAnalyzer, Depends(get_document_analyzer)],
) -> UploadSingleResponse | PlainTextResponse:
    """
    Upload one file and analyze it.

    Images come back as labeled certificate fields, PDFs as summary text.
    """
    if uploaded is None:
        return PlainTextResponse(
            "No file uploaded.", status_code=status.HTTP_400_BAD_REQUEST
        )

    logger.info("Analyzing %s (%d bytes)", uploaded.stored_filename, uploaded.size)
    result = await analyzer.process_document(uploaded.stored_path)

    return UploadSingleResponse(
        message="File analyze successfully",
        filename=uploaded.stored_filename,
        path=str(uploaded.stored_path),
        result=result,
    )


@router.post(
    "/upload-multiple",
    response_model=UploadMultipleResponse,
    responses={400: {"description": "No files uploaded, too many files or invalid file type"}},
)
async def upload_multiple(
    uploaded: Annotated[list[UploadedFile], Depends(file_array("files"))],
) -> UploadMultipleResponse | PlainTextResponse:
    """Upload up to five files. The files are stored but not analyzed."""
    if not uploaded:
        return PlainTextResponse(
            "No files uploaded.", status_code=status.HTTP_400_BAD_REQUEST
        )

    return UploadMultipleResponse(
        message="Files uploaded successfully",
        files=[
            StoredFileInfo(filename=item.stored_filename, path=str(item.stored_path))
            for item in uploaded
        ],
    )
