"""
Pydantic models for the document analysis pipeline.

Defines the upload record, analysis results and the HTTP envelopes.
Wire names are camelCase; Python attributes stay snake_case.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileCategory(str, Enum):
    """Coarse document categories the analyzer dispatches on."""

    IMAGE = "image"
    PDF = "pdf"
    UNKNOWN = "unknown"


class UploadedFile(CamelModel):
    """
    A file accepted by the upload layer and written to disk.

    Attributes:
        fieldname: Multipart field the file arrived under.
        original_name: Filename as sent by the client.
        stored_filename: Generated unique filename on disk.
        stored_path: Path of the stored file.
        mime_type: Content type declared by the client.
        size: Number of bytes written.
    """

    fieldname: str
    original_name: str
    stored_filename: str
    stored_path: Path
    mime_type: str
    size: int = Field(..., ge=0)


class ImageData(BaseModel):
    """Inline image payload sent alongside a prompt."""

    base64: str
    mime_type: str | None = None


class ExtractionErrorPayload(CamelModel):
    """Returned in place of structured data when the AI output is not JSON."""

    extracted_text: str
    error: str = "Failed to parse structured data"


class LabeledCertificate(BaseModel):
    """Parsed values together with their display labels."""

    labels: dict[str, str]
    values: dict[str, Any]


AnalysisResult = LabeledCertificate | str | None


class BatchItemResult(CamelModel):
    """
    Outcome of one file in a batch.

    Exactly one of ``content`` or ``error`` is set.
    """

    file_path: str
    content: AnalysisResult = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# HTTP Envelopes
# =============================================================================


class UploadSingleResponse(BaseModel):
    """Response model for the upload-single endpoint."""

    message: str = Field(..., description="Status message")
    filename: str = Field(..., description="Stored filename")
    path: str = Field(..., description="Path of the stored file")
    result: AnalysisResult = Field(
        default=None,
        description="Labeled certificate for images, summary text for PDFs",
    )


class StoredFileInfo(BaseModel):
    """Filename and path of one stored upload."""

    filename: str
    path: str


class UploadMultipleResponse(BaseModel):
    """Response model for the upload-multiple endpoint."""

    message: str = Field(..., description="Status message")
    files: list[StoredFileInfo] = Field(..., description="Stored files")


class ErrorResponse(BaseModel):
    """Body returned for rejected uploads and unhandled errors."""

    error: str
    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")
