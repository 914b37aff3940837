"""
Document analyzer: routes a stored file to the image or PDF pipeline.
"""

import asyncio
import base64
import logging
import os
from typing import assert_never

# Handle both package imports and standalone imports
try:
    from ..models import AnalysisResult, BatchItemResult, FileCategory, ImageData, LabeledCertificate
    from .ai import (
        CERTIFICATE_EXTRACTION_PROMPT,
        IMAGE_DESCRIPTION_PROMPT,
        AIService,
        build_pdf_summary_prompt,
    )
    from .file_types import FileAccessError, detect_file_type, get_mime_type, read_file
    from .image_service import DEFAULT_MAX_SIZE, optimize_image
    from .pdf_service import PDFExtractionError, PDFService
    from .shaping import label_extracted_data, parse_structured_response
except ImportError:
    from models import AnalysisResult, BatchItemResult, FileCategory, ImageData, LabeledCertificate
    from services.ai import (
        CERTIFICATE_EXTRACTION_PROMPT,
        IMAGE_DESCRIPTION_PROMPT,
        AIService,
        build_pdf_summary_prompt,
    )
    from services.file_types import FileAccessError, detect_file_type, get_mime_type, read_file
    from services.image_service import DEFAULT_MAX_SIZE, optimize_image
    from services.pdf_service import PDFExtractionError, PDFService
    from services.shaping import label_extracted_data, parse_structured_response

logger = logging.getLogger(__name__)


class UnsupportedFileTypeError(Exception):
    """Raised when a file is neither an image nor a PDF."""

    def __init__(self, message: str = "Unsupported file type"):
        super().__init__(message)


class DocumentAnalyzer:
    """
    Orchestrates analysis of stored uploads.

    Images are downsampled and sent with a structured extraction prompt;
    PDFs have their text extracted and summarized by the text model.
    """

    def __init__(
        self,
        ai_service: AIService,
        pdf_service: PDFService | None = None,
        max_image_size: int = DEFAULT_MAX_SIZE,
    ):
        """
        Initialize the analyzer.

        Args:
            ai_service: Shared AI service, built once at startup.
            pdf_service: PDF text extractor.
            max_image_size: Bounding box size for image downsampling.
        """
        self.ai_service = ai_service
        self.pdf_service = pdf_service or PDFService()
        self.max_image_size = max_image_size

    async def _prepare_image(self, image_path: str | os.PathLike) -> ImageData:
        """Downsample an image and encode it for inline transmission."""
        optimized = await asyncio.to_thread(
            optimize_image, image_path, self.max_image_size
        )
        return ImageData(
            base64=base64.b64encode(optimized).decode("utf-8"),
            mime_type=get_mime_type(image_path),
        )

    async def describe_image(self, image_path: str | os.PathLike) -> str:
        """Ask the image model for a free-form analysis of an image."""
        image = await self._prepare_image(image_path)
        return await self.ai_service.analyze(
            IMAGE_DESCRIPTION_PROMPT, image, model=self.ai_service.image_model
        )

    async def extract_image_text(self, image_path: str | os.PathLike) -> dict:
        """
        Extract certificate fields from an image.

        Returns:
            The parsed fields, or an error envelope with the raw model text
            when the response is not JSON.
        """
        image = await self._prepare_image(image_path)
        result = await self.ai_service.analyze(
            CERTIFICATE_EXTRACTION_PROMPT, image, model=self.ai_service.image_model
        )
        return parse_structured_response(result)

    async def extract_pdf_content(self, pdf_path: str | os.PathLike) -> str | None:
        """
        Summarize the text of a PDF with the text model.

        Read and parse failures are logged and reported as None; errors from
        the model call propagate.
        """
        try:
            pdf_bytes = await asyncio.to_thread(read_file, pdf_path)
            pdf_text = await asyncio.to_thread(self.pdf_service.extract_text, pdf_bytes)
        except (FileAccessError, PDFExtractionError) as e:
            logger.error("PDF extraction error for %s: %s", pdf_path, e)
            return None

        return await self.ai_service.analyze(
            build_pdf_summary_prompt(pdf_text), model=self.ai_service.text_model
        )

    async def _process_image(self, image_path: str | os.PathLike) -> LabeledCertificate:
        extracted_data = await self.extract_image_text(image_path)
        return label_extracted_data(extracted_data)

    async def process_document(self, file_path: str | os.PathLike) -> AnalysisResult:
        """
        Analyze a single stored file.

        Args:
            file_path: Path of the file on disk.

        Returns:
            A LabeledCertificate for images, the summary text (or None) for PDFs.

        Raises:
            UnsupportedFileTypeError: If the extension is neither image nor PDF.
        """
        file_type = detect_file_type(file_path)
        logger.info("Processing %s as %s", file_path, file_type.value)

        if file_type is FileCategory.IMAGE:
            return await self._process_image(file_path)
        elif file_type is FileCategory.PDF:
            return await self.extract_pdf_content(file_path)
        elif file_type is FileCategory.UNKNOWN:
            raise UnsupportedFileTypeError()
        else:
            assert_never(file_type)

    async def _process_batch_item(self, file_path: str | os.PathLike) -> BatchItemResult:
        try:
            content = await self.process_document(file_path)
        except Exception as e:
            logger.error("Batch item %s failed: %s", file_path, e)
            return BatchItemResult(file_path=str(file_path), error=str(e))
        return BatchItemResult(file_path=str(file_path), content=content)

    async def process_batch(
        self, file_paths: list[str | os.PathLike]
    ) -> list[BatchItemResult]:
        """
        Analyze several files concurrently.

        A failure in one file is recorded on its entry and does not affect
        the others. Results are returned in input order.
        """
        logger.info("Starting batch analysis of %d file(s)", len(file_paths))
        results = await asyncio.gather(
            *(self._process_batch_item(file_path) for file_path in file_paths)
        )
        failed = sum(1 for result in results if not result.ok)
        logger.info(
            "Batch analysis finished: %d succeeded, %d failed",
            len(results) - failed,
            failed,
        )
        return list(results)
