"""
PDF processing service using PyMuPDF.

Handles extraction of the text layer of PDF documents for AI processing.
"""

import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)


class PDFExtractionError(Exception):
    """Raised when PDF text extraction fails."""

    pass


class PDFService:
    """
    Service for PDF processing operations.

    Uses PyMuPDF (fitz) to read the text of every page.
    """

    def _open(self, file_bytes: bytes | BinaryIO):
        """Open a PDF document from bytes or a file-like object."""
        try:
            # Import here to provide clear error if PyMuPDF not installed
            import fitz
        except ImportError as e:
            logger.error("PyMuPDF not installed: %s", e)
            raise PDFExtractionError(
                "PyMuPDF library not installed. Run: pip install PyMuPDF"
            ) from e

        # Ensure we have bytes
        if hasattr(file_bytes, "read"):
            pdf_bytes = file_bytes.read()
        else:
            pdf_bytes = file_bytes

        if not pdf_bytes:
            raise PDFExtractionError("Empty PDF file provided")

        # Validate PDF magic bytes
        if not pdf_bytes[:4] == b"%PDF":
            raise PDFExtractionError(
                "Invalid PDF file: does not start with PDF header"
            )

        try:
            return fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            logger.error("Could not open PDF: %s", e)
            raise PDFExtractionError(f"Invalid or corrupted PDF file: {e}") from e

    def extract_text(self, file_bytes: bytes | BinaryIO) -> str:
        """
        Extract the text of every page of a PDF.

        Words on a page are joined with a single space; pages are joined
        with a newline.

        Args:
            file_bytes: PDF file as bytes or file-like object.

        Returns:
            The trimmed document text.

        Raises:
            PDFExtractionError: If the document cannot be parsed.
        """
        try:
            with self._open(file_bytes) as document:
                page_count = document.page_count
                page_texts = []
                for page in document:
                    words = page.get_text("words")
                    page_texts.append(" ".join(word[4] for word in words).strip())

            logger.info("Extracted text from %d page(s)", page_count)
            return "\n".join(page_texts).strip()

        except PDFExtractionError as e:
            logger.error("PDF text extraction error: %s", e)
            raise PDFExtractionError("Failed to extract PDF text") from e

        except Exception as e:
            logger.exception("Unexpected error during PDF text extraction")
            raise PDFExtractionError("Failed to extract PDF text") from e


# Singleton instance for convenience
_pdf_service: PDFService | None = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service singleton."""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
