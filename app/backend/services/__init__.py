"""
Services package for the document analyzer.

Contains:
- file_types: Extension based file type detection
- uploads: Upload validation and disk storage
- image_service: Image downsampling with Pillow
- pdf_service: PDF text extraction with PyMuPDF
- ai: Gemini integration with model fallback
- shaping: Reshaping of AI responses
- analyzer: Orchestration of the image and PDF pipelines
"""

from .ai import AIService
from .analyzer import DocumentAnalyzer
from .pdf_service import PDFService

__all__ = ["AIService", "DocumentAnalyzer", "PDFService"]
