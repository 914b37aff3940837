"""
Document Analyzer Backend Application.

A FastAPI service that accepts uploaded images and PDFs and extracts
structured information from them using Google Gemini.
"""

__version__ = "1.0.0"
