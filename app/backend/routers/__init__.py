"""
Routers package for FastAPI endpoints.

Organized by domain:
- upload: Single and multiple file upload endpoints
"""

from . import upload

__all__ = ["upload"]
