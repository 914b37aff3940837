"""
FastAPI application for the document analyzer service.

Provides endpoints for:
- Uploading a single image or PDF and analyzing it with Gemini
- Uploading several files for storage
- Health checks
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Handle both package imports (when running as module) and standalone imports (uvicorn main:app)
try:
    from . import __version__
    from .config import get_settings
    from .models import ErrorResponse, HealthResponse
    from .routers import upload
    from .services.ai import create_ai_service
    from .services.analyzer import DocumentAnalyzer
    from .services.pdf_service import get_pdf_service
    from .services.uploads import UploadError
except ImportError:
    import sys
    from pathlib import Path
    # Add parent directory to path for standalone imports
    backend_dir = Path(__file__).parent
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))
    from config import get_settings
    from models import ErrorResponse, HealthResponse
    from routers import upload
    from services.ai import create_ai_service
    from services.analyzer import DocumentAnalyzer
    from services.pdf_service import get_pdf_service
    from services.uploads import UploadError

    __version__ = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Document Analyzer Service...")
    settings = get_settings()
    # One AI client for the whole process, shared by every request
    app.state.analyzer = DocumentAnalyzer(
        ai_service=create_ai_service(settings),
        pdf_service=get_pdf_service(),
        max_image_size=settings.max_image_size,
    )
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down Document Analyzer Service...")


# Create FastAPI application
app = FastAPI(
    title="Document Analyzer API",
    description="Extracts structured information from images and PDFs using Gemini",
    version=__version__,
    lifespan=lifespan,
)


# Registered before CORSMiddleware so CORS headers are added to 500 responses too
@app.middleware("http")
async def catch_unhandled_errors(request: Request, call_next):
    """Log any unhandled error and answer 500."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Something went wrong", message=str(exc)).model_dump(),
        )


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(upload.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(UploadError)
async def upload_error_handler(request: Request, exc: UploadError):
    """Handle rejected uploads."""
    logger.warning("Upload rejected on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error="Upload rejected", message=str(exc)).model_dump(),
    )

