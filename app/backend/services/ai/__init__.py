"""
AI service package for document understanding.

This package provides:
- classification: Classification of model errors for the fallback branch
- prompts: Prompts sent to the model
- exceptions: Shared AI exceptions

The AIService class sends prompts (optionally with an inline image) to
Google Gemini through its OpenAI-compatible endpoint.
"""

import logging
from typing import Any

# Handle both package imports and standalone imports
try:
    from ...models import ImageData
except ImportError:
    from models import ImageData

from .classification import ModelErrorClassification, classify_model_error
from .exceptions import AIServiceError
from .prompts import (
    CERTIFICATE_EXTRACTION_PROMPT,
    IMAGE_DESCRIPTION_PROMPT,
    build_pdf_summary_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

__all__ = [
    "AIService",
    "AIServiceError",
    "ModelErrorClassification",
    "classify_model_error",
    "create_ai_service",
    "CERTIFICATE_EXTRACTION_PROMPT",
    "IMAGE_DESCRIPTION_PROMPT",
    "build_pdf_summary_prompt",
]


class AIService:
    """
    Service for AI-powered document analysis.

    Uses a Gemini "flash" model for images and a "pro" model for text, with
    a single retry on a fallback model when the requested model is reported
    as deprecated or not found.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        image_model: str = "gemini-1.5-flash",
        text_model: str = "gemini-1.5-pro",
        fallback_model: str = "gemini-1.5-flash",
        client: Any = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: Gemini API key.
            base_url: OpenAI-compatible endpoint of the Gemini API.
            image_model: Model used for prompts that carry an image.
            text_model: Model used for text-only prompts.
            fallback_model: Model retried when the requested one is retired.
            client: Pre-built AsyncOpenAI-compatible client (used by tests).
        """
        self.api_key = api_key
        self.base_url = base_url
        self.image_model = image_model
        self.text_model = text_model
        self.fallback_model = fallback_model
        self._client = client

        if self._client is None and not self.api_key:
            logger.warning(
                "No Gemini API key configured. Set GEMINI_API_KEY in .env before analyzing documents."
            )

    @property
    def client(self):
        """Lazy-load the AsyncOpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "Gemini API key not provided. Set GEMINI_API_KEY environment variable."
                )
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _build_messages(
        self, prompt: str, image: ImageData | None = None
    ) -> list[dict[str, Any]]:
        """Build the chat messages for a prompt and optional inline image."""
        if image is None:
            return [{"role": "user", "content": prompt}]

        mime_type = image.mime_type or DEFAULT_IMAGE_MIME_TYPE
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{image.base64}"},
                    },
                ],
            }
        ]

    async def _complete(self, model: str, messages: list[dict[str, Any]]) -> str:
        """Send messages to a model and return the response text."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
        )
        content = response.choices[0].message.content
        if not content:
            raise AIServiceError(f"Empty response from {model}")
        return content

    async def analyze(
        self,
        prompt: str,
        image: ImageData | None = None,
        model: str | None = None,
    ) -> str:
        """
        Send a prompt, optionally with an inline image, and return the text.

        Args:
            prompt: Instructions for the model.
            image: Base64 image payload to send inline.
            model: Model to call. Defaults to the image model when an image
                is given and to the text model otherwise.

        Returns:
            The model's response text.

        Raises:
            Exception: Whatever the client raised, when the error does not
                qualify for the fallback or the fallback call fails too.
        """
        if model is None:
            model = self.image_model if image is not None else self.text_model
        messages = self._build_messages(prompt, image)

        try:
            return await self._complete(model, messages)
        except Exception as e:
            logger.error("Gemini analysis error (%s): %s", model, e)

            classification = classify_model_error(e)
            if not classification.should_fall_back:
                raise

            logger.warning(
                "Switching to alternative Gemini model %s (%r)",
                self.fallback_model,
                classification,
            )
            try:
                return await self._complete(self.fallback_model, messages)
            except Exception as fallback_error:
                logger.error("Fallback model error: %s", fallback_error)
                raise


def create_ai_service(settings: Any = None) -> AIService:
    """
    Build the AI service from application settings.

    Called once at startup; the instance is handed to the analyzer.
    """
    if settings is None:
        try:
            from ...config import get_settings
        except ImportError:
            from config import get_settings

        settings = get_settings()

    return AIService(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        image_model=settings.image_model,
        text_model=settings.text_model,
        fallback_model=settings.fallback_model,
    )
