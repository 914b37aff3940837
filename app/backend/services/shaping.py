"""
Reshaping of AI responses into the structures returned to clients.
"""

import json
import logging
import re
from typing import Any

# Handle both package imports and standalone imports
try:
    from ..models import ExtractionErrorPayload, LabeledCertificate
except ImportError:
    from models import ExtractionErrorPayload, LabeledCertificate

logger = logging.getLogger(__name__)

CERTIFICATE_LABELS = {
    "recipientName": "Nama Penerima",
    "eventTitle": "Judul Acara",
    "eventDate": "Tanggal Acara",
    "description": "Deskripsi",
    "issuedBy": "Dikeluarkan Oleh",
}

_CODE_FENCE_PATTERN = re.compile(r"```json|```")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_DISALLOWED_CHARS_PATTERN = re.compile(r"[^\w\s .,!?-]")


def _reject_constant(name: str) -> float:
    raise ValueError(f"Invalid JSON constant: {name}")


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence markers and surrounding whitespace."""
    return _CODE_FENCE_PATTERN.sub("", text).strip()


def parse_structured_response(text: str) -> dict[str, Any]:
    """
    Parse the model's JSON answer, tolerating Markdown code fences.

    Args:
        text: Raw response text from the model.

    Returns:
        The parsed object, or an error envelope holding the raw text when
        the response is not a JSON object.
    """
    try:
        parsed = json.loads(strip_code_fences(text), parse_constant=_reject_constant)
    except ValueError as e:
        logger.error("JSON parsing error: %s", e)
        return ExtractionErrorPayload(extracted_text=text).model_dump(by_alias=True)

    if not isinstance(parsed, dict):
        logger.error("Expected a JSON object, got %s", type(parsed).__name__)
        return ExtractionErrorPayload(extracted_text=text).model_dump(by_alias=True)
    return parsed


def label_extracted_data(extracted_data: dict[str, Any]) -> LabeledCertificate:
    """Attach the display labels to extracted certificate values."""
    return LabeledCertificate(labels=dict(CERTIFICATE_LABELS), values=extracted_data)


def clean_extracted_text(text: str) -> str:
    """Collapse whitespace and drop characters outside word chars and basic punctuation."""
    text = _WHITESPACE_PATTERN.sub(" ", text)
    text = _DISALLOWED_CHARS_PATTERN.sub("", text)
    return text.strip()
