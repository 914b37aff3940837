"""Test doubles and sample file builders."""

import io
from types import SimpleNamespace

from PIL import Image

from app.backend.models import ImageData


class FakeAIService:
    """Stands in for AIService, returning canned text and recording calls."""

    image_model = "gemini-1.5-flash"
    text_model = "gemini-1.5-pro"

    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    async def analyze(
        self, prompt: str, image: ImageData | None = None, model: str | None = None
    ) -> str:
        self.calls.append({"prompt": prompt, "image": image, "model": model})
        if self.error is not None:
            raise self.error
        return self.response


class FakeChatClient:
    """
    Minimal AsyncOpenAI look-alike.

    ``outcomes`` maps a model name to the text it returns or the exception
    it raises.
    """

    def __init__(self, outcomes: dict[str, str | Exception]):
        self.outcomes = outcomes
        self.requests: list[dict] = []
        self.chat = SimpleNamespace(completions=self)

    async def create(self, model: str, messages: list[dict]):
        self.requests.append({"model": model, "messages": messages})
        outcome = self.outcomes[model]
        if isinstance(outcome, Exception):
            raise outcome
        message = SimpleNamespace(content=outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


CERTIFICATE_RESPONSE = """```json
{
  "recipientName": "Budi Santoso",
  "eventTitle": "Seminar Nasional AI",
  "eventDate": "2024-05-12",
  "description": "Peserta",
  "issuedBy": "Universitas Indonesia",
  "additionalNotes": null
}
```"""


def make_image_bytes(size: tuple[int, int] = (64, 32), format: str = "PNG") -> bytes:
    """Encode a solid color image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color="red").save(buffer, format=format)
    return buffer.getvalue()


def make_pdf_bytes(pages: list[str]) -> bytes:
    """Build a PDF with one line of text per page."""
    import fitz

    document = fitz.open()
    for text in pages:
        page = document.new_page()
        page.insert_text((72, 72), text)
    pdf_bytes = document.tobytes()
    document.close()
    return pdf_bytes
