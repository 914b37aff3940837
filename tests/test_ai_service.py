"""Tests for AI service and model fallback."""

import httpx
import openai
import pytest

from app.backend.config import Settings
from app.backend.models import ImageData
from app.backend.services.ai import (
    AIService,
    AIServiceError,
    classify_model_error,
    create_ai_service,
)
from tests.helpers import FakeChatClient


def _not_found_error(message: str = "model not found") -> openai.NotFoundError:
    request = httpx.Request("POST", "https://example.test/chat/completions")
    response = httpx.Response(404, request=request)
    return openai.NotFoundError(message, response=response, body=None)


class TestClassifyModelError:
    """Tests for model error classification."""

    def test_deprecated_message(self):
        result = classify_model_error(RuntimeError("model gemini-1.0 is deprecated"))
        assert result.is_deprecated is True
        assert result.is_not_found is False
        assert result.should_fall_back is True

    def test_not_found_message(self):
        result = classify_model_error(RuntimeError("[404 Not Found] models/x"))
        assert result.is_not_found is True
        assert result.should_fall_back is True

    def test_sdk_not_found_error(self):
        result = classify_model_error(_not_found_error())
        assert result.is_not_found is True
        assert result.is_deprecated is False

    def test_other_errors_do_not_fall_back(self):
        result = classify_model_error(RuntimeError("429 Too Many Requests"))
        assert result.is_deprecated is False
        assert result.is_not_found is False
        assert result.should_fall_back is False

    def test_marker_is_case_sensitive(self):
        assert classify_model_error(RuntimeError("Deprecated")).is_deprecated is False


class TestAIServiceAnalyze:
    """Tests for AIService.analyze."""

    @pytest.mark.asyncio
    async def test_text_prompt_uses_text_model(self):
        client = FakeChatClient({"gemini-1.5-pro": "summary"})
        service = AIService(client=client)

        assert await service.analyze("summarize this") == "summary"
        request = client.requests[0]
        assert request["model"] == "gemini-1.5-pro"
        assert request["messages"] == [{"role": "user", "content": "summarize this"}]

    @pytest.mark.asyncio
    async def test_image_prompt_sends_inline_data(self):
        client = FakeChatClient({"gemini-1.5-flash": "{}"})
        service = AIService(client=client)

        await service.analyze("describe", ImageData(base64="QUJD", mime_type="image/png"))
        request = client.requests[0]
        assert request["model"] == "gemini-1.5-flash"
        parts = request["messages"][0]["content"]
        assert parts[0] == {"type": "text", "text": "describe"}
        assert parts[1]["image_url"]["url"] == "data:image/png;base64,QUJD"

    @pytest.mark.asyncio
    async def test_image_mime_type_defaults_to_jpeg(self):
        client = FakeChatClient({"gemini-1.5-flash": "{}"})
        service = AIService(client=client)

        await service.analyze("describe", ImageData(base64="QUJD"))
        url = client.requests[0]["messages"][0]["content"][1]["image_url"]["url"]
        assert url.startswith("data:image/jpeg;base64,")

    @pytest.mark.asyncio
    async def test_deprecated_model_falls_back_once(self):
        client = FakeChatClient(
            {
                "gemini-1.5-pro": RuntimeError("gemini-1.5-pro is deprecated"),
                "gemini-1.5-flash": "fallback answer",
            }
        )
        service = AIService(client=client)

        assert await service.analyze("summarize") == "fallback answer"
        assert [r["model"] for r in client.requests] == ["gemini-1.5-pro", "gemini-1.5-flash"]
        assert client.requests[0]["messages"] == client.requests[1]["messages"]

    @pytest.mark.asyncio
    async def test_not_found_falls_back_with_same_image_payload(self):
        client = FakeChatClient(
            {"old-vision": _not_found_error(), "gemini-1.5-flash": "ok"}
        )
        service = AIService(client=client, image_model="old-vision")

        result = await service.analyze("describe", ImageData(base64="QUJD", mime_type="image/png"))
        assert result == "ok"
        assert client.requests[0]["messages"] == client.requests[1]["messages"]

    @pytest.mark.asyncio
    async def test_other_errors_propagate_unchanged(self):
        error = RuntimeError("quota exceeded")
        client = FakeChatClient({"gemini-1.5-pro": error})
        service = AIService(client=client)

        with pytest.raises(RuntimeError) as exc_info:
            await service.analyze("summarize")
        assert exc_info.value is error
        assert len(client.requests) == 1

    @pytest.mark.asyncio
    async def test_fallback_failure_propagates(self):
        fallback_error = RuntimeError("fallback unavailable")
        client = FakeChatClient(
            {
                "gemini-1.5-pro": RuntimeError("404 Not Found"),
                "gemini-1.5-flash": fallback_error,
            }
        )
        service = AIService(client=client)

        with pytest.raises(RuntimeError) as exc_info:
            await service.analyze("summarize")
        assert exc_info.value is fallback_error
        assert len(client.requests) == 2

    @pytest.mark.asyncio
    async def test_empty_response_raises(self):
        client = FakeChatClient({"gemini-1.5-pro": ""})
        service = AIService(client=client)

        with pytest.raises(AIServiceError):
            await service.analyze("summarize")

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self):
        service = AIService(api_key=None)

        with pytest.raises(AIServiceError) as exc_info:
            await service.analyze("summarize")
        assert "API key" in str(exc_info.value)


class TestCreateAIService:
    """Tests for building the service from settings."""

    def test_models_come_from_settings(self):
        settings = Settings(
            gemini_api_key="test-key",
            image_model="vision-x",
            text_model="text-x",
            fallback_model="backup-x",
        )
        service = create_ai_service(settings)
        assert service.api_key == "test-key"
        assert service.image_model == "vision-x"
        assert service.text_model == "text-x"
        assert service.fallback_model == "backup-x"

    def test_legacy_env_var_is_accepted(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("SECRET_KEY_GENERATIVE_AI", "legacy-key")
        assert Settings().gemini_api_key == "legacy-key"
