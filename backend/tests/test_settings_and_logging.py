import pytest
from pydantic import ValidationError
from unittest.mock import AsyncMock, Mock

from hangout_planner.core.ai_client import GeminiClient
from hangout_planner.core.exceptions import ConfigurationError
from hangout_planner.core.logging_config import redact_api_keys
from hangout_planner.core.settings import Settings

FAKE_KEY = "AIza" + "x" * 35


def test_redact_key_query_param():
    event = {"url": "https://generativelanguage.googleapis.com/v1/models?alt=json&key=SECRET123"}
    out = redact_api_keys(None, None, event.copy())
    assert out["url"].endswith("key=REDACTED")
    assert "SECRET123" not in out["url"]


def test_redact_bare_google_key():
    out = redact_api_keys(None, None, {"error": f"invalid api key {FAKE_KEY} supplied"})
    assert FAKE_KEY not in out["error"]
    assert "REDACTED" in out["error"]


def test_redact_nested():
    event = {"a": {"b": ["foo", f"https://...&key={FAKE_KEY}"]}}
    out = redact_api_keys(None, None, event.copy())
    assert out["a"]["b"][0] == "foo"
    assert all(FAKE_KEY not in x for x in out["a"]["b"])


def test_redact_leaves_other_values():
    out = redact_api_keys(None, None, {"count": 3, "event": "itinerary_saved"})
    assert out == {"count": 3, "event": "itinerary_saved"}


class TestSettings:
    def test_defaults(self):
        settings = Settings(GEMINI_API_KEY="", STORAGE_BACKEND="memory")
        assert settings.API_PREFIX == "/api"
        assert settings.GEMINI_MODEL == "gemini-1.5-pro"
        assert settings.AI_TEMPERATURE == 0.7
        assert settings.AI_TIMEOUT_SECONDS == 20.0

    def test_allowed_origins_from_string(self):
        settings = Settings(ALLOWED_ORIGINS="http://a.test, http://b.test,")
        assert settings.ALLOWED_ORIGINS == ["http://a.test", "http://b.test"]

    def test_storage_backend_is_normalized(self):
        assert Settings(STORAGE_BACKEND=" Database ").STORAGE_BACKEND == "database"

    def test_unknown_storage_backend(self):
        with pytest.raises(ValidationError):
            Settings(STORAGE_BACKEND="redis")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(AI_TIMEOUT_SECONDS=0)


class TestGeminiClient:
    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            GeminiClient.from_settings(Settings(GEMINI_API_KEY=""))

    @pytest.mark.asyncio
    async def test_generate_requests_json(self):
        sdk = Mock()
        sdk.aio.models.generate_content = AsyncMock(return_value=Mock(text='{"title": "x"}'))
        client = GeminiClient(api_key="", model="gemini-test", temperature=0.7, client=sdk)

        text = await client.generate("plan my day")

        assert text == '{"title": "x"}'
        kwargs = sdk.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "plan my day"
        assert kwargs["config"].temperature == 0.7
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_empty_response_raises(self):
        sdk = Mock()
        sdk.aio.models.generate_content = AsyncMock(return_value=Mock(text=""))
        client = GeminiClient(api_key="", client=sdk)

        with pytest.raises(ValueError):
            await client.generate("plan my day")
