"""Tests for the Gemini completion service (client faked, no network)."""

import os
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors
from google.genai import types

from services.errors import CompletionError
from services.gemini_client import GeminiCompletionService, strip_code_fences


def _fake_client(response=None, error=None):
    calls = []

    async def generate_content(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return response

    client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
    return client, calls


def _response(text, finish_reason=types.FinishReason.STOP, tokens=321):
    return SimpleNamespace(
        text=text,
        candidates=[SimpleNamespace(finish_reason=finish_reason)],
        usage_metadata=SimpleNamespace(total_token_count=tokens),
    )


class TestStripCodeFences:
    def test_plain_json(self):
        assert strip_code_fences('{"a": 1}') == '{"a": 1}'

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n[1, 2]\n```') == "[1, 2]"


class TestGeminiCompletionService:
    @pytest.mark.asyncio
    async def test_maps_response(self):
        client, calls = _fake_client(_response('{"ok": true}'))
        service = GeminiCompletionService(client=client, model="gemini-test", temperature=0.1)

        result = await service.complete("system", "prompt", 2048)

        assert result.content == '{"ok": true}'
        assert result.tokens_used == 321
        assert result.finish_reason == "stop"
        assert calls[0]["model"] == "gemini-test"
        assert calls[0]["contents"] == "prompt"
        config = calls[0]["config"]
        assert config.system_instruction == "system"
        assert config.max_output_tokens == 2048
        assert config.temperature == 0.1
        assert config.response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_max_tokens_is_length(self):
        client, _ = _fake_client(_response('{"cut', finish_reason=types.FinishReason.MAX_TOKENS))
        result = await GeminiCompletionService(client=client).complete("s", "p", 10)
        assert result.finish_reason == "length"

    @pytest.mark.asyncio
    async def test_missing_usage_and_text(self):
        response = SimpleNamespace(text=None, candidates=[], usage_metadata=None)
        client, _ = _fake_client(response)
        result = await GeminiCompletionService(client=client).complete("s", "p", 10)
        assert result.content == ""
        assert result.tokens_used == 0
        assert result.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_api_error_becomes_completion_error(self):
        error = genai_errors.ServerError(503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}})
        client, _ = _fake_client(error=error)
        with pytest.raises(CompletionError) as exc_info:
            await GeminiCompletionService(client=client).complete("s", "p", 10)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error_becomes_completion_error(self):
        client, _ = _fake_client(error=ConnectionError("reset by peer"))
        with pytest.raises(CompletionError) as exc_info:
            await GeminiCompletionService(client=client).complete("s", "p", 10)
        assert exc_info.value.status_code is None
        assert "reset by peer" in str(exc_info.value)


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.skipif(not os.environ.get("GEMINI_API_KEY"), reason="GEMINI_API_KEY not set")
async def test_live_json_completion():
    from google import genai

    service = GeminiCompletionService(client=genai.Client(api_key=os.environ["GEMINI_API_KEY"]))
    result = await service.complete(
        "Return only JSON.", 'Return {"status": "ok"} exactly.', 64
    )
    assert '"ok"' in result.content
