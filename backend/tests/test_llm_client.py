"""
tests/test_llm_client.py

Tests for the chat completions client.

Verifies:
✔ Request shape: URL, bearer header, payload fields
✔ HTTP status errors and transport errors map to UpstreamUnavailable
✔ Non-JSON bodies map to UpstreamUnavailable
✔ Missing choices / content raise their own errors
✔ LLMConfig is built from settings
"""

import json

import httpx
import pytest

from educa.generation.errors import EmptyChoicesError, EmptyContentError, UpstreamUnavailable
from educa.llm_client import ChatCompletionClient, LLMConfig
from educa.settings import Settings


MESSAGES = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]


def make_client(handler, api_key="secret"):
    config = LLMConfig(base_url="http://llm.test/v1/", api_key=api_key, model="demo-model", timeout_seconds=5)
    return ChatCompletionClient(config, transport=httpx.MockTransport(handler))


class TestRequest:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": '{"ok": true}'}}]})

        client = make_client(handler)
        content = await client.complete(MESSAGES, temperature=0.5, max_tokens=4000)
        await client.aclose()

        assert content == '{"ok": true}'
        assert seen["url"] == "http://llm.test/v1/chat/completions"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"] == {
            "model": "demo-model",
            "messages": MESSAGES,
            "temperature": 0.5,
            "max_tokens": 4000,
            "response_format": {"type": "json_object"},
        }

    @pytest.mark.asyncio
    async def test_no_key_no_header_and_plain_mode(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "hola"}}]})

        client = make_client(handler, api_key=None)
        await client.complete(MESSAGES, temperature=0.7, json_mode=False)
        assert seen["auth"] is None
        assert "response_format" not in seen["body"]
        assert "max_tokens" not in seen["body"]


class TestErrors:
    @pytest.mark.asyncio
    async def test_http_status(self):
        client = make_client(lambda request: httpx.Response(429, text="rate limited"))
        with pytest.raises(UpstreamUnavailable) as excinfo:
            await client.complete(MESSAGES, temperature=0.7)
        assert excinfo.value.status_code == 429

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = make_client(handler)
        with pytest.raises(UpstreamUnavailable) as excinfo:
            await client.complete(MESSAGES, temperature=0.7)
        assert excinfo.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(UpstreamUnavailable):
            await client.complete(MESSAGES, temperature=0.7)

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(EmptyChoicesError):
            await client.complete(MESSAGES, temperature=0.7)

    @pytest.mark.asyncio
    async def test_empty_content(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": [{"message": {"content": ""}}]}))
        with pytest.raises(EmptyContentError):
            await client.complete(MESSAGES, temperature=0.7)


def test_config_from_settings():
    source = Settings(LLM_BASE_URL="http://local:8080/v1", LLM_API_KEY="k", LLM_MODEL="m", LLM_TIMEOUT_SECONDS=12)
    config = LLMConfig.from_settings(source)
    assert config == LLMConfig(base_url="http://local:8080/v1", api_key="k", model="m", timeout_seconds=12.0)
    assert config.completions_url == "http://local:8080/v1/chat/completions"
