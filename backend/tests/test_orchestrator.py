"""
tests/test_orchestrator.py

Tests for ResourceGenerator retry and fallback behaviour.

Verifies:
✔ Success on the first call → one call, parsed content returned
✔ Malformed content twice → two calls, default returned
✔ Network failure then success → second content returned
✔ Both calls fail → default returned, no exception
✔ Second attempt lowers temperature and caps max_tokens
✔ Empty choices / empty content / empty object trigger a retry
✔ Truncated output and bare fragments trigger a retry, then the default
✔ Non-generation errors propagate
✔ generate_with_report flags fallbacks
"""

import json
import logging

import httpx
import pytest

from conftest import TEST_LLM_CONFIG, ScriptedLLM
from educa.generation import GenerationRequest, ResourceGenerator, get_default_resource
from educa.generation.prompts import SYSTEM_PROMPT
from educa.llm_client import ChatCompletionClient


ORAL = {
    "titulo": "Mi mascota",
    "descripcion": "Exposición breve",
    "instruccionesDocente": "Guíe la exposición",
    "guionEstudiante": "Mi mascota se llama...",
    "preguntasOrientadoras": ["¿Cómo se llama?"],
    "criteriosEvaluacion": ["Habla claro"],
}

REQUEST = GenerationRequest(resource_type="oral", options={"titulo": "Mi mascota", "tema": "mascotas"})


class ExplodingClient:
    async def complete(self, messages, *, temperature, max_tokens=None, json_mode=True):
        raise RuntimeError("bug")


# ─────────────────────────────────────────────────────
# Core scenarios
# ─────────────────────────────────────────────────────


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        llm = ScriptedLLM(json.dumps(ORAL))
        resource = await llm.generator().generate(REQUEST)
        assert resource == ORAL
        assert len(llm.requests) == 1

    @pytest.mark.asyncio
    async def test_malformed_twice_returns_default(self):
        llm = ScriptedLLM("no es json", "tampoco {")
        resource = await llm.generator().generate(REQUEST)
        assert resource == get_default_resource("oral", REQUEST.options)
        assert len(llm.requests) == 2

    @pytest.mark.asyncio
    async def test_network_error_then_success(self):
        llm = ScriptedLLM(503, "```json\n" + json.dumps(ORAL) + "\n```")
        resource = await llm.generator().generate(REQUEST)
        assert resource == ORAL
        assert len(llm.requests) == 2

    @pytest.mark.asyncio
    async def test_both_calls_fail(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = ChatCompletionClient(TEST_LLM_CONFIG, transport=httpx.MockTransport(handler))
        resource = await ResourceGenerator(client).generate(REQUEST)
        assert resource == get_default_resource("oral", REQUEST.options)
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_attempt_parameters(self):
        llm = ScriptedLLM(500, json.dumps(ORAL))
        await llm.generator().generate(REQUEST)
        first, second = llm.requests
        assert first["temperature"] == 0.7
        assert "max_tokens" not in first
        assert second["temperature"] == 0.5
        assert second["max_tokens"] == 4000
        for payload in (first, second):
            assert payload["model"] == TEST_LLM_CONFIG.model
            assert payload["response_format"] == {"type": "json_object"}
            assert payload["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
            assert payload["messages"][1]["role"] == "user"
            assert "Mi mascota" in payload["messages"][1]["content"]


class TestFailureKinds:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad_reply",
        [
            {"choices": []},
            {"choices": [{"message": {"role": "assistant", "content": None}}]},
            "   ",
            "{}",
            "[1, 2]",
        ],
    )
    async def test_retry_on_bad_first_reply(self, bad_reply):
        llm = ScriptedLLM(bad_reply, json.dumps(ORAL))
        resource = await llm.generator().generate(REQUEST)
        assert resource == ORAL
        assert len(llm.requests) == 2

    @pytest.mark.asyncio
    async def test_truncated_output_twice_returns_default(self):
        truncated = (
            '{"titulo": "Examen", "texto": "...", "preguntas": ['
            '{"pregunta": "a", "opciones": ["x", "y", "z", "w"], "respuesta": "x"}, '
            '{"pregunta": "b", "opciones": ["x", "y"'
        )
        request = GenerationRequest(resource_type="evaluacion", options={"titulo": "Examen"})
        llm = ScriptedLLM(truncated, truncated)
        result = await llm.generator().generate_with_report(request)
        assert result.was_fallback is True
        assert len(llm.requests) == 2
        assert result.resource == get_default_resource("evaluacion", request.options)
        assert {"titulo", "texto", "preguntas"} <= set(result.resource)

    @pytest.mark.asyncio
    async def test_fragment_without_any_required_field_is_retried(self):
        fragment = {"pregunta": "a", "opciones": ["x", "y"], "respuesta": "x"}
        llm = ScriptedLLM(json.dumps(fragment), json.dumps(ORAL))
        result = await llm.generator().generate_with_report(REQUEST)
        assert result.resource == ORAL
        assert result.attempts == 2
        assert result.errors[0].startswith("MalformedContentError")

    @pytest.mark.asyncio
    async def test_unknown_type_accepts_any_object(self):
        llm = ScriptedLLM(json.dumps({"nodos": ["a"]}))
        resource = await llm.generator().generate(GenerationRequest(resource_type="mapa_conceptual"))
        assert resource == {"nodos": ["a"]}

    @pytest.mark.asyncio
    async def test_defects_propagate(self):
        with pytest.raises(RuntimeError):
            await ResourceGenerator(ExplodingClient()).generate(REQUEST)


# ─────────────────────────────────────────────────────
# Report
# ─────────────────────────────────────────────────────


class TestGenerationReport:
    @pytest.mark.asyncio
    async def test_success_report(self):
        llm = ScriptedLLM(json.dumps(ORAL))
        result = await llm.generator().generate_with_report(REQUEST)
        assert result.was_fallback is False
        assert result.attempts == 1
        assert result.errors == ()
        assert result.duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_fallback_report(self):
        llm = ScriptedLLM(502, "nada")
        result = await llm.generator().generate_with_report(REQUEST)
        assert result.was_fallback is True
        assert result.attempts == 2
        assert len(result.errors) == 2
        assert result.errors[0].startswith("UpstreamUnavailable")
        assert result.errors[1].startswith("MalformedContentError")
        # The default is returned untouched
        assert "wasFallback" not in result.resource

    @pytest.mark.asyncio
    async def test_missing_fields_only_warn(self, caplog):
        partial = {"titulo": "Solo título"}
        llm = ScriptedLLM(json.dumps(partial))
        with caplog.at_level(logging.WARNING, logger="educa.generation.orchestrator"):
            result = await llm.generator().generate_with_report(REQUEST)
        assert result.resource == partial
        assert result.was_fallback is False
        assert "missing fields" in caplog.text
