"""
tests/test_json_extractor.py

Unit tests for JSON recovery from model output.

Verifies:
✔ Code fences are stripped before parsing
✔ Nested objects are preserved
✔ Prose around a single object is ignored
✔ Tier 2 returns the last balanced block when tier 1 fails
✔ The balanced scan stops at an unclosed brace (truncated output)
✔ Stray closing braces do not hide a later object
✔ Text without JSON raises MalformedContentError
✔ Non-object JSON is rejected
"""

import pytest

from educa.generation.errors import GenerationError, MalformedContentError
from educa.generation.json_extractor import (
    balanced_block_at,
    balanced_candidates,
    extract_json,
    slice_outer_braces,
    strip_code_fences,
)


# ─────────────────────────────────────────────────────
# Steps
# ─────────────────────────────────────────────────────


class TestSteps:
    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a":1}\n```') == '{"a":1}'
        assert strip_code_fences('```\n{"a":1}\n```') == '{"a":1}'

    def test_strip_code_fences_leaves_plain_text(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_slice_outer_braces(self):
        assert slice_outer_braces('Aquí tienes: {"a": {"b": 1}} ¡listo!') == '{"a": {"b": 1}}'

    def test_slice_outer_braces_without_braces(self):
        assert slice_outer_braces("sin llaves") is None
        assert slice_outer_braces("} al revés {") is None

    def test_balanced_block_at(self):
        text = 'x {"a": {"b": 1}} y'
        assert balanced_block_at(text, 2) == '{"a": {"b": 1}}'
        assert balanced_block_at("{ nunca cierra", 0) is None

    def test_balanced_candidates_skip_nested(self):
        text = '{"a": {"b": 1}} texto {"c": 2}'
        assert balanced_candidates(text) == ['{"a": {"b": 1}}', '{"c": 2}']

    def test_balanced_candidates_stop_at_unclosed_brace(self):
        text = '{"a": 1} luego {"b": [{"c": 2}, {"d": 3'
        assert balanced_candidates(text) == ['{"a": 1}']

    def test_balanced_candidates_ignore_stray_closing_brace(self):
        text = 'noise {"x":1} noise } {"y":2}'
        assert balanced_candidates(text) == ['{"x":1}', '{"y":2}']


# ─────────────────────────────────────────────────────
# extract_json
# ─────────────────────────────────────────────────────


class TestExtractJson:
    def test_fenced_object(self):
        assert extract_json('```json\n{"a":1}\n```') == {"a": 1}

    def test_nesting_preserved(self):
        assert extract_json('{"a": {"b": 1}}') == {"a": {"b": 1}}

    def test_prose_around_object(self):
        text = 'Claro, aquí está el recurso:\n{"titulo": "Los animales", "items": [1, 2]}\nEspero que sirva.'
        assert extract_json(text) == {"titulo": "Los animales", "items": [1, 2]}

    def test_tier_two_returns_last_candidate(self):
        text = 'Ejemplo: {"x": 1} y la respuesta real {"y": {"z": 2}}'
        assert extract_json(text) == {"y": {"z": 2}}

    def test_tier_two_with_stray_closing_brace(self):
        text = 'noise {"x":1} noise } {"y":2}'
        assert slice_outer_braces(strip_code_fences(text)) == '{"x":1} noise } {"y":2}'
        assert extract_json(text) == {"y": 2}

    def test_truncated_output_is_not_mined_for_fragments(self):
        text = (
            '{"titulo": "Examen", "texto": "...", "preguntas": ['
            '{"pregunta": "a", "opciones": ["x", "y", "z", "w"], "respuesta": "x"}, '
            '{"pregunta": "b", "opciones": ["x", "y"'
        )
        with pytest.raises(MalformedContentError):
            extract_json(text)

    def test_not_json_raises(self):
        with pytest.raises(MalformedContentError):
            extract_json("not json at all")

    def test_error_is_a_generation_error(self):
        with pytest.raises(GenerationError) as excinfo:
            extract_json("{ sin cerrar")
        assert "Error al parsear respuesta JSON" in str(excinfo.value)

    def test_array_is_rejected(self):
        with pytest.raises(MalformedContentError):
            extract_json("[1, 2, 3]")

    def test_non_string_is_rejected(self):
        with pytest.raises(MalformedContentError):
            extract_json(None)
