"""
Recover a JSON object from free-form model output.

Tier 1 strips code fences and parses the slice between the first "{" and the
last "}". Tier 2, used only when tier 1 fails, collects every brace-balanced
block of the raw text and parses the last one: models sometimes emit a short
example object before the real answer.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from .errors import MalformedContentError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def slice_outer_braces(text: str) -> Optional[str]:
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last < first:
        return None
    return text[first : last + 1]


def balanced_block_at(text: str, start: int) -> Optional[str]:
    """Return the block opened by text[start] up to its matching "}", or None."""
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def balanced_candidates(text: str) -> List[str]:
    candidates: List[str] = []
    idx = 0
    while True:
        start = text.find("{", idx)
        if start == -1:
            break
        block = balanced_block_at(text, start)
        if block is None:
            # Truncated output: nothing after an unclosed brace is trustworthy
            break
        candidates.append(block)
        idx = start + len(block)
    return candidates


def _loads_object(candidate: str) -> Dict[str, Any]:
    data = json.loads(candidate)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def extract_json(text: str) -> Dict[str, Any]:
    if not isinstance(text, str):
        raise MalformedContentError("model content is not a string")

    first_error: str
    sliced = slice_outer_braces(strip_code_fences(text))
    if sliced is None:
        first_error = "no braces found"
    else:
        try:
            return _loads_object(sliced)
        except ValueError as exc:
            first_error = str(exc)
    logger.debug("Fast JSON parse failed (%s); scanning balanced blocks", first_error)

    candidates = balanced_candidates(text.strip())
    if candidates:
        try:
            data = _loads_object(candidates[-1])
            logger.debug("Recovered JSON from %d balanced candidate(s)", len(candidates))
            return data
        except ValueError as exc:
            logger.debug("Last balanced candidate did not parse: %s", exc)
    raise MalformedContentError(f"Error al parsear respuesta JSON: {first_error}")
