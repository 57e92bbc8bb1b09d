"""
Generation orchestrator: prompt → model → JSON → resource.

At most two model calls per request, strictly sequential. The second call lowers
the temperature and caps the output length to favour well-formed JSON. When
both fail the type's default resource is returned, so callers always get a
structurally valid resource. Only GenerationError subclasses are absorbed;
any other exception is a defect and propagates.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .defaults import get_default_resource
from .errors import GenerationError, MalformedContentError
from .json_extractor import extract_json
from .options import GenerationRequest, ResourceType
from .prompts import SYSTEM_PROMPT, build_prompt
from .validation import REQUIRED_FIELDS, missing_fields

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float,
        max_tokens: Optional[int] = None,
        json_mode: bool = True,
    ) -> str: ...


@dataclass(frozen=True)
class AttemptParams:
    temperature: float
    max_tokens: Optional[int] = None


DEFAULT_ATTEMPTS: Tuple[AttemptParams, ...] = (
    AttemptParams(temperature=0.7),
    AttemptParams(temperature=0.5, max_tokens=4000),
)


@dataclass
class GenerationResult:
    resource: Dict[str, Any]
    was_fallback: bool
    attempts: int
    duration_seconds: float
    errors: Tuple[str, ...] = ()


class ResourceGenerator:
    def __init__(self, client: CompletionClient, *, attempts: Tuple[AttemptParams, ...] = DEFAULT_ATTEMPTS) -> None:
        self.client = client
        self.attempts = attempts

    async def generate(self, request: GenerationRequest) -> Dict[str, Any]:
        result = await self.generate_with_report(request)
        return result.resource

    async def generate_with_report(self, request: GenerationRequest) -> GenerationResult:
        started = time.perf_counter()
        prompt = build_prompt(request.resource_type, request.options)
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        logger.info("Generating %s resource", request.resource_type)
        logger.debug("Prompt for %s:\n%s", request.resource_type, prompt)

        errors: List[str] = []
        for number, params in enumerate(self.attempts, start=1):
            try:
                resource = await self._attempt(request, messages, params)
            except GenerationError as exc:
                errors.append(f"{type(exc).__name__}: {exc}")
                logger.warning(
                    "Attempt %d/%d for %s failed: %s: %s",
                    number, len(self.attempts), request.resource_type, type(exc).__name__, exc,
                )
                continue
            logger.info("Attempt %d succeeded for %s", number, request.resource_type)
            return GenerationResult(
                resource=resource,
                was_fallback=False,
                attempts=number,
                duration_seconds=time.perf_counter() - started,
                errors=tuple(errors),
            )

        logger.warning("Returning default %s resource after %d failed attempts", request.resource_type, len(self.attempts))
        return GenerationResult(
            resource=get_default_resource(request.resource_type, request.options),
            was_fallback=True,
            attempts=len(self.attempts),
            duration_seconds=time.perf_counter() - started,
            errors=tuple(errors),
        )

    async def _attempt(
        self,
        request: GenerationRequest,
        messages: List[Dict[str, str]],
        params: AttemptParams,
    ) -> Dict[str, Any]:
        content = await self.client.complete(
            messages,
            temperature=params.temperature,
            max_tokens=params.max_tokens,
        )
        logger.debug("Raw model content: %s", content)
        resource = extract_json(content)
        if not resource:
            raise MalformedContentError("model returned an empty JSON object")
        gaps = missing_fields(request.resource_type, resource)
        required = REQUIRED_FIELDS.get(ResourceType.parse(request.resource_type), ())
        if required and len(gaps) == len(required):
            # A fragment of the expected document, typically from truncated output
            raise MalformedContentError(f"model returned none of the {request.resource_type} fields")
        if gaps:
            logger.warning("Generated %s resource is missing fields: %s", request.resource_type, ", ".join(gaps))
        return resource
