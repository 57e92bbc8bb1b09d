"""
Resource generation pipeline

1. Prompt builder: resource type + options → instruction text
2. Chat completion call: see educa.llm_client
3. JSON extractor: model text → JSON object (two tiers)
4. Orchestrator: two attempts, then the type's default resource
"""

from .defaults import get_default_resource
from .errors import (
    EmptyChoicesError,
    EmptyContentError,
    GenerationError,
    MalformedContentError,
    UpstreamUnavailable,
)
from .json_extractor import extract_json
from .options import GenerationRequest, ResourceType
from .orchestrator import GenerationResult, ResourceGenerator
from .prompts import build_prompt
