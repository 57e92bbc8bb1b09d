from __future__ import annotations
import httpx
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from .settings import Settings, settings
from .generation.errors import EmptyChoicesError, EmptyContentError, UpstreamUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMConfig:
	base_url: str
	api_key: Optional[str]
	model: str
	timeout_seconds: float = 60.0

	@classmethod
	def from_settings(cls, source: Settings | None = None) -> "LLMConfig":
		source = source or settings
		return cls(
			base_url=source.llm_base_url,
			api_key=source.llm_api_key,
			model=source.llm_model,
			timeout_seconds=source.llm_timeout_seconds,
		)

	@property
	def completions_url(self) -> str:
		return f"{self.base_url.rstrip('/')}/chat/completions"


class ChatCompletionClient:
	"""OpenAI-compatible chat completions over httpx (OpenRouter by default)."""

	def __init__(self, config: LLMConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.config = config
		self._headers = {
			"Authorization": f"Bearer {config.api_key}" if config.api_key else "",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(timeout=config.timeout_seconds, transport=transport)

	async def complete(
		self,
		messages: List[Dict[str, str]],
		*,
		temperature: float,
		max_tokens: Optional[int] = None,
		json_mode: bool = True,
	) -> str:
		payload: Dict[str, Any] = {
			"model": self.config.model,
			"messages": messages,
			"temperature": temperature,
		}
		if max_tokens is not None:
			payload["max_tokens"] = max_tokens
		if json_mode:
			payload["response_format"] = {"type": "json_object"}
		headers = {k: v for k, v in self._headers.items() if v}
		logger.info("Sending chat completion request (model=%s, temperature=%s, max_tokens=%s)", self.config.model, temperature, max_tokens)
		try:
			r = await self._client.post(self.config.completions_url, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			status = http_err.response.status_code
			raise UpstreamUnavailable(f"LLM endpoint returned HTTP {status}: {http_err.response.text[:500]}", status_code=status) from http_err
		except httpx.RequestError as net_err:
			raise UpstreamUnavailable(f"LLM endpoint unreachable: {net_err!r}") from net_err
		try:
			data = r.json()
		except ValueError as err:
			raise UpstreamUnavailable(f"LLM endpoint returned a non-JSON body: {r.text[:500]}") from err
		logger.debug("Raw completion response: %s", data)
		return self._content_of(data)

	@staticmethod
	def _content_of(data: Any) -> str:
		choices = data.get("choices") if isinstance(data, dict) else None
		if not choices:
			raise EmptyChoicesError("completion response has no choices")
		message = choices[0].get("message") if isinstance(choices[0], dict) else None
		content = message.get("content") if isinstance(message, dict) else None
		if not content or not isinstance(content, str) or not content.strip():
			raise EmptyContentError("first completion choice has empty content")
		return content

	async def aclose(self) -> None:
		await self._client.aclose()
