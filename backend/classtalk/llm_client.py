from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, List, Optional
from .errors import ConfigurationError, UpstreamError
from .settings import settings

logger = logging.getLogger("classtalk.llm")


class ChatClient:
	"""Single-shot client for an OpenAI-compatible chat completions endpoint."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		temperature: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.openai_api_key
		if not self.api_key:
			raise ConfigurationError("Missing OPENAI_API_KEY")
		self.model = model or settings.openai_model
		self.base_url = base_url or settings.openai_base_url
		self.temperature = settings.openai_temperature if temperature is None else temperature
		self._headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(timeout=settings.http_timeout_seconds, transport=transport)

	async def generate(self, prompt: str, *, json_mode: bool = True) -> str:
		messages: List[Dict[str, str]] = [{"role": "user", "content": prompt}]
		payload: Dict[str, Any] = {
			"model": self.model,
			"messages": messages,
			"temperature": self.temperature,
		}
		if json_mode:
			payload["response_format"] = {"type": "json_object"}
		try:
			r = await self._client.post(self.base_url, headers=self._headers, json=payload)
		except httpx.RequestError as net_err:
			logger.warning("LLM request to %s failed: %s", self.base_url, net_err)
			raise UpstreamError(f"LLM request failed: {net_err}") from net_err
		if r.is_error:
			logger.warning("LLM provider answered %s", r.status_code)
			raise UpstreamError(
				f"LLM provider error ({r.status_code})",
				raw=r.text,
				provider_status=r.status_code,
			)
		try:
			data = r.json()
			content = data["choices"][0]["message"]["content"]
		except Exception:
			raise UpstreamError("Unexpected LLM response", raw=r.text, provider_status=r.status_code)
		return content or ""

	async def aclose(self) -> None:
		await self._client.aclose()
