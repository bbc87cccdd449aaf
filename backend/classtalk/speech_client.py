from __future__ import annotations
import logging
from typing import Optional, Union
from xml.sax.saxutils import escape, quoteattr

import httpx

from .errors import ConfigurationError, UpstreamError
from .settings import settings

logger = logging.getLogger("classtalk.tts")

Rate = Union[str, float, int]


def _voice_locale(voice: str) -> str:
	# Azure voice names look like "en-US-JennyNeural"
	parts = voice.split("-")
	if len(parts) >= 3:
		return f"{parts[0]}-{parts[1]}"
	return "en-US"


def build_ssml(text: str, voice: str, rate: Optional[Rate] = None) -> str:
	"""Wrap ``text`` in an SSML document for ``voice``.

	Text is escaped as element content and voice/rate as attribute values, so
	markup characters in user input never reach the synthesizer as SSML.
	"""
	body = escape(text)
	if rate is not None and str(rate).strip():
		body = f"<prosody rate={quoteattr(str(rate).strip())}>{body}</prosody>"
	return (
		f"<speak version='1.0' xmlns='http://www.w3.org/2001/10/synthesis' xml:lang={quoteattr(_voice_locale(voice))}>"
		f"<voice name={quoteattr(voice)}>{body}</voice>"
		"</speak>"
	)


class SpeechClient:
	"""Azure Cognitive Services text-to-speech over REST."""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		region: Optional[str] = None,
		output_format: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.azure_speech_key
		self.region = region or settings.azure_speech_region
		if not self.api_key or not self.region:
			raise ConfigurationError("Missing AZURE_SPEECH_KEY or AZURE_SPEECH_REGION")
		self.output_format = output_format or settings.tts_output_format
		self.base_url = f"https://{self.region}.tts.speech.microsoft.com/cognitiveservices/v1"
		self._client = httpx.AsyncClient(timeout=settings.http_timeout_seconds, transport=transport)

	async def synthesize(self, text: str, *, voice: Optional[str] = None, rate: Optional[Rate] = None) -> bytes:
		voice = voice or settings.tts_default_voice
		headers = {
			"Ocp-Apim-Subscription-Key": self.api_key,
			"Content-Type": "application/ssml+xml",
			"X-Microsoft-OutputFormat": self.output_format,
			"User-Agent": "classtalk",
		}
		ssml = build_ssml(text, voice, rate)
		try:
			r = await self._client.post(self.base_url, headers=headers, content=ssml.encode("utf-8"))
		except httpx.RequestError as net_err:
			logger.warning("TTS request to %s failed: %s", self.base_url, net_err)
			raise UpstreamError(f"TTS request failed: {net_err}") from net_err
		if r.is_error:
			logger.warning("TTS provider answered %s for voice %s", r.status_code, voice)
			raise UpstreamError(
				f"TTS provider error ({r.status_code})",
				raw=r.text or None,
				provider_status=r.status_code,
			)
		return r.content

	async def aclose(self) -> None:
		await self._client.aclose()
