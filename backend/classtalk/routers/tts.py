from __future__ import annotations
from typing import Optional, Union

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from ..errors import BadRequestError
from ..speech_client import SpeechClient

router = APIRouter(prefix="/api", tags=["tts"])


class TTSRequest(BaseModel):
	text: Optional[str] = None
	voice: Optional[str] = None
	rate: Optional[Union[float, str]] = None


@router.post("/tts")
async def tts(req: TTSRequest):
	text = (req.text or "").strip()
	if not text:
		raise BadRequestError("Missing text")
	client = SpeechClient()
	try:
		audio = await client.synthesize(text, voice=(req.voice or "").strip() or None, rate=req.rate)
	finally:
		await client.aclose()
	return Response(content=audio, media_type="audio/mpeg")
