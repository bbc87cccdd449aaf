from fastapi import APIRouter

from ..settings import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
	return {
		"status": "ok",
		"llm_configured": bool(settings.openai_api_key),
		"kv_backend": settings.kv_backend,
		"tts_configured": bool(settings.azure_speech_key and settings.azure_speech_region),
	}
