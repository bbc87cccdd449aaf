from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# OpenAI-compatible chat completions endpoint used for question generation
	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	openai_model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
	openai_base_url: str = Field(default="https://api.openai.com/v1/chat/completions", validation_alias="OPENAI_BASE_URL")
	openai_temperature: float = Field(default=0.7, validation_alias="OPENAI_TEMPERATURE")
	# Language of the translation lines in beginner hints
	hint_language: str = Field(default="Japanese", validation_alias="HINT_LANGUAGE")

	# Session storage: "upstash" (Redis REST) or "sql" (local SQLAlchemy table)
	kv_backend: str = Field(default="upstash", validation_alias="KV_BACKEND")
	upstash_url: str | None = Field(default=None, validation_alias="UPSTASH_REDIS_REST_URL")
	upstash_token: str | None = Field(default=None, validation_alias="UPSTASH_REDIS_REST_TOKEN")

	# Database for the sql backend
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
	# Days without an update before a stored session is purged (0 disables)
	session_retention_days: int = Field(default=0, validation_alias="SESSION_RETENTION_DAYS")

	# Azure speech
	azure_speech_key: str | None = Field(default=None, validation_alias="AZURE_SPEECH_KEY")
	azure_speech_region: str | None = Field(default=None, validation_alias="AZURE_SPEECH_REGION")
	tts_default_voice: str = Field(default="en-US-JennyNeural", validation_alias="TTS_DEFAULT_VOICE")
	tts_output_format: str = Field(default="audio-24khz-48kbitrate-mono-mp3", validation_alias="TTS_OUTPUT_FORMAT")

	http_timeout_seconds: float = Field(default=30, validation_alias="HTTP_TIMEOUT_SECONDS")

	# Logging (empty LOG_DIR keeps logs on the console only)
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	log_dir: str = Field(default="log", validation_alias="LOG_DIR")
	log_file: str = Field(default="classtalk.log", validation_alias="LOG_FILE")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
