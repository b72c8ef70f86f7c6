from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	# Fast model, good enough for short suggestions
	openai_model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
	openai_base_url: str = Field(default="https://api.openai.com/v1/chat/completions", validation_alias="OPENAI_BASE_URL")
	openai_temperature: float = Field(default=0.4, validation_alias="OPENAI_TEMPERATURE")
	# Client-side timeout for one generation round-trip
	timeout_seconds: float = Field(default=20.0, validation_alias="COPILOT_TIMEOUT_SECONDS")

	# Comma-separated allow-list, e.g. "http://localhost:5173,https://school.example"
	cors_origins: str = Field(default="", validation_alias="CORS_ORIGINS")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def cors_origin_list(self) -> List[str]:
		return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
