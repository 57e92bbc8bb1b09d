from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Auth configuration
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
	recovery_code_ttl_minutes: int = Field(default=15, validation_alias="RECOVERY_CODE_TTL_MINUTES")

	# OpenAI-compatible chat completions endpoint (OpenRouter by default)
	llm_base_url: str = Field(default="https://openrouter.ai/api/v1", validation_alias="LLM_BASE_URL")
	llm_api_key: str | None = Field(default=None, validation_alias="LLM_API_KEY")
	llm_model: str = Field(default="openai/gpt-4o-mini", validation_alias="LLM_MODEL")
	llm_timeout_seconds: float = Field(default=60.0, validation_alias="LLM_TIMEOUT_SECONDS")

	# Transactional email (Brevo); sending is skipped when the key is missing
	brevo_api_key: str | None = Field(default=None, validation_alias="BREVO_API_KEY")
	brevo_base_url: str = Field(default="https://api.brevo.com/v3/smtp/email", validation_alias="BREVO_BASE_URL")
	email_sender: str | None = Field(default=None, validation_alias="EMAIL_SENDER")
	email_sender_name: str = Field(default="Educa Recursos", validation_alias="EMAIL_SENDER_NAME")

	# Extra CORS origin besides the local Vite dev server
	frontend_url: str | None = Field(default=None, validation_alias="FRONTEND_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	port: int = Field(default=5000, validation_alias="PORT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
