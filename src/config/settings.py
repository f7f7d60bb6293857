"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PrepKit Interviews"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Text generation (Gemini REST API)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash-exp"
    text_generation_timeout_seconds: float = 60.0

    # Voice agent (Vapi)
    vapi_private_key: str = ""
    vapi_base_url: str = "https://api.vapi.ai"
    vapi_phone_number_id: str = ""
    vapi_customer_number: str = "+15555555555"
    vapi_webhook_secret: str = ""
    voice_timeout_seconds: float = 30.0

    # Voice assistant
    assistant_name: str = "PrepKit Technical Interviewer"
    assistant_model: str = "gpt-4o-mini"
    voice_provider: str = "11labs"
    voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    voice_speed: float = 1.0

    # Observability (Langfuse)
    langfuse_enabled: bool = True
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # History
    history_page_size: int = 10

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
