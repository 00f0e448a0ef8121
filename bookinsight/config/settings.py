from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseSettings):
    """Google Gemini configuration."""

    api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"),
    )
    analysis_model: str = "gemini-3-pro-preview"
    image_model: str = "gemini-2.5-flash-image"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    thinking_budget: int = Field(default=8000, ge=0, le=32768)
    image_aspect_ratio: str = "16:9"
    voice_name: str = "Kore"
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Optional HTTP timeout handed to the Gemini client; unset means no limit.",
    )

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class NarrationConfig(BaseSettings):
    """Narrated brief configuration (raw PCM declared by the TTS model)."""

    sample_rate: int = Field(default=24000, ge=1)
    channel_count: int = Field(default=1, ge=1)
    output: Literal["memory", "speaker"] = "memory"

    model_config = SettingsConfigDict(
        env_prefix="NARRATION_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "BookInsight Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/pipeline.log"

    # Gemini
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    # Narration
    narration: NarrationConfig = Field(default_factory=NarrationConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
