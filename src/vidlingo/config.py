"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Vidlingo configuration loaded from environment variables."""

    model_config = {"env_prefix": "VIDLINGO_", "env_file": ".env", "extra": "ignore"}

    # Inference provider
    hf_api_token: SecretStr = SecretStr("")
    inference_base_url: str = "https://api-inference.huggingface.co/models"
    transcription_model: str = "openai/whisper-large-v3"
    request_timeout_seconds: float = 120.0

    # Redis / Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    # Upload constraints
    upload_max_size_mb: int = 100
    accepted_mime_types: list[str] = ["video/mp4", "video/webm", "video/ogg"]

    # Audio
    downmix: str = "first"
    probe_timeout_seconds: float = 30.0

    # Playback
    playback_ready_timeout_seconds: float = 10.0

    # Languages
    default_source_language: str = "en"
    default_target_language: str = "es"

    # Directories
    media_dir: Path = Path("/tmp/vidlingo/media")
    media_ttl_seconds: int = 3600
    session_ttl_seconds: int = 3600


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
