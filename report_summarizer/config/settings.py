from functools import lru_cache
from pydantic_settings import BaseSettings
import os

class Settings(BaseSettings):
    # API Server Configuration
    api_host: str = "0.0.0.0"
    api_port: int = int(os.getenv("PORT", "5000"))
    api_reload: bool = False  # Disable reload in production
    cors_allow_origins: list[str] = ["*"]

    # Upload ceiling (bytes) for a single document
    max_upload_bytes: int = 5 * 1024 * 1024

    # Completion service (Perplexity chat-completions API)
    perplexity_api_key: str  # Required, no default
    completion_base_url: str = "https://api.perplexity.ai"
    completion_model: str = "sonar-pro"

    # OCR Configuration (English only)
    ocr_gpu: bool = False
    ocr_max_image_dimension: int = 2000
    ocr_min_confidence: float = 0.0  # Drop OCR fragments below this score (0.0-1.0)

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process from the environment and .env file."""
    return Settings()
