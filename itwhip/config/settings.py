"""SDK settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://itwhip.com/api/v3"


class Settings(BaseSettings):
    # Credentials
    api_key: str = ""
    hotel_id: str = ""

    # Remote API
    environment: str = "production"  # production | staging | development
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = 30000
    offline: bool = False  # True = no transport, every call gets a fallback response

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_prefix": "ITWHIP_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
