import os
from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_DATA_ROOT = Path(__file__).resolve().parent.parent.parent / "data"


class Settings(BaseSettings):
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    OPENWEATHERMAP_API_KEY: str = os.environ.get("OPENWEATHERMAP_API_KEY", "")
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    DATA_ROOT: str = os.environ.get("DATA_ROOT", str(DEFAULT_DATA_ROOT))

    LLM_PRIMARY_MODEL: str = "gemini-2.5-flash"
    LLM_FALLBACK_MODEL: str = "gemini-2.5-flash-lite"
    LLM_PRIMARY_TIMEOUT: float = 60.0
    LLM_FALLBACK_TIMEOUT: float = 30.0
    FERTILIZER_MODEL: str = "gemini-2.5-flash-lite"
    FERTILIZER_TIMEOUT: float = 45.0
    WEATHER_TIMEOUT: float = 20.0

    FERTILIZER_CACHE_TTL_SECONDS: float = 24 * 60 * 60
    FERTILIZER_CACHE_MAX_ENTRIES: int = 1000
    RATE_LIMIT_REQUESTS: int = 10
    RATE_LIMIT_WINDOW_SECONDS: float = 60 * 60
    RATE_LIMIT_MAX_KEYS: int = 10000

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
