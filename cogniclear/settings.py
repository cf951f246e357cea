from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    debug: bool = True

    ollama_api_key: Optional[str] = None
    ollama_host: str = "https://ollama.com"
    analysis_model: str = "gpt-oss:120b"
    temperature: float = 0.2
    request_timeout: float = 60.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
