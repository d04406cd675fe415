from __future__ import annotations
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_TPL_DIR = BASE_DIR / "templates"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    app_name: str = "Learning Plan Generator"
    log_level: str = "INFO"
    prompt_version: str = "v1.0"

    # providers, checked in this order: ollama > anthropic > openai > google
    use_ollama: bool = False
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-sonnet-20240229"

    openai_api_key: str = ""
    openai_model: str = "gpt-4"

    google_api_key: str = ""
    google_model: str = "gemini-pro"
    google_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    llm_max_tokens: int = 4000
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 120.0

    template_path: str = str(DEFAULT_TPL_DIR)

    @property
    def template_dir(self) -> str:
        p = Path(self.template_path)
        if not p.is_absolute():
            p = (BASE_DIR / p).resolve()
        return str(p)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
