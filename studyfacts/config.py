"""Application configuration."""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_DIR = Path(__file__).resolve().parents[1]

ProviderName = Literal["ollama", "openai"]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Study Facts API"
    fact_provider: ProviderName = "ollama"
    ollama_url: str = "http://localhost:11434/api/generate"
    ollama_model: str = "llama3.1:8b"
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    llm_timeout_seconds: int = 60
    llm_max_facts: int = 20
    llm_max_chars: int = 60000
    chunk_max_chars: int = 4200
    chunk_trigger_chars: int = 7000
    max_chunks: int = 8
    condensed_max_sentences: int = 40
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Provider and budget values handed explicitly to the generative stages."""

    provider: ProviderName = "ollama"
    ollama_url: str = "http://localhost:11434/api/generate"
    ollama_model: str = "llama3.1:8b"
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    timeout_seconds: int = 60
    max_facts_per_call: int = 20
    max_llm_chars: int = 60000
    chunk_max_chars: int = 4200
    chunk_trigger_chars: int = 7000
    max_chunks: int = 8
    condensed_max_sentences: int = 40

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationConfig":
        return cls(
            provider=settings.fact_provider,
            ollama_url=settings.ollama_url,
            ollama_model=settings.ollama_model,
            openai_api_key=settings.openai_api_key or None,
            openai_base_url=settings.openai_base_url,
            openai_model=settings.openai_model,
            timeout_seconds=settings.llm_timeout_seconds,
            max_facts_per_call=settings.llm_max_facts,
            max_llm_chars=settings.llm_max_chars,
            chunk_max_chars=settings.chunk_max_chars,
            chunk_trigger_chars=settings.chunk_trigger_chars,
            max_chunks=settings.max_chunks,
            condensed_max_sentences=settings.condensed_max_sentences,
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


@lru_cache
def get_generation_config() -> GenerationConfig:
    """Return the generation config built once from cached settings."""

    return GenerationConfig.from_settings(get_settings())
