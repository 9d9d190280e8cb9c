"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

USDA_FOUNDATION_CSV_URL = (
    "https://fdc.nal.usda.gov/fdc-datasets/"
    "FoodData_Central_foundation_food_csv_2024-04-18.zip"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    ollama_base_url: str = "http://localhost:11434/v1"
    ollama_api_key: str = "ollama"
    llm_model: str = "llama3.2"
    llm_max_tokens: int = 256
    llm_timeout_seconds: float = 60.0
    llm_max_concurrent: int = 1
    chat_context_limit: int = 3
    chat_cache_max_entries: int = 100
    chat_cache_ttl_seconds: int = 900
    dataset_csv_path: str = "data/usda-foods.csv"
    dataset_snapshot_path: str = "data/usda-compact.json"
    dataset_max_raw_rows: int = 1000
    dataset_max_records: int = 300
    usda_dataset_url: str = USDA_FOUNDATION_CSV_URL
    cors_allowed_origins: str | None = "http://localhost:3000,http://localhost:5000"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    origins: list[str] = []
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if value and value not in origins:
            origins.append(value)
    return origins
