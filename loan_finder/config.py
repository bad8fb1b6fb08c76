"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # AI provider credentials (read when an adapter is constructed)
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # AI provider models and endpoints
    claude_model: str = "claude-3-haiku-20240307"
    openai_model: str = "gpt-3.5-turbo"
    anthropic_api_base: str = "https://api.anthropic.com/v1"
    openai_api_base: str = "https://api.openai.com/v1"

    # Provider selection: explicit type ("openai", "claude", "keyword") or auto
    ai_provider: Optional[str] = None
    query_language: str = "tr"

    # Provider call tuning
    provider_max_tokens: int = 800
    provider_temperature: float = 0.1
    provider_timeout_seconds: float = 30.0
    provider_max_retries: int = 1
    provider_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Catalog
    default_currency: str = "TRY"
    catalog_backend: str = "memory"  # memory | database
    database_url: str = "sqlite:///./loan_finder.db"

    # Service
    service_name: str = "loan-finder"
    log_level: str = "INFO"


settings = Settings()
