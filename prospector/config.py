from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Prospector"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Text completion provider
    openai_api_key: str | None = None
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.4
    llm_timeout_seconds: float = 60.0

    # Lead database provider
    apollo_api_key: str | None = None
    apollo_base_url: str = "https://api.apollo.io/api/v1"
    apollo_timeout_seconds: float = 20.0
    apollo_fetch_limit: int = 10

    # Pipeline
    max_ranked_leads: int = 5
    research_enabled: bool = True

    # Security
    cors_origins: list[str] = []  # Empty by default for security

    # Sentry
    sentry_dsn: str | None = None

    # Metrics
    metrics_backend: str = "stdout"
    metrics_namespace: str = "prospector"
    metrics_disable: bool = False
    metrics_sample_rate: float = 1.0
    metrics_statsd_host: str = "127.0.0.1"
    metrics_statsd_port: int = 8125

    @property
    def apollo_enabled(self) -> bool:
        """True when a lead-database credential is configured."""
        return bool(self.apollo_api_key)

    model_config = ConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
