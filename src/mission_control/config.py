"""Application configuration via environment variables."""

from functools import lru_cache
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    database_url: str = "sqlite+aiosqlite:///./mission_control.db"
    sqlite_busy_timeout_ms: int = 5000
    api_key: str = "change-me"
    api_host: str = "0.0.0.0"
    api_port: int = 8787
    cors_origins: str = "*"
    environment: str = "development"

    # Upstream session source
    upstream_api_url: str = "http://localhost:8790"
    upstream_api_token: str = ""
    upstream_source_name: str = "mission-control"
    upstream_timeout_seconds: int = 10

    # Telemetry normalization
    recency_window_seconds: int = 600
    default_context_tokens: int = 1_000_000
    context_alert_threshold: float = 80.0
    context_alert_policy: Literal["every_cycle", "on_crossing"] = "every_cycle"
    offline_after_seconds: int = 0

    # Agent roster: session key -> agent id, plus fixed display order
    agent_roster: dict[str, str] = {
        "agent:main:main": "noah",
        "agent:kai:main": "kai",
        "agent:researcher:main": "dora",
    }
    agent_order: list[str] = ["noah", "kai", "dora"]

    # Dashboard read sizes
    dashboard_event_limit: int = 50
    dashboard_task_limit: int = 30
    dashboard_comms_limit: int = 30

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    INSECURE_SECRETS: ClassVar[set[str]] = {"change-me", "change-me-in-production", "secret", ""}

    def validate_production(self) -> None:
        """Raise if running in production with an insecure default API key."""
        if self.environment == "production" and self.api_key in self.INSECURE_SECRETS:
            raise RuntimeError(
                "API_KEY must be changed from default in production. "
                'Generate one: python -c "import secrets; print(secrets.token_hex(32))"'
            )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
