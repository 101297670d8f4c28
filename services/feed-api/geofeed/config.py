"""
Configuration management using Pydantic BaseSettings.
All values can be overridden via environment variables or a .env file.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Post store (MySQL-protocol compatible) ─────────────────────────────
    database_host: str = "post-db"
    database_port: int = 3306
    database_user: str = "root"
    database_password: str = ""
    database_name: str = "posts"
    # Full SQLAlchemy URL; wins over the discrete fields (e.g. sqlite in dev)
    database_url_override: Optional[str] = None

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"mysql+aiomysql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    # ── Social graph service ───────────────────────────────────────────────
    social_graph_url: str = "http://auth-service:8080/api"
    social_graph_timeout: float = 2.0    # seconds; no retries on expiry

    # ── Profile lookup ─────────────────────────────────────────────────────
    profile_service_url: str = "http://auth-service:8080/api"
    profile_service_timeout: float = 2.0

    # ── Feed ───────────────────────────────────────────────────────────────
    feed_default_page_size: int = 10
    feed_max_page_size: int = 100
    # Fixed 111.32 / 10007.0 results for whole-degree latitude deltas
    distance_legacy_overrides: bool = True

    # ── Observability ──────────────────────────────────────────────────────
    otel_exporter_otlp_endpoint: str = "http://jaeger:4317"
    tracing_enabled: bool = True
    service_name: str = "feed-api"
    environment: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
