"""Central environment-driven settings for the dashboard process.

The process loads this once at startup. Behavior is controlled by environment
variables (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "bananominer-dashboard"
    log_level: str = "INFO"
    upstream_base_url: str = "https://bananominer.com"
    upstream_user_agent: str = "BananoMinerDashboard/1.0"
    # httpx's own default; the upstream call carries no stricter policy.
    upstream_timeout_seconds: float = 5.0
    metrics_port: int = 0
    tracing_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
