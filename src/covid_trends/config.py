"""Configuration loading and validation."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class ProviderConfig(BaseModel):
    """disease.sh provider configuration."""

    base_url: str = "https://disease.sh/v3/covid-19"
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip any trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"base_url must be an http(s) URL: {v}"
            raise ValueError(msg)
        return v.rstrip("/")


class QueryConfig(BaseModel):
    """Default query parameters."""

    country: str = "all"
    last_days: int = Field(default=30, ge=1)
    top_n: int = Field(default=5, ge=1)
    metric: str = "cases"


class TraceConfig(BaseModel):
    """HTTP trace sink configuration."""

    enabled: bool = True
    path: Path = Field(default=Path("server/logs/http_trace.jsonl"))


class NotifyConfig(BaseModel):
    """Webhook notification configuration."""

    enabled: bool = True
    webhook_url: str | None = None
    webhook_url_env: str = "COVID_TRENDS_WEBHOOK_URL"
    timeout: float = Field(default=10.0, gt=0)

    def resolve_webhook_url(self) -> str | None:
        """Resolve the webhook URL, preferring the explicit value over the env var.

        Returns:
            Webhook URL, or None if notifications are disabled or unconfigured.
        """
        if not self.enabled:
            return None
        return self.webhook_url or os.getenv(self.webhook_url_env) or None


class ReportConfig(BaseModel):
    """Dashboard report configuration."""

    title: str = "COVID-19 Dashboard"
    output: Path = Field(default=Path("./site/index.html"))


class Config(BaseModel):
    """Root configuration model."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
    notify: NotifyConfig = Field(default_factory=NotifyConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def load_config(path: Path | None = None) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file. If None, defaults are used.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if path is None:
        return Config()

    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] | None = yaml.safe_load(f)

    return Config.model_validate(raw_config or {})
