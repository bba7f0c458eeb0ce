"""Core configuration module for prompt-fanout.

Loads settings from FANOUT_* prefixed environment variables using Pydantic Settings.
The provider credential is the one exception: it is read from HF_API_KEY (the
name the hosting platform injects) with FANOUT_HF_API_KEY accepted as well.

Patterns applied:
- One Settings object per process, shared through get_settings()
- Values are normalized by validators, so callers never re-check them
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from prompt_fanout.core.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_HF_BASE_URL,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    LOG_LEVELS,
)


class Settings(BaseSettings):
    """Application settings loaded from FANOUT_* environment variables.

    Example: FANOUT_PORT=8888, FANOUT_LOG_LEVEL=DEBUG, HF_API_KEY=hf_xxx

    Attributes:
        service_name: Service identifier for logging and tracing.
        port: HTTP port (1-65535). Default: 8888.
        host: Bind address. Default: 0.0.0.0.
        environment: Deployment environment. Default: development.
        log_level: Logging verbosity. Default: INFO.
        hf_api_key: Bearer credential for the Hugging Face inference router.
        hf_base_url: Base URL of the Hugging Face inference router.
        models_file: Optional YAML/JSON model registry. Built-in list if unset.
        isolate_failures: Capture provider failures per model instead of
            failing the whole request.
        request_timeout_seconds: Outbound call timeout. None waits forever.
        tracing_enabled: Install an OpenTelemetry tracer provider at startup.
        otlp_endpoint: OTLP gRPC endpoint. Console exporter if unset.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Service name for identification",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="HTTP server port",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        description="HTTP server bind address",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default=DEFAULT_ENVIRONMENT,
        description="Deployment environment",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # Provider Settings
    # =========================================================================
    hf_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HF_API_KEY", "FANOUT_HF_API_KEY"),
        description="Hugging Face API token sent as a Bearer credential",
    )
    hf_base_url: str = Field(
        default=DEFAULT_HF_BASE_URL,
        description="Hugging Face inference router base URL",
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for each outbound inference call (None = no timeout)",
    )

    # =========================================================================
    # Fan-out Settings
    # =========================================================================
    models_file: str | None = Field(
        default=None,
        description="Path to a YAML or JSON model registry file",
    )
    isolate_failures: bool = Field(
        default=False,
        description="Report provider failures per model instead of failing the request",
    )

    # =========================================================================
    # Observability Settings
    # =========================================================================
    tracing_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP gRPC exporter endpoint (e.g. http://localhost:4317)",
    )

    model_config = {
        "env_prefix": "FANOUT_",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level name; reject names logging does not know."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)} (got {v!r})")
        return level

    @field_validator("hf_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing slash so endpoint paths join cleanly."""
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Settings read from the environment on first call, then reused."""
    return Settings()
