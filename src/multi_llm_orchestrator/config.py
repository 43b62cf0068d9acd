"""Settings for the CLI and the HTTP boundary.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The workflow model itself takes no configuration; everything here concerns
the outer surfaces (logging, tenancy defaults, correlation ids, CORS).
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings for the orchestrator surfaces.

    Environment variables:
    - LOG_LEVEL                        (optional)
    - ORCHESTRATOR_LOG_FORMAT          (optional, json | text)
    - ORCHESTRATOR_DEFAULT_TENANT      (optional)
    - ORCHESTRATOR_CORRELATION_HEADER  (optional)
    - ORCHESTRATOR_CORS_ORIGINS        (optional, comma-separated)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="ORCHESTRATOR_LOG_FORMAT",
        description="Structured JSON lines, or human-readable text for local use",
    )

    default_tenant: str = Field(
        default="default",
        validation_alias="ORCHESTRATOR_DEFAULT_TENANT",
        description="Tenant used when a workflow document does not name one",
    )

    correlation_header: str = Field(
        default="X-Correlation-Id",
        validation_alias="ORCHESTRATOR_CORRELATION_HEADER",
        description="HTTP header carrying the caller's correlation id",
    )

    cors_origins: str = Field(
        default="http://localhost:5173",
        validation_alias="ORCHESTRATOR_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    @field_validator("default_tenant", "correlation_header")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
