from __future__ import annotations

import os

from pydantic import BaseModel, Field


def _parse_optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


class PsqlxAIConfig(BaseModel):
    # Observability
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = Field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))
    enable_metrics: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_METRICS", "false").lower() == "true"
    )
    metrics_bind: str = Field(default_factory=lambda: os.getenv("METRICS_BIND", "127.0.0.1"))
    metrics_port: int = Field(default_factory=lambda: int(os.getenv("METRICS_PORT", "9109")))

    # HTTP deadline; None waits for the upstream indefinitely
    timeout_seconds: float | None = Field(
        default_factory=lambda: _parse_optional_float(os.getenv("PSQLX_AI_TIMEOUT_SECONDS"))
    )

    def known_secrets(self) -> list[str]:
        return [v for v in (os.getenv("OPENAI_API_KEY"), os.getenv("ANTHROPIC_API_KEY")) if v]
