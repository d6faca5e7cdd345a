"""Environment-based configuration and the injected analysis config."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from gdcaudit.constants import DEFAULT_EXCERPT_CHARS

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # LLM Provider
    anthropic_api_key: str = ""
    model_identifier: str = "anthropic/claude-3-haiku-20240307"
    max_output_tokens: int = 1000
    temperature: float = 0.2
    request_timeout_seconds: float = 30.0

    # Analysis
    document_excerpt_chars: int = DEFAULT_EXCERPT_CHARS
    report_max_concurrency: int = 4

    # Directories
    log_dir: Path = Path("logs")

    # Logging
    log_level: str = "INFO"

    # API
    api_key: str = ""
    cors_origins: str = "*"

    @field_validator("anthropic_api_key", mode="before")
    @classmethod
    def _strip_key(cls, v: object) -> object:
        """Env files often carry trailing whitespace or newlines."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator(
        "request_timeout_seconds",
        "max_output_tokens",
        "document_excerpt_chars",
        "report_max_concurrency",
    )
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("temperature")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("temperature must be between 0 and 1")
        return v

    @property
    def allowed_origins(self) -> list[str]:
        """CORS_ORIGINS as a list; ``["*"]`` allows any origin."""
        return [
            o.strip() for o in self.cors_origins.split(",") if o.strip()
        ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


@dataclass(frozen=True)
class AnalysisConfig:
    """Options injected into the analyzer at construction time.

    ``credential`` is None when no key is configured; the analyzer
    then answers from the simulation table.
    """

    credential: str | None = None
    request_timeout: float = 30.0
    model_identifier: str = "anthropic/claude-3-haiku-20240307"
    max_output_length: int = 1000
    temperature: float = 0.2
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS

    @classmethod
    def from_settings(cls, settings: Settings) -> AnalysisConfig:
        return cls(
            credential=settings.anthropic_api_key or None,
            request_timeout=settings.request_timeout_seconds,
            model_identifier=settings.model_identifier,
            max_output_length=settings.max_output_tokens,
            temperature=settings.temperature,
            excerpt_chars=settings.document_excerpt_chars,
        )
