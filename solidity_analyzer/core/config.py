"""Core configuration for the Solidity analyzer."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from solidity_analyzer.core.errors import ConfigurationError
from solidity_analyzer.core.types import CommentPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SOLIDITY_ANALYZER_",
        case_sensitive=False,
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_name: str = "Solidity Analyzer"
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "WARNING"

    # ── Extraction ───────────────────────────────────────────────────────
    comment_policy: CommentPolicy = CommentPolicy.SKIP
    max_statement_length: int = 65_536

    # ── Providers ────────────────────────────────────────────────────────
    providers_dir: str = "~/.solidity-analyzer/providers"
    fallback_provider: str = "solidity_analyzer.analyzer.extractor"

    # ── Host / CLI ───────────────────────────────────────────────────────
    source_suffix: str = ".sol"
    exclude_dirs: list[str] = ["node_modules", ".git"]

    @field_validator("max_statement_length")
    @classmethod
    def _positive_length(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_statement_length must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton.

    Raises:
        ConfigurationError: an environment or .env value is invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigurationError(
            f"Invalid settings: {e.error_count()} error(s) in {', '.join(fields)}",
            details={"fields": fields},
        ) from e
