"""Tests for solidity_analyzer.core.config — settings loading and validation."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from solidity_analyzer.core.config import Settings, get_settings
from solidity_analyzer.core.errors import ConfigurationError
from solidity_analyzer.core.types import CommentPolicy


class TestSettings:
    """Verify settings defaults and environment overrides."""

    def test_default_app_env(self):
        s = Settings()
        assert s.app_env == "development"

    def test_extraction_defaults(self):
        s = Settings()
        assert s.comment_policy is CommentPolicy.SKIP
        assert s.max_statement_length == 65_536

    def test_provider_defaults(self):
        s = Settings()
        assert s.fallback_provider == "solidity_analyzer.analyzer.extractor"
        assert s.providers_dir.endswith("providers")

    def test_host_defaults(self):
        s = Settings()
        assert s.source_suffix == ".sol"
        assert "node_modules" in s.exclude_dirs

    @patch.dict(
        os.environ,
        {
            "SOLIDITY_ANALYZER_APP_ENV": "production",
            "SOLIDITY_ANALYZER_COMMENT_POLICY": "scan",
            "SOLIDITY_ANALYZER_LOG_LEVEL": "debug",
        },
    )
    def test_env_override(self):
        """Environment variables with SOLIDITY_ANALYZER_ prefix override defaults."""
        s = Settings()
        assert s.app_env == "production"
        assert s.comment_policy is CommentPolicy.SCAN
        assert s.log_level == "DEBUG"

    @patch.dict(os.environ, {"SOLIDITY_ANALYZER_MAX_STATEMENT_LENGTH": "0"})
    def test_non_positive_length_rejected(self):
        with pytest.raises(ValidationError):
            Settings()

    @patch.dict(os.environ, {"SOLIDITY_ANALYZER_APP_ENV": "qa"})
    def test_unknown_env_rejected(self):
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_returns_same_instance(self):
        """get_settings is cached — same object each call."""
        get_settings.cache_clear()
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    @patch.dict(os.environ, {"SOLIDITY_ANALYZER_MAX_STATEMENT_LENGTH": "0"})
    def test_get_settings_wraps_validation_errors(self):
        get_settings.cache_clear()
        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()
        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert exc_info.value.details == {"fields": ["max_statement_length"]}
