"""Exception hierarchy for the analyzer.

Only host-level problems raise. Malformed Solidity never does: the
extractor drops the offending statement and keeps going.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes carried by every AnalyzerError."""

    INVALID_SOURCE = "INVALID_SOURCE"
    PROVIDER_LOAD_FAILED = "PROVIDER_LOAD_FAILED"
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_PROVIDER_RESULT = "INVALID_PROVIDER_RESULT"


class AnalyzerError(Exception):
    """Base class for all analyzer errors."""

    code: ErrorCode = ErrorCode.INVALID_SOURCE

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidSourceError(AnalyzerError, TypeError):
    """The input handed to ``analyze`` is not text."""

    code = ErrorCode.INVALID_SOURCE


class ConfigurationError(AnalyzerError, ValueError):
    """A setting or option has an unusable value."""

    code = ErrorCode.INVALID_CONFIG


class ProviderLoadError(AnalyzerError, ImportError):
    """No analysis provider could be loaded.

    ``attempts`` lists ``(candidate, reason)`` pairs in the order tried.
    """

    code = ErrorCode.PROVIDER_LOAD_FAILED

    def __init__(self, message: str, attempts: list[tuple[str, str]] | None = None) -> None:
        self.attempts = list(attempts or [])
        super().__init__(
            message,
            details={"attempts": [{"candidate": c, "reason": r} for c, r in self.attempts]},
        )

    def __str__(self) -> str:
        if not self.attempts:
            return self.message
        tried = "; ".join(f"{c}: {r}" for c, r in self.attempts)
        return f"{self.message} (tried {tried})"


class ProviderResultError(AnalyzerError):
    """A loaded provider returned something that is not an analysis result."""

    code = ErrorCode.INVALID_PROVIDER_RESULT

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        super().__init__(
            f"Provider '{provider}' returned an invalid result: {reason}",
            details={"provider": provider},
        )
