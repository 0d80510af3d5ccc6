"""Extract version pragmas and import paths from Solidity source text."""

from solidity_analyzer.analyzer.extractor import Extractor, analyze
from solidity_analyzer.core.errors import (
    AnalyzerError,
    ConfigurationError,
    InvalidSourceError,
    ProviderLoadError,
    ProviderResultError,
)
from solidity_analyzer.core.types import AnalysisResult, CommentPolicy

__version__ = "0.1.0"

__all__ = [
    "analyze",
    "Extractor",
    "AnalysisResult",
    "CommentPolicy",
    "AnalyzerError",
    "ConfigurationError",
    "InvalidSourceError",
    "ProviderLoadError",
    "ProviderResultError",
]
