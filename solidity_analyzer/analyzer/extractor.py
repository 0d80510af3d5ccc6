"""Pragma and import extraction — the ``analyze`` entry point.

    from solidity_analyzer import analyze

    result = analyze(source)
    result.version_pragmas   # ["^0.8.0"]
    result.imports           # ["./IERC20.sol", "@openzeppelin/contracts/access/Ownable.sol"]

Each recognized statement is handed to its parser, which returns the fact
or ``None``; only present facts are kept. Nothing below this module raises
for malformed Solidity.
"""

from __future__ import annotations

import logging
from typing import Callable

from solidity_analyzer.analyzer.imports import parse_import
from solidity_analyzer.analyzer.pragma import parse_pragma
from solidity_analyzer.analyzer.scanner import mask_comments, strip_comments
from solidity_analyzer.analyzer.segmenter import segment
from solidity_analyzer.core.config import get_settings
from solidity_analyzer.core.errors import ConfigurationError, InvalidSourceError
from solidity_analyzer.core.types import AnalysisResult, CommentPolicy, Statement, StatementKind

logger = logging.getLogger(__name__)

PARSERS: dict[StatementKind, Callable[[str], str | None]] = {
    StatementKind.PRAGMA: parse_pragma,
    StatementKind.IMPORT: parse_import,
}


class Extractor:
    """Extracts version pragmas and import paths from Solidity source text.

    Options left as ``None`` come from :func:`get_settings`. An instance
    holds no per-call state and can be shared between threads.
    """

    def __init__(
        self,
        comment_policy: CommentPolicy | str | None = None,
        max_statement_length: int | None = None,
    ) -> None:
        if comment_policy is None or max_statement_length is None:
            settings = get_settings()
            if comment_policy is None:
                comment_policy = settings.comment_policy
            if max_statement_length is None:
                max_statement_length = settings.max_statement_length

        try:
            self.comment_policy = CommentPolicy(comment_policy)
        except ValueError as e:
            raise ConfigurationError(f"Unknown comment policy: {comment_policy!r}") from e

        limit = max_statement_length
        if limit <= 0:
            raise ConfigurationError(f"max_statement_length must be positive, got {limit}")
        self.max_statement_length = limit

    def statements(self, source: str) -> list[Statement]:
        """Return the recognized pragma/import statements of ``source``."""
        _check_source(source)
        text = mask_comments(source, self.comment_policy)
        return list(segment(text, self.max_statement_length))

    def analyze(self, source: str) -> AnalysisResult:
        result = AnalysisResult()
        targets = {
            StatementKind.PRAGMA: result.version_pragmas,
            StatementKind.IMPORT: result.imports,
        }

        statements = self.statements(source)
        for statement in statements:
            fact = PARSERS[statement.kind](self._body(source, statement))
            if fact is not None:
                targets[statement.kind].append(fact)

        logger.debug(
            "Extracted %d pragmas and %d imports from %d statements",
            len(result.version_pragmas),
            len(result.imports),
            len(statements),
            extra={"statements": len(statements)},
        )
        return result

    def _body(self, source: str, statement: Statement) -> str:
        # Skipped comments read as one space, the way the statement is written.
        original = source[statement.start:statement.end]
        if self.comment_policy is CommentPolicy.SCAN or original == statement.text:
            return statement.body
        return strip_comments(original)[len(statement.kind.value):-1]


def _check_source(source: object) -> None:
    if not isinstance(source, str):
        raise InvalidSourceError(
            f"source must be str, got {type(source).__name__}",
            details={"type": type(source).__name__},
        )


def analyze(
    source: str,
    *,
    comment_policy: CommentPolicy | str | None = None,
    max_statement_length: int | None = None,
) -> AnalysisResult:
    """Extract version pragmas and import paths from ``source``.

    Raises:
        InvalidSourceError: ``source`` is not a ``str``.
        ConfigurationError: an option has an unusable value.
    """
    extractor = Extractor(comment_policy=comment_policy, max_statement_length=max_statement_length)
    return extractor.analyze(source)
