"""Statement segmenter.

Splits comment-masked Solidity text into the top-level statements that
start with ``pragma`` or ``import``. Everything else is stepped over:
other statements through their ``;`` and blocks (contract, library,
interface and free function bodies) through their matching ``}``.
"""

from __future__ import annotations

import logging
from typing import Iterator

from solidity_analyzer.analyzer.scanner import (
    QUOTES,
    is_word_char,
    line_number,
    scan_string,
    skip_whitespace,
    word_end,
)
from solidity_analyzer.core.types import Statement, StatementKind

logger = logging.getLogger(__name__)

KEYWORDS: dict[str, StatementKind] = {kind.value: kind for kind in StatementKind}

DEFAULT_MAX_STATEMENT_LENGTH = 65_536


def segment(text: str, max_statement_length: int = DEFAULT_MAX_STATEMENT_LENGTH) -> Iterator[Statement]:
    """Yield recognized statements in source order."""
    n = len(text)
    i = 0
    while i < n:
        i = skip_whitespace(text, i)
        if i >= n:
            break

        if is_word_char(text[i]):
            end = word_end(text, i)
            kind = KEYWORDS.get(text[i:end])
            if kind is not None:
                start = i
                stmt_end, i = _delimit(text, start, end, kind, max_statement_length)
                if stmt_end is not None:
                    yield Statement(kind=kind, text=text[start:stmt_end], start=start)
                continue

        i = _skip_statement(text, i)


def _delimit(
    text: str,
    start: int,
    body_start: int,
    kind: StatementKind,
    max_statement_length: int,
) -> tuple[int | None, int]:
    """Find the ``;`` closing the statement whose keyword spans ``start:body_start``.

    Returns ``(statement_end, resume_at)``; ``statement_end`` is ``None``
    when the statement is dropped.
    """
    n = len(text)
    limit = start + max_statement_length
    i = body_start
    while i < n:
        if i >= limit:
            _log_drop(text, start, kind, "exceeds %d characters" % max_statement_length)
            return None, body_start

        ch = text[i]
        if ch == ";":
            return i + 1, i + 1
        if ch in QUOTES:
            i, _ = scan_string(text, i)
            continue
        if is_word_char(ch):
            end = word_end(text, i)
            if text[i:end] in KEYWORDS:
                _log_drop(text, start, kind, "interrupted by '%s'" % text[i:end])
                return None, i
            i = end
            continue
        i += 1

    _log_drop(text, start, kind, "unterminated")
    return None, n


def _skip_statement(text: str, start: int) -> int:
    """Step over an unrecognized top-level statement or block."""
    n = len(text)
    i = start
    while i < n:
        ch = text[i]
        if ch == ";" or ch == "}":
            return i + 1
        if ch == "{":
            return _skip_block(text, i + 1)
        if ch in QUOTES:
            i, _ = scan_string(text, i)
            continue
        if is_word_char(ch):
            end = word_end(text, i)
            if i > start and text[i:end] in KEYWORDS:
                return i
            i = end
            continue
        i += 1
    return n


def _skip_block(text: str, i: int) -> int:
    """Return the index just past the ``}`` matching an already consumed ``{``."""
    n = len(text)
    depth = 1
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i, _ = scan_string(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return n


def _log_drop(text: str, start: int, kind: StatementKind, reason: str) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Dropping %s statement at line %d: %s",
            kind.value,
            line_number(text, start),
            reason,
        )
