"""Version pragma parsing."""

from __future__ import annotations

from solidity_analyzer.analyzer.scanner import skip_whitespace, word_end

VERSION_PRAGMA = "solidity"


def parse_pragma(body: str) -> str | None:
    """Return the version expression of a ``pragma solidity`` statement body.

    ``body`` is the text between ``pragma`` and ``;``. Other pragma kinds
    (``experimental``, ``abicoder``, ...) and an empty expression give
    ``None``. The expression itself is not validated.
    """
    i = skip_whitespace(body, 0)
    end = word_end(body, i)
    if body[i:end] != VERSION_PRAGMA:
        return None
    return body[end:].strip() or None
