"""Import statement parsing.

Every Solidity import form reduces to one quoted path:

    import "bare.sol";
    import "as.sol" as something;
    import * as withStar from "star.sol";
    import {a, b as c} from "symbols.sol";

The parser is a small state machine over the statement body. Brace-form
symbol lists are only walked to find their closing ``}``; their contents,
malformed or not, are thrown away.
"""

from __future__ import annotations

import enum
import logging

from solidity_analyzer.analyzer.scanner import (
    QUOTES,
    is_word_char,
    read_string,
    scan_string,
    skip_whitespace,
    word_end,
)
from solidity_analyzer.core.types import ImportForm

logger = logging.getLogger(__name__)


class ImportState(str, enum.Enum):
    START = "start"
    STAR_FORM = "star_form"
    BRACE_FORM = "brace_form"
    BARE_FORM = "bare_form"
    LOCATE_PATH_LITERAL = "locate_path_literal"
    DONE = "done"
    SKIPPED = "skipped"


class ImportParser:
    """Parses one import statement body (text between ``import`` and ``;``)."""

    def __init__(self, body: str) -> None:
        self.body = body
        self.state = ImportState.START
        self.form: ImportForm | None = None
        self.path: str | None = None
        self._pos = 0

    def parse(self) -> str | None:
        while self.state not in (ImportState.DONE, ImportState.SKIPPED):
            state = self.state

            if state is ImportState.START:
                self._on_start()

            elif state is ImportState.STAR_FORM:
                self._on_star_form()

            elif state is ImportState.BRACE_FORM:
                self._on_brace_form()

            elif state is ImportState.BARE_FORM:
                self._on_bare_form()

            elif state is ImportState.LOCATE_PATH_LITERAL:
                self._on_locate_path_literal()

        return self.path

    # ── States ───────────────────────────────────────────────────────────

    def _on_start(self) -> None:
        self._pos = skip_whitespace(self.body, 0)
        if self._pos >= len(self.body):
            self._skip("empty import")
            return

        ch = self.body[self._pos]
        if ch == "*":
            self._pos += 1
            self.form, self.state = ImportForm.STAR, ImportState.STAR_FORM
        elif ch == "{":
            self._pos += 1
            self.form, self.state = ImportForm.BRACE, ImportState.BRACE_FORM
        elif ch in QUOTES:
            self.form, self.state = ImportForm.BARE, ImportState.BARE_FORM
        else:
            self._skip(f"unexpected {ch!r} after 'import'")

    def _on_star_form(self) -> None:
        # `* as Name` is stepped over on the way to `from`.
        self._expect_from()

    def _on_brace_form(self) -> None:
        body = self.body
        n = len(body)
        depth = 1
        i = self._pos
        while i < n:
            ch = body[i]
            if ch in QUOTES:
                i, _ = scan_string(body, i)
                continue
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    self._pos = i + 1
                    self._expect_from()
                    return
            i += 1
        self._skip("unbalanced '{'")

    def _on_bare_form(self) -> None:
        # The literal comes first; a trailing `as Name` is ignored.
        self.state = ImportState.LOCATE_PATH_LITERAL

    def _on_locate_path_literal(self) -> None:
        i = skip_whitespace(self.body, self._pos)
        if i >= len(self.body) or self.body[i] not in QUOTES:
            self._skip("no path literal")
            return
        path = read_string(self.body, i)
        if path is None:
            self._skip("unterminated path literal")
            return
        self.path = path
        self.state = ImportState.DONE

    # ── Helpers ──────────────────────────────────────────────────────────

    def _expect_from(self) -> None:
        """Advance past the ``from`` keyword, stepping over words before it."""
        body = self.body
        i = skip_whitespace(body, self._pos)
        while i < len(body) and is_word_char(body[i]):
            end = word_end(body, i)
            if body[i:end] == "from":
                self._pos = end
                self.state = ImportState.LOCATE_PATH_LITERAL
                return
            i = skip_whitespace(body, end)
        self._skip("missing 'from'")

    def _skip(self, reason: str) -> None:
        logger.debug("Skipping import statement: %s", reason)
        self.state = ImportState.SKIPPED


def parse_import(body: str) -> str | None:
    """Return the path imported by an import statement body, or ``None``."""
    return ImportParser(body).parse()
