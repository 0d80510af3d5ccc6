"""Tests for the import statement parser."""

from __future__ import annotations

import pytest

from solidity_analyzer.analyzer.imports import ImportParser, ImportState, parse_import
from solidity_analyzer.core.types import ImportForm


class TestImportForms:
    @pytest.mark.parametrize(
        "body, expected",
        [
            (' "bare.sol"', "bare.sol"),
            (" * as withStar from \"star.sol\"", "star.sol"),
            (' "as.sol" as something', "as.sol"),
            (' {} from "empty-braces.sol"', "empty-braces.sol"),
            (' {,,} from "empty-braces2.sol"', "empty-braces2.sol"),
            (' {something} from "symbol.sol"', "symbol.sol"),
            (' {something as somethingElse} from "aliased.sol"', "aliased.sol"),
            (' {something as somethingElse, other,,other2} from "multiple.sol"', "multiple.sol"),
        ],
    )
    def test_every_form_yields_the_path(self, body: str, expected: str):
        assert parse_import(body) == expected

    @pytest.mark.parametrize(
        "body, form",
        [
            (' "a.sol"', ImportForm.BARE),
            (' * as A from "a.sol"', ImportForm.STAR),
            (' {A} from "a.sol"', ImportForm.BRACE),
        ],
    )
    def test_form_is_recorded(self, body: str, form: ImportForm):
        parser = ImportParser(body)
        parser.parse()
        assert parser.form is form
        assert parser.state is ImportState.DONE

    def test_single_quotes(self):
        assert parse_import(" {A} from './single.sol'") == "./single.sol"

    def test_quotes_are_stripped_but_escapes_kept(self):
        assert parse_import(r' "dir\"name.sol"') == r'dir\"name.sol'

    def test_whitespace_and_newlines(self):
        assert parse_import("\n\t*\n as\tX\n from\n\n  \"ws.sol\"  \n") == "ws.sol"

    def test_nested_braces_are_balanced(self):
        assert parse_import(' {A, {B}} from "nested.sol"') == "nested.sol"

    def test_quoted_brace_inside_symbol_list(self):
        assert parse_import(' {A, "}"} from "quoted.sol"') == "quoted.sol"


class TestSkipped:
    @pytest.mark.parametrize(
        "body",
        [
            "",
            "   ",
            " Foo",
            " Foo from \"x.sol\"",
            ' {A, B from "unbalanced.sol"',
            ' {A} "no-from.sol"',
            " {A} from",
            " {A} from B",
            " * as X",
            ' "unterminated.sol',
            " {A} from 'broken\n.sol'",
        ],
    )
    def test_no_path_is_emitted(self, body: str):
        parser = ImportParser(body)
        assert parser.parse() is None
        assert parser.state is ImportState.SKIPPED

    def test_keywords_are_case_sensitive(self):
        assert parse_import(' {A} FROM "upper.sol"') is None
