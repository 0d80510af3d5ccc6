"""Shared fixtures for the solidity-analyzer test suite."""

from __future__ import annotations

import logging
import os
import textwrap
from pathlib import Path

import pytest

from solidity_analyzer.core.config import get_settings


# ── Isolation ────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop SOLIDITY_ANALYZER_* variables and the cached settings around each test."""
    for key in list(os.environ):
        if key.startswith("SOLIDITY_ANALYZER_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ── Solidity sources ─────────────────────────────────────────────────────────


PRAGMAS_SOURCE = """pragma solidity 1.2.3;

pragma solidity ^4.5.6 >1;
"""

IMPORTS_SOURCE = """import "bare.sol";

import * as withStar from "star.sol";

import "as.sol" as something;

import {} from "empty-braces.sol";

import {,,} from "empty-braces2.sol";

import {something} from "symbol.sol";

import {something as somethingElse} from "aliased.sol";

import {something as somethingElse, other,,other2} from "multiple.sol";
"""

ALL_IMPORT_PATHS = [
    "bare.sol",
    "star.sol",
    "as.sol",
    "empty-braces.sol",
    "empty-braces2.sol",
    "symbol.sol",
    "aliased.sol",
    "multiple.sol",
]


@pytest.fixture
def pragmas_source() -> str:
    return PRAGMAS_SOURCE


@pytest.fixture
def imports_source() -> str:
    return IMPORTS_SOURCE


@pytest.fixture
def import_paths() -> list[str]:
    return list(ALL_IMPORT_PATHS)


@pytest.fixture
def token_contract() -> str:
    """Return a realistic contract with comments, a body and mixed statements."""
    return textwrap.dedent("""\
        // SPDX-License-Identifier: MIT
        pragma solidity ^0.8.20;
        pragma abicoder v2;

        import "@openzeppelin/contracts/token/ERC20/ERC20.sol";
        import {Ownable} from "@openzeppelin/contracts/access/Ownable.sol";
        // import "./Legacy.sol";

        /**
         * @notice pragma solidity 0.4.24; is what the old version used.
         */
        contract Token is ERC20, Ownable {
            string public constant NOTE = "import \\"fake.sol\\"; }";

            constructor() ERC20("Token", "TKN") Ownable(msg.sender) {
                _mint(msg.sender, 1_000_000 ether);
            }

            function burn(uint256 amount) external {
                if (amount == 0) { revert(); }
                _burn(msg.sender, amount);
            }
        }

        import './Late.sol';
    """)


@pytest.fixture
def write_sol(tmp_path: Path):
    """Write a Solidity file under tmp_path and return its path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
