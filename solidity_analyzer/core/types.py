"""Shared enums and types used across the analyzer."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ────────────────────────────────────────────────────────────────────


class StatementKind(str, enum.Enum):
    """Leading keyword of a recognized top-level statement."""

    PRAGMA = "pragma"
    IMPORT = "import"


class CommentPolicy(str, enum.Enum):
    """How `//` and `/* */` comments are treated before segmentation."""

    SKIP = "skip"  # comments are whitespace; keywords inside are invisible
    SCAN = "scan"  # comment markers are whitespace; content is scanned as code


class ImportForm(str, enum.Enum):
    """Syntactic form an import statement was written in."""

    BARE = "bare"
    STAR = "star"
    BRACE = "brace"


# ── Statements ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Statement:
    """A recognized statement, from its keyword through the terminating `;`."""

    kind: StatementKind
    text: str
    start: int = 0

    @property
    def body(self) -> str:
        """Text between the keyword and the terminating `;`."""
        return self.text[len(self.kind.value):-1]

    @property
    def end(self) -> int:
        return self.start + len(self.text)


# ── Result ───────────────────────────────────────────────────────────────────


class AnalysisResult(BaseModel):
    """Facts extracted from one Solidity source, in source order."""

    model_config = ConfigDict(populate_by_name=True)

    version_pragmas: list[str] = Field(default_factory=list, alias="versionPragmas")
    imports: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.version_pragmas and not self.imports

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire shape: ``{"versionPragmas": [...], "imports": [...]}``."""
        return self.model_dump(by_alias=True)
