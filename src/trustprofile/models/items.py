"""
Trust Profile Items

A profile is a header document followed by sections. Each section is an
ordered list of items, and every item is exactly one of:

- Statement: a named check. Informational (title + report text) when it
  has no expression, otherwise an expression whose result drives the
  report text.
- DataBlock: a named value, coerced from its YAML form and exposed to
  every later item and to the final report.

The variant is decided once when the profile is parsed (see
`trustprofile.profiles.loader.classify_item`).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .enums import ItemKind, StatementKind


# Statement ids with this prefix name predefined checks
RESERVED_STATEMENT_PREFIX = "jpt."


# =============================================================================
# Statement
# =============================================================================

@dataclass
class Statement:
    """
    A single named check in a profile section.

    Attributes:
        id: Statement identifier; results are stored under profile.<id>
        title: Optional heading copied into the report
        description: Author-facing description, never reported
        expression: Expression source; absent for information statements
        report_text: Plain/localized text, or {true: ..., false: ...}
            branches for boolean expression results
        raw: The item exactly as it appeared in the profile
    """
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    expression: Optional[str] = None
    report_text: Any = None
    raw: dict[str, Any] = field(default_factory=dict)

    item_kind: ItemKind = field(default=ItemKind.STATEMENT, init=False, repr=False)

    @property
    def kind(self) -> StatementKind:
        """Information or expression statement."""
        if self.expression is None:
            return StatementKind.INFORMATION
        return StatementKind.EXPRESSION

    @property
    def is_reserved(self) -> bool:
        """True for predefined statement ids (``jpt.*``)."""
        return bool(self.id) and self.id.startswith(RESERVED_STATEMENT_PREFIX)


# =============================================================================
# Data Block
# =============================================================================

@dataclass
class DataBlock:
    """
    A named value declared in a profile section.

    Attributes:
        name: Key under which the value appears in the report and profile.*
        value: Scalar, list or mapping as written in the profile
        raw: The item exactly as it appeared in the profile
    """
    name: Optional[str]
    value: Any = None
    raw: dict[str, Any] = field(default_factory=dict)

    item_kind: ItemKind = field(default=ItemKind.DATA_BLOCK, init=False, repr=False)


Item = Union[Statement, DataBlock]
Section = list[Item]


# =============================================================================
# Profile Document
# =============================================================================

@dataclass
class ProfileDocument:
    """
    A parsed trust profile.

    Attributes:
        header: Document 0 as a plain mapping (metadata, variables,
            expressions, include, and any extra keys)
        sections: Documents 1..N, each a list of classified items
        source: Path the profile was loaded from, if any
    """
    header: dict[str, Any]
    sections: list[Section] = field(default_factory=list)
    source: Optional[Path] = None

    @property
    def base_path(self) -> Path:
        """Directory that relative include paths are resolved against."""
        if self.source is None:
            return Path.cwd()
        return self.source.parent

    @property
    def metadata(self) -> dict[str, Any]:
        """The header's metadata mapping (empty if absent)."""
        metadata = self.header.get("metadata")
        return metadata if isinstance(metadata, dict) else {}

    @property
    def display_name(self) -> str:
        """``name (version)`` for log messages."""
        metadata = self.metadata
        return f"{metadata.get('name', '<unnamed>')} ({metadata.get('version', '?')})"

    @property
    def includes(self) -> list[str]:
        """Include paths declared in the header, in order."""
        include = self.header.get("include") or []
        if isinstance(include, str):
            return [include]
        return [str(path) for path in include]
