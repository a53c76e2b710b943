"""
Trust Report Models

The structured output of one evaluation run:

    {
        "profile_metadata": {...},
        "statements": [[StatementReport, ...], ...],   # one list per section
        "<block name>": <value>,                       # one key per data block
        ...
    }
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


# Report keys that data blocks may not use
RESERVED_REPORT_KEYS = frozenset({"profile_metadata", "statements"})

_UNSET = object()


# =============================================================================
# Statement Report
# =============================================================================

@dataclass
class StatementReport:
    """
    Result of processing one statement.

    `value` is only reported for expression statements; it may legitimately
    be None there, so presence is tracked separately via `has_value`.
    """
    id: str
    title: Optional[str] = None
    report_text: Optional[str] = None
    value: Any = _UNSET

    @property
    def has_value(self) -> bool:
        return self.value is not _UNSET

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id}
        if self.title is not None:
            result["title"] = self.title
        if self.has_value:
            result["value"] = self.value
        if self.report_text is not None:
            result["report_text"] = self.report_text
        return result


# =============================================================================
# Trust Report
# =============================================================================

@dataclass
class TrustReport:
    """
    Accumulated report for one evaluation run.

    Attributes:
        profile_metadata: Merged header metadata
        statements: Per-section statement reports (empty sections omitted)
        blocks: Data block values in document order
    """
    profile_metadata: dict[str, Any] = field(default_factory=dict)
    statements: list[list[StatementReport]] = field(default_factory=list)
    blocks: dict[str, Any] = field(default_factory=dict)

    def add_section(self, reports: list[StatementReport]) -> None:
        """Append a section's statement reports; empty sections are dropped."""
        if reports:
            self.statements.append(list(reports))

    def add_block(self, name: str, value: Any) -> None:
        self.blocks[name] = value

    def find_statement(self, statement_id: str) -> Optional[StatementReport]:
        """First statement report with the given id, across all sections."""
        for section in self.statements:
            for report in section:
                if report.id == statement_id:
                    return report
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the report's wire shape."""
        result: dict[str, Any] = {
            "profile_metadata": self.profile_metadata,
            "statements": [
                [report.to_dict() for report in section]
                for section in self.statements
            ],
        }
        result.update(self.blocks)
        return result
