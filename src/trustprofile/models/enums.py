"""
Trust Profile Enumerations

Enumeration types used throughout the trust profile evaluator.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Profile Items
# =============================================================================

class ItemKind(str, Enum):
    """Variant tag of a profile item, decided once at parse time."""
    STATEMENT = "statement"
    DATA_BLOCK = "data_block"


class StatementKind(str, Enum):
    """Statement variants, distinguished by the presence of an expression."""
    INFORMATION = "information"    # title + report text only
    EXPRESSION = "expression"      # evaluated, conditional report text


# =============================================================================
# Output
# =============================================================================

class OutputFormat(str, Enum):
    """Trust report serialization formats."""
    JSON = "json"
    YAML = "yaml"
    HTML = "html"

    @property
    def extension(self) -> str:
        """File extension used for reports of this format."""
        return {
            OutputFormat.JSON: "json",
            OutputFormat.YAML: "yml",
            OutputFormat.HTML: "html",
        }[self]
