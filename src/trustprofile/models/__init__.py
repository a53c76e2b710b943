"""
Trust Profile Models

Domain models for profiles and trust reports:

    from trustprofile.models import (
        # Enums
        ItemKind, StatementKind, OutputFormat,
        # Profile items
        Statement, DataBlock, ProfileDocument,
        # Report
        StatementReport, TrustReport,
    )
"""
from __future__ import annotations

from .enums import (
    ItemKind,
    OutputFormat,
    StatementKind,
)
from .items import (
    RESERVED_STATEMENT_PREFIX,
    DataBlock,
    Item,
    ProfileDocument,
    Section,
    Statement,
)
from .report import (
    RESERVED_REPORT_KEYS,
    StatementReport,
    TrustReport,
)

__all__ = [
    # Enums
    "ItemKind",
    "OutputFormat",
    "StatementKind",
    # Items
    "RESERVED_STATEMENT_PREFIX",
    "DataBlock",
    "Item",
    "ProfileDocument",
    "Section",
    "Statement",
    # Report
    "RESERVED_REPORT_KEYS",
    "StatementReport",
    "TrustReport",
]
