"""
Trust Report Output

Serialization, writing and schema validation of trust reports.

Usage:
    from trustprofile.reporting import write_report, validate_report

    data = report.to_dict()
    validate_report(data)
    write_report(data, "out/", "indicators.json", OutputFormat.JSON)
"""
from __future__ import annotations

from .validation import (
    SCHEMA_PATH,
    load_report_schema,
    report_errors,
    validate_report,
)
from .writers import (
    report_path,
    serialize_report,
    to_html,
    to_json,
    to_yaml,
    write_report,
)

__all__ = [
    # Writers
    "report_path",
    "serialize_report",
    "to_html",
    "to_json",
    "to_yaml",
    "write_report",
    # Validation
    "SCHEMA_PATH",
    "load_report_schema",
    "report_errors",
    "validate_report",
]
