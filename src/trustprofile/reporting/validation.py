"""
Trust Report Validation

Validates serialized trust reports against the bundled JSON schema
(``trust_report.schema.json``).
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from ..exceptions import ReportValidationError


SCHEMA_PATH = Path(__file__).parent / "trust_report.schema.json"

# Errors reported per failed validation
MAX_REPORTED_ERRORS = 10


@lru_cache(maxsize=1)
def load_report_schema() -> dict[str, Any]:
    """Load the trust report JSON schema."""
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def report_errors(report: dict[str, Any]) -> list[str]:
    """
    Validate a report dictionary.

    Returns:
        Up to MAX_REPORTED_ERRORS messages, empty if the report is valid
    """
    validator = Draft202012Validator(load_report_schema())
    messages = []
    for error in sorted(validator.iter_errors(report), key=lambda e: list(e.absolute_path)):
        path = " -> ".join(str(p) for p in error.absolute_path) or "<root>"
        messages.append(f"{path}: {error.message}")
        if len(messages) >= MAX_REPORTED_ERRORS:
            break
    return messages


def validate_report(report: dict[str, Any]) -> None:
    """
    Raises:
        ReportValidationError: If the report does not match the schema
    """
    errors = report_errors(report)
    if errors:
        raise ReportValidationError(
            message=f"Trust report failed schema validation: {len(errors)} errors",
            details={"errors": errors},
        )
