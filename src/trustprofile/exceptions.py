"""
Trust Profile Exception Hierarchy

Domain-specific exceptions for trust profile evaluation.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: TP_<CATEGORY>_<SPECIFIC>

Errors raised for a single profile item carry it in details["item"]; the
item is appended to the message in flow-style YAML so the CLI shows which
item is wrong.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import yaml


def format_item(item: Any) -> str:
    """A profile item as one line of flow-style YAML."""
    text = yaml.safe_dump(item, default_flow_style=True, sort_keys=False, width=float("inf"))
    # scalars are dumped as a document with an explicit end marker
    return text.strip().removesuffix("\n...")


@dataclass
class TrustProfileError(Exception):
    """
    Base exception for all trust profile errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (TP_*)
        details: Additional context about the error
        profile: Profile name or path if applicable
    """
    message: str
    code: str = "TP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    profile: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        message = self.message
        if "item" in self.details:
            message = f"{message}: {format_item(self.details['item'])}"
        parts = [f"[{self.code}] {message}"]
        if self.profile:
            parts.append(f"(profile: {self.profile})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/CLI output."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.profile:
            result["profile"] = self.profile
        return result


# =============================================================================
# Profile Loading Errors
# =============================================================================

@dataclass
class NotLoadedError(TrustProfileError):
    """Evaluation requested before a profile was loaded."""
    code: str = "TP_PROFILE_NOT_LOADED"


@dataclass
class ProfileLoadError(TrustProfileError):
    """Failed to read or parse a profile or subject data file."""
    code: str = "TP_PROFILE_LOAD_ERROR"


@dataclass
class ProfileValidationError(TrustProfileError):
    """Profile header failed schema validation."""
    code: str = "TP_PROFILE_VALIDATION_ERROR"


@dataclass
class ConfigurationError(TrustProfileError):
    """A profile item is malformed (missing id, report_text, block name...)."""
    code: str = "TP_CONFIGURATION_ERROR"


@dataclass
class IncludeResolutionWarning(TrustProfileError):
    """An include target could not be read. Logged, never raised."""
    code: str = "TP_INCLUDE_UNRESOLVED"


# =============================================================================
# Evaluation Errors
# =============================================================================

@dataclass
class ExpressionEvaluationError(TrustProfileError):
    """Expression failed to parse or raised during evaluation."""
    code: str = "TP_EXPRESSION_ERROR"


@dataclass
class TemplateRenderError(TrustProfileError):
    """Template failed to parse or render."""
    code: str = "TP_TEMPLATE_ERROR"


# =============================================================================
# Report Errors
# =============================================================================

@dataclass
class ReportValidationError(TrustProfileError):
    """Trust report does not match the report schema."""
    code: str = "TP_REPORT_INVALID"


@dataclass
class ReportWriteError(TrustProfileError):
    """Trust report could not be serialized or written."""
    code: str = "TP_REPORT_WRITE_ERROR"
