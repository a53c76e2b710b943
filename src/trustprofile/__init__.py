"""
Trust Profile Evaluator

Evaluates trust indicator sets (JSON provenance data for a digital asset)
against declarative trust profiles (multi-document YAML) and produces a
structured trust report.

A profile is a header document (metadata, variables, expressions, include)
followed by sections of statements and data blocks. Statements either
report static information or evaluate an expression; data blocks publish
named values. Every item sees the results of the items before it.

Quick Start:
    from trustprofile import ProfileEvaluator

    evaluator = ProfileEvaluator()
    evaluator.load_profile("profiles/camera_profile.yml")
    report = evaluator.evaluate(indicators)

    report.find_statement("content").report_text
    report.to_dict()   # {"profile_metadata": ..., "statements": [...], ...}

Version: 1.1.0
"""
from __future__ import annotations

__version__ = "1.1.0"

from .config import EvaluatorSettings
from .engine import (
    EvaluationRun,
    ExpressionEngine,
    ProfileEvaluator,
    TemplateRenderer,
    evaluate_expression,
)
from .exceptions import (
    ConfigurationError,
    ExpressionEvaluationError,
    IncludeResolutionWarning,
    NotLoadedError,
    ProfileLoadError,
    ProfileValidationError,
    ReportValidationError,
    ReportWriteError,
    TemplateRenderError,
    TrustProfileError,
)
from .models import (
    DataBlock,
    OutputFormat,
    ProfileDocument,
    Statement,
    StatementReport,
    TrustReport,
)

__all__ = [
    "__version__",
    # Configuration
    "EvaluatorSettings",
    # Engine
    "EvaluationRun",
    "ExpressionEngine",
    "ProfileEvaluator",
    "TemplateRenderer",
    "evaluate_expression",
    # Models
    "DataBlock",
    "OutputFormat",
    "ProfileDocument",
    "Statement",
    "StatementReport",
    "TrustReport",
    # Exceptions
    "ConfigurationError",
    "ExpressionEvaluationError",
    "IncludeResolutionWarning",
    "NotLoadedError",
    "ProfileLoadError",
    "ProfileValidationError",
    "ReportValidationError",
    "ReportWriteError",
    "TemplateRenderError",
    "TrustProfileError",
]
