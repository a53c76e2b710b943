"""
Trust Profile Engine

Services for evaluating trust profiles.

Services:
- ProfileEvaluator: Load a profile and evaluate subject data against it
- StatementProcessor: Process information and expression statements
- DataBlockProcessor: Coerce data block values
- ExpressionEngine: Sandboxed expression evaluation
- TemplateRenderer: Sandboxed ``{{ }}`` template rendering

Usage:
    from trustprofile.engine import ProfileEvaluator

    evaluator = ProfileEvaluator()
    evaluator.load_profile("profiles/camera_profile.yml")
    report = evaluator.evaluate(indicators)
"""
from __future__ import annotations

from .coercion import (
    coerce_value,
    parse_bool,
    parse_number,
)
from .data_blocks import DataBlockProcessor
from .evaluator import (
    EvaluationRun,
    ProfileEvaluator,
    evaluate_expression,
)
from .expressions import (
    BUILTIN_FUNCTIONS,
    ExpressionEngine,
)
from .statements import (
    DEFAULT_LANGUAGE,
    StatementProcessor,
)
from .templates import (
    MISSING_HELPER_MARKER,
    MissingHelperUndefined,
    TemplateRenderer,
    finalize_value,
    raw,
)

__all__ = [
    # Evaluator
    "EvaluationRun",
    "ProfileEvaluator",
    "evaluate_expression",
    # Processors
    "DataBlockProcessor",
    "StatementProcessor",
    "DEFAULT_LANGUAGE",
    # Coercion
    "coerce_value",
    "parse_bool",
    "parse_number",
    # Expressions
    "BUILTIN_FUNCTIONS",
    "ExpressionEngine",
    # Templates
    "MISSING_HELPER_MARKER",
    "MissingHelperUndefined",
    "TemplateRenderer",
    "finalize_value",
    "raw",
]
