"""
Trust Profile Evaluator

Evaluates a loaded trust profile against subject data.

Per run:
    1. resolve includes (once per loaded profile)
    2. validate the merged header
    3. copy every header field into the data context
    4. bind `variables`, register `expressions`
    5. process every section item in document order
    6. return the assembled TrustReport

Each run gets its own data context, bindings, expression engine and
template renderer, so runs never share state.
"""
from __future__ import annotations

import copy
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..config import EvaluatorSettings
from ..exceptions import NotLoadedError, ProfileValidationError
from ..models import DataBlock, ProfileDocument, Statement, StatementReport, TrustReport
from ..profiles import IncludeResolver, ProfileLoader, validate_header
from .data_blocks import DataBlockProcessor
from .expressions import ExpressionEngine
from .statements import StatementProcessor
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


# =============================================================================
# Evaluation Run
# =============================================================================

class EvaluationRun:
    """
    One evaluation of a resolved profile against one subject.

    Attributes:
        document: The include-resolved profile
        data_context: Subject data + header fields + ``profile`` results
        variables: Variable bindings from the header
        report: The report being assembled
    """

    def __init__(
        self,
        document: ProfileDocument,
        subject_data: Mapping[str, Any],
        settings: EvaluatorSettings,
    ) -> None:
        self.document = document
        self.settings = settings
        self.data_context: dict[str, Any] = copy.deepcopy(dict(subject_data))
        self.variables: dict[str, Any] = {}
        self.report = TrustReport()

        self.engine = ExpressionEngine()
        self.renderer = TemplateRenderer(self.engine, self.variables)
        self.blocks = DataBlockProcessor(self.renderer)
        self.statements = StatementProcessor(
            self.engine,
            self.renderer,
            self.variables,
            language=settings.report_language,
            require_info_report_text=settings.require_info_report_text,
        )
        self.executed = False

    def execute(self) -> TrustReport:
        """Run the profile and return the report."""
        if self.executed:
            return self.report

        header = self.document.header
        for key, value in header.items():
            self.data_context[key] = copy.deepcopy(value)
        self.data_context["profile"] = {}

        self.report.profile_metadata = copy.deepcopy(self.document.metadata)
        logger.info(
            "Evaluating %s from %s dated %s",
            self.document.display_name,
            self.document.metadata.get("issuer"),
            self.document.metadata.get("date"),
            extra={"profile": self.document.display_name},
        )

        self._bind_variables(header.get("variables") or {})
        self._register_expressions(header.get("expressions") or {})

        logger.debug("Profile contains %d sections", len(self.document.sections))
        for section in self.document.sections:
            self.report.add_section(self._process_section(section))

        self.executed = True
        return self.report

    def _bind_variables(self, variables: Mapping[str, Any]) -> None:
        for name, value in variables.items():
            logger.debug("Binding variable %s = %r", name, value)
            self.variables[name] = value

    def _register_expressions(self, expressions: Mapping[str, str]) -> None:
        for name, source in expressions.items():
            self.engine.register_function(name, source, self.variables)

    def _process_section(self, section: list[Any]) -> list[StatementReport]:
        reports: list[StatementReport] = []
        for item in section:
            if isinstance(item, DataBlock):
                self._publish(self.blocks.process(item, self.data_context) or {})
            elif isinstance(item, Statement):
                reports.append(self.statements.process(item, self.data_context))
        return reports

    def _publish(self, values: Mapping[str, Any]) -> None:
        """Expose data block output in the report and under ``profile``."""
        for name, value in values.items():
            self.report.add_block(name, value)
            self.data_context["profile"][name] = value


# =============================================================================
# Profile Evaluator
# =============================================================================

class ProfileEvaluator:
    """
    Loads a trust profile and evaluates subject data against it.

    Usage:
        evaluator = ProfileEvaluator()
        evaluator.load_profile("profiles/camera_profile.yml")
        report = evaluator.evaluate(indicators)
        print(report.to_dict())
    """

    def __init__(
        self,
        settings: Optional[EvaluatorSettings] = None,
        loader: Optional[ProfileLoader] = None,
        include_resolver: Optional[IncludeResolver] = None,
    ) -> None:
        self.settings = settings or EvaluatorSettings()
        self.loader = loader or ProfileLoader()
        self.include_resolver = include_resolver or IncludeResolver()
        self.profile: Optional[ProfileDocument] = None
        self._resolved: Optional[ProfileDocument] = None

    @property
    def is_loaded(self) -> bool:
        return self.profile is not None

    def load_profile(self, path: Union[str, Path]) -> ProfileDocument:
        """Load a profile file, replacing any previously loaded profile."""
        return self._set_profile(self.loader.load(path))

    def load_profile_from_string(
        self,
        content: str,
        base_path: Optional[Union[str, Path]] = None,
    ) -> ProfileDocument:
        """
        Load a profile from YAML text.

        Args:
            content: Multi-document YAML
            base_path: Directory relative includes are resolved against
        """
        source = Path(base_path).resolve() / "<string>" if base_path else None
        return self._set_profile(self.loader.load_from_string(content, source=source))

    def _set_profile(self, document: ProfileDocument) -> ProfileDocument:
        self.profile = document
        self._resolved = None
        return document

    def resolved_profile(self) -> ProfileDocument:
        """
        The loaded profile with includes merged and header validated.

        Raises:
            NotLoadedError: If no profile is loaded
            ProfileValidationError: If the merged header is invalid
        """
        if self.profile is None:
            raise NotLoadedError(
                message="Trust profile not loaded. Load a profile before evaluation.",
            )
        if self._resolved is None:
            resolved = self.include_resolver.resolve(self.profile)
            try:
                validate_header(resolved.header)
            except ValidationError as e:
                raise ProfileValidationError(
                    message=f"Trust profile header validation failed: {e.error_count()} errors",
                    details={"errors": e.errors(), "path": str(self.profile.source or "")},
                    profile=resolved.display_name,
                )
            self._resolved = resolved
        return self._resolved

    def run(self, subject_data: Mapping[str, Any]) -> EvaluationRun:
        """Evaluate and return the executed run (report + data context)."""
        started = time.perf_counter()
        run = EvaluationRun(self.resolved_profile(), subject_data, self.settings)
        run.execute()
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "Evaluated %d statement sections and %d data blocks in %sms",
            len(run.report.statements), len(run.report.blocks), duration_ms,
            extra={"profile": run.document.display_name, "duration_ms": duration_ms},
        )
        return run

    def evaluate(self, subject_data: Mapping[str, Any]) -> TrustReport:
        """
        Evaluate subject data against the loaded profile.

        Args:
            subject_data: Trust indicators (never modified)

        Returns:
            The TrustReport

        Raises:
            NotLoadedError: If no profile is loaded
            ConfigurationError: If a profile item is malformed
            ExpressionEvaluationError: If an expression fails
        """
        return self.run(subject_data).report


def evaluate_expression(expression: str, subject_data: Mapping[str, Any]) -> Any:
    """Evaluate one ad-hoc expression against subject data."""
    return ExpressionEngine().evaluate(expression, subject_data)
