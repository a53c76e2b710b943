"""
Trust Profile Statement Processor

Processes one statement into a StatementReport.

Information statements (no expression) report their title and report
text. Expression statements report the expression's value, store it under
``profile.<id>`` in the data context, and, when the value is a boolean,
report the matching branch of their report text:

    - id: content
      expression: content_status == 'assertion.dataHash.match'
      report_text:
        true:
          en: This content has not been modified
        false:
          en: This content has been modified
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from ..exceptions import ConfigurationError
from ..models import Statement, StatementKind, StatementReport
from .expressions import ExpressionEngine
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


DEFAULT_LANGUAGE = "en"


class StatementProcessor:
    """
    Processes statements for one evaluation run.

    Args:
        engine: The run's expression engine
        renderer: The run's template renderer
        bindings: The run's variable bindings
        language: Language resolved from localized report text
        require_info_report_text: If False, information statements without
            report_text (pure section headers) are accepted
    """

    def __init__(
        self,
        engine: ExpressionEngine,
        renderer: TemplateRenderer,
        bindings: Optional[Mapping[str, Any]] = None,
        language: str = DEFAULT_LANGUAGE,
        require_info_report_text: bool = True,
    ) -> None:
        self.engine = engine
        self.renderer = renderer
        self.bindings = bindings if bindings is not None else {}
        self.language = language
        self.require_info_report_text = require_info_report_text

    def process(
        self,
        statement: Statement,
        data_context: MutableMapping[str, Any],
    ) -> StatementReport:
        """
        Process one statement.

        Args:
            statement: A classified statement
            data_context: Current data context; expression results are
                written to its ``profile`` mapping

        Returns:
            The statement's report

        Raises:
            ConfigurationError: If id or report_text is missing
            ExpressionEvaluationError: If the expression fails
        """
        self._validate(statement)

        if statement.is_reserved:
            logger.debug("Predefined statement %s", statement.id)

        if statement.kind == StatementKind.INFORMATION:
            return self._process_information(statement, data_context)
        return self._process_expression(statement, data_context)

    def _validate(self, statement: Statement) -> None:
        if not statement.id:
            raise ConfigurationError(
                message="Statement is missing its id",
                details={"item": statement.raw},
            )

        needs_text = (
            statement.kind == StatementKind.EXPRESSION
            or self.require_info_report_text
        )
        if needs_text and statement.report_text is None:
            raise ConfigurationError(
                message=f"Statement {statement.id!r} is missing report_text",
                details={"item": statement.raw},
            )

    # -------------------------------------------------------------------------
    # Information statements
    # -------------------------------------------------------------------------

    def _process_information(
        self,
        statement: Statement,
        data_context: Mapping[str, Any],
    ) -> StatementReport:
        logger.debug(
            "Processing %s (%s)", statement.title or "statement", statement.id,
            extra={"statement_id": statement.id},
        )
        report = StatementReport(id=statement.id, title=statement.title)

        text = statement.report_text
        if isinstance(text, Mapping):
            text = self._localize(text, statement)
        if text is not None:
            report.report_text = self._render_text(str(text), data_context)
        return report

    # -------------------------------------------------------------------------
    # Expression statements
    # -------------------------------------------------------------------------

    def _process_expression(
        self,
        statement: Statement,
        data_context: MutableMapping[str, Any],
    ) -> StatementReport:
        logger.debug(
            "Evaluating expression %s: %s", statement.id, statement.expression,
            extra={"statement_id": statement.id},
        )
        result = self.engine.evaluate(statement.expression, data_context, self.bindings)
        logger.debug("Result of %s: %r", statement.id, result)

        report = StatementReport(id=statement.id, title=statement.title, value=result)
        data_context.setdefault("profile", {})[statement.id] = result

        if not isinstance(result, bool):
            return report

        branch = self._select_branch(statement.report_text, result)
        if not isinstance(branch, Mapping):
            logger.warning(
                "Statement %s has no localized report text for %s",
                statement.id, str(result).lower(),
                extra={"statement_id": statement.id},
            )
            return report

        text = self._localize(branch, statement)
        if text is not None:
            report.report_text = self._render_text(str(text), data_context)
        return report

    @staticmethod
    def _select_branch(report_text: Any, result: bool) -> Any:
        """Branch for `result`; YAML may key it as a bool or a string."""
        if not isinstance(report_text, Mapping):
            return None
        if result in report_text:
            return report_text[result]
        return report_text.get("true" if result else "false")

    # -------------------------------------------------------------------------
    # Text helpers
    # -------------------------------------------------------------------------

    def _localize(self, text: Mapping[Any, Any], statement: Statement) -> Optional[Any]:
        localized = text.get(self.language)
        if localized is None:
            logger.warning(
                "Statement %s has no %r report text", statement.id, self.language,
                extra={"statement_id": statement.id},
            )
        return localized

    def _render_text(self, text: str, data_context: Mapping[str, Any]) -> str:
        if self.renderer.contains_directive(text):
            return self.renderer.render(text, data_context)
        return text
