"""
Trust Profile Template Renderer

Expands ``{{ ... }}`` directives in report text and data block values
against the data context, using a sandboxed Jinja2 environment.

Rendering rules:
- mappings and lists render as compact JSON, so a rendered block value can
  be parsed back into structured data
- booleans render as ``true``/``false``, None renders as nothing
- missing names render as nothing; calling a missing helper renders a
  visible ``🔴 Missing: name()`` marker instead of failing the run
- ``expr('...')`` evaluates an expression with the run's expression engine
- ``raw(value)`` / ``value | raw`` marks a value as safe
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from jinja2 import ChainableUndefined, TemplateError, Undefined, pass_context
from jinja2.runtime import Context
from jinja2.sandbox import SandboxedEnvironment
from markupsafe import Markup

from ..exceptions import TemplateRenderError
from .expressions import RUNTIME_ERRORS, ExpressionEngine

logger = logging.getLogger(__name__)


MISSING_HELPER_MARKER = "🔴 Missing"


class MissingHelperUndefined(ChainableUndefined):
    """Undefined that renders a marker when called as a helper."""
    __slots__ = ()

    def __call__(self, *args: Any, **kwargs: Any) -> str:  # type: ignore[override]
        name = self._undefined_name or "helper"
        logger.warning("Template called missing helper %s()", name)
        return f"{MISSING_HELPER_MARKER}: {name}()"


def finalize_value(value: Any) -> Any:
    """Convert a directive's value to its rendered form."""
    if isinstance(value, (Undefined, Markup)):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return value


def raw(value: Any) -> Markup:
    """Bypass output escaping for `value`."""
    return Markup(finalize_value(value))


class TemplateRenderer:
    """
    Sandboxed template renderer for one evaluation run.

    Usage:
        renderer = TemplateRenderer(engine, bindings)
        renderer.render("{{ metadata.name }} - {{ profile.content }}", data)
    """

    def __init__(
        self,
        expression_engine: Optional[ExpressionEngine] = None,
        bindings: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.expression_engine = expression_engine or ExpressionEngine()
        self.bindings = bindings if bindings is not None else {}
        self.env = SandboxedEnvironment(
            autoescape=False,
            undefined=MissingHelperUndefined,
            finalize=finalize_value,
            keep_trailing_newline=True,
        )
        self.env.globals["expr"] = self._expr_helper()
        self.env.globals["raw"] = raw
        self.env.filters["raw"] = raw
        self._templates: dict[str, Any] = {}

    @property
    def start_string(self) -> str:
        return self.env.variable_start_string

    @property
    def end_string(self) -> str:
        return self.env.variable_end_string

    def contains_directive(self, text: str) -> bool:
        """True if `text` contains an opening directive delimiter."""
        return self.start_string in text

    def is_directive(self, text: str) -> bool:
        """True if `text` both starts and ends with the directive delimiters."""
        return text.startswith(self.start_string) and text.endswith(self.end_string)

    def render(self, source: str, data_context: Mapping[str, Any]) -> str:
        """
        Render `source` against `data_context`.

        Raises:
            TemplateRenderError: If the template cannot be parsed or fails
        """
        template = self._templates.get(source)
        if template is None:
            try:
                template = self.env.from_string(source)
            except TemplateError as e:
                raise TemplateRenderError(
                    message=f"Cannot parse template {source!r}: {e}",
                    details={"template": source, "error": str(e)},
                )
            self._templates[source] = template

        try:
            return template.render(dict(data_context))
        except TemplateError as e:
            raise TemplateRenderError(
                message=f"Template {source!r} failed: {e}",
                details={"template": source, "error": str(e)},
            )
        except RUNTIME_ERRORS as e:
            raise TemplateRenderError(
                message=f"Template {source!r} failed: {type(e).__name__}: {e}",
                details={"template": source, "error": str(e)},
            )

    def _expr_helper(self) -> Any:
        engine = self.expression_engine

        @pass_context
        def expr(context: Context, source: str) -> Any:
            return engine.evaluate(source, context.get_all(), self.bindings)

        return expr
