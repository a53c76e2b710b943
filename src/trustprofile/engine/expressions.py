"""
Trust Profile Expression Engine

Evaluates statement expressions against the data context using sandboxed
Jinja2 expressions (``env.compile_expression``).

Name resolution inside an expression:
- data context keys are top-level names (``declaration['claim.v2'].alg``)
- variable bindings are layered over them
- functions registered from the profile's `expressions` header are callable
  by name; inside their body the call arguments are ``args`` and the first
  argument is ``value``
- missing names chain to None instead of raising, also inside list and
  mapping results, so every result is plain JSON-ready data

One engine belongs to one evaluation run. Nothing is registered globally,
so independent runs never see each other's functions.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from jinja2 import ChainableUndefined, TemplateError, Undefined, pass_context
from jinja2.runtime import Context
from jinja2.sandbox import SandboxedEnvironment

from ..exceptions import ExpressionEvaluationError

logger = logging.getLogger(__name__)


# Runtime failures an expression can raise besides Jinja's own errors
RUNTIME_ERRORS = (TypeError, ValueError, ArithmeticError, LookupError, AttributeError)


# =============================================================================
# Built-in Functions
# =============================================================================

def _length(value: Any) -> int:
    if value is None:
        return 0
    return len(value)


def _keys(value: Any) -> list[Any]:
    return list(value.keys()) if isinstance(value, Mapping) else []


def _values(value: Any) -> list[Any]:
    return list(value.values()) if isinstance(value, Mapping) else []


def _contains(container: Any, item: Any) -> bool:
    if container is None:
        return False
    return item in container


BUILTIN_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "length": _length,
    "keys": _keys,
    "values": _values,
    "contains": _contains,
    "upper": lambda s: str(s).upper(),
    "lower": lambda s: str(s).lower(),
}


def strip_undefined(value: Any) -> Any:
    """Replace Undefined anywhere in `value` with None."""
    if isinstance(value, Undefined):
        return None
    if isinstance(value, Mapping):
        return {key: strip_undefined(member) for key, member in value.items()}
    if isinstance(value, (list, tuple)):
        return [strip_undefined(element) for element in value]
    return value


# =============================================================================
# Expression Engine
# =============================================================================

class ExpressionEngine:
    """
    Sandboxed expression evaluator for one evaluation run.

    Usage:
        engine = ExpressionEngine()
        engine.register_function("isHashed", "value.alg == 'sha256'", {})
        engine.evaluate("isHashed(declaration['claim.v2'])", data, {})
    """

    def __init__(self) -> None:
        self.env = SandboxedEnvironment(undefined=ChainableUndefined)
        self.env.globals.update(BUILTIN_FUNCTIONS)
        self._compiled: dict[str, Any] = {}
        self.functions: dict[str, str] = {}

    def compile(self, source: str) -> Any:
        """Compile (and cache) an expression, failing on bad syntax."""
        source = source.strip()
        compiled = self._compiled.get(source)
        if compiled is None:
            try:
                compiled = self.env.compile_expression(source, undefined_to_none=True)
            except TemplateError as e:
                raise ExpressionEvaluationError(
                    message=f"Cannot parse expression {source!r}: {e}",
                    details={"expression": source, "error": str(e)},
                )
            self._compiled[source] = compiled
        return compiled

    def evaluate(
        self,
        source: str,
        data_context: Mapping[str, Any],
        bindings: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Evaluate an expression.

        Args:
            source: Expression source
            data_context: Names visible to the expression
            bindings: Variable bindings, layered over the data context

        Returns:
            The expression's value (None for missing names)

        Raises:
            ExpressionEvaluationError: If the expression cannot be parsed
                or fails while running
        """
        compiled = self.compile(source)
        namespace = dict(data_context)
        if bindings:
            namespace.update(bindings)
        return self._run(compiled, source, namespace)

    def register_function(
        self,
        name: str,
        source: str,
        bindings: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Register `source` as a callable function named `name`.

        The body is compiled immediately so a broken expression fails at
        registration. `bindings` is captured by reference: variables bound
        later in the run are visible too.

        Raises:
            ExpressionEvaluationError: If the body cannot be parsed
        """
        compiled = self.compile(source)
        captured = bindings if bindings is not None else {}

        @pass_context
        def registered(context: Context, *args: Any) -> Any:
            namespace = dict(context.get_all())
            namespace.update(captured)
            namespace["args"] = list(args)
            namespace["value"] = args[0] if args else None
            return self._run(compiled, source, namespace)

        registered.__name__ = name
        self.env.globals[name] = registered
        self.functions[name] = source
        logger.debug("Registered expression function %s: %s", name, source)

    def _run(self, compiled: Any, source: str, namespace: dict[str, Any]) -> Any:
        try:
            return strip_undefined(compiled(namespace))
        except TemplateError as e:
            raise ExpressionEvaluationError(
                message=f"Expression {source!r} failed: {e}",
                details={"expression": source, "error": str(e)},
            )
        except RUNTIME_ERRORS as e:
            raise ExpressionEvaluationError(
                message=f"Expression {source!r} failed: {type(e).__name__}: {e}",
                details={"expression": source, "error": str(e)},
            )
