"""
Trust Report Writers

Serializes trust reports to JSON, YAML or HTML and writes them to an output
directory as ``<subject>_report.<ext>``.

HTML reports are rendered from a user-supplied Jinja2 template with the
report's top-level keys as template variables. Autoescaping is on; use
``raw`` to emit trusted markup.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from jinja2 import Environment, TemplateError

from ..engine.templates import finalize_value, raw
from ..exceptions import ReportWriteError
from ..models import OutputFormat

logger = logging.getLogger(__name__)


def to_json(report: dict[str, Any]) -> str:
    return json.dumps(report, indent=2, ensure_ascii=False, default=str) + "\n"


def to_yaml(report: dict[str, Any]) -> str:
    return yaml.safe_dump(
        report,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def to_html(report: dict[str, Any], template_source: str) -> str:
    """Render `report` through an HTML template."""
    env = Environment(autoescape=True, finalize=finalize_value)
    env.globals["raw"] = raw
    env.filters["raw"] = raw
    try:
        return env.from_string(template_source).render(report)
    except TemplateError as e:
        raise ReportWriteError(
            message=f"HTML template failed: {e}",
            details={"error": str(e)},
        )


def serialize_report(
    report: dict[str, Any],
    output_format: OutputFormat,
    html_template: Optional[Union[str, Path]] = None,
) -> str:
    """
    Serialize a report dictionary.

    Raises:
        ReportWriteError: If the HTML template is missing or fails
    """
    if output_format == OutputFormat.JSON:
        return to_json(report)
    if output_format == OutputFormat.YAML:
        return to_yaml(report)

    if html_template is None:
        raise ReportWriteError(message="HTML output requires a template")
    try:
        template_source = Path(html_template).read_text(encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(
            message=f"Cannot read HTML template: {e}",
            details={"path": str(html_template)},
        )
    return to_html(report, template_source)


def report_path(output_dir: Union[str, Path], subject_path: Union[str, Path], output_format: OutputFormat) -> Path:
    """``<output_dir>/<subject stem>_report.<ext>``"""
    stem = Path(subject_path).stem
    return Path(output_dir) / f"{stem}_report.{output_format.extension}"


def write_report(
    report: dict[str, Any],
    output_dir: Union[str, Path],
    subject_path: Union[str, Path],
    output_format: OutputFormat = OutputFormat.YAML,
    html_template: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Write a report to `output_dir`, creating it if needed.

    Returns:
        Path of the written file

    Raises:
        ReportWriteError: If serialization or writing fails
    """
    content = serialize_report(report, output_format, html_template)
    path = report_path(output_dir, subject_path, output_format)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(
            message=f"Cannot write report: {e}",
            details={"path": str(path)},
        )
    logger.info("%s report written to %s", output_format.value.upper(), path)
    return path
