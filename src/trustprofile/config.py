"""
Trust Profile Configuration

Evaluator settings, read from TRUSTPROFILE_* environment variables.

    TRUSTPROFILE_LOG_LEVEL                  logging level (default INFO)
    TRUSTPROFILE_LOG_JSON                   structured JSON logs (default false)
    TRUSTPROFILE_REPORT_LANGUAGE            localized report text language (default en)
    TRUSTPROFILE_REQUIRE_INFO_REPORT_TEXT   information statements need report_text (default true)
    TRUSTPROFILE_OUTPUT_FORMAT              default CLI report format (default yaml)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .models import OutputFormat


ENV_PREFIX = "TRUSTPROFILE_"


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EvaluatorSettings:
    """
    Settings shared by the evaluator and the CLI.

    Attributes:
        log_level: Logging level name
        log_json: Emit structured JSON log lines
        report_language: Language resolved from localized report text
        require_info_report_text: Reject information statements that have
            no report_text. Expression statements always need one.
        output_format: Default report format for the CLI
    """
    log_level: str = "INFO"
    log_json: bool = False
    report_language: str = "en"
    require_info_report_text: bool = True
    output_format: OutputFormat = OutputFormat.YAML

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EvaluatorSettings:
        """Build settings from the environment, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        output_format = env.get(f"{ENV_PREFIX}OUTPUT_FORMAT")
        return cls(
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
            log_json=_env_bool(env.get(f"{ENV_PREFIX}LOG_JSON"), defaults.log_json),
            report_language=env.get(f"{ENV_PREFIX}REPORT_LANGUAGE", defaults.report_language),
            require_info_report_text=_env_bool(
                env.get(f"{ENV_PREFIX}REQUIRE_INFO_REPORT_TEXT"),
                defaults.require_info_report_text,
            ),
            output_format=(
                OutputFormat(output_format.lower()) if output_format else defaults.output_format
            ),
        )

    def with_overrides(self, **changes: object) -> EvaluatorSettings:
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
