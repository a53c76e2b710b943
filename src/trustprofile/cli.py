"""
Trust Profile CLI

Evaluates a trust indicator set (JSON) against a trust profile (YAML), or
evaluates a single ad-hoc expression against it.

Usage:
    trust-eval indicators.json --profile camera_profile.yml
    trust-eval indicators.json -p camera_profile.yml -o out/ --json
    trust-eval indicators.json -p camera_profile.yml -o out/ --html report.html
    trust-eval indicators.json --eval "declaration['claim.v2'].alg | upper"

Exit Codes:
    0   SUCCESS - Report produced (or expression evaluated)
    1   ERROR   - Usage, load, configuration or evaluation error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from . import __version__
from .config import EvaluatorSettings
from .engine import ProfileEvaluator, evaluate_expression
from .exceptions import ProfileLoadError, TrustProfileError
from .logging_config import configure_logging
from .models import OutputFormat
from .reporting import to_json, validate_report, write_report

logger = logging.getLogger(__name__)


# ============================================================================
# EXIT CODES
# ============================================================================

class ExitCode:
    """Process exit codes."""
    SUCCESS = 0
    ERROR = 1


def print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


# ============================================================================
# HELPERS
# ============================================================================

def load_subject_data(path: Path) -> dict[str, Any]:
    """
    Load the trust indicator set.

    Raises:
        ProfileLoadError: If the file cannot be read or is not a JSON object
    """
    logger.info("Loading trust indicator set from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ProfileLoadError(
            message=f"Failed to load trust indicator set: {e}",
            details={"path": str(path)},
        )
    if not isinstance(data, dict):
        raise ProfileLoadError(
            message="Trust indicator set must be a JSON object",
            details={"path": str(path)},
        )
    return data


def selected_format(args: argparse.Namespace, settings: EvaluatorSettings) -> OutputFormat:
    if args.html:
        return OutputFormat.HTML
    if args.json:
        return OutputFormat.JSON
    if args.yaml:
        return OutputFormat.YAML
    return settings.output_format


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_eval(args: argparse.Namespace, settings: EvaluatorSettings) -> int:
    """Evaluate one expression and print its JSON value."""
    data = load_subject_data(Path(args.subject))
    result = evaluate_expression(args.eval, data)
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    return ExitCode.SUCCESS


def cmd_profile(args: argparse.Namespace, settings: EvaluatorSettings) -> int:
    """Evaluate the subject against a profile and emit the report."""
    evaluator = ProfileEvaluator(settings=settings)
    evaluator.load_profile(args.profile)

    data = load_subject_data(Path(args.subject))
    report = evaluator.evaluate(data).to_dict()
    if args.validate:
        validate_report(report)

    if args.output:
        output_format = selected_format(args, settings)
        write_report(report, args.output, args.subject, output_format, args.html)
    else:
        sys.stdout.write(to_json(report))
    return ExitCode.SUCCESS


# ============================================================================
# MAIN
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trust-eval",
        description="Evaluate trust indicator sets against trust profiles.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   SUCCESS   Report produced
  1   ERROR     Usage, load or evaluation error

Examples:
  trust-eval indicators.json -p camera_profile.yml
  trust-eval indicators.json -p camera_profile.yml -o out/ --json
  trust-eval indicators.json --eval "length(assertions)"
        """,
    )
    parser.add_argument("subject", help="Trust indicator set (JSON file)")
    parser.add_argument("--profile", "-p", help="Trust profile (YAML file)")
    parser.add_argument("--eval", "-e", help="Evaluate a single expression instead of a profile")
    parser.add_argument("--output", "-o", help="Output directory for the report")

    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("--json", action="store_true", help="Write the report as JSON")
    fmt.add_argument("--yaml", "-y", action="store_true", help="Write the report as YAML")
    fmt.add_argument("--html", metavar="TEMPLATE", help="Render the report through an HTML template")

    parser.add_argument("--validate", action="store_true",
                        help="Check the report against the trust report schema")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    parser.add_argument("--log-json", action="store_true", default=None,
                        help="Emit structured JSON logs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EvaluatorSettings.from_env().with_overrides(
            log_level=args.log_level.upper() if args.log_level else None,
            log_json=args.log_json,
        )
    except ValueError as e:
        print_error(f"Invalid configuration: {e}")
        return ExitCode.ERROR

    configure_logging(settings.log_level, settings.log_json)

    if bool(args.profile) == bool(args.eval):
        print_error("Specify exactly one of --profile or --eval")
        return ExitCode.ERROR

    try:
        if args.eval:
            return cmd_eval(args, settings)
        return cmd_profile(args, settings)
    except TrustProfileError as e:
        print_error(str(e))
        return ExitCode.ERROR
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print_error(f"Unexpected error: {e}")
        return ExitCode.ERROR


if __name__ == "__main__":
    sys.exit(main())
