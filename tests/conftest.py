"""
Pytest configuration and fixtures for trust profile tests.

Provides helper factories for profile items and common fixtures for the
per-run engine objects.
"""
import json
import logging
import textwrap
from pathlib import Path

import pytest

from trustprofile.engine import ExpressionEngine, TemplateRenderer
from trustprofile.logging_config import ROOT_LOGGER
from trustprofile.models import DataBlock, Statement


FIXTURES = Path(__file__).parent / "fixtures"


# =============================================================================
# Factory Helpers
# =============================================================================

def make_statement(
    id: str = "stmt",
    expression: str = None,
    report_text=None,
    title: str = None,
    description: str = None,
) -> Statement:
    """Create a Statement, keeping the raw item in sync with its fields."""
    raw = {
        key: value
        for key, value in {
            "id": id,
            "title": title,
            "description": description,
            "expression": expression,
            "report_text": report_text,
        }.items()
        if value is not None
    }
    return Statement(
        id=id,
        title=title,
        description=description,
        expression=expression,
        report_text=report_text,
        raw=raw,
    )


def make_block(name: str, value) -> DataBlock:
    """Create a DataBlock."""
    return DataBlock(name=name, value=value, raw={"block": {"name": name, "value": value}})


def boolean_text(true_text: str, false_text: str, language: str = "en") -> dict:
    """report_text with localized true/false branches."""
    return {True: {language: true_text}, False: {language: false_text}}


def write_profile(directory: Path, name: str, content: str) -> Path:
    """Write a (dedented) YAML profile into `directory`."""
    path = directory / name
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


HEADER = """
metadata:
  name: Test Profile
  issuer: Trust Profile Test Suite
  version: 1.0.0
  date: 2025-06-17T22:44:49.717Z
"""


def profile_text(*sections: str, header: str = HEADER) -> str:
    """Join a header and section bodies into one multi-document profile."""
    documents = [textwrap.dedent(header).strip()]
    documents.extend(textwrap.dedent(section).strip() for section in sections)
    return "\n---\n".join(documents) + "\n"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() so caplog keeps seeing trustprofile records."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def indicators():
    """Trust indicator set used by the fixture profiles."""
    with open(FIXTURES / "indicators.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def engine():
    """Fresh expression engine."""
    return ExpressionEngine()


@pytest.fixture
def bindings():
    """Variable bindings shared by an engine and renderer."""
    return {}


@pytest.fixture
def renderer(engine, bindings):
    """Template renderer wired to the `engine` fixture."""
    return TemplateRenderer(engine, bindings)
