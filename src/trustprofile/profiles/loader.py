"""
Trust Profile Loader

Loads multi-document YAML trust profiles and classifies every section item
as a Statement or a DataBlock.

Document 0 is kept as a plain mapping (it is validated later, once includes
have been merged into it). Documents 1..N become sections.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError, ProfileLoadError
from ..models import DataBlock, Item, ProfileDocument, Section, Statement
from .schema import STATEMENT_KEYS, DataBlockSchema, StatementSchema

logger = logging.getLogger(__name__)


# =============================================================================
# YAML Loader
# =============================================================================

class ProfileYamlLoader(yaml.SafeLoader):
    """
    SafeLoader with YAML 1.2 style implicit typing.

    Only true/false are booleans (not yes/no/on/off) and timestamps stay
    strings, so ``date: 2025-06-17T22:44:49.717Z`` reaches the report
    exactly as written.
    """


ProfileYamlLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in ("tag:yaml.org,2002:bool", "tag:yaml.org,2002:timestamp")
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

ProfileYamlLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def parse_documents(content: str) -> list[Any]:
    """Parse every YAML document in `content`, in order."""
    return list(yaml.load_all(content, Loader=ProfileYamlLoader))


# =============================================================================
# Item Classification
# =============================================================================

def classify_item(raw: Any) -> Item:
    """
    Classify one section item.

    - A mapping with `id` is a Statement.
    - A mapping with `block` (and no `id`) is a DataBlock.
    - Any other statement-shaped mapping is a Statement without an id;
      processing it fails with ConfigurationError.
    - Anything else is rejected here.

    Raises:
        ConfigurationError: If the item matches neither shape
    """
    if not isinstance(raw, dict):
        raise ConfigurationError(
            message="Profile item is not a mapping",
            details={"item": raw},
        )

    if "id" not in raw and "block" in raw:
        try:
            schema = DataBlockSchema.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(
                message="Invalid data block",
                details={"item": raw, "errors": e.errors()},
            )
        return DataBlock(name=schema.block.name, value=schema.block.value, raw=raw)

    if not STATEMENT_KEYS.intersection(raw):
        raise ConfigurationError(
            message="Profile item is neither a statement nor a data block",
            details={"item": raw},
        )

    try:
        schema = StatementSchema.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            message="Invalid statement",
            details={"item": raw, "errors": e.errors()},
        )
    return Statement(
        id=schema.id,
        title=schema.title,
        description=schema.description,
        expression=schema.expression,
        report_text=schema.report_text,
        raw=raw,
    )


def parse_section(document: Any) -> Section:
    """A section document is a list of items, a single item, or empty."""
    if document is None:
        return []
    if isinstance(document, list):
        return [classify_item(raw) for raw in document]
    return [classify_item(document)]


# =============================================================================
# Profile Loader
# =============================================================================

class ProfileLoader:
    """
    Loads trust profiles from YAML files or strings.

    Usage:
        loader = ProfileLoader()
        document = loader.load("profiles/camera_profile.yml")
    """

    def load(self, path: Union[str, Path]) -> ProfileDocument:
        """
        Load a profile from a file.

        Args:
            path: Path to a multi-document YAML profile

        Returns:
            Parsed ProfileDocument

        Raises:
            ProfileLoadError: If the file cannot be read or parsed
            ConfigurationError: If a section item is malformed
        """
        path = Path(path).resolve()
        logger.info("Loading trust profile from %s", path)

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ProfileLoadError(
                message=f"Failed to read trust profile: {e}",
                details={"path": str(path), "error": str(e)},
            )

        return self.load_from_string(content, source=path)

    def load_from_string(
        self,
        content: str,
        source: Optional[Path] = None,
    ) -> ProfileDocument:
        """
        Load a profile from YAML text.

        Args:
            content: Multi-document YAML
            source: Path the text came from; relative includes resolve
                against its directory (the working directory otherwise)

        Returns:
            Parsed ProfileDocument
        """
        where = str(source) if source else "<string>"
        try:
            documents = parse_documents(content)
        except yaml.YAMLError as e:
            raise ProfileLoadError(
                message=f"Failed to parse trust profile: {e}",
                details={"path": where, "error": str(e)},
            )

        if not documents or not isinstance(documents[0], dict):
            raise ProfileLoadError(
                message="Trust profile must start with a header mapping",
                details={"path": where},
            )

        header, *section_docs = documents
        sections = [parse_section(doc) for doc in section_docs]
        logger.debug("Parsed %d sections from %s", len(sections), where)

        return ProfileDocument(header=header, sections=sections, source=source)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_profile(path: Union[str, Path]) -> ProfileDocument:
    """Load a profile from a file with a temporary loader."""
    return ProfileLoader().load(path)


def load_profile_from_string(content: str, source: Optional[Path] = None) -> ProfileDocument:
    """Load a profile from YAML text with a temporary loader."""
    return ProfileLoader().load_from_string(content, source=source)
