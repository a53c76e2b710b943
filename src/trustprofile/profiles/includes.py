"""
Trust Profile Include Resolution

Merges the profile fragments listed under the header's `include` key into
the primary profile:

- each included file's first document is merged into the header
  (new keys are added, mappings are shallow-merged with the included
  values winning, anything else is overwritten);
- any further documents in the included file are appended as sections
  after the primary profile's own sections.

Includes are processed in list order, so later includes win. A missing or
unreadable include is logged and skipped.
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from ..exceptions import IncludeResolutionWarning
from ..models import ProfileDocument
from .loader import parse_documents, parse_section

logger = logging.getLogger(__name__)


def merge_header(target: dict[str, Any], included: dict[str, Any]) -> dict[str, Any]:
    """
    Merge an included header into `target` in place.

    Examples:
        {x: {a: 1}} + {x: {b: 2}} -> {x: {a: 1, b: 2}}
        {y: 1}      + {y: 2}      -> {y: 2}
    """
    for key, value in included.items():
        existing = target.get(key)
        if key in target and isinstance(existing, dict) and isinstance(value, dict):
            target[key] = {**existing, **value}
        else:
            target[key] = value
    return target


class IncludeResolver:
    """
    Resolves a profile's includes into a new, merged ProfileDocument.

    The input document is never modified.

    Usage:
        resolver = IncludeResolver()
        merged = resolver.resolve(document)
    """

    def resolve(self, document: ProfileDocument) -> ProfileDocument:
        """
        Merge every include of `document`.

        Args:
            document: The primary profile as loaded

        Returns:
            A ProfileDocument with the merged header and all sections
        """
        header = copy.deepcopy(document.header)
        sections = list(document.sections)

        for include in document.includes:
            path = self.resolve_path(include, document.base_path)
            documents = self._read(path, document)
            if documents is None:
                continue

            first, *rest = documents or [None]
            if isinstance(first, dict):
                merge_header(header, first)
            elif first is not None:
                self._warn(
                    path, document,
                    "first document is not a mapping; header not merged",
                )

            sections.extend(parse_section(doc) for doc in rest)
            logger.debug(
                "Included %s (%d extra sections)", path, len(rest),
            )

        return ProfileDocument(header=header, sections=sections, source=document.source)

    @staticmethod
    def resolve_path(include: str, base_path: Path) -> Path:
        """Relative include paths are resolved against the profile's directory."""
        path = Path(include)
        if path.is_absolute():
            return path
        return base_path / path

    def _read(self, path: Path, document: ProfileDocument) -> Optional[list[Any]]:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            self._warn(path, document, f"cannot be read: {e}")
            return None

        try:
            return parse_documents(content)
        except yaml.YAMLError as e:
            self._warn(path, document, f"cannot be parsed: {e}")
            return None

    @staticmethod
    def _warn(path: Path, document: ProfileDocument, reason: str) -> None:
        warning = IncludeResolutionWarning(
            message=f"Skipping include {path}: {reason}",
            details={"path": str(path)},
            profile=document.display_name,
        )
        logger.warning(str(warning))


def resolve_includes(document: ProfileDocument) -> ProfileDocument:
    """Resolve includes with a temporary resolver."""
    return IncludeResolver().resolve(document)
