"""
Trust Profile Data Block Processor

Turns a declarative data block into a concrete value:

    - block:
        name: asset_info
        value:
          alg: "{{ declaration['claim.v2'].alg }}"
          myNumber: "100"

becomes ``{"asset_info": {"alg": "sha256", "myNumber": 100}}``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from ..exceptions import ConfigurationError
from ..models import RESERVED_REPORT_KEYS, DataBlock
from .coercion import coerce_value
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


class DataBlockProcessor:
    """
    Coerces data block values for one evaluation run.

    The caller publishes the result into the report and into the data
    context's ``profile`` mapping.
    """

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def process(
        self,
        item: Any,
        data_context: Mapping[str, Any],
    ) -> Optional[dict[str, Any]]:
        """
        Process one data block.

        Args:
            item: A classified profile item
            data_context: Current data context

        Returns:
            ``{name: value}``, or None if `item` is not a DataBlock

        Raises:
            ConfigurationError: If the block has no name or a reserved name
        """
        if not isinstance(item, DataBlock):
            return None

        name = item.name
        if not name:
            raise ConfigurationError(
                message="Data block is missing its name",
                details={"item": item.raw},
            )
        if name in RESERVED_REPORT_KEYS:
            raise ConfigurationError(
                message=f"Data block name {name!r} is reserved",
                details={"item": item.raw},
            )

        value = item.value
        if isinstance(value, list):
            result: Any = [self._coerce(element, data_context) for element in value]
        elif isinstance(value, Mapping):
            result = {
                key: self._coerce(member, data_context)
                for key, member in value.items()
                if key != "name"
            }
        else:
            result = self._coerce(value, data_context)

        logger.debug("Data block %s = %r", name, result, extra={"block_name": name})
        return {name: result}

    def _coerce(self, value: Any, data_context: Mapping[str, Any]) -> Any:
        return coerce_value(value, data_context, self.renderer)
