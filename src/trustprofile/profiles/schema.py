"""
Trust Profile Schemas

Pydantic models for validating trust profile documents.

Document 0 (the header) is validated after includes have been merged into
it; items in documents 1..N are validated one at a time as they are
classified. Unknown keys are allowed everywhere: header extras are copied
into the data context, item extras are ignored.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Header Schemas
# =============================================================================

class ProfileMetadataSchema(BaseModel):
    """Schema for the required `metadata` mapping of the header."""
    name: str = Field(..., description="Profile name")
    version: Any = Field(..., description="Profile version")
    issuer: str = Field(..., description="Organization issuing the profile")
    date: Any = Field(..., description="Issue date, kept as written")
    language: Optional[str] = Field(None, description="Default report language")

    model_config = {
        "extra": "allow",
    }


class ProfileHeaderSchema(BaseModel):
    """Schema for document 0 of a trust profile."""
    metadata: ProfileMetadataSchema = Field(..., description="Profile metadata")
    variables: dict[str, Any] = Field(
        default_factory=dict,
        description="Named values bound as globals in every expression",
    )
    expressions: dict[str, str] = Field(
        default_factory=dict,
        description="Named expressions registered as callable functions",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Profile fragments merged into this header",
    )

    model_config = {
        "extra": "allow",
    }

    @field_validator("variables", "expressions", mode="before")
    @classmethod
    def none_as_empty_mapping(cls, v: Any) -> Any:
        """An empty YAML key (``variables:``) parses as None."""
        return {} if v is None else v

    @field_validator("include", mode="before")
    @classmethod
    def normalize_include(cls, v: Any) -> Any:
        """Accept a single path as well as a list of paths."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


# =============================================================================
# Item Schemas
# =============================================================================

class StatementSchema(BaseModel):
    """Schema for a statement item."""
    id: Optional[str] = Field(None, description="Statement identifier")
    title: Optional[str] = Field(None, description="Heading copied into the report")
    description: Optional[str] = Field(None, description="Author-facing description")
    expression: Optional[str] = Field(None, description="Expression to evaluate")
    report_text: Any = Field(None, description="Report text or boolean branches")

    model_config = {
        "extra": "allow",
    }

    @field_validator("id", "title", "expression", mode="before")
    @classmethod
    def scalar_as_string(cls, v: Any) -> Any:
        """YAML turns ``id: 42`` or ``title: 2025`` into a number; these are always strings."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class BlockSchema(BaseModel):
    """Schema for the inner mapping of a data block."""
    name: Optional[str] = Field(None, description="Block name")
    value: Any = Field(None, description="Scalar, list or mapping")

    model_config = {
        "extra": "allow",
    }


class DataBlockSchema(BaseModel):
    """Schema for a data block item."""
    block: BlockSchema = Field(..., description="The named value")

    model_config = {
        "extra": "allow",
    }


# Keys that make a mapping statement-shaped
STATEMENT_KEYS = frozenset({"id", "title", "description", "expression", "report_text"})


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_header(data: dict[str, Any]) -> ProfileHeaderSchema:
    """
    Validate a (merged) profile header.

    Args:
        data: Document 0 after include resolution

    Returns:
        Validated ProfileHeaderSchema

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return ProfileHeaderSchema.model_validate(data)
