"""
Trust Profiles

Loading, include resolution and schema validation for trust profiles.

A trust profile is a multi-document YAML file: a header document
(metadata, variables, expressions, include) followed by sections of
statements and data blocks.

Usage:
    from trustprofile.profiles import ProfileLoader, IncludeResolver

    document = ProfileLoader().load("profiles/camera_profile.yml")
    merged = IncludeResolver().resolve(document)
"""
from __future__ import annotations

from .includes import (
    IncludeResolver,
    merge_header,
    resolve_includes,
)
from .loader import (
    ProfileLoader,
    ProfileYamlLoader,
    classify_item,
    load_profile,
    load_profile_from_string,
    parse_documents,
    parse_section,
)
from .schema import (
    BlockSchema,
    DataBlockSchema,
    ProfileHeaderSchema,
    ProfileMetadataSchema,
    StatementSchema,
    validate_header,
)

__all__ = [
    # Loader
    "ProfileLoader",
    "ProfileYamlLoader",
    "classify_item",
    "load_profile",
    "load_profile_from_string",
    "parse_documents",
    "parse_section",
    # Includes
    "IncludeResolver",
    "merge_header",
    "resolve_includes",
    # Schemas
    "BlockSchema",
    "DataBlockSchema",
    "ProfileHeaderSchema",
    "ProfileMetadataSchema",
    "StatementSchema",
    "validate_header",
]
