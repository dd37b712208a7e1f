"""SQL schema extraction.

- Parse CREATE TABLE statements with sqlglot
- Mine column comments for display names and inline enumerations
"""
from __future__ import annotations

from .comment_parser import (
    DEFAULT_MATCHERS,
    PatternMatcher,
    extract_enum_from_comment,
    first_match,
    mentions_json,
)

from .ddl_extractor import (
    DDLExtractor,
    logical_type_name,
)

__all__ = [
    "DEFAULT_MATCHERS",
    "PatternMatcher",
    "extract_enum_from_comment",
    "first_match",
    "mentions_json",
    "DDLExtractor",
    "logical_type_name",
]
