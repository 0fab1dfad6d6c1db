"""Translation key extraction from source trees."""

from localecheck.extractor.rules import (
    ExtractionRule,
    RawMatch,
    builtin_rules,
    get_rule,
    list_rules,
    register_rule,
)
from localecheck.extractor.scanner import (
    DEFAULT_EXCLUDES,
    KeyExtractor,
    SourceReference,
    extract_references,
    group_by_key,
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "ExtractionRule",
    "KeyExtractor",
    "RawMatch",
    "SourceReference",
    "builtin_rules",
    "extract_references",
    "get_rule",
    "group_by_key",
    "list_rules",
    "register_rule",
]
