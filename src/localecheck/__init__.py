"""localecheck: audit translation catalogs against source code.

Finds keys used in code but missing from the catalog, catalog entries
without a translation for a target locale, and stale catalog entries no
longer referenced anywhere.

Example:
    >>> import localecheck as lc
    >>> result = lc.audit(lc.AuditConfig(root="Sources", catalog="Localizable.xcstrings", locale="ru"))
    >>> result.report.missing_translation
    ('Save',)
"""

from localecheck.advisories import Advisory, run_advisories
from localecheck.api import AuditResult, audit, extract_keys
from localecheck.catalog import (
    Catalog,
    CatalogEntry,
    CatalogFormat,
    TranslationUnit,
    get_format,
    load_catalog,
    register_format,
    save_catalog,
)
from localecheck.config import AuditConfig, load_config
from localecheck.errors import (
    AuditWarning,
    CatalogFormatError,
    ConfigurationError,
    ErrorCode,
    FileSystemError,
    InvalidLocaleError,
    LocaleCheckError,
)
from localecheck.extractor import ExtractionRule, KeyExtractor, SourceReference, register_rule
from localecheck.keys import normalize_key, render_key
from localecheck.locale import LocaleInfo, validate_locale
from localecheck.reconcile import AuditReport, apply_fixes, reconcile
from localecheck.reporters import get_reporter
from localecheck.types import AuditCategory, ExitFlag, UnitState

__version__ = "0.1.0"

__all__ = [
    "Advisory",
    "AuditCategory",
    "AuditConfig",
    "AuditReport",
    "AuditResult",
    "AuditWarning",
    "Catalog",
    "CatalogEntry",
    "CatalogFormat",
    "CatalogFormatError",
    "ConfigurationError",
    "ErrorCode",
    "ExitFlag",
    "ExtractionRule",
    "FileSystemError",
    "InvalidLocaleError",
    "KeyExtractor",
    "LocaleCheckError",
    "LocaleInfo",
    "SourceReference",
    "TranslationUnit",
    "UnitState",
    "apply_fixes",
    "audit",
    "extract_keys",
    "get_format",
    "get_reporter",
    "load_catalog",
    "load_config",
    "normalize_key",
    "reconcile",
    "register_format",
    "register_rule",
    "render_key",
    "run_advisories",
    "save_catalog",
    "validate_locale",
]
