"""High-level audit entry points.

Example:
    >>> from localecheck import AuditConfig, audit
    >>> result = audit(AuditConfig(root="Sources", catalog="Localizable.xcstrings", locale="de"))
    >>> result.report.counts()
    {'missing_from_catalog': 0, 'missing_translation': 3, 'stale': 1}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from localecheck.advisories import run_advisories
from localecheck.catalog.atomic import AtomicOperation
from localecheck.catalog.loader import load_catalog, new_catalog, resolve_format, save_catalog
from localecheck.catalog.model import Catalog, CatalogEntry
from localecheck.config import AuditConfig
from localecheck.errors import ConfigurationError, ErrorCode
from localecheck.extractor.scanner import SourceReference, extract_references, group_by_key
from localecheck.locale import validate_locale
from localecheck.reconcile import DEFAULT_SOURCE_LOCALE, AuditReport, apply_fixes, reconcile

logger = logging.getLogger(__name__)


@dataclass
class AuditResult:
    """Outcome of :func:`audit`.

    Attributes:
        report: The immutable audit report
        catalog: The catalog as loaded (plus added entries in fix mode)
        added: Entries appended in fix mode
        write: Details of the catalog write, when one happened
    """

    report: AuditReport
    catalog: Catalog
    added: list[CatalogEntry] = field(default_factory=list)
    write: AtomicOperation | None = None

    def exit_code(self, config: AuditConfig) -> int:
        return self.report.exit_code(config.fail_on_categories())


def _require(value: Any, option: str, name: str) -> Any:
    if value in (None, ""):
        raise ConfigurationError(
            f"No {name} given",
            code=ErrorCode.CONFIG_INVALID,
            hint=f"Pass {option} or set '{name}' in the configuration file.",
        )
    return value


def collect_references(config: AuditConfig) -> tuple[list[SourceReference], list]:
    """Extract source references as configured."""
    rules, extra_rules = config.selected_rules()
    return extract_references(
        config.root,
        rules=rules,
        exclude=config.exclude,
        extra_rules=extra_rules,
    )


def extract_keys(config: AuditConfig) -> dict[str, list[SourceReference]]:
    """Normalized key -> references for the configured source tree."""
    references, _ = collect_references(config)
    return group_by_key(references)


def audit(config: AuditConfig) -> AuditResult:
    """Run one audit: extract, load, reconcile and, in fix mode, write back.

    Fatal errors abort before any report is produced.

    Raises:
        ConfigurationError: If the target locale or catalog path is missing.
        InvalidLocaleError: If a locale code is malformed.
        FileSystemError: If the source root or catalog cannot be read or written.
        CatalogFormatError: If the catalog is malformed.
    """
    locale = _require(config.locale, "--locale", "locale")
    catalog_path = Path(_require(config.catalog, "--catalog", "catalog"))
    validate_locale(locale)
    if config.source_locale:
        validate_locale(config.source_locale)

    fmt = resolve_format(catalog_path, config.format)
    if config.fix and not catalog_path.exists():
        logger.info("Catalog %s does not exist; starting a new one", catalog_path)
        catalog = new_catalog(catalog_path, fmt, config.source_locale or DEFAULT_SOURCE_LOCALE)
    else:
        catalog = load_catalog(catalog_path, fmt, source_locale=config.source_locale)

    references, warnings = collect_references(config)
    source_locale = config.source_locale or catalog.source_locale or DEFAULT_SOURCE_LOCALE
    advisories = run_advisories(catalog, locale, source_locale, glossary=config.glossary)

    report = reconcile(
        references,
        catalog,
        locale,
        source_locale=source_locale,
        warnings=[*catalog.warnings, *warnings],
        advisories=advisories,
    )

    result = AuditResult(report=report, catalog=catalog)
    if config.fix:
        result.added = apply_fixes(report, catalog, fmt)
        if result.added or not catalog_path.exists():
            result.write = save_catalog(catalog, catalog_path, fmt, backup=config.backup)
    return result
