"""Reconciliation of extracted keys against a catalog.

:func:`reconcile` is a pure function of (source references, catalog, target
locale). It never touches the catalog; :func:`apply_fixes` is the explicit,
opt-in mutation that adds placeholder entries for keys found only in code.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from localecheck.errors import AuditWarning
from localecheck.locale import validate_locale
from localecheck.types import AuditCategory, ExitFlag

if TYPE_CHECKING:
    from localecheck.advisories import Advisory
    from localecheck.catalog.base import CatalogFormat
    from localecheck.catalog.model import Catalog, CatalogEntry
    from localecheck.extractor.scanner import SourceReference

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_LOCALE = "en"
ALL_CATEGORIES: tuple[AuditCategory, ...] = tuple(AuditCategory)


@dataclass(frozen=True)
class AuditReport:
    """Immutable result of one audit run.

    Attributes:
        target_locale: Locale checked for missing translations
        source_locale: Source locale of the catalog
        missing_from_catalog: Keys referenced in code but absent from the catalog
        missing_translation: Catalog keys with a source entry but no translated
            unit for the target locale
        stale: Catalog keys no longer referenced by any scanned file
        matched: Keys present in both code and catalog
        references: Normalized key -> sorted source references
        catalog_keys: Normalized key -> raw key as written in the catalog
        warnings: Non-fatal conditions collected during the run
        advisories: Advisory findings (never affect the exit code)
    """

    target_locale: str
    source_locale: str
    missing_from_catalog: tuple[str, ...] = ()
    missing_translation: tuple[str, ...] = ()
    stale: tuple[str, ...] = ()
    matched: tuple[str, ...] = ()
    references: Mapping[str, tuple[SourceReference, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    catalog_keys: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    warnings: tuple[AuditWarning, ...] = ()
    advisories: tuple[Advisory, ...] = ()

    def category(self, category: AuditCategory | str) -> tuple[str, ...]:
        """Keys in ``category``."""
        if not isinstance(category, AuditCategory):
            category = AuditCategory.parse(category)
        return getattr(self, category.value)

    def counts(self) -> dict[str, int]:
        return {c.value: len(self.category(c)) for c in ALL_CATEGORIES}

    @property
    def is_clean(self) -> bool:
        return not any(self.category(c) for c in ALL_CATEGORIES)

    def exit_code(self, fail_on: Iterable[AuditCategory | str] | None = None) -> int:
        """Bitwise exit code for the categories in ``fail_on`` (default: all)."""
        categories = ALL_CATEGORIES if fail_on is None else fail_on
        flags = ExitFlag.CLEAN
        for category in categories:
            if not isinstance(category, AuditCategory):
                category = AuditCategory.parse(category)
            if self.category(category):
                flags |= category.exit_flag
        return int(flags)

    def references_for(self, key: str) -> tuple[SourceReference, ...]:
        return self.references.get(key, ())

    def raw_key(self, key: str) -> str:
        return self.catalog_keys.get(key, key)

    def to_dict(self, fail_on: Iterable[AuditCategory | str] | None = None) -> dict[str, Any]:
        def _item(key: str) -> dict[str, Any]:
            item: dict[str, Any] = {"key": key}
            if key in self.catalog_keys:
                item["catalog_key"] = self.catalog_keys[key]
            item["references"] = [ref.to_dict() for ref in self.references_for(key)]
            return item

        data: dict[str, Any] = {
            "report_type": "locale_audit",
            "target_locale": self.target_locale,
            "source_locale": self.source_locale,
            "summary": {**self.counts(), "matched": len(self.matched)},
        }
        for category in ALL_CATEGORIES:
            data[category.value] = [_item(key) for key in self.category(category)]
        data["warnings"] = [w.to_dict() for w in self.warnings]
        data["advisories"] = [a.to_dict() for a in self.advisories]
        data["exit_code"] = self.exit_code(fail_on)
        return data


def _needs_translation(entry: CatalogEntry, target_locale: str, source_locale: str) -> bool:
    return (
        entry.translatable
        and entry.has_source(source_locale)
        and not entry.is_translated(target_locale)
    )


def reconcile(
    references: Iterable[SourceReference],
    catalog: Catalog,
    target_locale: str,
    source_locale: str | None = None,
    warnings: Iterable[AuditWarning] = (),
    advisories: Iterable[Advisory] = (),
) -> AuditReport:
    """Compare code references with ``catalog`` for ``target_locale``.

    Raises:
        InvalidLocaleError: If ``target_locale`` (or ``source_locale``) is not
            a syntactically valid BCP-47 tag. Checked before any comparison.
    """
    validate_locale(target_locale)
    source_locale = source_locale or catalog.source_locale or DEFAULT_SOURCE_LOCALE
    validate_locale(source_locale)

    grouped: dict[str, list[SourceReference]] = defaultdict(list)
    for ref in references:
        grouped[ref.key].append(ref)

    index = catalog.index()
    code_keys = set(grouped)
    catalog_keys = set(index)

    missing_translation = sorted(
        key
        for key, entry in index.items()
        if _needs_translation(entry, target_locale, source_locale)
    )

    report = AuditReport(
        target_locale=target_locale,
        source_locale=source_locale,
        missing_from_catalog=tuple(sorted(code_keys - catalog_keys)),
        missing_translation=tuple(missing_translation),
        stale=tuple(sorted(catalog_keys - code_keys)),
        matched=tuple(sorted(code_keys & catalog_keys)),
        references=MappingProxyType(
            {key: tuple(sorted(grouped[key])) for key in sorted(grouped)}
        ),
        catalog_keys=MappingProxyType({key: entry.raw_key for key, entry in index.items()}),
        warnings=tuple(warnings),
        advisories=tuple(advisories),
    )
    logger.debug("Reconciled %d code keys against %d catalog keys: %s", len(code_keys), len(catalog_keys), report.counts())
    return report


def apply_fixes(report: AuditReport, catalog: Catalog, fmt: CatalogFormat) -> list[CatalogEntry]:
    """Append an untranslated entry for every key missing from the catalog.

    Existing entries are never modified or removed. Returns the new entries.
    """
    added = []
    for key in report.missing_from_catalog:
        if key in catalog:
            logger.debug("Catalog already holds %r as %r", key, catalog.get(key).raw_key)
            continue
        entry = fmt.new_entry(key, report.source_locale)
        catalog.add_entry(entry)
        added.append(entry)
    if added:
        logger.info("Added %d placeholder entries to the catalog", len(added))
    return added
