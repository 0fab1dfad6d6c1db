"""In-memory catalog model.

A :class:`Catalog` keeps its entries in file order, keyed by the raw key as
written in the file. Lookups during reconciliation go through the normalized
key index, which is last-write-wins when two raw keys normalize to the same
key; every raw entry is still kept so that write-back never drops translator
work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

from localecheck.errors import AuditWarning
from localecheck.keys import normalize_key
from localecheck.locale import canonical_locale
from localecheck.types import UnitState, WarningKind

logger = logging.getLogger(__name__)


@dataclass
class TranslationUnit:
    """A (state, value) pair for one locale.

    Attributes:
        state: Translation state
        value: Translated text
        meta: Format-specific payload preserved for lossless write-back
    """

    state: UnitState
    value: str = ""
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.state, UnitState):
            self.state = UnitState(self.state)
        if self.state == UnitState.TRANSLATED and not self.value:
            raise ValueError("A translated unit must have a non-empty value")

    @property
    def is_translated(self) -> bool:
        return self.state == UnitState.TRANSLATED


@dataclass
class CatalogEntry:
    """One record in the catalog.

    Attributes:
        raw_key: Key exactly as stored in the catalog file
        units: Locale code -> unit, in file order
        comment: Developer comment for translators
        implicit_source: The key text itself is the source-language string
        translatable: False for entries marked as not needing translation
        meta: Format-specific payload preserved for lossless write-back
    """

    raw_key: str
    units: dict[str, TranslationUnit] = field(default_factory=dict)
    comment: str | None = None
    implicit_source: bool = False
    translatable: bool = True
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return normalize_key(self.raw_key)

    def unit_for(self, locale: str) -> TranslationUnit | None:
        """Unit for ``locale``, matching locale codes canonically."""
        if locale in self.units:
            return self.units[locale]
        wanted = canonical_locale(locale)
        for code, unit in self.units.items():
            if canonical_locale(code) == wanted:
                return unit
        return None

    def has_source(self, source_locale: str) -> bool:
        return self.implicit_source or self.unit_for(source_locale) is not None

    def source_text(self, source_locale: str) -> str:
        """Source-language text: the source unit's value, else the raw key."""
        unit = self.unit_for(source_locale)
        if unit is not None and unit.value:
            return unit.value
        return self.raw_key

    def is_translated(self, locale: str) -> bool:
        unit = self.unit_for(locale)
        return unit is not None and unit.is_translated


@dataclass
class Catalog:
    """A parsed translation catalog.

    Attributes:
        entries: Raw key -> entry, in file order
        source_locale: Source (development) language of the catalog
        format_name: Name of the format the catalog was parsed from
        document: Format-specific document state needed for write-back
        warnings: Non-fatal issues found while parsing
    """

    entries: dict[str, CatalogEntry] = field(default_factory=dict)
    source_locale: str | None = None
    format_name: str | None = None
    document: Any = None
    warnings: list[AuditWarning] = field(default_factory=list)
    path: str | None = None

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries.values())

    def __contains__(self, key: str) -> bool:
        return normalize_key(key) in self.index()

    def warn(self, kind: WarningKind, message: str) -> None:
        warning = AuditWarning(kind=kind, message=message, path=self.path)
        logger.warning("%s", warning)
        self.warnings.append(warning)

    def index(self) -> dict[str, CatalogEntry]:
        """Normalized key -> entry; later entries win on collisions."""
        index: dict[str, CatalogEntry] = {}
        for entry in self.entries.values():
            index[entry.key] = entry
        return index

    def collisions(self) -> dict[str, list[str]]:
        """Normalized keys shared by more than one raw key."""
        groups: dict[str, list[str]] = {}
        for entry in self.entries.values():
            groups.setdefault(entry.key, []).append(entry.raw_key)
        return {key: raws for key, raws in groups.items() if len(raws) > 1}

    def check_collisions(self) -> None:
        """Record a warning for each normalized-key collision."""
        for key, raws in self.collisions().items():
            self.warn(
                WarningKind.DUPLICATE_KEY,
                f"keys {', '.join(repr(r) for r in raws)} normalize to {key!r}; "
                f"using {raws[-1]!r}",
            )

    def keys(self) -> set[str]:
        return set(self.index())

    def get(self, key: str) -> CatalogEntry | None:
        return self.index().get(normalize_key(key))

    def add_entry(self, entry: CatalogEntry) -> CatalogEntry:
        """Append a new entry. Existing raw keys are never replaced."""
        if entry.raw_key in self.entries:
            raise KeyError(f"Catalog already contains key {entry.raw_key!r}")
        self.entries[entry.raw_key] = entry
        return entry
