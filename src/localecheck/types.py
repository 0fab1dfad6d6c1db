"""Type definitions for localecheck."""

from __future__ import annotations

from enum import Enum, IntFlag


class UnitState(str, Enum):
    """Lifecycle state of a single translated value."""

    UNTRANSLATED = "untranslated"
    TRANSLATED = "translated"
    NEEDS_REVIEW = "needs_review"
    STALE = "stale"


class AuditCategory(str, Enum):
    """Discrepancy categories reported by an audit run."""

    MISSING_FROM_CATALOG = "missing_from_catalog"
    MISSING_TRANSLATION = "missing_translation"
    STALE = "stale"

    @property
    def label(self) -> str:
        return {
            AuditCategory.MISSING_FROM_CATALOG: "keys missing from catalog",
            AuditCategory.MISSING_TRANSLATION: "missing translations",
            AuditCategory.STALE: "stale keys",
        }[self]

    @property
    def exit_flag(self) -> "ExitFlag":
        return {
            AuditCategory.MISSING_FROM_CATALOG: ExitFlag.MISSING_FROM_CATALOG,
            AuditCategory.MISSING_TRANSLATION: ExitFlag.MISSING_TRANSLATION,
            AuditCategory.STALE: ExitFlag.STALE,
        }[self]

    @classmethod
    def parse(cls, value: str) -> "AuditCategory":
        """Parse a category from its value or a short alias."""
        aliases = {
            "missing": cls.MISSING_FROM_CATALOG,
            "missing-from-catalog": cls.MISSING_FROM_CATALOG,
            "untranslated": cls.MISSING_TRANSLATION,
            "missing-translation": cls.MISSING_TRANSLATION,
        }
        normalized = value.strip().lower()
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized.replace("-", "_"))


class ExitFlag(IntFlag):
    """Bitwise-combinable exit codes, one bit per audit category."""

    CLEAN = 0
    MISSING_FROM_CATALOG = 1
    MISSING_TRANSLATION = 2
    STALE = 4


class WarningKind(str, Enum):
    """Kinds of non-fatal conditions collected during a run."""

    PATTERN = "pattern"
    UNREADABLE_FILE = "unreadable-file"
    DUPLICATE_KEY = "duplicate-key"


class AdvisoryKind(str, Enum):
    """Kinds of advisory findings. Advisories never fail a run."""

    PLACEHOLDER_MISMATCH = "placeholder-mismatch"
    INCONSISTENT_TRANSLATION = "inconsistent-translation"
    GLOSSARY_MISMATCH = "glossary-mismatch"
