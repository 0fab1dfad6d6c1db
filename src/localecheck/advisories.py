"""Advisory catalog checks.

These findings point at likely translation problems but never fail a run:
legitimate context-dependent variation exists, so a human decides.

- placeholder-mismatch: a translation with a different number of
  placeholders than its source text
- inconsistent-translation: the same source text translated differently
  across entries
- glossary-mismatch: a translation of a source containing a glossary term
  that lacks the term's expected translation
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Mapping

from localecheck.catalog.model import Catalog
from localecheck.keys import count_placeholders
from localecheck.locale import canonical_locale
from localecheck.types import AdvisoryKind


@dataclass(frozen=True, order=True)
class Advisory:
    """A non-blocking finding about a catalog entry."""

    key: str
    kind: AdvisoryKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "kind": self.kind.value, "message": self.message}

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.key}: {self.message}"


def _fold(text: str) -> str:
    return " ".join(text.split()).casefold()


def check_placeholders(catalog: Catalog, target_locale: str, source_locale: str) -> list[Advisory]:
    advisories = []
    for key, entry in catalog.index().items():
        unit = entry.unit_for(target_locale)
        if unit is None or not unit.is_translated:
            continue
        expected = count_placeholders(entry.source_text(source_locale))
        actual = count_placeholders(unit.value)
        if expected != actual:
            advisories.append(
                Advisory(
                    key=key,
                    kind=AdvisoryKind.PLACEHOLDER_MISMATCH,
                    message=f"source has {expected} placeholder(s), translation has {actual}",
                )
            )
    return advisories


def check_consistency(catalog: Catalog, target_locale: str, source_locale: str) -> list[Advisory]:
    translations: dict[str, dict[str, list[str]]] = defaultdict(lambda: defaultdict(list))
    for key, entry in catalog.index().items():
        unit = entry.unit_for(target_locale)
        if unit is None or not unit.is_translated:
            continue
        translations[_fold(entry.source_text(source_locale))][unit.value].append(key)

    advisories = []
    for source, variants in translations.items():
        if len(variants) < 2:
            continue
        rendered = ", ".join(repr(v) for v in sorted(variants))
        for value in sorted(variants):
            for key in variants[value]:
                advisories.append(
                    Advisory(
                        key=key,
                        kind=AdvisoryKind.INCONSISTENT_TRANSLATION,
                        message=f"source {source!r} is translated as {rendered}",
                    )
                )
    return advisories


def check_glossary(
    catalog: Catalog,
    target_locale: str,
    source_locale: str,
    glossary: Mapping[str, Mapping[str, str]],
) -> list[Advisory]:
    """Check translations against ``glossary`` (term -> locale -> translation)."""
    wanted = canonical_locale(target_locale)
    terms: list[tuple[str, re.Pattern[str], str]] = []
    for term, translations in glossary.items():
        expected = next(
            (value for code, value in translations.items() if canonical_locale(code) == wanted),
            None,
        )
        if expected:
            terms.append((term, re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE), expected))

    advisories = []
    if not terms:
        return advisories
    for key, entry in catalog.index().items():
        unit = entry.unit_for(target_locale)
        if unit is None or not unit.is_translated:
            continue
        source = entry.source_text(source_locale)
        for term, pattern, expected in terms:
            if pattern.search(source) and expected.casefold() not in unit.value.casefold():
                advisories.append(
                    Advisory(
                        key=key,
                        kind=AdvisoryKind.GLOSSARY_MISMATCH,
                        message=f"term {term!r} should be translated as {expected!r}",
                    )
                )
    return advisories


def run_advisories(
    catalog: Catalog,
    target_locale: str,
    source_locale: str,
    glossary: Mapping[str, Mapping[str, str]] | None = None,
) -> list[Advisory]:
    """All advisory checks, sorted by key."""
    advisories = check_placeholders(catalog, target_locale, source_locale)
    if canonical_locale(target_locale) != canonical_locale(source_locale):
        advisories += check_consistency(catalog, target_locale, source_locale)
    if glossary:
        advisories += check_glossary(catalog, target_locale, source_locale, glossary)
    return sorted(advisories)
