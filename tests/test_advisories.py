"""Tests for advisory catalog checks."""

from localecheck.advisories import (
    Advisory,
    check_consistency,
    check_glossary,
    check_placeholders,
    run_advisories,
)
from localecheck.catalog import Catalog, CatalogEntry, TranslationUnit
from localecheck.types import AdvisoryKind, UnitState


def entry(raw_key, **translations):
    units = {
        locale.replace("_", "-"): TranslationUnit(state=UnitState.TRANSLATED, value=value)
        for locale, value in translations.items()
    }
    return CatalogEntry(raw_key=raw_key, units=units)


def catalog_of(*entries):
    catalog = Catalog(source_locale="en")
    for item in entries:
        catalog.add_entry(item)
    return catalog


class TestPlaceholders:
    def test_mismatch_reported(self):
        catalog = catalog_of(entry("Hi %@", en="Hi %@", de="Hallo"))

        advisories = check_placeholders(catalog, "de", "en")

        assert advisories == [
            Advisory(
                key="Hi {0}",
                kind=AdvisoryKind.PLACEHOLDER_MISMATCH,
                message="source has 1 placeholder(s), translation has 0",
            )
        ]

    def test_different_placeholder_syntax_is_fine(self):
        catalog = catalog_of(entry("%lld items", en="%lld items", de="%1$lld Elemente"))

        assert check_placeholders(catalog, "de", "en") == []

    def test_untranslated_units_ignored(self):
        catalog = catalog_of(
            CatalogEntry(
                raw_key="Hi %@",
                units={"de": TranslationUnit(state=UnitState.NEEDS_REVIEW, value="Hallo")},
            )
        )

        assert check_placeholders(catalog, "de", "en") == []


class TestConsistency:
    def test_same_source_different_translations(self):
        catalog = catalog_of(
            entry("Save", en="Save", de="Speichern"),
            entry("save", en="save", de="Sichern"),
        )

        advisories = check_consistency(catalog, "de", "en")

        assert {a.key for a in advisories} == {"Save", "save"}
        assert all(a.kind == AdvisoryKind.INCONSISTENT_TRANSLATION for a in advisories)
        assert "'Sichern', 'Speichern'" in advisories[0].message

    def test_consistent_translations(self):
        catalog = catalog_of(
            entry("Save", en="Save", de="Speichern"),
            entry("Save ", en="Save", de="Speichern"),
        )

        assert check_consistency(catalog, "de", "en") == []


class TestGlossary:
    GLOSSARY = {"Workspace": {"de": "Arbeitsbereich"}}

    def test_missing_term(self):
        catalog = catalog_of(entry("Open workspace", en="Open workspace", de="Projekt öffnen"))

        advisories = check_glossary(catalog, "de", "en", self.GLOSSARY)

        assert len(advisories) == 1
        assert advisories[0].message == "term 'Workspace' should be translated as 'Arbeitsbereich'"

    def test_term_present(self):
        catalog = catalog_of(entry("Open workspace", en="Open workspace", de="Arbeitsbereich öffnen"))

        assert check_glossary(catalog, "de", "en", self.GLOSSARY) == []

    def test_word_boundary(self):
        catalog = catalog_of(entry("Workspaces", en="Workspaces", de="Bereiche"))

        assert check_glossary(catalog, "de", "en", self.GLOSSARY) == []

    def test_other_locale_not_checked(self):
        catalog = catalog_of(entry("Open workspace", en="Open workspace", fr="Ouvrir"))

        assert check_glossary(catalog, "fr", "en", self.GLOSSARY) == []


class TestRunAdvisories:
    def test_sorted_and_combined(self):
        catalog = catalog_of(
            entry("Hi %@", en="Hi %@", de="Hallo"),
            entry("Delete", en="Delete", de="Löschen"),
            entry("delete", en="delete", de="Entfernen"),
        )

        advisories = run_advisories(catalog, "de", "en")

        assert [a.key for a in advisories] == sorted(a.key for a in advisories)
        assert {a.kind for a in advisories} == {
            AdvisoryKind.PLACEHOLDER_MISMATCH,
            AdvisoryKind.INCONSISTENT_TRANSLATION,
        }

    def test_source_locale_skips_consistency(self):
        catalog = catalog_of(
            entry("Delete", en="Delete"),
            entry("delete", en="delete"),
        )

        assert run_advisories(catalog, "en", "en") == []

    def test_str(self):
        advisory = Advisory(key="Save", kind=AdvisoryKind.GLOSSARY_MISMATCH, message="check")

        assert str(advisory) == "[glossary-mismatch] Save: check"
        assert advisory.to_dict() == {"key": "Save", "kind": "glossary-mismatch", "message": "check"}
