"""Tests for the String Catalog (.xcstrings) format."""

import json

import pytest

from conftest import string_unit, xcstrings_text
from localecheck.catalog import get_format, load_catalog, save_catalog
from localecheck.catalog.loader import dump_catalog
from localecheck.errors import CatalogFormatError
from localecheck.types import UnitState, WarningKind

XCODE_LAYOUT = """{
  "sourceLanguage" : "en",
  "strings" : {
    "Old Feature" : {

    },
    "Save" : {
      "comment" : "Toolbar button",
      "localizations" : {
        "ru" : {
          "stringUnit" : {
            "state" : "translated",
            "value" : "Сохранить"
          }
        }
      }
    },
    "Welcome, %@!" : {
      "localizations" : {
        "de" : {
          "stringUnit" : {
            "state" : "new",
            "value" : ""
          }
        }
      }
    }
  },
  "version" : "1.0"
}"""


@pytest.fixture
def fmt():
    return get_format("xcstrings")


class TestParse:
    """Tests for parsing String Catalogs."""

    def test_entries_and_units(self, fmt):
        catalog = fmt.parse(XCODE_LAYOUT.encode("utf-8"))

        assert catalog.source_locale == "en"
        assert list(catalog.entries) == ["Old Feature", "Save", "Welcome, %@!"]
        save = catalog.entries["Save"]
        assert save.comment == "Toolbar button"
        assert save.units["ru"].state == UnitState.TRANSLATED
        assert save.units["ru"].value == "Сохранить"

    def test_new_state_is_untranslated(self, fmt):
        catalog = fmt.parse(XCODE_LAYOUT.encode("utf-8"))

        assert catalog.entries["Welcome, %@!"].units["de"].state == UnitState.UNTRANSLATED

    def test_keys_are_normalized(self, fmt):
        catalog = fmt.parse(XCODE_LAYOUT.encode("utf-8"))

        assert catalog.keys() == {"Old Feature", "Save", "Welcome, {0}!"}
        assert catalog.get("Welcome, {name}!").raw_key == "Welcome, %@!"

    def test_implicit_source(self, fmt):
        catalog = fmt.parse(XCODE_LAYOUT.encode("utf-8"))

        entry = catalog.entries["Save"]
        assert entry.implicit_source
        assert entry.has_source("en")
        assert entry.source_text("en") == "Save"

    def test_should_translate_false(self, fmt):
        text = xcstrings_text({"AppName": {"shouldTranslate": False}})

        catalog = fmt.parse(text.encode("utf-8"))

        assert catalog.entries["AppName"].translatable is False

    def test_plural_variations(self, fmt):
        plural = {
            "variations": {
                "plural": {
                    "one": string_unit("%lld Datei"),
                    "other": string_unit("%lld Dateien"),
                }
            }
        }
        partial = {
            "variations": {
                "plural": {
                    "one": string_unit("%lld Datei"),
                    "other": string_unit("", state="new"),
                }
            }
        }
        text = xcstrings_text(
            {
                "%lld files": {"localizations": {"de": plural}},
                "%lld folders": {"localizations": {"de": partial}},
            }
        )

        catalog = fmt.parse(text.encode("utf-8"))

        assert catalog.entries["%lld files"].is_translated("de")
        assert not catalog.entries["%lld folders"].is_translated("de")

    def test_locale_codes_match_canonically(self, fmt):
        text = xcstrings_text({"Save": {"localizations": {"pt-BR": string_unit("Salvar")}}})

        catalog = fmt.parse(text.encode("utf-8"))

        assert catalog.entries["Save"].is_translated("pt_BR")

    def test_duplicate_keys_warn_last_wins(self, fmt):
        text = (
            '{"sourceLanguage": "en", "strings": {'
            '"Save": {"localizations": {"ru": {"stringUnit": {"state": "translated", "value": "A"}}}},'
            '"Save": {"localizations": {"ru": {"stringUnit": {"state": "translated", "value": "B"}}}}'
            '}, "version": "1.0"}'
        )

        catalog = fmt.parse(text.encode("utf-8"))

        assert catalog.entries["Save"].units["ru"].value == "B"
        assert [w.kind for w in catalog.warnings] == [WarningKind.DUPLICATE_KEY]

    def test_normalized_collision_warns_and_keeps_both(self, fmt):
        text = xcstrings_text(
            {
                "Hi %@": {"localizations": {"ru": string_unit("Привет, %@")}},
                "Hi %lld": {"localizations": {"ru": string_unit("Привет, %lld")}},
            }
        )

        catalog = fmt.parse(text.encode("utf-8"))

        assert list(catalog.entries) == ["Hi %@", "Hi %lld"]
        assert catalog.get("Hi {0}").raw_key == "Hi %lld"
        assert [w.kind for w in catalog.warnings] == [WarningKind.DUPLICATE_KEY]

    @pytest.mark.parametrize(
        "data,message",
        [
            (b'{"strings": {', "Invalid JSON"),
            (b"[]", "must be an object"),
            (b'{"strings": []}', "'strings' must be an object"),
            (b'{"strings": {"Save": "oops"}}', "must be an object"),
            (b"\xff\xfe\x00", "not valid UTF-8"),
        ],
    )
    def test_malformed(self, fmt, data, message):
        with pytest.raises(CatalogFormatError, match=message):
            fmt.parse(data, path="Broken.xcstrings")


class TestSerialize:
    """Tests for writing String Catalogs back."""

    def test_round_trip_xcode_layout(self, fmt):
        catalog = fmt.parse(XCODE_LAYOUT.encode("utf-8"))

        assert fmt.serialize(catalog) == XCODE_LAYOUT.encode("utf-8")

    def test_round_trip_keeps_trailing_newline(self, fmt):
        data = (XCODE_LAYOUT + "\n").encode("utf-8")

        assert fmt.serialize(fmt.parse(data)) == data

    def test_round_trip_variations(self, fmt):
        text = xcstrings_text(
            {
                "%lld files": {
                    "extractionState": "manual",
                    "localizations": {
                        "de": {
                            "variations": {
                                "plural": {
                                    "one": string_unit("%lld Datei"),
                                    "other": string_unit("%lld Dateien"),
                                }
                            }
                        }
                    },
                }
            }
        )

        assert fmt.serialize(fmt.parse(text.encode("utf-8"))).decode("utf-8") == text

    def test_edited_unit_written(self, fmt):
        catalog = fmt.parse(XCODE_LAYOUT.encode("utf-8"))
        unit = catalog.entries["Welcome, %@!"].units["de"]
        unit.state = UnitState.TRANSLATED
        unit.value = "Willkommen, %@!"

        data = json.loads(fmt.serialize(catalog))

        assert data["strings"]["Welcome, %@!"]["localizations"]["de"] == {
            "stringUnit": {"state": "translated", "value": "Willkommen, %@!"}
        }

    def test_new_entry_uses_printf_placeholders(self, fmt):
        entry = fmt.new_entry("Welcome back, {0}!", "en")

        assert entry.raw_key == "Welcome back, %@!"
        assert entry.units["en"].state == UnitState.UNTRANSLATED

    def test_save_and_load(self, fmt, tmp_path):
        path = tmp_path / "Localizable.xcstrings"
        path.write_text(XCODE_LAYOUT, encoding="utf-8")

        catalog = load_catalog(path)
        catalog.add_entry(fmt.new_entry("Welcome back, {0}!", "en"))
        save_catalog(catalog)

        reloaded = load_catalog(path)
        assert list(reloaded.entries)[-1] == "Welcome back, %@!"
        assert reloaded.entries["Welcome back, %@!"].units["en"].state == UnitState.UNTRANSLATED
        assert json.loads(path.read_text(encoding="utf-8"))["strings"]["Welcome back, %@!"] == {
            "localizations": {"en": {"stringUnit": {"state": "new", "value": "Welcome back, %@!"}}}
        }
        assert dump_catalog(reloaded) == path.read_bytes()
