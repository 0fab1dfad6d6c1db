"""Tests for the JSON and YAML catalog formats."""

import json

import pytest

from localecheck.catalog import get_format, load_catalog, save_catalog
from localecheck.catalog.structured import SOURCE_LOCALE_KEY
from localecheck.errors import CatalogFormatError
from localecheck.types import UnitState, WarningKind

DOCUMENT = {
    SOURCE_LOCALE_KEY: "en",
    "Save": {"en": "Save", "ru": "Сохранить"},
    "Welcome, {0}!": {
        "en": "Welcome, {0}!",
        "de": {"state": "needs_review", "value": "Willkommen, {0}!"},
        "ru": None,
    },
    "Delete": {"en": "Delete", "ru": ""},
}


def json_text(document):
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


class TestJSONFormat:
    """Tests for JSON catalogs."""

    @pytest.fixture
    def fmt(self):
        return get_format("json")

    def test_parse(self, fmt):
        catalog = fmt.parse(json_text(DOCUMENT).encode("utf-8"))

        assert catalog.source_locale == "en"
        assert list(catalog.entries) == ["Save", "Welcome, {0}!", "Delete"]
        assert catalog.entries["Save"].units["ru"].state == UnitState.TRANSLATED
        welcome = catalog.entries["Welcome, {0}!"]
        assert welcome.units["de"].state == UnitState.NEEDS_REVIEW
        assert welcome.units["ru"].state == UnitState.UNTRANSLATED
        assert catalog.entries["Delete"].units["ru"].state == UnitState.UNTRANSLATED

    def test_source_locale_parameter_is_fallback(self, fmt):
        catalog = fmt.parse(b'{"Save": {"fr": "Enregistrer"}}', source_locale="fr")

        assert catalog.source_locale == "fr"

    def test_round_trip(self, fmt):
        data = json_text(DOCUMENT).encode("utf-8")

        assert fmt.serialize(fmt.parse(data)) == data

    def test_shorthand_kept_until_state_changes(self, fmt):
        catalog = fmt.parse(json_text(DOCUMENT).encode("utf-8"))
        catalog.entries["Save"].units["ru"].state = UnitState.NEEDS_REVIEW
        catalog.entries["Delete"].units["ru"].value = "Удалить"
        catalog.entries["Delete"].units["ru"].state = UnitState.TRANSLATED

        data = json.loads(fmt.serialize(catalog))

        assert data["Save"]["ru"] == {"state": "needs_review", "value": "Сохранить"}
        assert data["Delete"]["ru"] == "Удалить"

    def test_new_entry(self, fmt):
        catalog = fmt.parse(json_text(DOCUMENT).encode("utf-8"))
        catalog.add_entry(fmt.new_entry("Hello, {0}", "en"))

        data = json.loads(fmt.serialize(catalog))

        assert list(data)[-1] == "Hello, {0}"
        assert data["Hello, {0}"] == {"en": {"state": "untranslated", "value": "Hello, {0}"}}

    def test_add_existing_raw_key_rejected(self, fmt):
        catalog = fmt.parse(json_text(DOCUMENT).encode("utf-8"))

        with pytest.raises(KeyError):
            catalog.add_entry(fmt.new_entry("Save", "en"))

    def test_duplicate_keys_warn(self, fmt):
        catalog = fmt.parse(b'{"Save": {"ru": "A"}, "Save": {"ru": "B"}}')

        assert catalog.entries["Save"].units["ru"].value == "B"
        assert [w.kind for w in catalog.warnings] == [WarningKind.DUPLICATE_KEY]

    @pytest.mark.parametrize(
        "data,message",
        [
            (b'{"Save": ', "Invalid JSON"),
            (b'["Save"]', "must be a mapping"),
            (b'{"Save": "Save"}', "must map locale codes"),
            (b'{"Save": {"ru": {"state": "done", "value": "x"}}}', "Unknown state"),
            (b'{"Save": {"ru": 42}}', "Unsupported value"),
        ],
    )
    def test_malformed(self, fmt, data, message):
        with pytest.raises(CatalogFormatError, match=message):
            fmt.parse(data, path="strings.json")

    def test_save_new_file_records_source_locale(self, tmp_path):
        from localecheck.catalog import new_catalog

        path = tmp_path / "strings.json"
        catalog = new_catalog(path, source_locale="en")
        catalog.add_entry(get_format("json").new_entry("Save", "en"))

        save_catalog(catalog)

        assert json.loads(path.read_text(encoding="utf-8")) == {
            SOURCE_LOCALE_KEY: "en",
            "Save": {"en": {"state": "untranslated", "value": "Save"}},
        }


class TestYAMLFormat:
    """Tests for YAML catalogs."""

    @pytest.fixture
    def fmt(self):
        return get_format("yaml")

    def test_parse(self, fmt):
        text = (
            "'@sourceLocale': en\n"
            "Save:\n"
            "  en: Save\n"
            "  no: Lagre\n"
            "  ru: Сохранить\n"
            "Welcome, {0}!:\n"
            "  en: Welcome, {0}!\n"
            "  de:\n"
            "    state: needs_review\n"
            "    value: Willkommen, {0}!\n"
        )

        catalog = fmt.parse(text.encode("utf-8"))

        assert catalog.source_locale == "en"
        assert set(catalog.entries["Save"].units) == {"en", "no", "ru"}
        assert catalog.entries["Save"].units["no"].value == "Lagre"
        assert catalog.entries["Welcome, {0}!"].units["de"].state == UnitState.NEEDS_REVIEW

    def test_yml_suffix(self):
        assert get_format("yml").name == "yaml"

    def test_save_load_is_stable(self, fmt, tmp_path):
        path = tmp_path / "strings.yaml"
        path.write_text(
            "Save:\n  en: Save\n  ru: Сохранить\nDelete:\n  en: Delete\n  ru: ''\n",
            encoding="utf-8",
        )

        save_catalog(load_catalog(path))
        first = path.read_bytes()
        save_catalog(load_catalog(path))

        assert path.read_bytes() == first
        assert "Сохранить" in first.decode("utf-8")

    def test_duplicate_keys_warn(self, fmt):
        catalog = fmt.parse(b"Save:\n  ru: A\nSave:\n  ru: B\n")

        assert catalog.entries["Save"].units["ru"].value == "B"
        assert [w.kind for w in catalog.warnings] == [WarningKind.DUPLICATE_KEY]

    def test_empty_document(self, fmt):
        assert len(fmt.parse(b"")) == 0

    def test_malformed(self, fmt):
        with pytest.raises(CatalogFormatError, match="Invalid YAML"):
            fmt.parse(b"Save: [unclosed\n", path="strings.yaml")
