"""Tests for catalog loading, format selection and atomic write-back."""

import pytest

from localecheck.catalog import format_for_path, get_format, list_formats, load_catalog, save_catalog
from localecheck.catalog.atomic import AtomicFileWriter, atomic_write
from localecheck.catalog.structured import JSONFormat
from localecheck.errors import CatalogFormatError, ConfigurationError, ErrorCode, FileSystemError


class TestFormatRegistry:
    """Tests for format lookup."""

    def test_builtin_formats(self):
        assert list_formats() == ["json", "po", "xcstrings", "yaml"]

    @pytest.mark.parametrize(
        "filename,name",
        [
            ("Localizable.xcstrings", "xcstrings"),
            ("en.json", "json"),
            ("messages.yml", "yaml"),
            ("ru.po", "po"),
            ("messages.pot", "po"),
        ],
    )
    def test_format_for_path(self, filename, name):
        assert format_for_path(filename).name == name

    def test_unknown_suffix(self):
        with pytest.raises(CatalogFormatError) as exc_info:
            format_for_path("strings.txt")

        assert "--catalog-format" in exc_info.value.hint

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError, match="Unknown catalog format"):
            get_format("arb")


class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileSystemError) as exc_info:
            load_catalog(tmp_path / "missing.json")

        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND
        assert "--fix" in exc_info.value.hint

    def test_explicit_format_overrides_suffix(self, tmp_path):
        path = tmp_path / "strings.txt"
        path.write_text('{"Save": {"en": "Save"}}', encoding="utf-8")

        catalog = load_catalog(path, format="json")

        assert catalog.format_name == "json"
        assert catalog.keys() == {"Save"}


class TestAtomicWrite:
    """Tests for AtomicFileWriter."""

    def test_writes_new_file(self, tmp_path):
        path = tmp_path / "out.json"

        result = atomic_write(path, b"{}\n")

        assert path.read_bytes() == b"{}\n"
        assert result.bytes_written == 3
        assert result.backup_path is None
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_backup(self, tmp_path):
        path = tmp_path / "out.json"
        path.write_bytes(b"old")

        result = atomic_write(path, b"new", create_backup=True)

        assert path.read_bytes() == b"new"
        assert result.backup_path == tmp_path / "out.json.bak"
        assert result.backup_path.read_bytes() == b"old"

    def test_failure_leaves_original(self, tmp_path):
        path = tmp_path / "out.json"
        path.write_bytes(b"original")

        with pytest.raises(RuntimeError):
            with AtomicFileWriter(path) as writer:
                writer.write(b"partial")
                raise RuntimeError("boom")

        assert path.read_bytes() == b"original"
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_write_after_commit(self, tmp_path):
        with AtomicFileWriter(tmp_path / "out.json") as writer:
            writer.write(b"x")
            writer.commit()
            with pytest.raises(RuntimeError):
                writer.write(b"y")


class TestSaveCatalog:
    """Tests for save_catalog."""

    @pytest.fixture
    def catalog_path(self, tmp_path):
        path = tmp_path / "strings.json"
        path.write_text('{\n  "Save": {\n    "en": "Save"\n  }\n}\n', encoding="utf-8")
        return path

    def test_round_trip(self, catalog_path):
        before = catalog_path.read_bytes()

        save_catalog(load_catalog(catalog_path))

        assert catalog_path.read_bytes() == before

    def test_serialization_failure_leaves_file_untouched(self, catalog_path, monkeypatch):
        before = catalog_path.read_bytes()
        catalog = load_catalog(catalog_path)

        def fail(self, catalog):
            raise ValueError("cannot encode")

        monkeypatch.setattr(JSONFormat, "serialize", fail)

        with pytest.raises(CatalogFormatError, match="cannot encode"):
            save_catalog(catalog)

        assert catalog_path.read_bytes() == before
        assert [p.name for p in catalog_path.parent.iterdir()] == ["strings.json"]

    def test_unwritable_target(self, catalog_path, tmp_path):
        catalog = load_catalog(catalog_path)

        with pytest.raises(FileSystemError) as exc_info:
            save_catalog(catalog, tmp_path / "missing-dir" / "strings.json")

        assert exc_info.value.code == ErrorCode.FILE_NOT_WRITABLE
