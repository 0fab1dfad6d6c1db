"""Shared fixtures for localecheck tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest


def xcstrings_text(strings: dict[str, Any], source_language: str = "en") -> str:
    """Render a String Catalog the way Xcode lays it out (no empty objects)."""
    document = {"sourceLanguage": source_language, "strings": strings, "version": "1.0"}
    return json.dumps(document, indent=2, ensure_ascii=False, separators=(",", " : "))


def string_unit(value: str, state: str = "translated") -> dict[str, Any]:
    return {"stringUnit": {"state": state, "value": value}}


@pytest.fixture
def write_files(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative path: content}`` under ``tmp_path / "src"``."""

    def _write(files: dict[str, str], root: str = "src") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            target = base / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(content), encoding="utf-8")
        return base

    return _write


@pytest.fixture
def swift_project(tmp_path: Path) -> dict[str, Path]:
    """A small SwiftUI project with a String Catalog.

    Code uses "Welcome, \\(name)!" (twice), "Save" and "Home"; the catalog
    holds "Save" (en + ru), "Welcome, %@!" (en only) and "Old Feature".
    """
    sources = tmp_path / "App"
    (sources / "Views").mkdir(parents=True)
    (sources / "Views" / "HomeView.swift").write_text(
        "import SwiftUI\n"
        "\n"
        "struct HomeView: View {\n"
        "    var body: some View {\n"
        '        Text("Welcome, \\(user.name)!")\n'
        '            .navigationTitle("Home")\n'
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (sources / "Views" / "SettingsView.swift").write_text(
        "struct SettingsView: View {\n"
        "    var body: some View {\n"
        '        Button("Save") { save() }\n'
        '        Text("Welcome, \\(profile.displayName)!")\n'
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    catalog = tmp_path / "Localizable.xcstrings"
    catalog.write_text(
        xcstrings_text(
            {
                "Old Feature": {"localizations": {"en": string_unit("Old Feature")}},
                "Save": {
                    "localizations": {
                        "en": string_unit("Save"),
                        "ru": string_unit("Сохранить"),
                    }
                },
                "Welcome, %@!": {"localizations": {"en": string_unit("Welcome, %@!")}},
            }
        ),
        encoding="utf-8",
    )
    return {"root": sources, "catalog": catalog}
