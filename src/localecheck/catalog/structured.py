"""Generic JSON and YAML catalogs.

Document layout (JSON shown; YAML is the same tree)::

    {
      "@sourceLocale": "en",
      "Save": {"en": "Save", "ru": "Сохранить"},
      "Welcome, {0}!": {
        "en": "Welcome, {0}!",
        "de": {"state": "needs_review", "value": "Willkommen, {0}!"}
      }
    }

Top-level keys starting with ``@`` are document metadata. A plain string
value is shorthand for a translated unit (untranslated when empty); the
shorthand is kept on write-back as long as it still describes the unit.
"""

from __future__ import annotations

import copy
import json
from abc import abstractmethod
from pathlib import Path
from typing import Any

import yaml

from localecheck.catalog.base import CatalogFormat, duplicate_tracking_hook, register_format
from localecheck.catalog.model import Catalog, CatalogEntry, TranslationUnit
from localecheck.errors import CatalogFormatError
from localecheck.types import UnitState, WarningKind

SOURCE_LOCALE_KEY = "@sourceLocale"


class StructuredFormat(CatalogFormat):
    """Shared parsing for key -> locale -> unit documents."""

    @abstractmethod
    def _load(self, text: str, path: str | Path | None) -> tuple[Any, list[str]]:
        """Return the parsed document and any duplicated mapping keys."""

    @abstractmethod
    def _dump(self, data: dict[str, Any]) -> str:
        """Render the document."""

    def parse(
        self,
        data: bytes,
        *,
        path: str | Path | None = None,
        source_locale: str | None = None,
    ) -> Catalog:
        text = self._decode(data, path)
        document, duplicates = self._load(text, path)
        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise CatalogFormatError(f"Catalog root must be a mapping: {path or '<bytes>'}", path=path)

        metadata = {k: v for k, v in document.items() if isinstance(k, str) and k.startswith("@")}
        catalog = Catalog(
            source_locale=metadata.get(SOURCE_LOCALE_KEY) or source_locale,
            format_name=self.name,
            document=metadata,
            path=str(path) if path else None,
        )
        for key in duplicates:
            catalog.warn(WarningKind.DUPLICATE_KEY, f"key {key!r} appears more than once; last value wins")

        for raw_key, locales in document.items():
            if not isinstance(raw_key, str):
                raise CatalogFormatError(f"Catalog keys must be strings, got {raw_key!r} in {path}", path=path)
            if raw_key in metadata:
                continue
            if not isinstance(locales, dict):
                raise CatalogFormatError(
                    f"Entry {raw_key!r} must map locale codes to values in catalog {path}", path=path
                )
            units = {}
            for locale, value in locales.items():
                if not isinstance(locale, str):
                    raise CatalogFormatError(
                        f"Locale code {locale!r} of entry {raw_key!r} must be a string in {path}", path=path
                    )
                units[locale] = self._parse_unit(raw_key, locale, value, path)
            catalog.entries[raw_key] = CatalogEntry(raw_key=raw_key, units=units)

        catalog.check_collisions()
        return catalog

    def _parse_unit(self, raw_key: str, locale: str, value: Any, path: str | Path | None) -> TranslationUnit:
        if value is None:
            return TranslationUnit(state=UnitState.UNTRANSLATED, meta={"null": True})
        if isinstance(value, str):
            state = UnitState.TRANSLATED if value else UnitState.UNTRANSLATED
            return TranslationUnit(state=state, value=value, meta={"shorthand": True})
        if isinstance(value, dict):
            text = value.get("value") or ""
            if not isinstance(text, str):
                raise CatalogFormatError(f"Value of {raw_key!r} [{locale}] must be a string in {path}", path=path)
            raw_state = value.get("state")
            if raw_state is None:
                state = UnitState.TRANSLATED if text else UnitState.UNTRANSLATED
            else:
                try:
                    state = UnitState(raw_state)
                except ValueError as e:
                    raise CatalogFormatError(
                        f"Unknown state {raw_state!r} for {raw_key!r} [{locale}] in {path}", path=path
                    ) from e
            if state == UnitState.TRANSLATED and not text:
                state = UnitState.UNTRANSLATED
            return TranslationUnit(state=state, value=text, meta={"payload": value})
        raise CatalogFormatError(f"Unsupported value for {raw_key!r} [{locale}] in {path}: {value!r}", path=path)

    def serialize(self, catalog: Catalog) -> bytes:
        data: dict[str, Any] = dict(catalog.document or {})
        if catalog.document is None and catalog.source_locale:
            data[SOURCE_LOCALE_KEY] = catalog.source_locale
        for entry in catalog:
            data[entry.raw_key] = {
                locale: self._serialize_unit(unit) for locale, unit in entry.units.items()
            }
        return self._dump(data).encode("utf-8")

    def _serialize_unit(self, unit: TranslationUnit) -> Any:
        if unit.meta.get("null") and unit.state == UnitState.UNTRANSLATED and not unit.value:
            return None
        if unit.meta.get("shorthand"):
            if unit.state == UnitState.TRANSLATED or (unit.state == UnitState.UNTRANSLATED and not unit.value):
                return unit.value

        payload = copy.deepcopy(unit.meta.get("payload")) or {}
        implied = UnitState.TRANSLATED if unit.value else UnitState.UNTRANSLATED
        if "state" in payload or unit.state != implied:
            payload["state"] = unit.state.value
        if payload.get("value", "") != unit.value or "value" not in payload:
            payload["value"] = unit.value
        return payload


@register_format
class JSONFormat(StructuredFormat):
    """Key -> locale -> value JSON document."""

    name = "json"
    suffixes = (".json",)

    def _load(self, text: str, path: str | Path | None) -> tuple[Any, list[str]]:
        duplicates: list[str] = []
        try:
            return json.loads(text, object_pairs_hook=duplicate_tracking_hook(duplicates)), duplicates
        except json.JSONDecodeError as e:
            raise CatalogFormatError(
                f"Invalid JSON in catalog {path or '<bytes>'}: {e.msg} (line {e.lineno}, column {e.colno})",
                path=path,
            ) from e

    def _dump(self, data: dict[str, Any]) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class CatalogYAMLLoader(yaml.SafeLoader):
    """Safe loader that records duplicate mapping keys.

    Implicit booleans are disabled so locale codes such as ``no`` (Norwegian)
    stay strings.
    """

    def __init__(self, stream: Any) -> None:
        super().__init__(stream)
        self.duplicates: list[str] = []

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                if key in seen:
                    self.duplicates.append(str(key))
                seen.add(key)
            except TypeError:
                continue
        return super().construct_mapping(node, deep=deep)


CatalogYAMLLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@register_format
class YAMLFormat(StructuredFormat):
    """Key -> locale -> value YAML document."""

    name = "yaml"
    suffixes = (".yaml", ".yml")

    def _load(self, text: str, path: str | Path | None) -> tuple[Any, list[str]]:
        loader = CatalogYAMLLoader(text)
        try:
            return loader.get_single_data(), loader.duplicates
        except yaml.YAMLError as e:
            detail = " ".join(str(e).split())
            raise CatalogFormatError(f"Invalid YAML in catalog {path or '<bytes>'}: {detail}", path=path) from e
        finally:
            loader.dispose()

    def _dump(self, data: dict[str, Any]) -> str:
        return yaml.safe_dump(
            data,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
            width=4096,
        )
