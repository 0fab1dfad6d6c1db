"""Apple String Catalog (.xcstrings) format.

Document layout::

    {
      "sourceLanguage" : "en",
      "strings" : {
        "Welcome, %@!" : {
          "comment" : "Greeting on the home screen",
          "localizations" : {
            "ru" : { "stringUnit" : { "state" : "translated", "value" : "…" } }
          }
        }
      },
      "version" : "1.0"
    }

Output matches Xcode's layout (two-space indent, ``" : "`` separator,
non-ASCII kept verbatim). Plural and device ``variations`` are summarized
into a single unit for auditing and written back untouched.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from localecheck.catalog.base import CatalogFormat, duplicate_tracking_hook, register_format
from localecheck.catalog.model import Catalog, CatalogEntry, TranslationUnit
from localecheck.errors import CatalogFormatError
from localecheck.types import UnitState, WarningKind

logger = logging.getLogger(__name__)

_STATE_FROM_XC = {
    "new": UnitState.UNTRANSLATED,
    "translated": UnitState.TRANSLATED,
    "needs_review": UnitState.NEEDS_REVIEW,
    "stale": UnitState.STALE,
}
_STATE_TO_XC = {
    UnitState.UNTRANSLATED: "new",
    UnitState.TRANSLATED: "translated",
    UnitState.NEEDS_REVIEW: "needs_review",
    UnitState.STALE: "stale",
}

# Xcode writes empty objects as "{", a blank line, then "}"
_EMPTY_OBJECT = re.compile(r"^( *)(.*) : \{\}(,?)$", re.MULTILINE)


@dataclass
class XCStringsDocument:
    """Top-level document state kept for write-back."""

    data: dict[str, Any] = field(default_factory=dict)
    trailing_newline: bool = False


def _leaf_units(node: Any) -> list[dict[str, Any]]:
    """All ``stringUnit`` dicts below a variations node."""
    if not isinstance(node, dict):
        return []
    leaves = []
    for key, value in node.items():
        if key == "stringUnit" and isinstance(value, dict):
            leaves.append(value)
        else:
            leaves.extend(_leaf_units(value))
    return leaves


@register_format
class XCStringsFormat(CatalogFormat):
    """Xcode String Catalog."""

    name = "xcstrings"
    suffixes = (".xcstrings",)
    placeholder_style = "printf"

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def parse(
        self,
        data: bytes,
        *,
        path: str | Path | None = None,
        source_locale: str | None = None,
    ) -> Catalog:
        text = self._decode(data, path)
        duplicates: list[str] = []
        try:
            document = json.loads(text, object_pairs_hook=duplicate_tracking_hook(duplicates))
        except json.JSONDecodeError as e:
            raise CatalogFormatError(
                f"Invalid JSON in catalog {path or '<bytes>'}: {e.msg} (line {e.lineno}, column {e.colno})",
                path=path,
            ) from e

        if not isinstance(document, dict):
            raise CatalogFormatError(f"Catalog root must be an object: {path or '<bytes>'}", path=path)
        strings = document.get("strings", {})
        if not isinstance(strings, dict):
            raise CatalogFormatError(f"'strings' must be an object in catalog {path or '<bytes>'}", path=path)

        catalog = Catalog(
            source_locale=document.get("sourceLanguage") or source_locale,
            format_name=self.name,
            document=XCStringsDocument(data=document, trailing_newline=text.endswith("\n")),
            path=str(path) if path else None,
        )
        for key in duplicates:
            catalog.warn(WarningKind.DUPLICATE_KEY, f"key {key!r} appears more than once; last value wins")

        for raw_key, raw_entry in strings.items():
            catalog.entries[raw_key] = self._parse_entry(raw_key, raw_entry, catalog.source_locale, path)

        catalog.check_collisions()
        logger.debug("Parsed %d xcstrings entries from %s", len(catalog), path)
        return catalog

    def _parse_entry(
        self,
        raw_key: str,
        raw_entry: Any,
        source_locale: str | None,
        path: str | Path | None,
    ) -> CatalogEntry:
        if not isinstance(raw_entry, dict):
            raise CatalogFormatError(f"Entry {raw_key!r} must be an object in catalog {path}", path=path)
        localizations = raw_entry.get("localizations", {})
        if not isinstance(localizations, dict):
            raise CatalogFormatError(
                f"'localizations' of entry {raw_key!r} must be an object in catalog {path}", path=path
            )

        units = {
            locale: self._parse_unit(payload)
            for locale, payload in localizations.items()
        }
        entry = CatalogEntry(
            raw_key=raw_key,
            units=units,
            comment=raw_entry.get("comment"),
            translatable=raw_entry.get("shouldTranslate", True) is not False,
            meta={"raw": raw_entry},
        )
        if source_locale and entry.unit_for(source_locale) is None:
            entry.implicit_source = True
        return entry

    def _parse_unit(self, payload: Any) -> TranslationUnit:
        if not isinstance(payload, dict):
            return TranslationUnit(state=UnitState.UNTRANSLATED, meta={"payload": payload})

        if isinstance(payload.get("stringUnit"), dict):
            unit = payload["stringUnit"]
            state = _STATE_FROM_XC.get(unit.get("state"), UnitState.UNTRANSLATED)
            value = unit.get("value") or ""
            if state == UnitState.TRANSLATED and not value:
                state = UnitState.UNTRANSLATED
            return TranslationUnit(state=state, value=value, meta={"payload": payload})

        leaves = _leaf_units(payload.get("variations"))
        values = [leaf.get("value") or "" for leaf in leaves]
        states = [_STATE_FROM_XC.get(leaf.get("state"), UnitState.UNTRANSLATED) for leaf in leaves]
        if leaves and all(s == UnitState.TRANSLATED for s in states) and all(values):
            state = UnitState.TRANSLATED
        elif UnitState.NEEDS_REVIEW in states:
            state = UnitState.NEEDS_REVIEW
        elif leaves and all(s == UnitState.STALE for s in states):
            state = UnitState.STALE
        else:
            state = UnitState.UNTRANSLATED
        value = next((v for v in values if v), "")
        return TranslationUnit(state=state, value=value, meta={"payload": payload, "variations": True})

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def serialize(self, catalog: Catalog) -> bytes:
        document = catalog.document
        if not isinstance(document, XCStringsDocument):
            document = XCStringsDocument(
                data={"sourceLanguage": catalog.source_locale or "en", "strings": {}, "version": "1.0"},
            )

        data = dict(document.data)
        data["strings"] = {
            entry.raw_key: self._serialize_entry(entry) for entry in catalog
        }
        text = json.dumps(data, indent=2, ensure_ascii=False, separators=(",", " : "))
        text = _EMPTY_OBJECT.sub(
            lambda m: f"{m.group(1)}{m.group(2)} : {{\n\n{m.group(1)}}}{m.group(3)}", text
        )
        if document.trailing_newline:
            text += "\n"
        return text.encode("utf-8")

    def _serialize_entry(self, entry: CatalogEntry) -> dict[str, Any]:
        raw = dict(entry.meta.get("raw") or {})
        if entry.comment is not None:
            raw["comment"] = entry.comment
        if entry.units or "localizations" in raw:
            raw["localizations"] = {
                locale: self._serialize_unit(unit) for locale, unit in entry.units.items()
            }
        return raw

    def _serialize_unit(self, unit: TranslationUnit) -> Any:
        payload = copy.deepcopy(unit.meta.get("payload"))
        if unit.meta.get("variations"):
            return payload
        if not isinstance(payload, dict):
            if payload is not None and unit.state == UnitState.UNTRANSLATED and not unit.value:
                return payload
            payload = {}

        string_unit = dict(payload.get("stringUnit") or {})
        if _STATE_FROM_XC.get(string_unit.get("state")) != unit.state:
            string_unit["state"] = _STATE_TO_XC[unit.state]
        if (string_unit.get("value") or "") != unit.value or "value" not in string_unit:
            string_unit["value"] = unit.value
        payload["stringUnit"] = string_unit
        return payload
