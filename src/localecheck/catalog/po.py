"""gettext PO catalogs, read and written with polib.

A PO file holds one target language (the ``Language`` header); the msgid is
the source-language text, so every entry has an implicit source. ``fuzzy``
entries are ``needs_review`` and obsolete (``#~``) entries are ``stale``.
Templates (``.pot``) have no language and therefore no units.
"""

from __future__ import annotations

import logging
from pathlib import Path

import polib

from localecheck.catalog.base import CatalogFormat, register_format
from localecheck.catalog.model import Catalog, CatalogEntry, TranslationUnit
from localecheck.errors import CatalogFormatError
from localecheck.types import UnitState, WarningKind

logger = logging.getLogger(__name__)

_CONTEXT_SEPARATOR = "\x04"


def _entry_id(po_entry: polib.POEntry) -> str:
    if po_entry.msgctxt:
        return f"{po_entry.msgctxt}{_CONTEXT_SEPARATOR}{po_entry.msgid}"
    return po_entry.msgid


def _unit_from_po(po_entry: polib.POEntry) -> TranslationUnit:
    if po_entry.msgid_plural:
        forms = [po_entry.msgstr_plural[k] for k in sorted(po_entry.msgstr_plural)]
        value = forms[0] if forms else ""
        complete = bool(forms) and all(forms)
    else:
        value = po_entry.msgstr
        complete = bool(value)

    if po_entry.obsolete:
        state = UnitState.STALE
    elif "fuzzy" in po_entry.flags:
        state = UnitState.NEEDS_REVIEW
    elif complete:
        state = UnitState.TRANSLATED
    else:
        state = UnitState.UNTRANSLATED
    return TranslationUnit(state=state, value=value)


@register_format
class POFormat(CatalogFormat):
    """gettext PO/POT file."""

    name = "po"
    suffixes = (".po", ".pot")

    def parse(
        self,
        data: bytes,
        *,
        path: str | Path | None = None,
        source_locale: str | None = None,
    ) -> Catalog:
        text = self._decode(data, path)
        try:
            po = polib.pofile(text)
        except (OSError, ValueError) as e:
            raise CatalogFormatError(f"Invalid PO catalog {path or '<bytes>'}: {e}", path=path) from e

        language = po.metadata.get("Language") or None
        catalog = Catalog(
            source_locale=source_locale,
            format_name=self.name,
            document=po,
            path=str(path) if path else None,
        )
        for po_entry in po:
            entry_id = _entry_id(po_entry)
            if entry_id in catalog.entries:
                catalog.warn(WarningKind.DUPLICATE_KEY, f"msgid {po_entry.msgid!r} appears more than once; last value wins")
            units = {language: _unit_from_po(po_entry)} if language else {}
            catalog.entries[entry_id] = CatalogEntry(
                raw_key=po_entry.msgid,
                units=units,
                comment=po_entry.comment or None,
                implicit_source=True,
                translatable=not po_entry.obsolete,
                meta={"po_entry": po_entry},
            )

        catalog.check_collisions()
        logger.debug("Parsed %d PO entries (language=%s) from %s", len(catalog), language, path)
        return catalog

    def new_entry(self, key: str, source_locale: str) -> CatalogEntry:
        return CatalogEntry(raw_key=key, implicit_source=True)

    def serialize(self, catalog: Catalog) -> bytes:
        po = catalog.document
        if not isinstance(po, polib.POFile):
            po = polib.POFile()
            po.metadata = {"Content-Type": "text/plain; charset=UTF-8"}
            catalog.document = po
        language = po.metadata.get("Language") or None

        for entry in catalog:
            po_entry = entry.meta.get("po_entry")
            if po_entry is None:
                po_entry = polib.POEntry(msgid=entry.raw_key, msgstr="")
                if entry.comment:
                    po_entry.comment = entry.comment
                po.append(po_entry)
                entry.meta["po_entry"] = po_entry
            unit = entry.unit_for(language) if language else None
            if unit is not None:
                self._sync(po_entry, unit)

        return str(po).encode("utf-8")

    def _sync(self, po_entry: polib.POEntry, unit: TranslationUnit) -> None:
        current = _unit_from_po(po_entry)
        if current.state == unit.state and current.value == unit.value:
            return
        if po_entry.msgid_plural:
            po_entry.msgstr_plural[0] = unit.value
        else:
            po_entry.msgstr = unit.value
        if unit.state == UnitState.NEEDS_REVIEW and "fuzzy" not in po_entry.flags:
            po_entry.flags.append("fuzzy")
        elif unit.state != UnitState.NEEDS_REVIEW and "fuzzy" in po_entry.flags:
            po_entry.flags.remove("fuzzy")
        po_entry.obsolete = unit.state == UnitState.STALE
