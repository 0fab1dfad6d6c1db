"""Catalog format abstraction and registry.

Every serialization format implements the same capability: parse bytes into a
:class:`~localecheck.catalog.model.Catalog` and serialize a catalog back into
bytes. Reconciliation never depends on a specific format.

New formats can be registered at runtime:

    >>> @register_format
    ... class ArbFormat(CatalogFormat):
    ...     name = "arb"
    ...     suffixes = (".arb",)
    ...     ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, TypeVar

from localecheck.catalog.model import Catalog, CatalogEntry, TranslationUnit
from localecheck.errors import CatalogFormatError, ConfigurationError
from localecheck.keys import render_key
from localecheck.types import UnitState


class CatalogFormat(ABC):
    """Abstract base class for catalog serialization formats."""

    name: str = "base"
    suffixes: tuple[str, ...] = ()
    placeholder_style: str = "brace"

    @abstractmethod
    def parse(
        self,
        data: bytes,
        *,
        path: str | Path | None = None,
        source_locale: str | None = None,
    ) -> Catalog:
        """Parse raw bytes into a catalog.

        Raises:
            CatalogFormatError: If the data is not a valid document.
        """

    @abstractmethod
    def serialize(self, catalog: Catalog) -> bytes:
        """Serialize a catalog deterministically.

        Entries are written in catalog order, so serializing a freshly
        parsed catalog reproduces its canonical layout.
        """

    def new_entry(self, key: str, source_locale: str) -> CatalogEntry:
        """Placeholder entry for a key found in code but not in the catalog."""
        raw_key = render_key(key, self.placeholder_style)
        return CatalogEntry(
            raw_key=raw_key,
            units={source_locale: TranslationUnit(state=UnitState.UNTRANSLATED, value=raw_key)},
        )

    def _decode(self, data: bytes, path: str | Path | None) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CatalogFormatError(
                f"Catalog is not valid UTF-8: {path or '<bytes>'} ({e.reason} at byte {e.start})",
                path=path,
            ) from e


def duplicate_tracking_hook(duplicates: list[str]) -> Callable[[list[tuple[str, Any]]], dict[str, Any]]:
    """``json`` object_pairs_hook that keeps the last value and records repeats."""

    def hook(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in pairs:
            if key in result:
                duplicates.append(key)
            result[key] = value
        return result

    return hook


F = TypeVar("F", bound=type[CatalogFormat])

# Registry of format classes, keyed by name
_format_registry: dict[str, type[CatalogFormat]] = {}


def register_format(cls: F) -> F:
    """Class decorator registering a catalog format under its name."""
    _format_registry[cls.name] = cls
    return cls


def _ensure_builtin_formats() -> None:
    # Importing the modules runs their @register_format decorators
    from localecheck.catalog import po, structured, xcstrings  # noqa: F401


def get_format(name: str) -> CatalogFormat:
    """Create a format instance by name."""
    _ensure_builtin_formats()
    normalized = name.lower().strip().lstrip(".")
    if normalized in _format_registry:
        return _format_registry[normalized]()
    for cls in _format_registry.values():
        if f".{normalized}" in cls.suffixes:
            return cls()
    raise ConfigurationError(
        f"Unknown catalog format: {name!r}",
        hint=f"Available formats: {', '.join(list_formats())}",
    )


def format_for_path(path: str | Path) -> CatalogFormat:
    """Pick a format from the file suffix."""
    _ensure_builtin_formats()
    suffix = Path(path).suffix.lower()
    for cls in _format_registry.values():
        if suffix in cls.suffixes:
            return cls()
    raise CatalogFormatError(
        f"Cannot determine catalog format from file name: {path}",
        path=path,
        hint=f"Pass --catalog-format explicitly. Available formats: {', '.join(list_formats())}",
    )


def list_formats() -> list[str]:
    _ensure_builtin_formats()
    return sorted(_format_registry)
