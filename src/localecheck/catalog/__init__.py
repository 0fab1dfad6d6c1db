"""Translation catalogs: model, formats, loading and write-back."""

from localecheck.catalog.base import (
    CatalogFormat,
    format_for_path,
    get_format,
    list_formats,
    register_format,
)
from localecheck.catalog.loader import (
    dump_catalog,
    load_catalog,
    new_catalog,
    save_catalog,
)
from localecheck.catalog.model import Catalog, CatalogEntry, TranslationUnit

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogFormat",
    "TranslationUnit",
    "dump_catalog",
    "format_for_path",
    "get_format",
    "list_formats",
    "load_catalog",
    "new_catalog",
    "register_format",
    "save_catalog",
]
