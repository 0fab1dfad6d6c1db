"""Catalog loading and write-back."""

from __future__ import annotations

import logging
from pathlib import Path

from localecheck.catalog.atomic import AtomicOperation, atomic_write
from localecheck.catalog.base import CatalogFormat, format_for_path, get_format
from localecheck.catalog.model import Catalog
from localecheck.errors import CatalogFormatError, ErrorCode, FileSystemError

logger = logging.getLogger(__name__)


def resolve_format(path: str | Path, format: str | CatalogFormat | None = None) -> CatalogFormat:
    """Format instance for ``path``: explicit name or instance, else by suffix."""
    if isinstance(format, CatalogFormat):
        return format
    if format:
        return get_format(format)
    return format_for_path(path)


def load_catalog(
    path: str | Path,
    format: str | CatalogFormat | None = None,
    source_locale: str | None = None,
) -> Catalog:
    """Parse the catalog file at ``path``.

    Args:
        path: Catalog file
        format: Format name or instance; inferred from the suffix when omitted
        source_locale: Source locale used when the file does not declare one

    Raises:
        FileSystemError: If the file cannot be read.
        CatalogFormatError: If the file is not a valid catalog.
    """
    path = Path(path)
    fmt = resolve_format(path, format)
    if not path.exists():
        raise FileSystemError(
            f"Catalog not found: {path}",
            path=path,
            code=ErrorCode.FILE_NOT_FOUND,
            hint="Check the --catalog path, or pass --fix to create a new catalog.",
        )
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FileSystemError(f"Cannot read catalog {path}: {e.strerror or e}", path=path) from e

    catalog = fmt.parse(data, path=path, source_locale=source_locale)
    logger.info("Loaded %d entries from %s (%s)", len(catalog), path, fmt.name)
    return catalog


def new_catalog(
    path: str | Path,
    format: str | CatalogFormat | None = None,
    source_locale: str | None = None,
) -> Catalog:
    """Empty catalog that will be written to ``path``."""
    fmt = resolve_format(path, format)
    return Catalog(source_locale=source_locale, format_name=fmt.name, path=str(path))


def dump_catalog(catalog: Catalog, format: str | CatalogFormat | None = None) -> bytes:
    """Serialize ``catalog`` in memory."""
    fmt = resolve_format(catalog.path or "", format or catalog.format_name)
    try:
        return fmt.serialize(catalog)
    except (TypeError, ValueError) as e:
        raise CatalogFormatError(
            f"Cannot serialize catalog {catalog.path or ''}: {e}".strip(),
            path=catalog.path,
        ) from e


def save_catalog(
    catalog: Catalog,
    path: str | Path | None = None,
    format: str | CatalogFormat | None = None,
    backup: bool = False,
) -> AtomicOperation:
    """Write ``catalog`` to ``path`` atomically.

    The whole document is serialized before the target is touched, so a
    serialization failure leaves the existing file as it was.
    """
    target = Path(path or catalog.path or "")
    if not str(target) or target == Path("."):
        raise FileSystemError("No catalog path to write to", path="", code=ErrorCode.FILE_NOT_WRITABLE)

    payload = dump_catalog(catalog, format)
    try:
        result = atomic_write(target, payload, create_backup=backup)
    except OSError as e:
        raise FileSystemError(
            f"Cannot write catalog {target}: {e.strerror or e}",
            path=target,
            code=ErrorCode.FILE_NOT_WRITABLE,
        ) from e
    logger.info("Wrote %d bytes to %s", result.bytes_written, target)
    return result
