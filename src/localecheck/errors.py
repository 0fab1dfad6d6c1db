"""Error types for localecheck.

Fatal conditions are exceptions derived from :class:`LocaleCheckError`; each
carries an :class:`ErrorCode` that doubles as the process exit code. Non-fatal
conditions are collected as :class:`AuditWarning` records and surfaced
alongside the report.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from localecheck.types import WarningKind


class ErrorCode(Enum):
    """Exit codes for fatal errors.

    Codes below 8 are reserved for audit category flags (1, 2 and 4); every
    fatal error exits with 8 or higher.
    """

    # General errors (8-9)
    GENERAL_ERROR = 8

    # File errors (10-19)
    FILE_NOT_FOUND = 10
    FILE_NOT_READABLE = 11
    FILE_NOT_WRITABLE = 12
    INVALID_CATALOG_FORMAT = 13

    # Argument errors (20-29)
    INVALID_LOCALE = 20

    # Configuration errors (30-39)
    CONFIG_NOT_FOUND = 30
    CONFIG_INVALID = 31


class LocaleCheckError(Exception):
    """Base exception for fatal localecheck errors.

    Attributes:
        message: One-line diagnostic naming the offending path or value
        code: Error code
        details: Additional error details
        hint: Helpful hint for resolution
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.hint = hint

    def __str__(self) -> str:
        return self.message


class FileSystemError(LocaleCheckError):
    """The source root or a catalog path cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: Path | str,
        code: ErrorCode = ErrorCode.FILE_NOT_READABLE,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details={"path": str(path)},
            hint=hint,
        )
        self.path = path


class CatalogFormatError(LocaleCheckError):
    """The catalog does not parse as valid structured data."""

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_CATALOG_FORMAT,
            details={"path": str(path) if path else None},
            hint=hint,
        )
        self.path = path


class InvalidLocaleError(LocaleCheckError):
    """A locale argument fails the BCP-47 syntactic check."""

    def __init__(self, locale: str, hint: str | None = None) -> None:
        super().__init__(
            message=f"Invalid locale code: {locale!r}",
            code=ErrorCode.INVALID_LOCALE,
            details={"locale": locale},
            hint=hint or "Use a BCP-47 tag such as 'en', 'es-MX' or 'zh-Hans'.",
        )
        self.locale = locale


class ConfigurationError(LocaleCheckError):
    """The configuration file or an option value is invalid."""

    def __init__(
        self,
        message: str,
        config_path: Path | str | None = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details={"config_path": str(config_path) if config_path else None},
            hint=hint or "Check the configuration file format and values.",
        )
        self.config_path = config_path


@dataclass(frozen=True)
class AuditWarning:
    """A non-fatal condition observed during a run."""

    kind: WarningKind
    message: str
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "path": self.path}

    def __str__(self) -> str:
        if self.path:
            return f"[{self.kind.value}] {self.path}: {self.message}"
        return f"[{self.kind.value}] {self.message}"
