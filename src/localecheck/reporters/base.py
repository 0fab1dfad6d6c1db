"""Base classes for audit report renderers.

Reporters turn an :class:`~localecheck.reconcile.AuditReport` into text for
terminals and logs or into structured documents for CI gating.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from localecheck.types import AuditCategory

if TYPE_CHECKING:
    from localecheck.reconcile import AuditReport


class ReporterError(Exception):
    """Base exception for all reporter-related errors."""


class RenderError(ReporterError):
    """Raised when rendering a report fails."""


class WriteError(ReporterError):
    """Raised when writing a report to file fails."""


@dataclass
class ReporterConfig:
    """Base configuration for all reporters.

    Attributes:
        output_path: Optional path to write the report to
        title: Title for the report
        fail_on: Categories that contribute to the reported exit code
        include_warnings: Whether to include non-fatal warnings
        include_advisories: Whether to include advisory findings
    """

    output_path: str | Path | None = None
    title: str = "Locale Audit"
    fail_on: list[AuditCategory] | None = None
    include_warnings: bool = True
    include_advisories: bool = True

    def get_output_path(self) -> Path | None:
        if self.output_path is None:
            return None
        return Path(self.output_path)


ConfigT = TypeVar("ConfigT", bound=ReporterConfig)


class BaseReporter(ABC, Generic[ConfigT]):
    """Abstract base class for audit reporters.

    Example:
        >>> class CountReporter(BaseReporter[ReporterConfig]):
        ...     @classmethod
        ...     def _default_config(cls):
        ...         return ReporterConfig()
        ...     def render(self, report):
        ...         return str(report.counts())
    """

    name: str = "base"
    file_extension: str = ".txt"

    def __init__(self, config: ConfigT | None = None, **kwargs: Any) -> None:
        self._config = config or self._default_config()
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)

    @classmethod
    @abstractmethod
    def _default_config(cls) -> ConfigT:
        """Create default configuration for this reporter type."""

    @property
    def config(self) -> ConfigT:
        return self._config

    @abstractmethod
    def render(self, report: AuditReport) -> str:
        """Render ``report`` to a string.

        Raises:
            RenderError: If rendering fails.
        """

    def write(self, report: AuditReport, path: str | Path | None = None) -> Path:
        """Render ``report`` and write it to ``path`` (or ``config.output_path``).

        Raises:
            WriteError: If no path is given or writing fails.
        """
        output_path = Path(path) if path else self._config.get_output_path()
        if output_path is None:
            raise WriteError(
                "No output path specified. Either pass a path argument "
                "or set output_path in the reporter configuration."
            )

        content = self.render(report)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise WriteError(f"Failed to write report to {output_path}: {e}") from e
        return output_path
