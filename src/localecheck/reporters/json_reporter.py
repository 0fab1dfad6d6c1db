"""JSON report renderer for CI pipelines."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from localecheck.reporters.base import BaseReporter, RenderError, ReporterConfig

if TYPE_CHECKING:
    from localecheck.reconcile import AuditReport


@dataclass
class JSONReporterConfig(ReporterConfig):
    """Configuration for the JSON reporter.

    Attributes:
        indent: Number of spaces for indentation (None for compact)
        sort_keys: Whether to sort object keys
        ensure_ascii: Whether to escape non-ASCII characters
        include_references: Whether to list source references per key
    """

    indent: int | None = 2
    sort_keys: bool = False
    ensure_ascii: bool = False
    include_references: bool = True


class JSONReporter(BaseReporter[JSONReporterConfig]):
    """Render an audit report as a JSON document.

    Every category is always present, so consumers can assert completeness.

    Example:
        >>> reporter = JSONReporter(indent=None)
        >>> data = json.loads(reporter.render(report))
        >>> data["summary"]["stale"]
        0
    """

    name = "json"
    file_extension = ".json"

    @classmethod
    def _default_config(cls) -> JSONReporterConfig:
        return JSONReporterConfig()

    def _prepare_data(self, report: AuditReport) -> dict[str, Any]:
        data = report.to_dict(fail_on=self._config.fail_on)
        if not self._config.include_references:
            for category in ("missing_from_catalog", "missing_translation", "stale"):
                for item in data[category]:
                    item.pop("references", None)
        if not self._config.include_warnings:
            data.pop("warnings")
        if not self._config.include_advisories:
            data.pop("advisories")
        return data

    def render(self, report: AuditReport) -> str:
        try:
            return json.dumps(
                self._prepare_data(report),
                indent=self._config.indent,
                sort_keys=self._config.sort_keys,
                ensure_ascii=self._config.ensure_ascii,
            )
        except (TypeError, ValueError) as e:
            raise RenderError(f"Failed to serialize report to JSON: {e}") from e
