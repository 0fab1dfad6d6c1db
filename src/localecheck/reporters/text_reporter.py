"""Human-readable report renderer using Rich."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from localecheck.reporters.base import BaseReporter, RenderError, ReporterConfig
from localecheck.types import AuditCategory

if TYPE_CHECKING:
    from localecheck.reconcile import AuditReport

_CATEGORY_STYLES = {
    AuditCategory.MISSING_FROM_CATALOG: "red",
    AuditCategory.MISSING_TRANSLATION: "yellow",
    AuditCategory.STALE: "magenta",
}


@dataclass
class TextReporterConfig(ReporterConfig):
    """Configuration for the text reporter.

    Attributes:
        color: Whether to emit ANSI styles
        width: Console width (None for auto)
        show_header: Whether to show the header panel
        max_references: Maximum references listed per key (None for all)
    """

    color: bool = False
    width: int | None = None
    show_header: bool = True
    max_references: int | None = None


class TextReporter(BaseReporter[TextReporterConfig]):
    """Render an audit report as grouped text.

    Each category gets a ``<count> <label>`` heading followed by one
    ``file:line — key`` line per reference. Empty categories still print
    their heading, e.g. ``0 stale keys``.
    """

    name = "text"
    file_extension = ".txt"

    @classmethod
    def _default_config(cls) -> TextReporterConfig:
        return TextReporterConfig()

    def _create_console(self) -> Console:
        return Console(
            force_terminal=self._config.color,
            no_color=not self._config.color,
            width=self._config.width or 200,
            record=True,
            file=StringIO(),
            highlight=False,
            soft_wrap=True,
        )

    def _render_header(self, console: Console, report: AuditReport) -> None:
        exit_code = report.exit_code(self._config.fail_on)
        header = Text()
        header.append("Target locale: ", style="dim")
        header.append(f"{report.target_locale}\n", style="cyan")
        header.append("Source locale: ", style="dim")
        header.append(f"{report.source_locale}\n", style="cyan")
        header.append("Status: ", style="dim")
        if exit_code:
            header.append(f"FAILED (exit code {exit_code})", style="bold red")
        else:
            header.append("PASSED", style="bold green")
        console.print(Panel(header, title=self._config.title, border_style="blue"))

    def _render_summary(self, console: Console, report: AuditReport) -> None:
        table = Table(title="Summary", show_header=False, box=None)
        table.add_column("Category", style="dim")
        table.add_column("Count", justify="right", style="bold")
        for category in AuditCategory:
            table.add_row(category.label.capitalize(), str(len(report.category(category))))
        table.add_row("Matched keys", str(len(report.matched)))
        console.print(table)

    def _render_category(self, console: Console, report: AuditReport, category: AuditCategory) -> None:
        keys = report.category(category)
        style = _CATEGORY_STYLES[category] if keys else "green"
        console.print()
        console.print(Text(f"{len(keys)} {category.label}", style=f"bold {style}"))

        limit = self._config.max_references
        for key in keys:
            references = report.references_for(key)
            if category == AuditCategory.STALE or not references:
                console.print(Text(f"  {report.raw_key(key)}"))
                continue
            shown = references if limit is None else references[:limit]
            for ref in shown:
                console.print(Text(f"  {ref.location} — {key}"))
            if len(shown) < len(references):
                console.print(Text(f"  ... {len(references) - len(shown)} more", style="dim"))

    def _render_notes(self, console: Console, report: AuditReport) -> None:
        if self._config.include_warnings and report.warnings:
            console.print()
            console.print(Text(f"{len(report.warnings)} warnings", style="bold yellow"))
            for warning in report.warnings:
                console.print(Text(f"  {warning}"))
        if self._config.include_advisories and report.advisories:
            console.print()
            console.print(Text(f"{len(report.advisories)} advisories", style="bold cyan"))
            for advisory in report.advisories:
                console.print(Text(f"  {advisory}"))

    def render(self, report: AuditReport) -> str:
        try:
            console = self._create_console()
            if self._config.show_header:
                self._render_header(console, report)
                self._render_summary(console, report)
            for category in AuditCategory:
                self._render_category(console, report, category)
            self._render_notes(console, report)
            return console.export_text(clear=True, styles=self._config.color)
        except Exception as e:
            raise RenderError(f"Failed to render text report: {e}") from e
