"""Command-line interface for localecheck."""

import functools
import json
import logging
from pathlib import Path
from typing import Annotated, Any, Callable, Optional, TypeVar

import typer

from localecheck.api import audit, collect_references
from localecheck.config import configure_logging, load_config, sample_config
from localecheck.errors import ErrorCode, FileSystemError, LocaleCheckError
from localecheck.extractor.scanner import group_by_key
from localecheck.keys import PLACEHOLDER_STYLES, normalize_key, render_key, unescape_literal
from localecheck.reporters import ReporterError, get_reporter

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

app = typer.Typer(
    name="localecheck",
    help="Audit translation catalogs against the strings used in source code",
    add_completion=False,
)


def error_boundary(func: F) -> F:
    """Turn errors into a one-line diagnostic and a non-zero exit code.

    Stack traces are only logged at DEBUG level (``--debug``).
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except LocaleCheckError as e:
            logger.debug("Aborted", exc_info=True)
            typer.echo(typer.style(f"Error: {e.message}", fg="red"), err=True)
            if e.hint:
                typer.echo(typer.style(f"Hint: {e.hint}", fg="yellow"), err=True)
            raise typer.Exit(e.code.value)
        except ReporterError as e:
            logger.debug("Report failed", exc_info=True)
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.GENERAL_ERROR.value)
        except Exception as e:
            logger.debug("Unexpected error", exc_info=True)
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.GENERAL_ERROR.value)

    return wrapper  # type: ignore


def _split(values: Optional[list[str]]) -> Optional[list[str]]:
    """Accept both repeated options and comma-separated values."""
    if not values:
        return None
    return [item.strip() for value in values for item in value.split(",") if item.strip()]


RootOption = Annotated[
    Optional[Path],
    typer.Option("--root", help="Source tree to scan"),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Configuration file (default: localecheck.yaml in the working directory)"),
]
RuleOption = Annotated[
    Optional[list[str]],
    typer.Option("--rule", "-r", help="Extraction rule to apply (repeatable; default: auto-detect)"),
]
ExcludeOption = Annotated[
    Optional[list[str]],
    typer.Option("--exclude", help="Additional glob pattern to skip (repeatable)"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show progress logging")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Show debug logging and stack traces")]


@app.command(name="audit")
@error_boundary
def audit_cmd(
    root: RootOption = None,
    catalog: Annotated[
        Optional[Path],
        typer.Option("--catalog", help="Translation catalog file"),
    ] = None,
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Target locale to check (BCP-47, e.g. de or es-MX)"),
    ] = None,
    source_locale: Annotated[
        Optional[str],
        typer.Option("--source-locale", help="Source locale (default: from the catalog, else en)"),
    ] = None,
    catalog_format: Annotated[
        Optional[str],
        typer.Option("--catalog-format", help="Catalog format (xcstrings, json, yaml, po)"),
    ] = None,
    fix: Annotated[
        bool,
        typer.Option("--fix", help="Add untranslated entries for keys missing from the catalog"),
    ] = False,
    backup: Annotated[
        bool,
        typer.Option("--backup", help="Keep a .bak copy of the catalog when writing it"),
    ] = False,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Report format (text, json)"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the report to a file"),
    ] = None,
    config: ConfigOption = None,
    rule: RuleOption = None,
    exclude: ExcludeOption = None,
    fail_on: Annotated[
        Optional[list[str]],
        typer.Option(
            "--fail-on",
            help="Category that fails the run (repeatable): missing_from_catalog, missing_translation, stale",
        ),
    ] = None,
    verbose: VerboseOption = False,
    debug: DebugOption = False,
) -> None:
    """Audit a catalog against the source tree.

    Exit code 0 means every checked category is empty; otherwise bits are
    set per category (1 missing from catalog, 2 missing translation, 4 stale).
    """
    configure_logging(verbose=verbose, debug=debug)
    settings = load_config(
        config,
        overrides={
            "root": root,
            "catalog": catalog,
            "locale": locale,
            "source_locale": source_locale,
            "format": catalog_format,
            "output_format": format,
            "enabled_rules": _split(rule),
            "fail_on": _split(fail_on),
            "fix": fix or None,
            "backup": backup or None,
        },
    )
    if exclude:
        settings = settings.merged({"exclude": [*settings.exclude, *_split(exclude)]})

    result = audit(settings)
    reporter = get_reporter(settings.output_format, fail_on=settings.fail_on_categories())
    if output:
        reporter.write(result.report, output)
        typer.echo(f"Report written to {output}", err=True)
    else:
        typer.echo(reporter.render(result.report))

    if result.write is not None:
        typer.echo(
            f"Added {len(result.added)} entries to {result.write.path}",
            err=True,
        )
        if result.write.backup_path:
            typer.echo(f"Backup saved to {result.write.backup_path}", err=True)

    raise typer.Exit(result.exit_code(settings))


@app.command(name="keys")
@error_boundary
def keys_cmd(
    root: RootOption = None,
    config: ConfigOption = None,
    rule: RuleOption = None,
    exclude: ExcludeOption = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, json)"),
    ] = "text",
    verbose: VerboseOption = False,
    debug: DebugOption = False,
) -> None:
    """List the translation keys found in the source tree."""
    configure_logging(verbose=verbose, debug=debug)
    settings = load_config(config, overrides={"root": root, "enabled_rules": _split(rule)})
    if exclude:
        settings = settings.merged({"exclude": [*settings.exclude, *_split(exclude)]})

    references, warnings = collect_references(settings)
    grouped = group_by_key(references)

    if format == "json":
        data = {
            "root": str(settings.root),
            "keys": [
                {"key": key, "references": [ref.to_dict() for ref in refs]}
                for key, refs in grouped.items()
            ],
            "warnings": [w.to_dict() for w in warnings],
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    elif format == "text":
        for key, refs in grouped.items():
            typer.echo(key)
            for ref in refs:
                typer.echo(f"  {ref.location}")
        typer.echo(f"{len(grouped)} keys, {len(references)} references")
        for warning in warnings:
            typer.echo(typer.style(f"Warning: {warning}", fg="yellow"), err=True)
    else:
        typer.echo(f"Error: Unsupported format: {format}", err=True)
        raise typer.Exit(ErrorCode.GENERAL_ERROR.value)


@app.command(name="normalize")
@error_boundary
def normalize_cmd(
    text: Annotated[str, typer.Argument(help="Raw string as written in source code")],
    style: Annotated[
        str,
        typer.Option("--style", help=f"Placeholder style ({', '.join(PLACEHOLDER_STYLES)})"),
    ] = "brace",
    literal: Annotated[
        bool,
        typer.Option("--literal", help="Decode backslash escapes first, as for a source literal"),
    ] = False,
) -> None:
    """Print the normalized translation key for TEXT."""
    if literal:
        text = unescape_literal(text)
    typer.echo(render_key(normalize_key(text), style))


@app.command(name="init")
@error_boundary
def init_cmd(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Configuration file to create"),
    ] = Path("localecheck.yaml"),
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="File format (yaml, json; default: from the file name)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write a sample configuration file."""
    if format is None:
        format = "json" if output.suffix.lower() == ".json" else "yaml"
    content = sample_config(format)
    if output.exists() and not force:
        raise FileSystemError(
            f"File already exists: {output}",
            path=output,
            code=ErrorCode.FILE_NOT_WRITABLE,
            hint="Pass --force to overwrite it.",
        )
    try:
        output.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(
            f"Cannot write {output}: {e.strerror or e}",
            path=output,
            code=ErrorCode.FILE_NOT_WRITABLE,
        ) from e
    typer.echo(f"Configuration written to {output}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
