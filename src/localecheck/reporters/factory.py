"""Reporter registry.

New reporter types can be registered at runtime:

    >>> @register_reporter("markdown")
    ... class MarkdownReporter(BaseReporter):
    ...     ...
"""

from __future__ import annotations

from typing import Any, Callable

from localecheck.reporters.base import BaseReporter, ReporterError

ReporterConstructor = Callable[..., BaseReporter[Any]]

# Registry of reporter constructors
_reporter_registry: dict[str, ReporterConstructor] = {}


def register_reporter(name: str) -> Callable[[ReporterConstructor], ReporterConstructor]:
    """Decorator to register a reporter type under ``name``."""

    def decorator(cls: ReporterConstructor) -> ReporterConstructor:
        _reporter_registry[name] = cls
        return cls

    return decorator


def get_reporter(format: str, **kwargs: Any) -> BaseReporter[Any]:
    """Create a reporter for ``format`` ("text", "json" or a registered name).

    Raises:
        ReporterError: If the format is unknown.
    """
    format = format.lower().strip()

    if format in _reporter_registry:
        return _reporter_registry[format](**kwargs)

    if format == "json":
        from localecheck.reporters.json_reporter import JSONReporter

        return JSONReporter(**kwargs)

    if format in ("text", "console"):
        from localecheck.reporters.text_reporter import TextReporter

        return TextReporter(**kwargs)

    raise ReporterError(
        f"Unknown reporter format: {format}. "
        f"Available formats: {', '.join(list_available_formats())}"
    )


def list_available_formats() -> list[str]:
    return sorted({"json", "text", *_reporter_registry})
