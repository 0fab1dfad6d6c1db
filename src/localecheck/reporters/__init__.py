"""Audit report renderers."""

from localecheck.reporters.base import (
    BaseReporter,
    RenderError,
    ReporterConfig,
    ReporterError,
    WriteError,
)
from localecheck.reporters.factory import (
    get_reporter,
    list_available_formats,
    register_reporter,
)

__all__ = [
    "BaseReporter",
    "RenderError",
    "ReporterConfig",
    "ReporterError",
    "WriteError",
    "get_reporter",
    "list_available_formats",
    "register_reporter",
]
