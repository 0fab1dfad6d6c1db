"""Configuration loading.

Settings are layered, lowest priority first:

1. Defaults on :class:`AuditConfig`
2. A configuration file (``localecheck.yaml``, ``.localecheck.yaml``,
   ``localecheck.json`` or ``localecheck.toml`` in the working directory,
   or an explicit path)
3. ``LOCALECHECK_<FIELD>`` environment variables
4. Explicit overrides (command-line options)

Example ``localecheck.yaml``::

    root: Sources
    catalog: Resources/Localizable.xcstrings
    locale: de
    fail_on: [missing_from_catalog, missing_translation]
    exclude: [Generated, "*.generated.swift"]
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from localecheck.errors import ConfigurationError, ErrorCode
from localecheck.extractor.rules import ExtractionRule, get_rule
from localecheck.extractor.scanner import DEFAULT_EXCLUDES
from localecheck.types import AuditCategory

logger = logging.getLogger(__name__)

ENV_PREFIX = "LOCALECHECK_"
CONFIG_FILENAMES = (
    "localecheck.yaml",
    ".localecheck.yaml",
    "localecheck.yml",
    "localecheck.json",
    "localecheck.toml",
)

_LIST_FIELDS = frozenset({"enabled_rules", "exclude", "fail_on"})
_BOOL_FIELDS = frozenset({"fix", "backup"})
_ENV_FIELDS = (
    "root",
    "catalog",
    "locale",
    "source_locale",
    "format",
    "enabled_rules",
    "exclude",
    "fail_on",
    "output_format",
    "fix",
    "backup",
)


@dataclass
class AuditConfig:
    """Settings for one audit run.

    Attributes:
        root: Source tree to scan
        catalog: Catalog file path
        locale: Target locale to check for missing translations
        source_locale: Source locale; taken from the catalog when unset, else ``en``
        format: Catalog format name; inferred from the catalog suffix when unset
        rules: Custom extraction rules (``name``, ``suffixes``, ``patterns``)
        enabled_rules: Rule names to apply; built-in rules are auto-selected when unset
        exclude: Glob patterns for directories and files to skip
        fail_on: Categories that make the run fail; all when unset
        glossary: Term -> {locale: expected translation}
        output_format: Report format (``text`` or ``json``)
        fix: Append placeholder entries for keys missing from the catalog
        backup: Keep a ``.bak`` copy of the catalog when writing it
    """

    root: Path = field(default_factory=lambda: Path("."))
    catalog: Path | None = None
    locale: str | None = None
    source_locale: str | None = None
    format: str | None = None
    rules: list[dict[str, Any]] = field(default_factory=list)
    enabled_rules: list[str] | None = None
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    fail_on: list[str] | None = None
    glossary: dict[str, dict[str, str]] = field(default_factory=dict)
    output_format: str = "text"
    fix: bool = False
    backup: bool = False
    config_path: Path | None = field(default=None, compare=False)

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)} - {"config_path"}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], config_path: Path | None = None) -> "AuditConfig":
        """Build a config from plain data, validating keys and value types."""
        unknown = sorted(set(data) - cls.field_names())
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration key(s): {', '.join(unknown)}",
                config_path=config_path,
                hint=f"Valid keys: {', '.join(sorted(cls.field_names()))}",
            )
        config = cls(config_path=config_path)
        for key, value in data.items():
            if value is None:
                continue
            setattr(config, key, _coerce(key, value, config_path))
        config.validate()
        return config

    def merged(self, overrides: Mapping[str, Any]) -> "AuditConfig":
        """Copy of this config with non-None ``overrides`` applied."""
        data = {name: getattr(self, name) for name in self.field_names()}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return AuditConfig.from_dict(data, config_path=self.config_path)

    def validate(self) -> None:
        if self.fail_on is not None:
            self.fail_on_categories()
        for rule in self.rules:
            if not isinstance(rule, Mapping):
                raise ConfigurationError(
                    "Each entry under 'rules' must be a mapping", config_path=self.config_path
                )
        for term, translations in self.glossary.items():
            if not isinstance(translations, Mapping):
                raise ConfigurationError(
                    f"Glossary term {term!r} must map locale codes to translations",
                    config_path=self.config_path,
                )

    def fail_on_categories(self) -> list[AuditCategory] | None:
        if self.fail_on is None:
            return None
        categories = []
        for value in self.fail_on:
            try:
                categories.append(AuditCategory.parse(value))
            except ValueError:
                raise ConfigurationError(
                    f"Unknown audit category in fail_on: {value!r}",
                    config_path=self.config_path,
                    hint=f"Valid categories: {', '.join(c.value for c in AuditCategory)}",
                ) from None
        return categories

    def custom_rules(self) -> list[ExtractionRule]:
        return [ExtractionRule.from_dict(dict(rule)) for rule in self.rules]

    def selected_rules(self) -> tuple[list[ExtractionRule] | None, list[ExtractionRule]]:
        """(explicit rules or None for auto-selection, extra custom rules)."""
        custom = {rule.name: rule for rule in self.custom_rules()}
        if self.enabled_rules is None:
            return None, list(custom.values())
        explicit = [custom[name] if name in custom else get_rule(name) for name in self.enabled_rules]
        return explicit, []


def _coerce(key: str, value: Any, config_path: Path | None) -> Any:
    if key in ("root", "catalog"):
        return Path(value).expanduser()
    if key in _LIST_FIELDS:
        if isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError(f"'{key}' must be a list", config_path=config_path)
        return [str(item) for item in value]
    if key in _BOOL_FIELDS:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1", "on")
        return bool(value)
    if key == "rules":
        if not isinstance(value, list):
            raise ConfigurationError("'rules' must be a list of rule mappings", config_path=config_path)
        return list(value)
    if key == "glossary":
        if not isinstance(value, Mapping):
            raise ConfigurationError("'glossary' must be a mapping", config_path=config_path)
        return {str(term): dict(translations) if isinstance(translations, Mapping) else translations
                for term, translations in value.items()}
    return str(value)


def find_config_file(directory: str | Path = ".") -> Path | None:
    """First configuration file found in ``directory``."""
    directory = Path(directory)
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Parse a YAML, JSON or TOML configuration file into a mapping.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            config_path=path,
            code=ErrorCode.CONFIG_NOT_FOUND,
            hint="Run 'localecheck init' to create one.",
        )

    suffix = path.suffix.lower()
    try:
        content = path.read_text(encoding="utf-8")
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        elif suffix == ".json":
            data = json.loads(content)
        elif suffix == ".toml":
            data = tomllib.loads(content)
        else:
            raise ConfigurationError(
                f"Unsupported configuration file format: {suffix or path.name}",
                config_path=path,
                hint="Use a .yaml, .json or .toml file.",
            )
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}", config_path=path) from e
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        message = " ".join(str(e).split())
        raise ConfigurationError(f"Failed to parse {path}: {message}", config_path=path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must contain a mapping at the top level",
            config_path=path,
        )
    # [tool.localecheck] tables are accepted in TOML files
    if suffix == ".toml" and "tool" in data:
        data = data["tool"].get("localecheck", {})
    return data


def load_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Settings from ``LOCALECHECK_<FIELD>`` environment variables."""
    environ = os.environ if environ is None else environ
    result: dict[str, Any] = {}
    for name in _ENV_FIELDS:
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            result[name] = value
    return result


def load_config(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: str | Path = ".",
) -> AuditConfig:
    """Resolve the effective configuration (file < environment < overrides)."""
    path = Path(config_path) if config_path else find_config_file(cwd)
    data: dict[str, Any] = {}
    if path is not None:
        data.update(load_config_file(path))
        logger.debug("Loaded configuration from %s", path)

    data.update(load_env(environ))
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return AuditConfig.from_dict(data, config_path=path)


SAMPLE_CONFIG: dict[str, Any] = {
    "root": ".",
    "catalog": "Localizable.xcstrings",
    "locale": "de",
    "source_locale": "en",
    "exclude": list(DEFAULT_EXCLUDES),
    "fail_on": [c.value for c in AuditCategory],
    "output_format": "text",
    "rules": [
        {
            "name": "dart",
            "suffixes": [".dart"],
            "patterns": [r"""\.tr\(\s*'((?:[^'\\\n]|\\.)*)'"""],
        }
    ],
    "glossary": {"Workspace": {"de": "Arbeitsbereich"}},
}


def sample_config(format: str = "yaml") -> str:
    """Render :data:`SAMPLE_CONFIG` as YAML or JSON."""
    if format == "yaml":
        return yaml.safe_dump(SAMPLE_CONFIG, sort_keys=False, allow_unicode=True, default_flow_style=False)
    if format == "json":
        return json.dumps(SAMPLE_CONFIG, indent=2, ensure_ascii=False) + "\n"
    raise ConfigurationError(f"Unsupported sample configuration format: {format!r}", hint="Use 'yaml' or 'json'.")


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Send log records to stderr through Rich.

    Warnings only by default; ``verbose`` enables INFO and ``debug`` enables
    DEBUG with tracebacks.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        rich_tracebacks=debug,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger("localecheck")
    for existing in list(package_logger.handlers):
        if isinstance(existing, RichHandler):
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
