"""Extraction rules.

A rule pairs a set of file suffixes with one or more text patterns that
denote a localization call. Each pattern has exactly one capturing group: the
raw message text or key. Rules are pure: they map file text to a sequence of
raw matches and keep no state between files.

New rule types can be registered at runtime:

    >>> register_rule(ExtractionRule(
    ...     name="dart",
    ...     suffixes=(".dart",),
    ...     patterns=(r"\\.tr\\(\\s*'((?:[^'\\\\]|\\\\.)*)'",),
    ... ))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator

from localecheck.errors import ConfigurationError

# Double- and single-quoted literal bodies with backslash escapes.
_DQ = r'"((?:[^"\\\n]|\\.)*)"'
_SQ = r"'((?:[^'\\\n]|\\.)*)'"
_ANYQ = r"""(["'`])((?:(?!\1)[^\\\n]|\\.)*)\1"""


@dataclass(frozen=True)
class RawMatch:
    """One pattern hit inside a file."""

    offset: int
    text: str
    pattern: str


@dataclass(frozen=True)
class ExtractionRule:
    """A (suffix matcher, pattern set) pair.

    Attributes:
        name: Rule name, used in warnings and reports
        suffixes: File suffixes handled by this rule (with leading dot)
        patterns: Regular expressions; the last capturing group is the text
        decode_escapes: Decode backslash escapes in captured literals
    """

    name: str
    suffixes: tuple[str, ...]
    patterns: tuple[str, ...]
    decode_escapes: bool = True
    _compiled: tuple[re.Pattern[str], ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        if not self.suffixes:
            raise ConfigurationError(f"Rule {self.name!r} has no file suffixes")
        if not self.patterns:
            raise ConfigurationError(f"Rule {self.name!r} has no patterns")
        compiled = []
        for pattern in self.patterns:
            try:
                regex = re.compile(pattern, re.MULTILINE)
            except re.error as e:
                raise ConfigurationError(
                    f"Rule {self.name!r} has an invalid pattern {pattern!r}: {e}"
                ) from e
            if regex.groups < 1:
                raise ConfigurationError(
                    f"Rule {self.name!r} pattern {pattern!r} has no capturing group"
                )
            compiled.append(regex)
        object.__setattr__(self, "suffixes", tuple(s.lower() for s in self.suffixes))
        object.__setattr__(self, "_compiled", tuple(compiled))

    def handles(self, filename: str) -> bool:
        return filename.lower().endswith(self.suffixes)

    def apply(self, text: str) -> Iterator[RawMatch]:
        """Yield every raw match of every pattern in ``text``."""
        for regex in self._compiled:
            for match in regex.finditer(text):
                captured = match.group(regex.groups)
                if captured is None or not captured.strip():
                    continue
                yield RawMatch(offset=match.start(), text=captured, pattern=regex.pattern)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractionRule":
        """Build a custom rule from configuration data."""
        try:
            name = data["name"]
            suffixes = data["suffixes"]
            patterns = data["patterns"]
        except KeyError as e:
            raise ConfigurationError(f"Custom rule is missing field {e.args[0]!r}") from e
        if isinstance(suffixes, str):
            suffixes = [suffixes]
        if isinstance(patterns, str):
            patterns = [patterns]
        return cls(
            name=str(name),
            suffixes=tuple(s if s.startswith(".") else f".{s}" for s in suffixes),
            patterns=tuple(patterns),
            decode_escapes=bool(data.get("decode_escapes", True)),
        )


SWIFT_RULE = ExtractionRule(
    name="swift",
    suffixes=(".swift",),
    patterns=(
        r"\bText\(\s*" + _DQ,
        r"\bString\(\s*localized:\s*" + _DQ,
        r"\bNSLocalizedString\(\s*" + _DQ,
        r"\bLocalizedStringKey\(\s*" + _DQ,
        r"\bLocalizedStringResource\(\s*" + _DQ,
        r"\bButton\(\s*" + _DQ,
        r"\bLabel\(\s*" + _DQ,
        r"\bToggle\(\s*" + _DQ,
        r"\.navigationTitle\(\s*" + _DQ,
    ),
)

JAVASCRIPT_RULE = ExtractionRule(
    name="javascript",
    suffixes=(".js", ".jsx", ".mjs", ".ts", ".tsx", ".vue", ".svelte"),
    patterns=(
        r"(?<![\w$])\$?t\(\s*" + _ANYQ,
        r"\bi18nKey=" + _ANYQ,
    ),
)

PYTHON_RULE = ExtractionRule(
    name="python",
    suffixes=(".py",),
    patterns=(
        r"(?<![\w.])_\(\s*[rbuf]?" + _DQ,
        r"(?<![\w.])_\(\s*[rbuf]?" + _SQ,
        r"\b(?:gettext|gettext_lazy|ugettext|ngettext|ngettext_lazy)\(\s*" + _DQ,
        r"\b(?:gettext|gettext_lazy|ugettext|ngettext|ngettext_lazy)\(\s*" + _SQ,
        r"\bpgettext(?:_lazy)?\(\s*" + _DQ + r"\s*,\s*" + _DQ,
    ),
)

KOTLIN_RULE = ExtractionRule(
    name="kotlin",
    suffixes=(".kt", ".java"),
    patterns=(
        r"\bstringResource\(\s*R\.string\.(\w+)",
        r"\bgetString\(\s*R\.string\.(\w+)",
    ),
    decode_escapes=False,
)

SHIPPED_RULES = (SWIFT_RULE, JAVASCRIPT_RULE, PYTHON_RULE, KOTLIN_RULE)

# Registry of built-in and runtime-registered rules, keyed by name
_rule_registry: dict[str, ExtractionRule] = {rule.name: rule for rule in SHIPPED_RULES}


def register_rule(rule: ExtractionRule) -> ExtractionRule:
    """Register (or replace) a rule under its name."""
    _rule_registry[rule.name] = rule
    return rule


def get_rule(name: str) -> ExtractionRule:
    """Look up a registered rule by name."""
    try:
        return _rule_registry[name]
    except KeyError:
        available = ", ".join(sorted(_rule_registry))
        raise ConfigurationError(
            f"Unknown extraction rule: {name!r}",
            hint=f"Available rules: {available}",
        ) from None


def list_rules() -> list[str]:
    return sorted(_rule_registry)


def builtin_rules() -> list[ExtractionRule]:
    return [_rule_registry[name] for name in list_rules()]


def is_shipped(rule: ExtractionRule) -> bool:
    """True for the rules that come with the package, unmodified."""
    return rule in SHIPPED_RULES
