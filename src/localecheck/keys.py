"""Translation key normalization.

Interpolation syntax differs between platforms: Swift writes ``\\(count)``,
Apple and C catalogs write ``%@`` / ``%lld`` / ``%1$@``, Python writes
``%(name)s`` or ``{name}``, i18next writes ``{{name}}`` and JavaScript
template literals write ``${name}``. Two occurrences of the same message that
differ only in variable names must map to the same key, so every placeholder
is collapsed into the brace-index form ``{N}``, numbered by order of
appearance.

Normalization is deterministic and idempotent: ``{N}`` tokens re-number to
themselves, and the literal-percent escape ``%%`` is never touched.
"""

from __future__ import annotations

import re

# ``${N}`` and ``{{N}}`` are left to the brace branch so normalized keys stay fixed points
_PLACEHOLDER = re.compile(
    r"""
      (?P<escape>%%)
    | (?P<swift>\\\((?:[^()]|\((?:[^()]|\([^()]*\))*\))*\))
    | (?P<mustache>\{\{(?!\s*\d+\s*\}\})\s*[^{}]+?\s*\}\})
    | (?P<template>\$\{(?!\d+\})[^{}]*\})
    | (?P<brace>\{(?:\s*(?:\d+|[A-Za-z_][\w.]*)\s*(?::[^{}]*)?)?\})
    | (?P<pyformat>%\([^)]+\)[-#0+]*\d*(?:\.\d+)?[diouxXeEfFgGcrs])
    | (?P<printf>%(?:\d+\$)?[-#0+']*(?:\d+|\*)?(?:\.(?:\d+|\*))?(?:hh|h|ll|l|q|L|z|j|t)?[@diuxXfFeEgGcs])
    """,
    re.VERBOSE,
)

_CANONICAL = re.compile(r"\{(\d+)\}")

_ESCAPES = {
    '"': '"',
    "'": "'",
    "`": "`",
    "\\": "\\",
    "n": "\n",
    "t": "\t",
    "r": "\r",
}
_ESCAPE_SEQUENCE = re.compile(r"\\([\"'`\\ntr])")

#: Placeholder styles understood by :func:`render_key`.
PLACEHOLDER_STYLES = ("brace", "printf")


def normalize_key(text: str) -> str:
    """Collapse every interpolation placeholder in ``text`` into ``{N}``.

    Example:
        >>> normalize_key("Welcome, {name}!")
        'Welcome, {0}!'
        >>> normalize_key("Hi \\\\(user.name), you have %lld items")
        'Hi {0}, you have {1} items'
    """
    counter = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal counter
        if match.group("escape"):
            return match.group(0)
        token = f"{{{counter}}}"
        counter += 1
        return token

    return _PLACEHOLDER.sub(_replace, text)


def find_placeholders(text: str) -> list[str]:
    """Return the raw placeholder tokens in ``text``, in order."""
    return [m.group(0) for m in _PLACEHOLDER.finditer(text or "") if not m.group("escape")]


def count_placeholders(text: str) -> int:
    return len(find_placeholders(text))


def render_key(key: str, style: str = "brace") -> str:
    """Render a normalized key in a catalog's native placeholder style.

    ``brace`` keeps ``{N}``; ``printf`` renders each placeholder as ``%@``,
    the form Xcode writes into String Catalog keys.
    """
    if style == "brace":
        return key
    if style == "printf":
        return _CANONICAL.sub("%@", key)
    raise ValueError(f"Unknown placeholder style: {style!r}. Available: {', '.join(PLACEHOLDER_STYLES)}")


def unescape_literal(text: str) -> str:
    """Decode the backslash escapes of a captured string literal.

    Only quote, backslash, newline, tab and carriage-return escapes are
    decoded; Swift's ``\\(`` interpolation opener is left intact.
    """
    return _ESCAPE_SEQUENCE.sub(lambda m: _ESCAPES[m.group(1)], text)
