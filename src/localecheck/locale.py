"""Locale tag parsing and BCP-47 syntactic validation.

Supports formats:
- Simple: "en", "ru"
- With region: "en-US", "es-MX", "es-419", "pt_BR"
- With script: "zh-Hans", "zh-Hant", "sr-Latn-RS"
- With variants/extensions: "de-CH-1996", "en-US-u-ca-gregory", "x-pseudo"

Underscores are accepted as separators (Android and gettext write "pt_BR")
and canonicalized to hyphens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from localecheck.errors import InvalidLocaleError

_LANGTAG = re.compile(
    r"""
    ^(?:
        (?P<language>[a-z]{2,3}(?:-[a-z]{3}){0,3}|[a-z]{4,8})
        (?:-(?P<script>[a-z]{4}))?
        (?:-(?P<region>[a-z]{2}|\d{3}))?
        (?P<variants>(?:-(?:[a-z\d]{5,8}|\d[a-z\d]{3}))*)
        (?P<extensions>(?:-[a-wyz\d](?:-[a-z\d]{2,8})+)*)
        (?:-(?P<private>x(?:-[a-z\d]{1,8})+))?
      |
        (?P<private_only>x(?:-[a-z\d]{1,8})+)
    )$
    """,
    re.IGNORECASE | re.VERBOSE,
)


@dataclass(frozen=True)
class LocaleInfo:
    """Parsed locale information.

    Attributes:
        language: ISO 639 language code (e.g., "en", "yue"), optionally with extlang
        script: ISO 15924 script code (e.g., "Latn", "Hans")
        region: ISO 3166-1 or UN M.49 region code (e.g., "US", "419")
        variants: Variant, extension and private-use subtags, lowercased
    """

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()

    @property
    def tag(self) -> str:
        """Get the canonical BCP 47 language tag."""
        parts = [self.language] if self.language else []
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        return "-".join(parts)

    @classmethod
    def parse(cls, tag: str) -> "LocaleInfo":
        """Parse a locale tag.

        Raises:
            InvalidLocaleError: If the tag is not syntactically valid BCP-47.
        """
        if not isinstance(tag, str):
            raise InvalidLocaleError(repr(tag))
        candidate = tag.strip().replace("_", "-")
        match = _LANGTAG.match(candidate)
        if not candidate or match is None:
            raise InvalidLocaleError(tag)

        if match.group("private_only"):
            return cls(language="", variants=(match.group("private_only").lower(),))

        variants: list[str] = []
        for group in ("variants", "extensions"):
            value = match.group(group)
            if value:
                variants.extend(part.lower() for part in value.strip("-").split("-"))
        if match.group("private"):
            variants.append(match.group("private").lower())

        script = match.group("script")
        region = match.group("region")
        return cls(
            language=match.group("language").lower(),
            script=script.capitalize() if script else None,
            region=region.upper() if region else None,
            variants=tuple(variants),
        )

    def __str__(self) -> str:
        return self.tag


def is_valid_locale(tag: str) -> bool:
    """Return True if ``tag`` passes the BCP-47 syntactic check."""
    try:
        LocaleInfo.parse(tag)
    except InvalidLocaleError:
        return False
    return True


def validate_locale(tag: str) -> LocaleInfo:
    """Parse ``tag`` or raise :class:`InvalidLocaleError`."""
    return LocaleInfo.parse(tag)


@lru_cache(maxsize=512)
def canonical_locale(tag: str) -> str:
    """Canonical form of a catalog locale code.

    Catalogs are user-editable, so codes that fail validation are returned
    unchanged instead of raising.
    """
    try:
        return LocaleInfo.parse(tag).tag
    except InvalidLocaleError:
        return tag
