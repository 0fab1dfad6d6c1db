"""Tests for locale tag parsing and validation."""

import pytest

from localecheck.errors import ErrorCode, InvalidLocaleError
from localecheck.locale import LocaleInfo, canonical_locale, is_valid_locale, validate_locale


class TestValidateLocale:
    """Tests for the BCP-47 syntactic check."""

    @pytest.mark.parametrize(
        "tag",
        [
            "en",
            "ru",
            "es-MX",
            "es-419",
            "zh-Hans",
            "sr-Latn-RS",
            "pt_BR",
            "de-CH-1996",
            "en-US-u-ca-gregory",
            "x-pseudo",
            "yue",
        ],
    )
    def test_valid(self, tag):
        assert is_valid_locale(tag)
        validate_locale(tag)

    @pytest.mark.parametrize("tag", ["xx-??", "", "e", "en-", "en--US", "12", "en US", "toolonglanguage"])
    def test_invalid(self, tag):
        assert not is_valid_locale(tag)
        with pytest.raises(InvalidLocaleError):
            validate_locale(tag)

    def test_error_names_offending_value(self):
        with pytest.raises(InvalidLocaleError) as exc_info:
            validate_locale("xx-??")

        assert exc_info.value.code == ErrorCode.INVALID_LOCALE
        assert "'xx-??'" in str(exc_info.value)
        assert exc_info.value.hint


class TestLocaleInfo:
    """Tests for LocaleInfo."""

    def test_parse_components(self):
        info = LocaleInfo.parse("sr-Latn-RS")

        assert info.language == "sr"
        assert info.script == "Latn"
        assert info.region == "RS"

    @pytest.mark.parametrize(
        "tag,canonical",
        [
            ("EN", "en"),
            ("pt_br", "pt-BR"),
            ("zh-hans-cn", "zh-Hans-CN"),
            ("es-419", "es-419"),
        ],
    )
    def test_canonical_tag(self, tag, canonical):
        assert LocaleInfo.parse(tag).tag == canonical
        assert canonical_locale(tag) == canonical

    def test_canonical_locale_is_lenient(self):
        assert canonical_locale("not a locale") == "not a locale"
