"""
Unit tests for configuration record parsing.
"""

import pytest

from txtweb.records import ConfigSyntaxError, SiteOptions, parse_parameters, parse_txtweb_config


class TestParseTxtwebConfig:
    """Tests for parse_txtweb_config."""

    def test_empty(self):
        assert parse_txtweb_config("") == {}
        assert parse_txtweb_config("   ") == {}

    def test_full_record(self):
        cfg = parse_txtweb_config(
            "html-wrap=true;html-align=center;html-max-width=400px;html-bg=red;html-fg=white"
        )
        assert cfg == {
            "html-wrap": "true",
            "html-align": "center",
            "html-max-width": "400px",
            "html-bg": "red",
            "html-fg": "white",
        }

    def test_keys_lowercased_values_preserved(self):
        assert parse_txtweb_config("HTML-BG=DarkRed") == {"html-bg": "DarkRed"}

    def test_whitespace_around_separators(self):
        cfg = parse_txtweb_config("  html-wrap = true ;  html-fg = #333 ")
        assert cfg == {"html-wrap": "true", "html-fg": "#333"}

    def test_quoted_values(self):
        cfg = parse_txtweb_config('content-type="text/html; charset=UTF-8"; html-bg=" navy "')
        assert cfg == {"content-type": "text/html; charset=UTF-8", "html-bg": "navy"}

    def test_quoted_escape(self):
        assert parse_txtweb_config(r'html-bg="a\"b"') == {"html-bg": 'a"b'}

    def test_empty_value_dropped(self):
        assert parse_txtweb_config('html-bg=""; html-fg=red') == {"html-fg": "red"}

    def test_trailing_semicolon(self):
        assert parse_txtweb_config("html-wrap=true;") == {"html-wrap": "true"}

    def test_unknown_keys_kept(self):
        assert parse_txtweb_config("foo=bar") == {"foo": "bar"}

    @pytest.mark.parametrize(
        "record",
        [
            "html-wrap",
            "html-wrap=",
            "=true",
            "html-wrap=true;;html-bg=red",
            'html-bg="unterminated',
            "content-type=text/html",
            "html-wrap=true html-bg=red",
        ],
    )
    def test_malformed_yields_empty(self, record):
        assert parse_txtweb_config(record) == {}

    def test_duplicate_key_with_other_value_is_malformed(self):
        assert parse_txtweb_config("html-bg=red; HTML-BG=blue") == {}

    def test_duplicate_key_with_same_value(self):
        assert parse_txtweb_config("html-wrap=true; html-bg=red; html-bg=red") == {"html-wrap": "true", "html-bg": "red"}

    def test_duplicate_key_quoted_same_value(self):
        assert parse_txtweb_config('html-bg=red; html-bg="red"') == {"html-bg": "red"}

    def test_extended_value(self):
        assert parse_txtweb_config("html-wrap=true; html-bg*=utf-8''%23fff") == {"html-wrap": "true", "html-bg": "#fff"}

    def test_extended_value_with_language(self):
        assert parse_txtweb_config("html-fg*=US-ASCII'en'dark%20red") == {"html-fg": "dark red"}

    def test_extended_value_unknown_charset_dropped(self):
        assert parse_txtweb_config("html-wrap=true; html-bg*=iso-8859-1''%23fff") == {"html-wrap": "true"}

    def test_extended_value_bad_escape_dropped(self):
        assert parse_txtweb_config("html-wrap=true; html-bg*=utf-8''%zz") == {"html-wrap": "true"}

    def test_continuations(self):
        assert parse_txtweb_config("html-bg*0=na; html-bg*1=vy") == {"html-bg": "navy"}

    def test_encoded_continuations(self):
        record = "html-bg*0*=utf-8''%23; html-bg*1*=ff%66; html-bg*2=\"\""
        assert parse_txtweb_config(record) == {"html-bg": "#fff"}

    def test_continuation_gap_stops(self):
        assert parse_txtweb_config("html-bg*0=na; html-bg*2=vy") == {"html-bg": "na"}

    def test_continuation_overrides_plain(self):
        assert parse_txtweb_config("html-bg=red; html-bg*0=blue") == {"html-bg": "blue"}

    def test_unicode_space_trimmed(self):
        record = chr(0x3000) + "html-wrap=true;" + chr(0xA0) + "html-bg=red" + chr(0x2009)
        assert parse_txtweb_config(record) == {"html-wrap": "true", "html-bg": "red"}

    def test_separator_control_is_not_space(self):
        assert parse_txtweb_config("html-wrap=true;\x1fhtml-bg=red") == {}


def test_parse_parameters_keeps_order():
    assert list(parse_parameters("; b=2; a=1").items()) == [("b", "2"), ("a", "1")]


def test_parse_parameters_requires_leading_semicolon():
    with pytest.raises(ConfigSyntaxError):
        parse_parameters("a=1")


class TestSiteOptions:
    """Tests for SiteOptions."""

    def test_defaults(self):
        options = SiteOptions.from_config({})
        assert options == SiteOptions()
        assert options.html_wrap is False

    @pytest.mark.parametrize("value, expected", [("true", True), ("TRUE", True), (" True ", True), ("yes", False), ("1", False)])
    def test_html_wrap(self, value, expected):
        assert SiteOptions.from_config({"html-wrap": value}).html_wrap is expected

    def test_html_wrap_unicode_space(self):
        assert SiteOptions.from_config({"html-wrap": chr(0x3000) + "true" + chr(0x85)}).html_wrap is True
        assert SiteOptions.from_config({"html-wrap": "\x1ctrue"}).html_wrap is False

    def test_fields(self):
        options = SiteOptions.from_config(
            {"content-type": "text/markdown", "html-align": "center", "html-max-width": "40em", "html-bg": "red", "html-fg": "white"}
        )
        assert options.content_type == "text/markdown"
        assert options.html_align == "center"
        assert options.html_max_width == "40em"
        assert options.html_bg == "red"
        assert options.html_fg == "white"
