"""Unit tests for input sanitization."""

import html

import pytest

from mathsolve_ai.core.sanitizer import (
    MAX_STRIP_PASSES,
    SanitizeOptions,
    remove_dangerous_patterns,
    sanitize_string,
    sanitize_value,
)


class TestSanitizeString:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("<b>hello</b>", "hello"),
            ("<script>alert(1)</script>Solve it", "Solve it"),
            ("<style>p{}</style>text", "text"),
            ("  padded  ", "padded"),
            ("nul\x00byte", "nulbyte"),
            ("x < 5 and y > 2", "x < 5 and y > 2"),
            ("Tom & Jerry", "Tom & Jerry"),
            ("", ""),
        ],
    )
    def test_plain_text_mode(self, raw, expected):
        assert sanitize_string(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "&lt;img src=x onerror=alert(1)&gt;",
            "&lt;svg&gt;&lt;a href=x&gt;click&lt;/a&gt;",
            "&amp;lt;b&amp;gt;nested&amp;lt;/b&amp;gt;",
            "&#60;iframe src=x&#62;&#60;/iframe&#62;",
        ],
    )
    def test_entity_encoded_markup_is_stripped(self, raw):
        cleaned = sanitize_string(raw)
        assert "<" not in cleaned
        assert ">" not in cleaned

    def test_entity_encoded_markup_keeps_its_text(self):
        assert sanitize_string("&lt;b&gt;Find&lt;/b&gt; x &lt; 5") == "Find x < 5"

    def test_markup_that_never_settles_stays_escaped(self):
        layers, tag = [], "<img src=x>"
        for _ in range(MAX_STRIP_PASSES + 2):
            layers.append(tag)
            tag = html.escape(tag)
        cleaned = sanitize_string("".join(layers))
        assert "<" not in cleaned

    def test_removes_script_schemes_from_text(self):
        assert sanitize_string("javascript:alert(1)") == "alert(1)"
        assert sanitize_string("VBScript: run") == "run"

    def test_removes_inline_event_handlers_from_text(self):
        assert "onclick" not in sanitize_string("onclick=steal()")

    def test_basic_html_mode_keeps_formatting_tags(self):
        options = SanitizeOptions(allow_basic_html=True)
        cleaned = sanitize_string("<b>bold</b> <img src=x onerror=alert(1)>", options)
        assert "<b>bold</b>" in cleaned
        assert "img" not in cleaned
        assert "onerror" not in cleaned


class TestRemoveDangerousPatterns:
    @pytest.mark.parametrize(
        "raw",
        [
            "<iframe src='x'></iframe>",
            "<object data='x'></object>",
            "<embed src='x'>",
            "<link rel='stylesheet'>",
            "<meta http-equiv='refresh'>",
        ],
    )
    def test_patterns_are_removed(self, raw):
        assert remove_dangerous_patterns(raw) == ""


class TestSanitizeValue:
    def test_walks_nested_containers(self):
        value = {"title": "<i>Limits</i>", "tags": ["<b>calc</b>", "ok"], "meta": {"note": "<p>hi</p>"}}
        assert sanitize_value(value) == {"title": "Limits", "tags": ["calc", "ok"], "meta": {"note": "hi"}}

    def test_non_strings_pass_through(self):
        value = {"count": 3, "ratio": 0.5, "flag": True, "missing": None}
        assert sanitize_value(value) == value

    def test_excluded_fields_are_untouched(self):
        value = {"password": "<b>Pa55word!</b>", "token": " abc ", "username": "<b>alice</b>"}
        cleaned = sanitize_value(value)
        assert cleaned["password"] == "<b>Pa55word!</b>"
        assert cleaned["token"] == " abc "
        assert cleaned["username"] == "alice"

    def test_tuples_keep_their_type(self):
        assert sanitize_value(("<b>a</b>", "b")) == ("a", "b")

    def test_containers_beyond_max_depth_are_returned_as_is(self):
        options = SanitizeOptions(max_depth=1)
        value = {"outer": {"inner": "<b>deep</b>"}}
        assert sanitize_value(value, options) == value
