"""Tests for JSX text helpers."""

import pytest

from puntada.utils.text import (
    escape_jsx_text,
    is_layout_only,
    render_attribute,
    split_layout,
    utf16_len,
)


class TestUtf16Len:
    def test_ascii(self) -> None:
        assert utf16_len("abc") == 3

    def test_astral(self) -> None:
        assert utf16_len("a🚩b") == 4

    def test_empty(self) -> None:
        assert utf16_len("") == 0


class TestLayout:
    @pytest.mark.parametrize("raw", ["", "\n", "\n    ", "  \r\n  ", "\t\n"])
    def test_layout_only(self, raw: str) -> None:
        assert is_layout_only(raw)

    @pytest.mark.parametrize("raw", [" ", "  ", "x", "\n x \n", "\u00a0\n"])
    def test_rendered(self, raw: str) -> None:
        assert not is_layout_only(raw)

    def test_split_keeps_layout_at_both_ends(self) -> None:
        assert split_layout("\n    Hello\n  ") == ("\n    ", "Hello", "\n  ")

    def test_inline_spaces_are_content(self) -> None:
        assert split_layout(" items ") == ("", " items ", "")

    def test_one_sided_layout(self) -> None:
        assert split_layout("\n  Hello ") == ("\n  ", "Hello ", "")

    def test_layout_only_run(self) -> None:
        assert split_layout("\n  ") == ("\n  ", "", "")

    def test_parts_concatenate_back(self) -> None:
        raw = "\r\n\tOne two\r\n"
        assert "".join(split_layout(raw)) == raw


class TestEscape:
    def test_plain_text_is_unchanged(self) -> None:
        assert escape_jsx_text("Hello, world & co") == "Hello, world & co"

    def test_markup_characters(self) -> None:
        assert escape_jsx_text("a < b > c") == "a &lt; b &gt; c"

    def test_braces(self) -> None:
        assert escape_jsx_text("{x}") == "{'{'}x{'}'}"

    @pytest.mark.parametrize(
        ("value", "escaped"),
        [
            ("&lt;", "&amp;lt;"),
            ("&amp;", "&amp;amp;"),
            ("&#60; and &#x3C;", "&amp;#60; and &amp;#x3C;"),
            ("a &b c", "a &b c"),
            ("AT&T;", "AT&amp;T;"),
            ("&;", "&;"),
        ],
    )
    def test_character_references_are_escaped(self, value: str, escaped: str) -> None:
        assert escape_jsx_text(value) == escaped

    def test_entity_and_markup_together(self) -> None:
        assert escape_jsx_text("&gt; <") == "&amp;gt; &lt;"


class TestRenderAttribute:
    def test_double_quotes(self) -> None:
        assert render_attribute("data-edit-id", "a.tsx:1:1") == 'data-edit-id="a.tsx:1:1"'

    def test_falls_back_to_single_quotes(self) -> None:
        assert render_attribute("title", 'say "hi"') == "title='say \"hi\"'"

    def test_both_quotes_use_expression(self) -> None:
        assert render_attribute("title", "it's \"x\"") == 'title={"it\'s \\"x\\""}'
