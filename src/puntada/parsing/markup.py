"""JSX markup parsing for the Puntada parser.

Builds Element, Fragment, Attribute, Expression and Text nodes. Expression
containers and attribute values drop back into script scanning, so markup
nested inside code is found at any depth.

Error Recovery:
    Markup problems are recorded as diagnostics and parsing continues:

    - an opening tag cut off by EOF or by another ``<`` is kept with
      ``complete=False`` and no children
    - a closing tag that matches an enclosing element closes every element
      opened since, each reported as unclosed
    - a closing tag that matches nothing is reported and skipped
    - a ``<`` that starts neither a tag nor a closing tag is kept as text

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from puntada.nodes import (
    Attribute,
    Child,
    Element,
    Expression,
    Fragment,
    SpreadAttribute,
    Text,
)
from puntada.parsing.charsets import (
    ATTRIBUTE_NAME_EXTRA,
    QUOTES,
    SCRIPT_WHITESPACE,
    TAG_NAME_EXTRA,
    is_ident_part,
)

if TYPE_CHECKING:
    from puntada.location import LineIndex, SourceLocation
    from puntada.nodes import Markup


class MarkupParsingMixin:
    """Mixin providing JSX markup parsing.

    Required Host Attributes:
        - _source: str
        - _length: int
        - _pos: int
        - _lines: LineIndex
        - _source_file: str | None
        - _open_tags: list[str] (names of elements being parsed, innermost last)

    Required Host Methods:
        - _error(message, offset)
        - _scan_script(until_brace=...) -> list[Markup]
        - _at_markup_start(pos) -> bool
        - _peek_char(offset) -> str
        - _skip_line_comment(), _skip_block_comment()

    """

    _source: str
    _length: int
    _pos: int
    _lines: LineIndex
    _source_file: str | None
    _open_tags: list[str]

    def _location(self, start: int, end: int) -> SourceLocation:
        return self._lines.location(start, end, self._source_file)

    # -- Elements --------------------------------------------------------------

    def _parse_markup(self) -> Markup:
        """Parse an element or fragment starting at ``<``."""
        start = self._pos
        self._pos += 1

        if self._peek_char() == ">":
            self._pos += 1
            children, _ = self._parse_children("")
            return Fragment(location=self._location(start, self._pos), children=children)

        name = self._read_name(TAG_NAME_EXTRA)
        if self._peek_char() == "<":
            self._skip_type_arguments()
        attrs_end = self._pos

        attributes: list[Attribute | SpreadAttribute] = []
        self_closing = False
        complete = False

        while True:
            self._skip_tag_whitespace()
            if self._pos >= self._length:
                self._error(f"Unterminated opening tag <{name}>", start)
                break
            char = self._source[self._pos]
            if char == "/" and self._peek_char(1) == ">":
                self._pos += 2
                self_closing = True
                complete = True
                break
            if char == ">":
                self._pos += 1
                complete = True
                break
            if char == "{":
                expression = self._parse_expression_container()
                attributes.append(
                    SpreadAttribute(location=expression.location, expression=expression)
                )
                attrs_end = self._pos
                continue
            if char.isalpha() or char == "_" or char == "$":
                attributes.append(self._parse_attribute())
                attrs_end = self._pos
                continue
            if char == "<":
                self._error(f"Unterminated opening tag <{name}>", start)
                break
            self._error(f"Unexpected character {char!r} in tag <{name}>", self._pos)
            self._pos += 1

        children: tuple[Child, ...] = ()
        if complete and not self_closing:
            children, _ = self._parse_children(name)

        return Element(
            location=self._location(start, self._pos),
            name=name,
            attributes=tuple(attributes),
            children=children,
            self_closing=self_closing,
            attrs_end=attrs_end,
            complete=complete,
        )

    def _parse_children(self, name: str) -> tuple[tuple[Child, ...], bool]:
        """Parse children up to the matching closing tag.

        Args:
            name: Tag name of the enclosing element ("" for a fragment)

        Returns:
            Children and whether the closing tag was found
        """
        children: list[Child] = []
        self._open_tags.append(name)
        try:
            while self._pos < self._length:
                char = self._source[self._pos]
                if char == "{":
                    children.append(self._parse_expression_container())
                    continue
                if char == "<":
                    if self._peek_char(1) == "/":
                        closing_start = self._pos
                        closing_name, closing_end = self._read_closing_tag()
                        if closing_name == name:
                            self._pos = closing_end
                            return tuple(children), True
                        if closing_name in self._open_tags:
                            self._error(f"Unclosed element <{name}>", closing_start)
                            return tuple(children), False
                        self._error(f"Unexpected closing tag </{closing_name}>", closing_start)
                        self._pos = closing_end
                        continue
                    if self._at_markup_start(self._pos):
                        children.append(self._parse_markup())
                        continue
                    self._error("Unexpected '<' in text", self._pos)
                children.append(self._read_text())
            self._error(f"Unclosed element <{name}>" if name else "Unclosed fragment", self._pos)
            return tuple(children), False
        finally:
            self._open_tags.pop()

    def _read_closing_tag(self) -> tuple[str, int]:
        """Read ``</name>`` at the current position without consuming it.

        Returns:
            The closing tag's name and the offset just past it
        """
        pos = self._pos + 2
        while pos < self._length and self._source[pos] in SCRIPT_WHITESPACE:
            pos += 1
        name_start = pos
        while pos < self._length and (
            is_ident_part(self._source[pos]) or self._source[pos] in TAG_NAME_EXTRA
        ):
            pos += 1
        name = self._source[name_start:pos]
        while pos < self._length and self._source[pos] in SCRIPT_WHITESPACE:
            pos += 1
        if pos < self._length and self._source[pos] == ">":
            pos += 1
        else:
            self._error(f"Unterminated closing tag </{name}>", self._pos)
        return name, pos

    def _read_text(self) -> Text:
        """Read a text run; always consumes at least one character."""
        start = self._pos
        self._pos += 1
        while self._pos < self._length:
            char = self._source[self._pos]
            if char == "{":
                break
            if char == "<" and (self._peek_char(1) == "/" or self._at_markup_start(self._pos)):
                break
            self._pos += 1
        return Text(
            location=self._location(start, self._pos),
            content=self._source[start : self._pos],
        )

    # -- Attributes ------------------------------------------------------------

    def _parse_attribute(self) -> Attribute:
        start = self._pos
        name = self._read_name(ATTRIBUTE_NAME_EXTRA)
        name_end = self._pos

        self._skip_tag_whitespace()
        if self._peek_char() != "=":
            self._pos = name_end
            return Attribute(location=self._location(start, name_end), name=name)

        self._pos += 1
        self._skip_tag_whitespace()
        char = self._peek_char()

        if char in QUOTES:
            value_start = self._pos + 1
            end = self._source.find(char, value_start)
            if end == -1:
                self._error(f"Unterminated value for attribute {name!r}", start)
                self._pos = self._length
                value = self._source[value_start:]
            else:
                self._pos = end + 1
                value = self._source[value_start:end]
            return Attribute(location=self._location(start, self._pos), name=name, value=value)

        if char == "{":
            expression = self._parse_expression_container()
            return Attribute(
                location=self._location(start, self._pos),
                name=name,
                value_node=expression,
            )

        if char == "<" and self._at_markup_start(self._pos):
            markup = self._parse_markup()
            return Attribute(
                location=self._location(start, self._pos),
                name=name,
                value_node=markup,
            )

        self._error(f"Missing value for attribute {name!r}", self._pos)
        return Attribute(location=self._location(start, self._pos), name=name)

    def _parse_expression_container(self) -> Expression:
        """Parse ``{ ... }``, collecting markup nested in the code."""
        start = self._pos
        self._pos += 1
        children = self._scan_script(until_brace=True)
        if self._pos < self._length:
            self._pos += 1
        else:
            self._error("Unterminated expression container", start)
        return Expression(location=self._location(start, self._pos), children=tuple(children))

    # -- Helpers ---------------------------------------------------------------

    def _read_name(self, extra: frozenset[str]) -> str:
        start = self._pos
        while self._pos < self._length and (
            is_ident_part(self._source[self._pos]) or self._source[self._pos] in extra
        ):
            self._pos += 1
        return self._source[start : self._pos]

    def _skip_tag_whitespace(self) -> None:
        """Skip whitespace and comments inside a tag."""
        while self._pos < self._length:
            char = self._source[self._pos]
            if char in SCRIPT_WHITESPACE:
                self._pos += 1
            elif char == "/" and self._peek_char(1) == "/":
                self._skip_line_comment()
            elif char == "/" and self._peek_char(1) == "*":
                self._skip_block_comment()
            else:
                return

    def _skip_type_arguments(self) -> None:
        """Skip TypeScript type arguments after a tag name (``<Select<T> ...>``)."""
        depth = 0
        while self._pos < self._length:
            char = self._source[self._pos]
            if char == "<":
                depth += 1
            elif char == ">":
                depth -= 1
                if depth == 0:
                    self._pos += 1
                    return
            self._pos += 1
