"""Script scanning for the Puntada parser.

Skips JavaScript/TypeScript code without building a tree for it, and hands
control to markup parsing wherever a JSX element or fragment begins.

Deciding whether ``<`` opens markup or is an operator needs one bit of
context: whether an expression may start at this point. That bit is the
same one that separates a regular expression literal from division, so the
scanner tracks it as it goes:

- after an operator, an opening bracket, a comma, a semicolon or a keyword
  such as ``return``, an expression may start
- after an identifier, a literal or a closing bracket, it may not

TypeScript generics written in TSX style (``<T,>(x) => x`` or
``<T extends U>(x) => x``) are recognized and skipped, as are generic
function types such as ``type Fn = <T>(x: T) => T``.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from puntada.parsing.charsets import (
    EXPRESSION_KEYWORDS,
    LINE_TERMINATORS,
    QUOTES,
    SCRIPT_WHITESPACE,
    TAG_NAME_EXTRA,
    is_ident_part,
    is_ident_start,
)

if TYPE_CHECKING:
    from puntada.nodes import Markup


class ScriptScanningMixin:
    """Mixin providing code-mode scanning.

    Required Host Attributes:
        - _source: str
        - _length: int (cached len(_source))
        - _pos: int

    Required Host Methods:
        - _error(message, offset)
        - _parse_markup() -> Markup

    """

    _source: str
    _length: int
    _pos: int

    def _scan_script(self, *, until_brace: bool = False) -> list[Markup]:
        """Scan code from the current position, collecting markup.

        Args:
            until_brace: Stop at the first unbalanced ``}`` (left unconsumed),
                as when scanning the inside of ``{...}`` or ``${...}``

        Returns:
            Markup nodes found in the scanned code, in source order
        """
        source = self._source
        markup: list[Markup] = []
        depth = 0
        expr_start = True

        while self._pos < self._length:
            char = source[self._pos]

            if char in SCRIPT_WHITESPACE:
                self._pos += 1
                continue

            if char == "/":
                nxt = self._peek_char(1)
                if nxt == "/":
                    self._skip_line_comment()
                    continue
                if nxt == "*":
                    self._skip_block_comment()
                    continue
                if expr_start:
                    self._skip_regex()
                    expr_start = False
                else:
                    self._pos += 1
                    expr_start = True
                continue

            if char in QUOTES:
                self._skip_string(char)
                expr_start = False
                continue

            if char == "`":
                markup.extend(self._scan_template())
                expr_start = False
                continue

            if char == "{":
                depth += 1
                self._pos += 1
                expr_start = True
                continue

            if char == "}":
                if depth == 0 and until_brace:
                    return markup
                depth = max(0, depth - 1)
                self._pos += 1
                expr_start = False
                continue

            if char == ")" or char == "]":
                self._pos += 1
                expr_start = False
                continue

            if is_ident_start(char):
                after_dot = self._previous_significant() == "."
                word = self._read_word()
                expr_start = not after_dot and word in EXPRESSION_KEYWORDS
                continue

            if char.isdigit() or (char == "." and self._peek_char(1).isdigit()):
                self._skip_number()
                expr_start = False
                continue

            if char == "<" and expr_start and self._at_markup_start(self._pos):
                markup.append(self._parse_markup())
                expr_start = False
                continue

            if char == "." and source.startswith("...", self._pos):
                self._pos += 3
                expr_start = True
                continue

            # Any other punctuator
            self._pos += 1
            expr_start = char != "."

        return markup

    # -- Lookahead -------------------------------------------------------------

    def _peek_char(self, offset: int = 0) -> str:
        """Character at ``_pos + offset``, or "" past the end."""
        pos = self._pos + offset
        if pos < self._length:
            return self._source[pos]
        return ""

    def _previous_significant(self) -> str:
        """Nearest non-whitespace character before the current position."""
        pos = self._pos - 1
        while pos >= 0 and self._source[pos] in SCRIPT_WHITESPACE:
            pos -= 1
        return self._source[pos] if pos >= 0 else ""

    def _at_markup_start(self, pos: int) -> bool:
        """Check if ``<`` at ``pos`` opens a JSX element or fragment.

        Rejects TSX-style generic parameter lists (``<T,>`` and
        ``<T extends U>``) and a ``<T>`` followed by a parenthesized
        parameter list and ``=>``, which is a generic function type.
        """
        source = self._source
        nxt = pos + 1
        if nxt >= self._length:
            return False
        if source[nxt] == ">":
            return True
        if not is_ident_start(source[nxt]) or source[nxt] == "#":
            return False

        end = nxt + 1
        while end < self._length and (
            is_ident_part(source[end]) or source[end] in TAG_NAME_EXTRA
        ):
            end += 1
        while end < self._length and source[end] in SCRIPT_WHITESPACE:
            end += 1
        if end < self._length and source[end] == ",":
            return False
        if end < self._length and source[end] == ">" and self._at_arrow_signature(end + 1):
            return False
        if source.startswith("extends", end):
            after = end + len("extends")
            if after < self._length and source[after] in SCRIPT_WHITESPACE:
                return False
        return True

    def _at_arrow_signature(self, pos: int) -> bool:
        """Check for ``(params) =>`` at ``pos``, ignoring whitespace."""
        source = self._source
        pos = self._skip_whitespace_from(pos)
        if pos >= self._length or source[pos] != "(":
            return False
        depth = 0
        while pos < self._length:
            char = source[pos]
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    break
            pos += 1
        else:
            return False
        pos = self._skip_whitespace_from(pos + 1)
        return source.startswith("=>", pos)

    def _skip_whitespace_from(self, pos: int) -> int:
        while pos < self._length and self._source[pos] in SCRIPT_WHITESPACE:
            pos += 1
        return pos

    # -- Skipping --------------------------------------------------------------

    def _read_word(self) -> str:
        start = self._pos
        self._pos += 1
        while self._pos < self._length and is_ident_part(self._source[self._pos]):
            self._pos += 1
        return self._source[start : self._pos]

    def _skip_number(self) -> None:
        # Digits, hex/octal/binary prefixes, separators, exponents, bigint
        self._pos += 1
        while self._pos < self._length:
            char = self._source[self._pos]
            if char.isalnum() or char == "_" or char == ".":
                self._pos += 1
            else:
                break

    def _skip_line_comment(self) -> None:
        self._pos += 2
        while self._pos < self._length and self._source[self._pos] not in LINE_TERMINATORS:
            self._pos += 1

    def _skip_block_comment(self) -> None:
        start = self._pos
        end = self._source.find("*/", self._pos + 2)
        if end == -1:
            self._error("Unterminated comment", start)
            self._pos = self._length
        else:
            self._pos = end + 2

    def _skip_string(self, quote: str) -> None:
        """Skip a quoted string literal; stops at a bare line break."""
        start = self._pos
        self._pos += 1
        while self._pos < self._length:
            char = self._source[self._pos]
            if char == "\\":
                self._pos += 2
                continue
            if char == quote:
                self._pos += 1
                return
            if char == "\n" or char == "\r":
                break
            self._pos += 1
        self._pos = min(self._pos, self._length)
        self._error("Unterminated string literal", start)

    def _skip_regex(self) -> None:
        """Skip a regular expression literal including its flags."""
        start = self._pos
        self._pos += 1
        in_class = False
        while self._pos < self._length:
            char = self._source[self._pos]
            if char == "\\":
                self._pos += 2
                continue
            if char in LINE_TERMINATORS:
                self._error("Unterminated regular expression", start)
                return
            if char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                self._pos += 1
                while self._pos < self._length and is_ident_part(self._source[self._pos]):
                    self._pos += 1
                return
            self._pos += 1
        self._pos = self._length
        self._error("Unterminated regular expression", start)

    def _scan_template(self) -> list[Markup]:
        """Skip a template literal, scanning ``${...}`` substitutions as code."""
        start = self._pos
        markup: list[Markup] = []
        self._pos += 1
        while self._pos < self._length:
            char = self._source[self._pos]
            if char == "\\":
                self._pos += 2
                continue
            if char == "`":
                self._pos += 1
                return markup
            if char == "$" and self._peek_char(1) == "{":
                self._pos += 2
                markup.extend(self._scan_script(until_brace=True))
                if self._pos < self._length:
                    self._pos += 1  # closing }
                continue
            self._pos += 1
        self._pos = self._length
        self._error("Unterminated template literal", start)
        return markup
