"""Character sets for O(1) classification.

All sets are frozensets for:
- O(1) membership testing (vs O(n) for strings)
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Usage:
    from puntada.parsing.charsets import SCRIPT_WHITESPACE

    if char in SCRIPT_WHITESPACE:  # O(1) lookup
        ...
"""

# ECMAScript WhiteSpace and LineTerminator code points
SCRIPT_WHITESPACE: frozenset[str] = frozenset(
    " \t\n\r\v\f\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)

LINE_TERMINATORS: frozenset[str] = frozenset("\n\r\u2028\u2029")

QUOTES: frozenset[str] = frozenset("'\"")

# Keywords after which an expression (and so a regex or JSX) may begin
EXPRESSION_KEYWORDS: frozenset[str] = frozenset(
    {
        "await",
        "case",
        "default",
        "delete",
        "do",
        "else",
        "in",
        "instanceof",
        "new",
        "of",
        "return",
        "throw",
        "typeof",
        "void",
        "yield",
    }
)

# Extra characters allowed in JSX tag and attribute names
TAG_NAME_EXTRA: frozenset[str] = frozenset("-:.")
ATTRIBUTE_NAME_EXTRA: frozenset[str] = frozenset("-:")


def is_ident_start(char: str) -> bool:
    """Check if a character can start a JavaScript identifier."""
    return char.isalpha() or char == "_" or char == "$" or char == "#"


def is_ident_part(char: str) -> bool:
    """Check if a character can continue a JavaScript identifier."""
    return char.isalnum() or char == "_" or char == "$"
