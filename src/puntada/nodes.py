"""Typed tree nodes for Puntada.

All nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: a tree parsed for one request is never changed in place
- Pattern matching: Python 3.10+ match statements work naturally

The tree only models JSX markup. Surrounding JavaScript/TypeScript is
scanned and skipped, and stays in the source text, which the printer copies
byte for byte. Each node's location spans ``[offset, end_offset)`` in the
source it was parsed from.

Node Hierarchy:
Node (base)
├── Document          the file; children are top-level markup
├── Element           <name attrs...>children</name> or <name attrs... />
├── Fragment          <>children</>
├── Attribute         name, name="value", name={...}, name=<el/>
├── SpreadAttribute   {...props}
├── Expression        {code}; children are markup nested in the code
└── Text              raw JSX text run

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

from puntada.location import SourceLocation


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes.

    All nodes track their source location.

    """

    location: SourceLocation


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Raw JSX text between tags or expression containers.

    ``content`` is the source text as written, including layout whitespace
    and entity references.

    """

    content: str


@dataclass(frozen=True, slots=True)
class Expression(Node):
    """Expression container ``{ ... }``.

    The code itself is not modelled; ``children`` holds the markup found
    inside it, such as the ``<li>`` in ``{items.map(i => <li>{i}</li>)}``.

    """

    children: tuple[Markup, ...]


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """One attribute of an opening tag.

    Attributes:
        name: Attribute name as written (may contain ``-`` or ``:``)
        value: Unquoted string value, or None for bare and non-string values
        value_node: Expression or Element for ``name={...}`` / ``name=<el/>``
        synthetic: True for attributes added after parsing. A synthetic
            attribute has a zero-width location at its insertion point.

    """

    name: str
    value: str | None = None
    value_node: Expression | Element | Fragment | None = None
    synthetic: bool = False


@dataclass(frozen=True, slots=True)
class SpreadAttribute(Node):
    """Spread attribute ``{...props}``."""

    expression: Expression


@dataclass(frozen=True, slots=True)
class Element(Node):
    """A JSX element, opening tag plus children.

    The location starts at the opening ``<``, which is the position used
    for addressing.

    Attributes:
        name: Tag name (``div``, ``Card.Body``, ``svg:rect``)
        attributes: Attributes in source order
        children: Direct children in source order
        self_closing: Written as ``<name ... />``
        attrs_end: Offset just past the tag name or the last attribute;
            new attributes are inserted here
        complete: The opening tag was terminated by ``>`` or ``/>``

    """

    name: str
    attributes: tuple[Attribute | SpreadAttribute, ...]
    children: tuple[Child, ...]
    self_closing: bool
    attrs_end: int
    complete: bool = True

    def get_attribute(self, name: str) -> Attribute | None:
        """Return the first attribute called ``name``, if any."""
        for attr in self.attributes:
            if isinstance(attr, Attribute) and attr.name == name:
                return attr
        return None

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None


@dataclass(frozen=True, slots=True)
class Fragment(Node):
    """Fragment ``<>...</>``. Carries no attributes and is never addressed."""

    children: tuple[Child, ...]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recovered syntax problem.

    The parser keeps going after these; they are reported on the Document.

    """

    message: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root of a parsed file.

    Attributes:
        children: Top-level markup in source order
        diagnostics: Problems the parser recovered from

    """

    children: tuple[Markup, ...]
    diagnostics: tuple[Diagnostic, ...] = ()


# PEP 695 type aliases
type Markup = Element | Fragment
type Child = Element | Fragment | Expression | Text
