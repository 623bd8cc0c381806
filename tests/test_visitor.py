"""Tests for the tree visitor and transform utilities."""

import dataclasses

import pytest

from puntada import parse
from puntada.location import SourceLocation
from puntada.nodes import Attribute, Document, Element, Expression, Node, Text
from puntada.visitor import BaseVisitor, find_first, iter_children, transform, walk

LOC = SourceLocation(lineno=1, col_offset=1)


def _text(content: str) -> Text:
    return Text(location=LOC, content=content)


def _element(name: str, *children, attributes=()) -> Element:  # type: ignore[no-untyped-def]
    return Element(
        location=LOC,
        name=name,
        attributes=tuple(attributes),
        children=tuple(children),
        self_closing=not children,
        attrs_end=0,
    )


def _doc(*children) -> Document:  # type: ignore[no-untyped-def]
    return Document(location=LOC, children=tuple(children))


class NodeCollector(BaseVisitor[None]):
    """Collects all visited node type names."""

    def __init__(self) -> None:
        self.visited: list[str] = []

    def visit_default(self, node) -> None:  # type: ignore[override]
        self.visited.append(type(node).__name__)


class TestVisitorDispatch:
    def test_visits_every_node_kind_in_source_order(self) -> None:
        doc = parse('x = <a id="1" {...p}>hi{<b />}</a>; y = <></>')
        collector = NodeCollector()
        collector.visit(doc)
        assert collector.visited == [
            "Document",
            "Element",
            "Attribute",
            "SpreadAttribute",
            "Expression",
            "Text",
            "Expression",
            "Element",
            "Fragment",
        ]

    def test_specific_method_wins_over_default(self) -> None:
        class ElementNames(NodeCollector):
            def visit_element(self, node: Element) -> None:
                self.visited.append(node.name)

        collector = ElementNames()
        collector.visit(_doc(_element("a", _element("b"))))
        assert collector.visited == ["Document", "a", "b"]

    def test_return_value(self) -> None:
        class Namer(BaseVisitor[str]):
            def visit_element(self, node: Element) -> str:
                return node.name

        assert Namer().visit(_element("p")) == "p"


class TestEarlyTermination:
    def test_stop_ends_traversal(self) -> None:
        class FirstElement(BaseVisitor[None]):
            def __init__(self) -> None:
                self.seen: list[str] = []

            def visit_element(self, node: Element) -> None:
                self.seen.append(node.name)
                if node.name == "b":
                    self.stop()

        visitor = FirstElement()
        visitor.visit(_doc(_element("a", _element("b", _element("c"))), _element("d")))
        assert visitor.seen == ["a", "b"]
        assert visitor.stopped


class TestTraversalHelpers:
    def test_iter_children_yields_attributes_before_children(self) -> None:
        attribute = Attribute(location=LOC, name="id", value="x")
        child = _text("hi")
        element = _element("p", child, attributes=[attribute])
        assert list(iter_children(element)) == [attribute, child]

    def test_iter_children_of_leaf(self) -> None:
        assert list(iter_children(_text("x"))) == []

    def test_walk_is_depth_first(self) -> None:
        doc = _doc(_element("a", _element("b")), _element("c"))
        names = [node.name for node in walk(doc) if isinstance(node, Element)]
        assert names == ["a", "b", "c"]

    def test_find_first(self) -> None:
        doc = parse("x = <ul><li>1</li><li>2</li></ul>")
        found = find_first(doc, lambda node: node.name == "li", Element)  # type: ignore[attr-defined]
        assert found is not None
        assert found.location.position == (1, 9)

    def test_find_first_no_match(self) -> None:
        assert find_first(_doc(), lambda node: True, Element) is None


class TestTransform:
    def test_identity_shares_nodes(self) -> None:
        doc = parse("x = <p>Hi</p>")
        assert transform(doc, lambda node: node) is doc

    def test_rewrites_bottom_up(self) -> None:
        def upper(node: Node) -> Node:
            if isinstance(node, Text):
                return dataclasses.replace(node, content=node.content.upper())
            return node

        doc = _doc(_element("p", _text("hi")))
        result = transform(doc, upper)
        assert result.children[0].children[0].content == "HI"  # type: ignore[union-attr]
        assert doc.children[0].children[0].content == "hi"  # type: ignore[union-attr]

    def test_unchanged_siblings_are_shared(self) -> None:
        keep = _element("a", _text("1"))
        doc = _doc(keep, _element("b", _text("2")))

        def rename_b(node: Node) -> Node:
            if isinstance(node, Element) and node.name == "b":
                return dataclasses.replace(node, name="strong")
            return node

        result = transform(doc, rename_b)
        assert result.children[0] is keep
        assert result.children[1].name == "strong"  # type: ignore[union-attr]

    def test_removal(self) -> None:
        doc = _doc(_element("p", _text("a"), _element("br"), _text("b")))

        def drop_br(node: Node) -> Node | None:
            if isinstance(node, Element) and node.name == "br":
                return None
            return node

        result = transform(doc, drop_br)
        assert [type(c).__name__ for c in result.children[0].children] == ["Text", "Text"]  # type: ignore[union-attr]

    def test_reaches_markup_inside_expressions(self) -> None:
        doc = parse("x = <ul>{items.map(i => <li>{i}</li>)}</ul>")
        seen: list[str] = []

        def record(node: Node) -> Node:
            if isinstance(node, Element):
                seen.append(node.name)
            return node

        transform(doc, record)
        assert seen == ["li", "ul"]

    def test_cannot_remove_root(self) -> None:
        with pytest.raises(TypeError):
            transform(_doc(), lambda node: None if isinstance(node, Document) else node)

    def test_expression_children_transform(self) -> None:
        inner = _element("b")
        expression = Expression(location=LOC, children=(inner,))
        doc = _doc(_element("a", expression))

        def rename(node: Node) -> Node:
            if isinstance(node, Element) and node.name == "b":
                return dataclasses.replace(node, name="i")
            return node

        result = transform(doc, rename)
        names = [node.name for node in walk(result) if isinstance(node, Element)]
        assert names == ["a", "i"]
