"""Tree visitor and transformer for Puntada.

Provides a base visitor class with match-based dispatch and early
termination, a generic depth-first search, and an immutable transform
function for rewriting frozen trees.

Child discovery is generic: any dataclass field holding a Node, or a tuple
of Nodes, is a child slot. New node kinds are walked and transformed without
touching this module.

Example (find the element at a position):

    class PositionFinder(BaseVisitor[None]):
        def __init__(self, position):
            self.position = position
            self.found = None

        def visit_element(self, node):
            if node.location.position == self.position:
                self.found = node
                self.stop()

Example (rename every <b> to <strong>):

    def rename(node):
        if isinstance(node, Element) and node.name == "b":
            return dataclasses.replace(node, name="strong")
        return node

    new_doc = transform(doc, rename)

Thread Safety:
    Visitors are NOT shared across threads (they accumulate state). Create
    one per call. ``transform``, ``iter_children`` and ``find_first`` are
    pure and safe to call from any thread.

"""

import dataclasses
from collections.abc import Callable, Iterator

from puntada.nodes import (
    Attribute,
    Document,
    Element,
    Expression,
    Fragment,
    Node,
    SpreadAttribute,
    Text,
)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of any node in source order.

    Fields are visited in declaration order, so an Element's attributes come
    before its children.
    """
    for field in dataclasses.fields(node):
        value = getattr(node, field.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, Node):
                    yield item


class BaseVisitor[T]:
    """Base tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node types you care about.
    Unhandled node types fall through to ``visit_default``. Children are
    walked depth-first after the ``visit_*`` call. Call ``stop()`` from any
    visit method to end the whole traversal.

    Type parameter ``T`` is the return type of visit methods (use ``None``
    for side-effect-only visitors).

    """

    _stopped: bool = False

    def visit(self, node: Node) -> T:
        """Dispatch to the appropriate ``visit_*`` method, then walk children."""
        result = self._dispatch(node)
        if not self._stopped:
            self._walk_children(node)
        return result

    def stop(self) -> None:
        """End the traversal after the current visit method returns."""
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def visit_default(self, node: Node) -> T:
        """Called for node types without a specific ``visit_*`` method."""
        return None  # type: ignore[return-value]

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_element(self, node: Element) -> T:
        return self.visit_default(node)

    def visit_fragment(self, node: Fragment) -> T:
        return self.visit_default(node)

    def visit_attribute(self, node: Attribute) -> T:
        return self.visit_default(node)

    def visit_spread_attribute(self, node: SpreadAttribute) -> T:
        return self.visit_default(node)

    def visit_expression(self, node: Expression) -> T:
        return self.visit_default(node)

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    # -- Internal dispatch -----------------------------------------------------

    def _dispatch(self, node: Node) -> T:
        """Match-based dispatch to visit_* methods."""
        match node:
            case Document():
                return self.visit_document(node)
            case Element():
                return self.visit_element(node)
            case Fragment():
                return self.visit_fragment(node)
            case Attribute():
                return self.visit_attribute(node)
            case SpreadAttribute():
                return self.visit_spread_attribute(node)
            case Expression():
                return self.visit_expression(node)
            case Text():
                return self.visit_text(node)
            case _:
                return self.visit_default(node)

    def _walk_children(self, node: Node) -> None:
        for child in iter_children(node):
            self.visit(child)
            if self._stopped:
                return


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all its descendants, depth-first, in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))


def find_first[N: Node](
    node: Node,
    predicate: Callable[[Node], bool],
    node_type: type[N] = Node,  # type: ignore[assignment]
) -> N | None:
    """Depth-first search that stops at the first match.

    Args:
        node: Root of the search
        predicate: Test applied to every node of ``node_type``
        node_type: Only nodes of this type are tested

    Returns:
        The first matching node in source order, or None
    """
    for candidate in walk(node):
        if isinstance(candidate, node_type) and predicate(candidate):
            return candidate
    return None


def transform(doc: Document, fn: Callable[[Node], Node | None]) -> Document:
    """Apply a function to every node in the tree, returning a new tree.

    The function ``fn`` is called bottom-up: children are transformed first,
    then the parent is transformed with its new children. Subtrees that come
    back unchanged are shared with the original tree, not copied.

    Return ``None`` from ``fn`` to remove a node from a tuple of children.
    The root Document cannot be removed; returning None for it raises
    TypeError.

    Args:
        doc: The document to transform.
        fn: Function that receives a node and returns a (possibly new) node,
            or None to remove the node from the tree.

    Returns:
        A new Document with the transformation applied.

    """
    result = _transform_node(doc, fn)
    if result is None or not isinstance(result, Document):
        msg = "transform fn must return a Document for the root (cannot remove root)"
        raise TypeError(msg)
    return result


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Transform a single node bottom-up: children first, then self."""
    transformed = _transform_children(node, fn)
    return fn(transformed)


def _transform_children(node: Node, fn: Callable[[Node], Node | None]) -> Node:
    """Produce a new node with child fields transformed."""
    changes: dict[str, object] = {}
    for field in dataclasses.fields(node):
        value = getattr(node, field.name)
        if isinstance(value, Node):
            new_value = _transform_node(value, fn)
            if new_value is not value:
                changes[field.name] = new_value
        elif isinstance(value, tuple) and any(isinstance(item, Node) for item in value):
            new_items = tuple(
                result
                for item in value
                if (result := _transform_node(item, fn) if isinstance(item, Node) else item)
                is not None
            )
            if len(new_items) != len(value) or any(
                a is not b for a, b in zip(new_items, value, strict=False)
            ):
                changes[field.name] = new_items
    if changes:
        return dataclasses.replace(node, **changes)
    return node
