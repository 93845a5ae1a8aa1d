"""Arena-backed document tree with DOM-style traversal and selector queries.

Nodes never point at each other directly. Every node that takes part in a
hierarchy is registered in a :class:`NodeTree` arena and addressed by an
integer handle; parent, child and sibling links are stored as handles inside
the arena. Insertion and removal only rewrite a constant number of links;
a node linked under a parent from another arena moves there with its subtree.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Optional

from figma_renderer.model.elements import NodeKind, NodePayload

_MISSING = object()
_APPEND = object()
_BASE_FIELDS = frozenset({"id", "name", "visible", "kind", "plugin_data", "shared_plugin_data"})


@dataclass(slots=True)
class _Links:
    parent: Optional[int] = None
    first_child: Optional[int] = None
    last_child: Optional[int] = None
    previous_sibling: Optional[int] = None
    next_sibling: Optional[int] = None


class NodeTree:
    """Owns the structural links of every node registered with it."""

    def __init__(self) -> None:
        self._nodes: List[Optional["Node"]] = []
        self._links: List[_Links] = []

    def __len__(self) -> int:
        return sum(1 for node in self._nodes if node is not None)

    def register(self, node: "Node") -> int:
        """Return the handle of ``node`` in this arena, adopting it if needed.

        A node from another arena is detached there and moved here together
        with its whole subtree.
        """
        if node._tree is self:
            return node._handle  # type: ignore[return-value]
        if node._tree is not None:
            return self._migrate(node)
        handle = len(self._nodes)
        self._nodes.append(node)
        self._links.append(_Links())
        node._tree = self
        node._handle = handle
        return handle

    def _migrate(self, node: "Node") -> int:
        source = node._tree
        source.detach(node._handle)  # type: ignore[union-attr, arg-type]
        # Child order has to be captured while the old links are still readable.
        subtree = [node, *node.descendants()]
        child_lists = [(member, member.children.to_list()) for member in subtree]

        for member in subtree:
            source._nodes[member._handle] = None  # type: ignore[union-attr, index]
            member._tree = None
            member._handle = None
            self.register(member)

        for parent, children in child_lists:
            previous: Optional[int] = None
            for child in children:
                self.insert_after(parent._handle, child._handle, previous)  # type: ignore[arg-type]
                previous = child._handle
        return node._handle  # type: ignore[return-value]

    def node(self, handle: Optional[int]) -> Optional["Node"]:
        if handle is None:
            return None
        return self._nodes[handle]

    def links(self, handle: int) -> _Links:
        return self._links[handle]

    def insert_after(self, parent: int, child: int, after: Optional[int]) -> None:
        """Link ``child`` under ``parent`` right after ``after`` (``None`` means first)."""
        parent_links = self._links[parent]
        child_links = self._links[child]

        if after is None:
            following = parent_links.first_child
        else:
            following = self._links[after].next_sibling
            self._links[after].next_sibling = child

        child_links.parent = parent
        child_links.previous_sibling = after
        child_links.next_sibling = following

        if following is None:
            parent_links.last_child = child
        else:
            self._links[following].previous_sibling = child
        if after is None:
            parent_links.first_child = child

    def detach(self, handle: int) -> None:
        """Unlink a node from its parent and siblings, keeping its own subtree."""
        links = self._links[handle]
        if links.parent is not None:
            parent_links = self._links[links.parent]
            if parent_links.first_child == handle:
                parent_links.first_child = links.next_sibling
            if parent_links.last_child == handle:
                parent_links.last_child = links.previous_sibling
        if links.previous_sibling is not None:
            self._links[links.previous_sibling].next_sibling = links.next_sibling
        if links.next_sibling is not None:
            self._links[links.next_sibling].previous_sibling = links.previous_sibling
        links.parent = None
        links.previous_sibling = None
        links.next_sibling = None


class NodeList:
    """Lazy sequence of nodes that freezes into a snapshot on first full pull.

    Iterating an unmaterialized list starts a fresh walk over the live tree each
    time. ``len()``, indexing and :meth:`to_list` materialize the walk once;
    from then on the list replays that snapshot and ignores later edits.
    """

    def __init__(self, walk: Callable[[], Iterator["Node"]]) -> None:
        self._walk = walk
        self._nodes: Optional[List["Node"]] = None

    def __iter__(self) -> Iterator["Node"]:
        if self._nodes is not None:
            return iter(self._nodes)
        return self._walk()

    def to_list(self) -> List["Node"]:
        if self._nodes is None:
            self._nodes = list(self._walk())
        return self._nodes

    def item(self, index: int) -> Optional["Node"]:
        nodes = self.to_list()
        if 0 <= index < len(nodes):
            return nodes[index]
        return None

    def __getitem__(self, index: int) -> "Node":
        return self.to_list()[index]

    def __len__(self) -> int:
        return len(self.to_list())

    @property
    def materialized(self) -> bool:
        return self._nodes is not None


@dataclass(frozen=True)
class Selector:
    """Conjunctive node filter: an optional kind plus per-field tests.

    Field tests are exact values, compiled regular expressions (string fields
    only) or predicates receiving the field's current value.
    """

    kind: Optional[NodeKind] = None
    fields: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def build(cls, selector: Optional["Selector"] = None, **filters: object) -> "Selector":
        if selector is not None and not filters:
            return selector
        base_fields: Dict[str, object] = dict(selector.fields) if selector else {}
        kind = filters.pop("kind", selector.kind if selector else None)
        base_fields.update(filters)
        return cls(kind=kind, fields=base_fields)  # type: ignore[arg-type]


def _field_passes(test: object, value: object) -> bool:
    if isinstance(test, re.Pattern):
        return isinstance(value, str) and test.search(value) is not None
    if callable(test) and not isinstance(test, type):
        return bool(test(value))
    return value == test


@dataclass(slots=True, eq=False)
class Node:
    """A document node: shared base record plus a kind-specific payload."""

    id: str
    name: str
    kind: NodeKind
    payload: Optional[NodePayload] = None
    visible: bool = True
    plugin_data: Optional[Dict[str, object]] = None
    shared_plugin_data: Optional[Dict[str, object]] = None
    _tree: Optional[NodeTree] = field(default=None, init=False, repr=False)
    _handle: Optional[int] = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # Structural links
    @property
    def tree(self) -> Optional[NodeTree]:
        return self._tree

    def _link(self, name: str) -> Optional["Node"]:
        if self._tree is None:
            return None
        links = self._tree.links(self._handle)  # type: ignore[arg-type]
        return self._tree.node(getattr(links, name))

    @property
    def parent(self) -> Optional["Node"]:
        return self._link("parent")

    @property
    def first_child(self) -> Optional["Node"]:
        return self._link("first_child")

    @property
    def last_child(self) -> Optional["Node"]:
        return self._link("last_child")

    @property
    def previous_sibling(self) -> Optional["Node"]:
        return self._link("previous_sibling")

    @property
    def next_sibling(self) -> Optional["Node"]:
        return self._link("next_sibling")

    @property
    def children(self) -> NodeList:
        def walk() -> Iterator[Node]:
            child = self.first_child
            while child is not None:
                following = child.next_sibling
                yield child
                child = following

        return NodeList(walk)

    def append_child(self, node: "Node", after: object = _APPEND) -> "Node":
        """Insert ``node`` after ``after`` (default: last child, ``None``: first).

        An attached node is moved, with its subtree, even out of another
        tree. Inserting a node into its own subtree is rejected; that check
        walks up from ``self``, so the call costs O(depth) while the link
        updates stay O(1).
        """
        if self._tree is None:
            NodeTree().register(self)
        tree = self._tree
        assert tree is not None

        if after is _APPEND:
            after = self.last_child
        if after is not None:
            if not isinstance(after, Node) or after.parent is not self:
                raise ValueError("Insertion point must be a child of this node")
            if after is node:
                return node

        ancestor: Optional[Node] = self
        while ancestor is not None:
            if ancestor is node:
                raise ValueError(f"Cannot insert node {node.id!r} into its own subtree")
            ancestor = ancestor.parent

        child_handle = tree.register(node)
        tree.detach(child_handle)
        tree.insert_after(
            self._handle,  # type: ignore[arg-type]
            child_handle,
            after._handle if after is not None else None,  # type: ignore[union-attr]
        )
        return node

    def remove(self) -> None:
        """Detach from the parent; the node keeps its own children."""
        if self._tree is None:
            return
        self._tree.detach(self._handle)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Queries
    def field_value(self, name: str, default: object = _MISSING) -> object:
        """Return a base or payload field by name, ``default`` when absent."""
        if name in _BASE_FIELDS:
            return getattr(self, name)
        if name.startswith("_") or self.payload is None:
            return default
        return getattr(self.payload, name, default)

    def matches(self, selector: Optional[Selector] = None, **filters: object) -> bool:
        query = Selector.build(selector, **filters)
        if query.kind is not None and self.kind is not query.kind:
            return False
        for name, test in query.fields.items():
            value = self.field_value(name)
            if value is _MISSING:
                return False
            if not _field_passes(test, value):
                return False
        return True

    def descendants(self) -> Iterator["Node"]:
        """Pre-order walk over every node below this one, following live links."""
        current = self.first_child
        while current is not None:
            yield current
            following = current.first_child
            if following is None:
                following = self._next_after_subtree(current)
            current = following

    def _next_after_subtree(self, node: "Node") -> Optional["Node"]:
        current: Optional[Node] = node
        while current is not None and current is not self:
            sibling = current.next_sibling
            if sibling is not None:
                return sibling
            current = current.parent
        return None

    def query_selector_all(self, selector: Optional[Selector] = None, **filters: object) -> NodeList:
        query = Selector.build(selector, **filters)

        def walk() -> Iterator[Node]:
            for node in self.descendants():
                if node.matches(query):
                    yield node

        return NodeList(walk)

    def query_selector(self, selector: Optional[Selector] = None, **filters: object) -> Optional["Node"]:
        for node in self.query_selector_all(selector, **filters):
            return node
        return None
