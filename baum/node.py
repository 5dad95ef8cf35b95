"""
Baum Node - In-memory representation of a .baum tree.

A node is exactly one of two frozen variants:
    Leaf(payload)    raw bytes, no children
    Inner(children)  ordered tuple of nodes, no payload

Trees are built bottom-up from values, so they are finite and acyclic.
Length fields are never stored: the writer derives them from the content.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, Iterator, Union

from baum.spec import MAGIC_SIZE, NODE_HEADER_SIZE


@total_ordering
class _NodeBase:
    """Shared conveniences; both variants delegate to the codec modules.

    Ordering: every leaf sorts before every inner node, leaves compare by
    payload bytes, inner nodes compare their children lexicographically.
    """

    _variant = 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, _NodeBase):
            return NotImplemented
        if self._variant != other._variant:
            return self._variant < other._variant
        if isinstance(self, Leaf):
            return self.payload < other.payload
        return self.children < other.children

    def to_bytes(self) -> bytes:
        """Serialize this tree to bytes."""
        from baum.writer import BaumWriter
        return BaumWriter.serialize(self)

    def write(self, path: str) -> int:
        """Write this tree to a .baum file. Returns bytes written."""
        from baum.writer import BaumWriter
        return BaumWriter.write(self, path)

    def __str__(self) -> str:
        from baum.notation import to_text
        return to_text(self)


@dataclass(frozen=True)
class Leaf(_NodeBase):
    """A node holding raw bytes."""

    payload: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.payload, bytes):
            if not isinstance(self.payload, (bytearray, memoryview)):
                raise TypeError(
                    f"Leaf payload must be bytes-like, got {type(self.payload).__name__}"
                )
            object.__setattr__(self, "payload", bytes(self.payload))

    @property
    def is_leaf(self) -> bool:
        return True

    @property
    def is_inner(self) -> bool:
        return False

    @property
    def length(self) -> int:
        """Byte count, as written to the length field."""
        return len(self.payload)


@dataclass(frozen=True)
class Inner(_NodeBase):
    """
    A node holding an ordered sequence of child nodes.

    Usage:
        tree = Inner([Leaf(b"\\x01"), Inner([Leaf(b"\\x02"), Leaf(b"\\x03")])])
        data = tree.to_bytes()
        tree.write("tree.baum")
    """

    _variant = 1

    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def is_inner(self) -> bool:
        return True

    @property
    def length(self) -> int:
        """Child count, as written to the length field."""
        return len(self.children)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __getitem__(self, index: int) -> Node:
        return self.children[index]


Node = Union[Leaf, Inner]


def leaf(payload: bytes | bytearray | Iterable[int] = b"") -> Leaf:
    """Build a leaf from bytes or an iterable of byte values."""
    if isinstance(payload, int):
        raise TypeError("leaf() takes bytes or an iterable of byte values, not int")
    return Leaf(bytes(payload))


def inner(*children: Node) -> Inner:
    """Build an inner node from positional children."""
    return Inner(children)


def walk(node: Node) -> Iterator[tuple[int, Node]]:
    """Yield (depth, node) in pre-order. Iterative, safe for deep trees."""
    stack: list[tuple[int, Node]] = [(0, node)]
    while stack:
        depth, current = stack.pop()
        yield depth, current
        if isinstance(current, Inner):
            for child in reversed(current.children):
                stack.append((depth + 1, child))


def encoded_size(node: Node) -> int:
    """Exact length of encode(node), computed without encoding."""
    size = MAGIC_SIZE
    for _, current in walk(node):
        size += NODE_HEADER_SIZE
        if isinstance(current, Leaf):
            size += len(current.payload)
    return size


def depth(node: Node) -> int:
    """Deepest nesting level; a lone root has depth 0."""
    return max(d for d, _ in walk(node))


def count_nodes(node: Node) -> tuple[int, int]:
    """Return (leaves, inner nodes)."""
    leaves = inners = 0
    for _, current in walk(node):
        if isinstance(current, Leaf):
            leaves += 1
        else:
            inners += 1
    return leaves, inners
