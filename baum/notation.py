"""
Baum Notation - Human-readable text form of a tree.

    leaf   0x01_02_03      hex byte pairs joined by underscores ("0x" = empty)
    inner  (a b c)         children separated by whitespace

Example:
    (0x01_02_03 (0x 0x01 0x23_10_0a_bc))

Reading is lenient: whitespace between tokens is ignored, underscores may
appear anywhere inside a hex run, uppercase digits are accepted, and an odd
digit count makes the first digit a byte of its own (0x123 -> 01 23).
Writing is canonical, so to_text(from_text(s)) normalises s.
"""

from __future__ import annotations

from typing import NamedTuple

from baum.errors import NotationLexError, NotationParseError
from baum.node import Inner, Leaf, Node
from baum.spec import NOTATION_LEAF_PREFIX, NOTATION_BYTE_SEPARATOR

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

LPAREN = "("
RPAREN = ")"
BYTES = "bytes"

# Markers interleaved with nodes on the render stack
_CLOSE = object()
_SPACE = object()


class Token(NamedTuple):
    kind: str
    value: bytes
    position: int


def format_leaf(payload: bytes) -> str:
    return NOTATION_LEAF_PREFIX + NOTATION_BYTE_SEPARATOR.join(f"{b:02x}" for b in payload)


def to_text(node: Node) -> str:
    """Render a tree in canonical notation."""
    out: list[str] = []
    stack: list[object] = [node]
    while stack:
        item = stack.pop()
        if item is _CLOSE:
            out.append(")")
        elif item is _SPACE:
            out.append(" ")
        elif isinstance(item, Leaf):
            out.append(format_leaf(item.payload))
        else:
            out.append("(")
            stack.append(_CLOSE)
            children = item.children
            for i in range(len(children) - 1, -1, -1):
                stack.append(children[i])
                if i > 0:
                    stack.append(_SPACE)
    return "".join(out)


def tokenize(text: str) -> list[Token]:
    """Split notation into tokens. Raises NotationLexError."""
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == "(":
            tokens.append(Token(LPAREN, b"", i))
            i += 1
        elif c == ")":
            tokens.append(Token(RPAREN, b"", i))
            i += 1
        elif c == "0":
            start = i
            if i + 1 >= n or text[i + 1] != "x":
                raise NotationLexError("Expected 'x' after '0'", i + 1)
            i += 2
            digits: list[int] = []
            while i < n:
                d = text[i]
                if d in _HEX_DIGITS:
                    digits.append(int(d, 16))
                elif d != NOTATION_BYTE_SEPARATOR:
                    break
                i += 1
            tokens.append(Token(BYTES, _pack_nibbles(digits), start))
        elif c.isspace():
            i += 1
        else:
            raise NotationLexError(f"Unexpected character {c!r}", i)
    return tokens


def _pack_nibbles(digits: list[int]) -> bytes:
    out = bytearray()
    if len(digits) % 2:
        out.append(digits[0])
        digits = digits[1:]
    for hi, lo in zip(digits[::2], digits[1::2]):
        out.append(hi * 0x10 + lo)
    return bytes(out)


def parse_tokens(tokens: list[Token]) -> Node:
    """Build a tree from tokens. Raises NotationParseError."""
    if not tokens:
        raise NotationParseError("Empty input", 0)

    open_children: list[tuple[int, list[Node]]] = []
    root: Node | None = None

    for token in tokens:
        if root is not None:
            raise NotationParseError("Unexpected characters after node", token.position)
        if token.kind == LPAREN:
            open_children.append((token.position, []))
            continue
        if token.kind == RPAREN:
            if not open_children:
                raise NotationParseError("Unexpected ')'", token.position)
            node: Node = Inner(open_children.pop()[1])
        else:
            node = Leaf(token.value)

        if open_children:
            open_children[-1][1].append(node)
        else:
            root = node

    if open_children:
        raise NotationParseError("Unclosed '('", open_children[-1][0])
    return root


def from_text(text: str) -> Node:
    """Parse notation into a tree."""
    return parse_tokens(tokenize(text))
