"""
Baum Reader - Validating parser for .baum streams.

Validation features:
  - Magic check on the first 5 bytes before anything else is read
  - Tag checked the moment it is read (reported with offset and value)
  - Every length field checked against the bytes actually remaining
  - Trailing bytes after the root are rejected by default
  - Input size limit (prevents OOM from oversized files)

Robustness features:
  - Explicit work stack instead of recursion (deep nesting is only
    bounded by memory)
  - Declared child counts are never used to pre-allocate, so a hostile
    count with nothing behind it fails at the first missing tag byte
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import BinaryIO, Iterator, NamedTuple, Union

from baum.errors import BadMagic, InvalidTag, TrailingData, UnexpectedEof
from baum.node import Inner, Leaf, Node
from baum.spec import (
    MAGIC, MAGIC_SIZE, TAG_LEAF, TAG_INNER, TAG_NAMES,
    LENGTH_SIZE, NODE_HEADER_SIZE, MAX_FILE_SIZE,
)

logger = logging.getLogger(__name__)

_LENGTH = struct.Struct("<Q")

Buffer = Union[bytes, bytearray, memoryview]


class NodeHeader(NamedTuple):
    """Tag and length of one node, as found on the wire."""
    offset: int   # absolute offset of the tag byte
    depth: int    # root is 0
    tag: int
    length: int   # byte count for leaves, child count for inner nodes

    @property
    def payload_offset(self) -> int:
        return self.offset + NODE_HEADER_SIZE

    @property
    def kind(self) -> str:
        return TAG_NAMES[self.tag]


class BaumReader:
    """
    .baum stream reader.

    Usage:
        # Full parse (bytes already in memory)
        tree = BaumReader.parse(data)

        # From a file
        tree = BaumReader.read("tree.baum")

        # Header listing without building a tree
        for header in BaumReader.scan(data):
            print(header.offset, header.kind, header.length)
    """

    @staticmethod
    def is_baum(path: str | Path) -> bool:
        """Fast check if a file starts with the Baum magic. Reads 5 bytes."""
        with open(path, "rb") as f:
            head = f.read(MAGIC_SIZE)
        return head == MAGIC

    @staticmethod
    def is_baum_bytes(data: Buffer) -> bool:
        """Fast check if bytes start with the Baum magic."""
        return bytes(data[:MAGIC_SIZE]) == MAGIC

    @classmethod
    def read(cls, path: str | Path, max_size: int | None = MAX_FILE_SIZE,
             strict: bool = True) -> Node:
        """Fully parse a .baum file."""
        path = Path(path)
        file_size = path.stat().st_size
        if max_size is not None and file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        with open(path, "rb") as f:
            data = f.read()
        return cls.parse(data, max_size=None, strict=strict)

    @classmethod
    def parse_from(cls, stream: BinaryIO, max_size: int | None = MAX_FILE_SIZE,
                   strict: bool = True) -> Node:
        """Read a binary stream to its end and parse it."""
        if max_size is None:
            data = stream.read()
        else:
            data = stream.read(max_size + 1)
            if len(data) > max_size:
                raise ValueError(
                    f"Input exceeds maximum {max_size} bytes. "
                    f"Pass max_size= to override."
                )
        return cls.parse(data, max_size=None, strict=strict)

    @classmethod
    def parse(cls, data: Buffer, max_size: int | None = MAX_FILE_SIZE,
              strict: bool = True) -> Node:
        """Parse bytes into a tree.

        Raises a DecodeError subclass at the first structural violation.
        With strict=False, bytes after the root node are ignored instead
        of raising TrailingData.
        """
        if max_size is not None and len(data) > max_size:
            raise ValueError(
                f"Input size {len(data)} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        view = memoryview(data)

        # Open inner nodes: (declared child count, children so far)
        frames: list[tuple[int, list[Node]]] = []
        root: Node | None = None

        for header in cls.scan(view, strict=strict):
            node: Node | None
            if header.tag == TAG_LEAF:
                start = header.payload_offset
                node = Leaf(bytes(view[start:start + header.length]))
            elif header.length:
                frames.append((header.length, []))
                continue
            else:
                node = Inner(())

            # Close every inner node this child completes
            while node is not None and frames:
                count, children = frames[-1]
                children.append(node)
                if len(children) < count:
                    node = None
                else:
                    frames.pop()
                    node = Inner(children)
            if node is not None:
                root = node

        logger.debug("parsed %d bytes", len(view))
        return root

    @staticmethod
    def scan(data: Buffer, strict: bool = True) -> Iterator[NodeHeader]:
        """Validate a stream and yield every node header in pre-order.

        Headers are yielded as they are validated; on malformed input the
        error is raised after the headers that precede the violation.
        """
        view = memoryview(data)
        size = len(view)

        if size < MAGIC_SIZE or bytes(view[:MAGIC_SIZE]) != MAGIC:
            raise BadMagic(bytes(view[:MAGIC_SIZE]))

        pos = MAGIC_SIZE
        # Nodes still to read at each open level; the root level holds one
        pending = [1]
        while pending:
            if not pending[-1]:
                pending.pop()
                continue
            pending[-1] -= 1
            depth = len(pending) - 1

            if pos >= size:
                raise UnexpectedEof(pos, 1, 0)
            tag = view[pos]
            if tag != TAG_LEAF and tag != TAG_INNER:
                raise InvalidTag(pos, tag)

            remaining = size - pos - 1
            if remaining < LENGTH_SIZE:
                raise UnexpectedEof(pos + 1, LENGTH_SIZE, remaining)
            (length,) = _LENGTH.unpack_from(view, pos + 1)

            header = NodeHeader(pos, depth, tag, length)
            pos += NODE_HEADER_SIZE

            if tag == TAG_LEAF:
                remaining = size - pos
                if remaining < length:
                    raise UnexpectedEof(pos, length, remaining)
                pos += length
                yield header
            else:
                yield header
                pending.append(length)

        if pos < size:
            if strict:
                raise TrailingData(pos, size - pos)
            logger.debug("ignoring %d trailing bytes at offset %d", size - pos, pos)


def decode(data: Buffer, strict: bool = True) -> Node:
    """Decode a .baum byte sequence. Raises DecodeError on malformed input."""
    return BaumReader.parse(data, max_size=None, strict=strict)
