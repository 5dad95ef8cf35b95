"""
Baum Writer - Serializes a Node tree to .baum format.

Single pre-order pass:
  1. Magic, once, for the whole stream
  2. Per node: tag byte + u64 little-endian length + payload or children

The traversal keeps its own work stack, so tree depth is bounded by memory
rather than by Python's recursion limit.
"""

from __future__ import annotations

import io
import logging
import struct
from typing import BinaryIO

from baum.node import Leaf, Node
from baum.spec import MAGIC, TAG_LEAF, TAG_INNER, MAX_LENGTH

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<BQ")


class BaumWriter:

    @staticmethod
    def serialize(node: Node) -> bytes:
        """Serialize a tree to bytes. Pure: does not touch the input tree."""
        buf = io.BytesIO()
        BaumWriter.serialize_into(node, buf)
        return buf.getvalue()

    @staticmethod
    def serialize_into(node: Node, stream: BinaryIO) -> int:
        """Write the encoding of a tree to a binary stream. Returns bytes written."""
        stream.write(MAGIC)
        written = len(MAGIC)
        nodes = 0

        stack: list[Node] = [node]
        while stack:
            current = stack.pop()
            nodes += 1
            if isinstance(current, Leaf):
                payload = current.payload
                stream.write(_pack_header(TAG_LEAF, len(payload)))
                stream.write(payload)
                written += _HEADER.size + len(payload)
            else:
                children = current.children
                stream.write(_pack_header(TAG_INNER, len(children)))
                written += _HEADER.size
                # Reversed so the first child is popped first
                stack.extend(reversed(children))

        logger.debug("serialized %d nodes into %d bytes", nodes, written)
        return written

    @staticmethod
    def write(node: Node, path: str, mode: int = 0o644) -> int:
        """Write a tree to a .baum file atomically. Returns bytes written.

        Uses write-to-temp-then-rename so the target is never partially
        written. For trees produced piece by piece, use BaumStreamWriter.
        """
        import os
        import tempfile
        data = BaumWriter.serialize(node)
        dir_name = os.path.dirname(os.path.abspath(path)) or "."
        fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix=".baum.tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        logger.debug("wrote %s (%d bytes)", path, len(data))
        return len(data)


def _pack_header(tag: int, length: int) -> bytes:
    if length > MAX_LENGTH:
        raise OverflowError(f"Length {length} does not fit in 64 bits")
    return _HEADER.pack(tag, length)


def encode(node: Node) -> bytes:
    """Encode a tree. Total: every Node has exactly one encoding."""
    return BaumWriter.serialize(node)
