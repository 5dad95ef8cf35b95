"""
Baum Streaming Writer - Write a tree to disk node by node.

Useful when the tree is produced incrementally and should not be held in
memory as a whole.

Design:
    BAUM1                           <- Magic written on open
    01 | ff ff ff ff ff ff ff ff    <- begin_inner(): placeholder count
    00 | 03 00 .. 00 | 61 62 63     <- leaf(b"abc") written immediately
    ...
    01 | 02 00 00 00 00 00 00 00    <- end_inner(): count patched in place

Child counts are only known once an inner node ends, so the writer seeks
back to the placeholder and patches it. The target must be seekable.
The placeholder is the largest possible count, so a file abandoned
mid-tree fails to decode with UnexpectedEof instead of passing as a
shorter tree.

Usage:
    with BaumStreamWriter("output.baum") as w:
        with w.inner():
            w.leaf(b"first")
            with w.inner():
                w.leaf(b"nested")
            w.leaf(b"last")
"""

from __future__ import annotations

import logging
import os
import struct
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from baum.spec import MAGIC, TAG_LEAF, TAG_INNER, MAX_LENGTH

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<BQ")
_LENGTH = struct.Struct("<Q")


class BaumStreamWriter:
    """
    Streaming .baum writer. Nodes go to disk in pre-order as they arrive.
    The file is complete once every inner node has ended and close() runs.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._handle = open(self.path, "wb")
        # Open inner nodes: [offset of tag byte, children written so far]
        self._open: list[list[int]] = []
        self._has_root = False
        self._nodes = 0
        self._closed = False
        self._handle.write(MAGIC)

    def leaf(self, payload: bytes) -> None:
        """Write a leaf as the next node."""
        self._check_writable()
        payload = bytes(payload)
        if len(payload) > MAX_LENGTH:
            raise OverflowError(f"Length {len(payload)} does not fit in 64 bits")
        self._handle.write(_HEADER.pack(TAG_LEAF, len(payload)))
        self._handle.write(payload)
        self._count_node()

    def begin_inner(self) -> None:
        """Start an inner node. Following nodes become its children."""
        self._check_writable()
        offset = self._handle.tell()
        self._handle.write(_HEADER.pack(TAG_INNER, MAX_LENGTH))
        self._count_node()
        self._open.append([offset, 0])

    def end_inner(self) -> None:
        """Finish the innermost open inner node and patch its child count."""
        if self._closed:
            raise RuntimeError("Cannot write to a closed BaumStreamWriter")
        if not self._open:
            raise RuntimeError("end_inner() without a matching begin_inner()")
        offset, count = self._open.pop()
        end = self._handle.tell()
        self._handle.seek(offset + 1)
        self._handle.write(_LENGTH.pack(count))
        self._handle.seek(end)

    @contextmanager
    def inner(self) -> Iterator[BaumStreamWriter]:
        """Context manager around begin_inner()/end_inner()."""
        self.begin_inner()
        yield self
        self.end_inner()

    def close(self) -> None:
        """Flush and close. Raises RuntimeError if the tree is incomplete."""
        if self._closed:
            return
        self._handle.flush()
        os.fsync(self._handle.fileno())
        self._handle.close()
        self._closed = True
        if self._open:
            raise RuntimeError(
                f"Incomplete tree in {self.path}: "
                f"{len(self._open)} inner node(s) still open"
            )
        if not self._has_root:
            raise RuntimeError(f"Incomplete tree in {self.path}: no root node")
        logger.debug("streamed %d nodes to %s", self._nodes, self.path)

    def _check_writable(self) -> None:
        if self._closed:
            raise RuntimeError("Cannot write to a closed BaumStreamWriter")
        if self._has_root and not self._open:
            raise RuntimeError("Stream already holds a complete root node")

    def _count_node(self) -> None:
        self._nodes += 1
        if self._open:
            self._open[-1][1] += 1
        else:
            self._has_root = True

    def __enter__(self) -> BaumStreamWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        elif not self._closed:
            # Leave the partial file for inspection without masking the error
            self._handle.close()
            self._closed = True

    @property
    def nodes_written(self) -> int:
        return self._nodes

    @property
    def bytes_written(self) -> int:
        return self._handle.tell() if not self._closed else self.path.stat().st_size
