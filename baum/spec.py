"""
Baum Format Specification v1
============================

Layout:
    BAUM1                        <- Magic (5 bytes, whole-stream marker, once)
    <node>                       <- Exactly one root node

    node := tag(1) length(8, little-endian u64) data
        tag 0x00 (leaf):  data = exactly <length> raw bytes
        tag 0x01 (inner): data = <length> child nodes, pre-order
        any other tag is invalid

Design Decisions:
    - No escaping, no quoting: payloads are length-prefixed raw bytes
    - Lengths are derived from content on write, never stored on the model
    - No header fields beyond the magic, no checksum, no total length
    - A stream holds exactly one tree; bytes after the root are an error

Example (root inner with a single empty leaf):
    42 41 55 4d 31                  BAUM1
    01 01 00 00 00 00 00 00 00      inner, 1 child
    00 00 00 00 00 00 00 00 00      leaf, 0 bytes
"""

# Magic bytes - first five bytes of every .baum stream
MAGIC = b"BAUM1"
MAGIC_SIZE = len(MAGIC)

# Node tags
TAG_LEAF = 0x00
TAG_INNER = 0x01

TAG_NAMES = {
    TAG_LEAF: "leaf",
    TAG_INNER: "inner",
}

# Length/count field: unsigned 64-bit little-endian
LENGTH_SIZE = 8
NODE_HEADER_SIZE = 1 + LENGTH_SIZE
MAX_LENGTH = 2 ** 64 - 1

# Safety limits
MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB max input size for reader

# Environment override for MAX_FILE_SIZE (read by the CLI)
MAX_FILE_SIZE_ENV = "BAUM_MAX_FILE_SIZE"

# File extension
EXTENSION = ".baum"

# Text notation
NOTATION_LEAF_PREFIX = "0x"
NOTATION_BYTE_SEPARATOR = "_"
