"""
Baum errors.

Decoding is the only fallible half of the codec. Every decode failure is a
DecodeError carrying the absolute byte offset of the first violation found
during the single left-to-right scan. The text notation has its own
NotationError family, split into lexing and parsing failures.
"""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for every malformed .baum input."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


class BadMagic(DecodeError):
    """The first five bytes are missing or are not b"BAUM1"."""

    def __init__(self, found: bytes) -> None:
        super().__init__(f"Bad magic: expected b'BAUM1', found {found!r}", 0)
        self.found = found


class InvalidTag(DecodeError):
    """A node tag byte is neither 0x00 (leaf) nor 0x01 (inner)."""

    def __init__(self, offset: int, value: int) -> None:
        super().__init__(
            f"Invalid node tag 0x{value:02x} at offset {offset}", offset
        )
        self.value = value


class UnexpectedEof(DecodeError):
    """Fewer bytes remain than a tag, length field or payload needs."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"Unexpected end of input at offset {offset}: "
            f"needed {needed} bytes, {available} available",
            offset,
        )
        self.needed = needed
        self.available = available


class TrailingData(DecodeError):
    """Bytes remain after the root node was fully parsed."""

    def __init__(self, offset: int, remaining: int) -> None:
        super().__init__(
            f"{remaining} trailing bytes after root node at offset {offset}",
            offset,
        )
        self.remaining = remaining


class NotationError(ValueError):
    """Malformed text notation."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at position {position})")
        self.position = position


class NotationLexError(NotationError):
    pass


class NotationParseError(NotationError):
    pass
