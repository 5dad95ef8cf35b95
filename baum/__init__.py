"""
Baum - binary encoding for ordered, unlabeled trees.

Every node is a raw byte leaf or an ordered list of children.
No escaping, no quoting, no grammar.
"""

__version__ = "0.2.0"
__format_version__ = "1"

from baum.spec import MAGIC, EXTENSION
from baum.node import Leaf, Inner, Node, leaf, inner, walk
from baum.errors import (
    DecodeError, BadMagic, InvalidTag, UnexpectedEof, TrailingData,
    NotationError,
)
from baum.writer import BaumWriter, encode
from baum.reader import BaumReader, decode
from baum.stream import BaumStreamWriter
from baum.notation import to_text, from_text
