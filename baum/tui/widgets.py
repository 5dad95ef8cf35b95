"""Baum TUI Widgets - Tree and payload panels for the Baum viewer."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.reactive import reactive
from textual.widgets import Label, Static, Tree

from baum.node import Inner, Leaf, Node
from baum.notation import format_leaf

MAX_LABEL_PREVIEW = 8   # payload bytes shown inline in a tree label


def node_label(node: Node) -> str:
    """One-line label for a node in the tree widget."""
    if isinstance(node, Leaf):
        preview = format_leaf(node.payload[:MAX_LABEL_PREVIEW])
        if node.length > MAX_LABEL_PREVIEW:
            preview += "..."
        return f"leaf [{node.length} bytes] {preview}"
    return f"inner [{node.length} children]"


def hexdump(payload: bytes, width: int = 16) -> str:
    """Offset / hex / ASCII dump, one row per `width` bytes."""
    rows = []
    for start in range(0, len(payload), width):
        chunk = payload[start:start + width]
        hex_part = " ".join(f"{b:02x}" for b in chunk)
        text_part = "".join(chr(b) if 0x20 <= b < 0x7f else "." for b in chunk)
        rows.append(f"{start:08x}  {hex_part:<{width * 3 - 1}}  {text_part}")
    return "\n".join(rows)


class NodeTree(Tree):
    """Collapsible view of a decoded tree. Node data holds the Baum node."""

    DEFAULT_CSS = """
    NodeTree {
        width: 1fr;
        border: solid $accent;
    }
    """

    def __init__(self, root: Node, **kwargs) -> None:
        super().__init__(Text(node_label(root)), data=root, **kwargs)
        self._populate(root)

    def _populate(self, root: Node) -> None:
        # Work stack of (widget node, baum node); avoids recursion on deep trees
        stack = [(self.root, root)]
        while stack:
            widget_node, node = stack.pop()
            if not isinstance(node, Inner):
                continue
            for child in node.children:
                if isinstance(child, Inner):
                    added = widget_node.add(Text(node_label(child)), data=child)
                    stack.append((added, child))
                else:
                    widget_node.add_leaf(Text(node_label(child)), data=child)
        self.root.expand()


class PayloadPanel(Static):
    """Hex dump of the highlighted leaf, or a summary for inner nodes."""

    DEFAULT_CSS = """
    PayloadPanel {
        width: 80;
        border: solid $accent;
        padding: 1;
        overflow: auto;
    }
    PayloadPanel .payload-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    PayloadPanel .payload-body {
        color: $text;
    }
    """

    current_label = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._title_widget: Label | None = None
        self._body_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._title_widget = Label("Select a node", markup=False, classes="payload-title")
        # Payload bytes are arbitrary; never interpret them as markup
        self._body_widget = Static("", markup=False, classes="payload-body")
        yield self._title_widget
        yield self._body_widget

    def show_node(self, node: Node) -> None:
        self.current_label = node_label(node)
        if self._title_widget:
            self._title_widget.update(f"--- {self.current_label} ---")
        if self._body_widget:
            if isinstance(node, Leaf):
                self._body_widget.update(hexdump(node.payload) or "(empty)")
            else:
                self._body_widget.update(
                    "\n".join(node_label(child) for child in node.children) or "(no children)"
                )
        self.scroll_home()
