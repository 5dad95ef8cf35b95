"""Baum TUI Viewer - Textual app with tree and payload panels."""

from __future__ import annotations

import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Tree

from baum.node import Node
from baum.reader import BaumReader
from baum.spec import MAX_FILE_SIZE
from baum.tui.widgets import NodeTree, PayloadPanel


class BaumViewerApp(App):
    """TUI viewer for .baum files. Tree on the left, payload on the right."""

    TITLE = "Baum Viewer"
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-area {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("e", "expand_all", "Expand all", show=True),
        Binding("c", "collapse_all", "Collapse all", show=True),
    ]

    def __init__(self, root: Node, title: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._root = root
        if title:
            self.title = f"Baum Viewer - {title}"

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            yield NodeTree(self._root, id="tree")
            yield PayloadPanel(id="payload")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#payload", PayloadPanel).show_node(self._root)
        self.query_one("#tree", NodeTree).focus()

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted) -> None:
        if event.node.data is not None:
            self.query_one("#payload", PayloadPanel).show_node(event.node.data)

    def action_expand_all(self) -> None:
        self.query_one("#tree", NodeTree).root.expand_all()

    def action_collapse_all(self) -> None:
        tree = self.query_one("#tree", NodeTree)
        tree.root.collapse_all()
        tree.root.expand()


def run_viewer(path: str | Path, max_size: int | None = MAX_FILE_SIZE) -> None:
    """Launch the Baum TUI viewer."""
    path = Path(path)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    if not BaumReader.is_baum(path):
        print(f"Error: Not a Baum file: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        root = BaumReader.read(path, max_size=max_size)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = BaumViewerApp(root, title=path.name)
    app.run()
