"""
Baum CLI - Command-line interface for .baum tree files.

Commands:
  baum encode   - Encode text notation into a .baum file
  baum decode   - Print a .baum file as text notation
  baum inspect  - List node headers with byte offsets, plus tree stats
  baum validate - Validate a .baum file (magic, tags, lengths, trailing data)
  baum identify - Quick check if a file is Baum format
  baum view     - View a .baum file in the terminal (TUI)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger("baum.cli")


def _max_size() -> int:
    """Input size limit, overridable via BAUM_MAX_FILE_SIZE."""
    from baum.spec import MAX_FILE_SIZE, MAX_FILE_SIZE_ENV

    raw = os.environ.get(MAX_FILE_SIZE_ENV, "")
    if not raw:
        return MAX_FILE_SIZE
    try:
        value = int(raw)
    except ValueError:
        print(f"Error: {MAX_FILE_SIZE_ENV} must be an integer, got {raw!r}", file=sys.stderr)
        sys.exit(1)
    if value <= 0:
        print(f"Error: {MAX_FILE_SIZE_ENV} must be positive, got {value}", file=sys.stderr)
        sys.exit(1)
    return value


def cmd_encode(args: argparse.Namespace) -> None:
    """Encode text notation into a .baum file."""
    from baum.errors import NotationError
    from baum.notation import from_text

    if args.content:
        text = args.content
    elif args.file:
        file_path = Path(args.file)
        if not file_path.is_file():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            sys.exit(1)
        text = file_path.read_text(encoding="utf-8")
    elif not sys.stdin.isatty():
        text = sys.stdin.read()
    else:
        print("Error: Provide notation via --content, --file, or stdin", file=sys.stderr)
        sys.exit(1)

    try:
        node = from_text(text)
    except NotationError as e:
        print(f"Error: invalid notation: {e}", file=sys.stderr)
        sys.exit(1)

    output = args.output or "output.baum"
    nbytes = node.write(output)
    print(f"Encoded {output} ({nbytes} bytes)")


def cmd_decode(args: argparse.Namespace) -> None:
    """Print a .baum file as text notation."""
    from baum.reader import BaumReader

    try:
        node = BaumReader.read(args.path, max_size=_max_size())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    text = str(node)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Decoded {args.path} -> {args.output}")
    else:
        print(text)


def cmd_inspect(args: argparse.Namespace) -> None:
    """Inspect a .baum file - list node headers and summary stats."""
    from baum.errors import DecodeError
    from baum.reader import BaumReader
    from baum.spec import MAGIC

    path = Path(args.path)
    size = path.stat().st_size
    max_size = _max_size()
    if size > max_size:
        print(f"Error: File size {size} exceeds maximum {max_size} bytes", file=sys.stderr)
        sys.exit(1)
    data = path.read_bytes()

    print(f"BAUM {MAGIC.decode('ascii')}  size={size}")
    print()
    print("NODES:")

    leaves = inners = payload = 0
    max_depth = 0
    shown = 0
    try:
        for header in BaumReader.scan(data):
            if header.kind == "leaf":
                leaves += 1
                payload += header.length
                unit = "bytes"
            else:
                inners += 1
                unit = "children"
            max_depth = max(max_depth, header.depth)
            if args.limit is None or shown < args.limit:
                indent = "  " * header.depth
                print(f"  offset={header.offset:>8d}  {indent}{header.kind} ({header.length} {unit})")
                shown += 1
    except DecodeError as e:
        print()
        print(f"ERROR: {e}")
        sys.exit(1)

    total = leaves + inners
    if shown < total:
        print(f"  ... {total - shown} more")
    print()
    print("SUMMARY:")
    print(f"  nodes:    {total}")
    print(f"  leaves:   {leaves}")
    print(f"  inner:    {inners}")
    print(f"  depth:    {max_depth}")
    print(f"  payload:  {payload} bytes")


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a .baum file."""
    from baum.errors import DecodeError
    from baum.node import count_nodes
    from baum.reader import BaumReader

    path = args.path

    # Quick magic byte check
    if not BaumReader.is_baum(path):
        print(f"FAIL: {path} is not a valid Baum file (bad magic bytes)")
        sys.exit(1)

    try:
        node = BaumReader.read(path, max_size=_max_size(), strict=not args.lenient)
    except DecodeError as e:
        print(f"FAIL: {path}: {type(e).__name__}: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"FAIL: {e}")
        sys.exit(1)

    leaves, inners = count_nodes(node)
    print(f"OK: {path} is a valid Baum file")
    print(f"    Nodes: {leaves + inners} ({leaves} leaves, {inners} inner)")


def cmd_identify(args: argparse.Namespace) -> None:
    """Quick check if a file is Baum format."""
    from baum.reader import BaumReader

    is_baum = BaumReader.is_baum(args.path)
    if is_baum:
        print(f"{args.path}: Baum file")
    else:
        print(f"{args.path}: not Baum")
    sys.exit(0 if is_baum else 1)


def cmd_view(args: argparse.Namespace) -> None:
    """View a .baum file in the TUI."""
    try:
        from baum.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install \"baum[tui]\"",
            file=sys.stderr,
        )
        sys.exit(1)
    run_viewer(args.path, max_size=_max_size())


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="baum",
        description="Baum - binary encoding for ordered, unlabeled trees.",
    )
    from baum import __version__
    parser.add_argument("--version", action="version", version=f"baum {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # encode
    p_encode = sub.add_parser("encode", help="Encode text notation into a .baum file")
    p_encode.add_argument("-o", "--output", help="Output file path (default: output.baum)")
    p_encode.add_argument("-c", "--content", help="Notation string, e.g. '(0x01 0x02_03)'")
    p_encode.add_argument("-f", "--file", help="Read notation from file")

    # decode
    p_decode = sub.add_parser("decode", help="Print a .baum file as text notation")
    p_decode.add_argument("path", help="Path to .baum file")
    p_decode.add_argument("-o", "--output", help="Write notation to file instead of stdout")

    # inspect
    p_inspect = sub.add_parser("inspect", help="Inspect a .baum file")
    p_inspect.add_argument("path", help="Path to .baum file")
    p_inspect.add_argument("-n", "--limit", type=int, default=None, help="Show at most N nodes")

    # validate
    p_validate = sub.add_parser("validate", help="Validate a .baum file")
    p_validate.add_argument("path", help="Path to .baum file")
    p_validate.add_argument("--lenient", action="store_true",
                            help="Ignore bytes after the root node")

    # identify
    p_identify = sub.add_parser("identify", help="Quick check if a file is Baum")
    p_identify.add_argument("path", help="Path to file")

    # view
    p_view = sub.add_parser("view", help="View a .baum file (TUI)")
    p_view.add_argument("path", help="Path to .baum file")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if not args.command:
        print("Baum - binary encoding for ordered, unlabeled trees.\n")
        print("Usage:")
        print("  baum encode -c \"(0x01 (0x02 0x03) 0x04_05)\" -o tree.baum")
        print("  baum decode tree.baum")
        print("  baum inspect tree.baum")
        print("  baum validate tree.baum")
        print("  baum identify tree.baum")
        print("  baum view tree.baum")
        print()
        print("Pipe from stdin:")
        print("  echo \"(0x 0xff)\" | baum encode -o tree.baum")
        print()
        print("Run 'baum <command> --help' for details on any command.")
        sys.exit(0)

    commands = {
        "encode": cmd_encode,
        "decode": cmd_decode,
        "inspect": cmd_inspect,
        "validate": cmd_validate,
        "identify": cmd_identify,
        "view": cmd_view,
    }

    logger.debug("running command %s", args.command)
    commands[args.command](args)


if __name__ == "__main__":
    main()
