"""Generate an example .baum file to see what the format looks like."""

import sys
sys.path.insert(0, str(__import__("pathlib").Path(__file__).parent.parent))

from baum.node import Inner, Leaf
from baum.reader import BaumReader

# A small directory listing: (name, (size, mode)) per entry
tree = Inner([
    Inner([Leaf(b"README.md"), Inner([Leaf((1842).to_bytes(4, "little")), Leaf(b"\x01\xa4")])]),
    Inner([Leaf(b"src"), Inner([
        Inner([Leaf(b"main.py"), Inner([Leaf((311).to_bytes(4, "little")), Leaf(b"\x01\xed")])]),
    ])]),
    Inner([Leaf(b"empty"), Inner([])]),
])

out = __import__("pathlib").Path(__file__).parent / "listing.baum"
nbytes = tree.write(str(out))
print(f"Wrote {out} ({nbytes} bytes)")
print()
print(tree)
print()
for header in BaumReader.scan(out.read_bytes()):
    print(f"{header.offset:>5d}  {'  ' * header.depth}{header.kind} {header.length}")
