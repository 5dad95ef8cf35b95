"""
Security Tests - Hostile and corrupted inputs.

Every malformed stream must fail with a DecodeError subclass at the first
violation; no silently wrong tree, no other exception type, no huge
allocation driven by a declared length.
"""

import random

import pytest

from baum.errors import BadMagic, DecodeError, InvalidTag, UnexpectedEof
from baum.node import Inner, Leaf, walk
from baum.reader import BaumReader, decode
from baum.writer import encode


def _sample_trees():
    return [
        Leaf(b""),
        Inner([]),
        Leaf(b"payload"),
        Inner([
            Leaf(b"\x01"),
            Inner([Leaf(b"\x02"), Leaf(b"\x03")]),
            Leaf(b"\x04\x05"),
        ]),
        Inner([Inner([Inner([Leaf(b"deep")])]), Inner([]), Leaf(b"")]),
    ]


class TestTruncation:

    def test_every_truncation_is_unexpected_eof(self):
        for tree in _sample_trees():
            data = encode(tree)
            for cut in range(5, len(data)):
                with pytest.raises(UnexpectedEof):
                    decode(data[:cut])

    def test_truncation_inside_magic_is_bad_magic(self):
        data = encode(Leaf(b"x"))
        for cut in range(0, 5):
            with pytest.raises(BadMagic):
                decode(data[:cut])


class TestInvalidTags:

    def test_every_tag_position_rejected(self):
        for tree in _sample_trees():
            data = encode(tree)
            tag_offsets = [h.offset for h in BaumReader.scan(data)]
            for offset in tag_offsets:
                for bad in (0x02, 0x7f, 0xff):
                    corrupted = data[:offset] + bytes([bad]) + data[offset + 1:]
                    with pytest.raises(InvalidTag) as exc_info:
                        decode(corrupted)
                    assert exc_info.value.offset == offset
                    assert exc_info.value.value == bad


class TestMagicGate:

    def test_any_other_prefix_is_bad_magic(self):
        body = encode(Leaf(b"abc"))[5:]
        for prefix in (b"BAUM0", b"BAUM2", b"baum1", b"XAUM1", b"\x00" * 5, b"PK\x03\x04\x14"):
            with pytest.raises(BadMagic):
                decode(prefix + body)

    def test_bad_magic_reports_found_bytes(self):
        with pytest.raises(BadMagic) as exc_info:
            decode(b"GIF89a")
        assert exc_info.value.found == b"GIF89"


class TestHostileLengths:

    def test_huge_child_count_fails_fast(self):
        data = b"BAUM1" + b"\x01" + b"\xff" * 8 + encode(Leaf(b"a"))[5:]
        with pytest.raises(UnexpectedEof) as exc_info:
            decode(data)
        assert exc_info.value.offset == len(data)

    def test_huge_leaf_length_fails_without_allocating(self):
        data = b"BAUM1" + b"\x00" + b"\xff" * 8 + b"tiny"
        with pytest.raises(UnexpectedEof) as exc_info:
            decode(data)
        assert exc_info.value.needed == 2 ** 64 - 1
        assert exc_info.value.available == 4

    def test_leaf_length_one_too_many(self):
        data = bytearray(encode(Leaf(b"abcd")))
        data[6] = 5
        with pytest.raises(UnexpectedEof):
            decode(bytes(data))

    def test_leaf_length_one_too_few(self):
        data = bytearray(encode(Leaf(b"abcd")))
        data[6] = 3
        with pytest.raises(DecodeError):
            decode(bytes(data))


class TestDeepNesting:

    def test_deep_chain_decodes_without_recursion(self):
        levels = 50_000
        data = b"BAUM1" + (b"\x01" + (1).to_bytes(8, "little")) * levels + b"\x00" + bytes(8)
        tree = decode(data)
        assert max(d for d, _ in walk(tree)) == levels

    def test_deep_chain_encodes_without_recursion(self):
        levels = 50_000
        tree = Leaf(b"bottom")
        for _ in range(levels):
            tree = Inner((tree,))
        data = encode(tree)
        assert len(data) == 5 + 9 * (levels + 1) + 6

    def test_deep_truncated_chain(self):
        data = b"BAUM1" + (b"\x01" + (1).to_bytes(8, "little")) * 10_000
        with pytest.raises(UnexpectedEof) as exc_info:
            decode(data)
        assert exc_info.value.offset == len(data)


class TestFuzz:

    def test_random_bytes_only_raise_decode_errors(self):
        rng = random.Random(1234)
        for _ in range(2000):
            size = rng.randrange(0, 64)
            data = b"BAUM1" + bytes(rng.randrange(256) for _ in range(size))
            try:
                tree = decode(data)
            except DecodeError:
                continue
            assert encode(tree) == data

    def test_bit_flips_on_valid_encoding(self):
        rng = random.Random(99)
        data = encode(_sample_trees()[3])
        for _ in range(500):
            corrupted = bytearray(data)
            pos = rng.randrange(len(corrupted))
            corrupted[pos] ^= 1 << rng.randrange(8)
            try:
                tree = decode(bytes(corrupted))
            except DecodeError:
                continue
            # A surviving flip must be a payload byte, giving a different tree
            assert encode(tree) == bytes(corrupted)
