"""Streaming DEFLATE (RFC 1951) decompressor with an optional ring dictionary."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice

__all__ = ["InflateError", "DictionaryError", "Decompressor", "inflate"]


class InflateError(ValueError):
    """The compressed stream is malformed or truncated."""


class DictionaryError(InflateError):
    """A back-reference reaches further than the dictionary holds."""


_LENGTH_BITS = (
    0, 0, 0, 0, 0, 0, 0, 0,
    1, 1, 1, 1, 2, 2, 2, 2,
    3, 3, 3, 3, 4, 4, 4, 4,
    5, 5, 5, 5, 0,
)
_LENGTH_BASE = (
    3, 4, 5, 6, 7, 8, 9, 10,
    11, 13, 15, 17, 19, 23, 27, 31,
    35, 43, 51, 59, 67, 83, 99, 115,
    131, 163, 195, 227, 258,
)
_DIST_BITS = (
    0, 0, 0, 0, 1, 1, 2, 2,
    3, 3, 4, 4, 5, 5, 6, 6,
    7, 7, 8, 8, 9, 9, 10, 10,
    11, 11, 12, 12, 13, 13,
)
_DIST_BASE = (
    1, 2, 3, 4, 5, 7, 9, 13,
    17, 25, 33, 49, 65, 97, 129, 193,
    257, 385, 513, 769, 1025, 1537, 2049, 3073,
    4097, 6145, 8193, 12289, 16385, 24577,
)

# Order in which code-length code lengths are transmitted.
_CLCIDX = (16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15)

_MAX_CODE_BITS = 16


@dataclass(frozen=True)
class _Tree:
    counts: tuple[int, ...]
    symbols: tuple[int, ...]


def _build_tree(lengths: list[int]) -> _Tree:
    counts = [0] * _MAX_CODE_BITS
    for length in lengths:
        counts[length] += 1
    counts[0] = 0
    ordered = sorted((length, symbol) for symbol, length in enumerate(lengths) if length)
    return _Tree(tuple(counts), tuple(symbol for _, symbol in ordered))


_FIXED_LITERAL_TREE = _build_tree([8] * 144 + [9] * 112 + [7] * 24 + [8] * 8)
_FIXED_DISTANCE_TREE = _build_tree([5] * 32)


class Decompressor:
    """Inflates a raw DEFLATE stream held in ``source``.

    With ``dict_size`` of zero every byte produced so far may be referenced;
    otherwise back-references are served from a ring buffer of that size.
    The ``checksum_type`` and ``checksum`` attributes are left for container
    parsers to fill in; they are not updated while inflating.
    """

    def __init__(self, source, dict_size=0):
        if dict_size < 0:
            raise ValueError("dict_size must not be negative")
        self._source = bytes(source)
        self._pos = 0
        self.eof = False
        self.finished = False
        self.checksum_type: str | None = None
        self.checksum = 0
        self._tag = 0
        self._bitcount = 0
        self._dict_size = dict_size
        self._ring = bytearray(dict_size)
        self._ring_idx = 0
        self._history = bytearray()
        self._error: InflateError | None = None
        self._stream = self._blocks()

    def read_byte(self) -> int:
        """Return the next source byte, or 0 once the source is exhausted."""
        if self._pos < len(self._source):
            byte = self._source[self._pos]
            self._pos += 1
            return byte
        self.eof = True
        return 0

    def decompress(self, size) -> bytes:
        """Return up to ``size`` more output bytes; fewer only at stream end."""
        if size < 0:
            raise ValueError("size must not be negative")
        if self._error is not None:
            raise self._error
        if self.finished:
            return b""
        try:
            out = bytes(islice(self._stream, size))
        except InflateError as exc:
            self._error = exc
            raise
        if len(out) < size:
            self.finished = True
        return out

    def read_all(self) -> bytes:
        """Return all remaining output up to the end of the final block."""
        if self._error is not None:
            raise self._error
        try:
            out = bytes(self._stream)
        except InflateError as exc:
            self._error = exc
            raise
        self.finished = True
        return out

    # -- bit level ---------------------------------------------------------

    def _getbit(self) -> int:
        if self._bitcount == 0:
            self._tag = self.read_byte()
            self._bitcount = 8
        bit = self._tag & 1
        self._tag >>= 1
        self._bitcount -= 1
        return bit

    def _read_bits(self, num: int, base: int) -> int:
        value = 0
        for shift in range(num):
            if self._getbit():
                value |= 1 << shift
        return value + base

    def _decode_symbol(self, tree: _Tree) -> int:
        total = 0
        cur = 0
        length = 0
        while True:
            cur = 2 * cur + self._getbit()
            length += 1
            if length == _MAX_CODE_BITS:
                raise InflateError("invalid Huffman code")
            total += tree.counts[length]
            cur -= tree.counts[length]
            if cur < 0:
                break
        total += cur
        if not 0 <= total < len(tree.symbols):
            raise InflateError("invalid Huffman code")
        return tree.symbols[total]

    # -- output ------------------------------------------------------------

    def _put(self, byte: int) -> int:
        if self._dict_size:
            self._ring[self._ring_idx] = byte
            self._ring_idx = (self._ring_idx + 1) % self._dict_size
        else:
            self._history.append(byte)
        return byte

    # -- blocks ------------------------------------------------------------

    def _blocks(self) -> Iterator[int]:
        while True:
            final = self._getbit()
            btype = self._read_bits(2, 0)
            if btype == 0:
                yield from self._stored_block()
            elif btype == 1:
                yield from self._huffman_block(_FIXED_LITERAL_TREE, _FIXED_DISTANCE_TREE)
            elif btype == 2:
                literal_tree, distance_tree = self._decode_trees()
                yield from self._huffman_block(literal_tree, distance_tree)
            else:
                raise InflateError("invalid block type")
            if final:
                return

    def _stored_block(self) -> Iterator[int]:
        length = self.read_byte() | (self.read_byte() << 8)
        inverted = self.read_byte() | (self.read_byte() << 8)
        if length != (~inverted & 0xFFFF):
            raise InflateError("stored block length mismatch")
        self._bitcount = 0
        for _ in range(length):
            yield self._put(self.read_byte())

    def _decode_trees(self) -> tuple[_Tree, _Tree]:
        hlit = self._read_bits(5, 257)
        hdist = self._read_bits(5, 1)
        hclen = self._read_bits(4, 4)

        code_lengths = [0] * 19
        for index in _CLCIDX[:hclen]:
            code_lengths[index] = self._read_bits(3, 0)
        code_tree = _build_tree(code_lengths)

        limit = hlit + hdist
        lengths: list[int] = []
        while len(lengths) < limit:
            sym = self._decode_symbol(code_tree)
            if sym < 16:
                lengths.append(sym)
                continue
            if sym == 16:
                if not lengths:
                    raise InflateError("repeat code with no previous length")
                fill, repeat = lengths[-1], self._read_bits(2, 3)
            elif sym == 17:
                fill, repeat = 0, self._read_bits(3, 3)
            else:
                fill, repeat = 0, self._read_bits(7, 11)
            if len(lengths) + repeat > limit:
                raise InflateError("code lengths overflow")
            lengths.extend([fill] * repeat)

        return _build_tree(lengths[:hlit]), _build_tree(lengths[hlit:])

    def _huffman_block(self, literal_tree: _Tree, distance_tree: _Tree) -> Iterator[int]:
        while True:
            sym = self._decode_symbol(literal_tree)
            if self.eof:
                raise InflateError("unexpected end of compressed data")
            if sym < 256:
                yield self._put(sym)
                continue
            if sym == 256:
                return
            sym -= 257
            if sym >= 29:
                raise InflateError("invalid length code")
            length = self._read_bits(_LENGTH_BITS[sym], _LENGTH_BASE[sym])

            dist = self._decode_symbol(distance_tree)
            if dist >= 30:
                raise InflateError("invalid distance code")
            offset = self._read_bits(_DIST_BITS[dist], _DIST_BASE[dist])

            if self._dict_size:
                if offset > self._dict_size:
                    raise DictionaryError("distance exceeds dictionary size")
                position = (self._ring_idx - offset) % self._dict_size
                for _ in range(length):
                    yield self._put(self._ring[position])
                    position = (position + 1) % self._dict_size
            else:
                if offset > len(self._history):
                    raise InflateError("distance points before start of output")
                for _ in range(length):
                    yield self._put(self._history[-offset])


def inflate(data) -> bytes:
    """Decompress a complete raw DEFLATE stream."""
    return Decompressor(data).read_all()