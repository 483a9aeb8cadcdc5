"""Bit-level DEFLATE encoder that emits a single fixed-Huffman block."""

from __future__ import annotations

from bisect import bisect_right

__all__ = ["BitWriter", "encode_literals"]

_MAX_PENDING_BITS = 32
_MIN_MATCH = 3
_MAX_MATCH = 258
_MAX_DISTANCE = 32768

_MIRROR = tuple(int(f"{value:08b}"[::-1], 2) for value in range(256))

# (extra bits, smallest length, largest length) for length codes 257..285.
_LENGTH_CODES = (
    (0, 3, 3), (0, 4, 4), (0, 5, 5), (0, 6, 6),
    (0, 7, 7), (0, 8, 8), (0, 9, 9), (0, 10, 10),
    (1, 11, 12), (1, 13, 14), (1, 15, 16), (1, 17, 18),
    (2, 19, 22), (2, 23, 26), (2, 27, 30), (2, 31, 34),
    (3, 35, 42), (3, 43, 50), (3, 51, 58), (3, 59, 66),
    (4, 67, 82), (4, 83, 98), (4, 99, 114), (4, 115, 130),
    (5, 131, 162), (5, 163, 194), (5, 195, 226), (5, 227, 257),
    (0, 258, 258),
)
_LENGTH_MINS = tuple(low for _, low, _ in _LENGTH_CODES)

# (extra bits, smallest distance, largest distance) for distance codes 0..29.
_DISTANCE_CODES = (
    (0, 1, 1), (0, 2, 2), (0, 3, 3), (0, 4, 4),
    (1, 5, 6), (1, 7, 8), (2, 9, 12), (2, 13, 16),
    (3, 17, 24), (3, 25, 32), (4, 33, 48), (4, 49, 64),
    (5, 65, 96), (5, 97, 128), (6, 129, 192), (6, 193, 256),
    (7, 257, 384), (7, 385, 512), (8, 513, 768), (8, 769, 1024),
    (9, 1025, 1536), (9, 1537, 2048), (10, 2049, 3072), (10, 3073, 4096),
    (11, 4097, 6144), (11, 6145, 8192), (12, 8193, 12288), (12, 12289, 16384),
    (13, 16385, 24576), (13, 24577, 32768),
)
_DISTANCE_MINS = tuple(low for _, low, _ in _DISTANCE_CODES)


def _split_length(length: int):
    """Yield chunk lengths of 3..258 that add up to ``length``."""
    while length > 0:
        if length > _MAX_MATCH + 2:
            chunk = _MAX_MATCH
        elif length <= _MAX_MATCH:
            chunk = length
        else:
            chunk = length - _MIN_MATCH
        length -= chunk
        yield chunk


class BitWriter:
    """Accumulates DEFLATE codes least-significant bit first."""

    def __init__(self, compression_disabled=False):
        self.compression_disabled = compression_disabled
        self._out = bytearray()
        self._bits = 0
        self._nbits = 0

    def write_bits(self, bits, nbits) -> None:
        """Append the low ``nbits`` of ``bits``, flushing whole bytes."""
        if nbits < 0 or self._nbits + nbits > _MAX_PENDING_BITS:
            raise ValueError("too many pending bits")
        self._bits |= bits << self._nbits
        self._nbits += nbits
        while self._nbits >= 8:
            self._out.append(self._bits & 0xFF)
            self._bits >>= 8
            self._nbits -= 8

    def literal(self, byte) -> None:
        """Emit one literal byte."""
        if not 0 <= byte <= 0xFF:
            raise ValueError("literal must be a byte value")
        if self.compression_disabled:
            self.write_bits(byte, 8)
        elif byte <= 143:
            self.write_bits(_MIRROR[0x30 + byte], 8)
        else:
            self.write_bits(1 + 2 * _MIRROR[0x90 - 144 + byte], 9)

    def match(self, distance, length) -> None:
        """Emit a back-reference, split into several when longer than 258."""
        if self.compression_disabled:
            raise ValueError("matches cannot be written to an uncompressed block")
        if not 1 <= distance <= _MAX_DISTANCE:
            raise ValueError("distance must be between 1 and 32768")
        if length < _MIN_MATCH:
            raise ValueError("match length must be at least 3")

        dist_index = bisect_right(_DISTANCE_MINS, distance) - 1
        dist_extra, dist_min, _ = _DISTANCE_CODES[dist_index]

        for chunk in _split_length(length):
            index = bisect_right(_LENGTH_MINS, chunk) - 1
            extra, low, _ = _LENGTH_CODES[index]
            code = index + 257
            if code <= 279:
                self.write_bits(_MIRROR[(code - 256) * 2], 7)
            else:
                self.write_bits(_MIRROR[0xC0 - 280 + code], 8)
            if extra:
                self.write_bits(chunk - low, extra)

            self.write_bits(_MIRROR[dist_index * 8], 5)
            if dist_extra:
                self.write_bits(distance - dist_min, dist_extra)

    def start_block(self) -> None:
        """Open the final block, coded with the fixed Huffman tables."""
        self.write_bits(1, 1)
        self.write_bits(1, 2)

    def finish_block(self) -> None:
        """Emit the end-of-block code and pad so it is fully flushed."""
        self.write_bits(0, 7)
        self.write_bits(0, 7)

    def getvalue(self) -> bytes:
        """Return the bytes completed so far."""
        return bytes(self._out)


def encode_literals(data) -> bytes:
    """Encode ``data`` as a raw DEFLATE stream made of literals only."""
    writer = BitWriter()
    writer.start_block()
    for byte in bytes(data):
        writer.literal(byte)
    writer.finish_block()
    return writer.getvalue()