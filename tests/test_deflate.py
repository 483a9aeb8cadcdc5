import zlib

import pytest

from gasnode.deflate import BitWriter, encode_literals
from gasnode.inflate import inflate


def _stdlib_inflate(data):
    return zlib.decompress(data, -15)


def test_empty_stream_bytes():
    assert encode_literals(b"") == b"\x03\x00"


@pytest.mark.parametrize(
    "data",
    [b"", b"a", b"hello world", bytes(range(256)), b"\xff" * 50, b"\x00\x8f\x90\xff"],
)
def test_literals_round_trip(data):
    encoded = encode_literals(data)
    assert inflate(encoded) == data
    assert _stdlib_inflate(encoded) == data


def _encode_with_match(prefix, distance, length, suffix=b""):
    writer = BitWriter()
    writer.start_block()
    for byte in prefix:
        writer.literal(byte)
    writer.match(distance, length)
    for byte in suffix:
        writer.literal(byte)
    writer.finish_block()
    return writer.getvalue()


def test_short_match_round_trip():
    encoded = _encode_with_match(b"abc", 3, 9)
    assert inflate(encoded) == b"abcabcabcabc"
    assert _stdlib_inflate(encoded) == b"abcabcabcabc"


@pytest.mark.parametrize("length", [3, 10, 11, 34, 35, 130, 131, 257, 258, 259, 260, 261, 600])
def test_match_lengths_round_trip(length):
    prefix = b"x"
    encoded = _encode_with_match(prefix, 1, length, b"end")
    expected = b"x" * (1 + length) + b"end"
    assert inflate(encoded) == expected
    assert _stdlib_inflate(encoded) == expected


def test_uncompressed_literal_is_raw_byte():
    writer = BitWriter(compression_disabled=True)
    writer.literal(0x41)
    assert writer.getvalue() == b"A"


def test_match_rejected_when_compression_disabled():
    writer = BitWriter(compression_disabled=True)
    with pytest.raises(ValueError):
        writer.match(1, 3)


@pytest.mark.parametrize("distance", [0, 32769])
def test_match_rejects_bad_distance(distance):
    with pytest.raises(ValueError):
        BitWriter().match(distance, 3)


def test_match_rejects_short_length():
    with pytest.raises(ValueError):
        BitWriter().match(1, 2)


def test_write_bits_rejects_overflow():
    with pytest.raises(ValueError):
        BitWriter().write_bits(0, 33)


def test_write_bits_flushes_whole_bytes_only():
    writer = BitWriter()
    writer.write_bits(0x1FF, 9)
    assert writer.getvalue() == b"\xff"
    writer.write_bits(0x7F, 7)
    assert writer.getvalue() == b"\xff\xff"


def test_literal_rejects_out_of_range():
    with pytest.raises(ValueError):
        BitWriter().literal(256)