import zlib

import pytest

from gasnode.inflate import Decompressor, DictionaryError, InflateError, inflate


def _raw_deflate(data, level=6, strategy=zlib.Z_DEFAULT_STRATEGY):
    comp = zlib.compressobj(level, zlib.DEFLATED, -15, 9, strategy)
    return comp.compress(data) + comp.flush()


def _pack_bits(bits):
    out = bytearray()
    for start in range(0, len(bits), 8):
        byte = 0
        for shift, bit in enumerate(bits[start:start + 8]):
            byte |= bit << shift
        out.append(byte)
    return bytes(out)


SAMPLE = (b"The quick brown fox jumps over the lazy dog. " * 40
          + bytes(range(256)) * 3)


def test_stored_block_wire_bytes():
    assert inflate(b"\x01\x03\x00\xfc\xffabc") == b"abc"


def test_empty_fixed_block():
    assert inflate(b"\x03\x00") == b""


@pytest.mark.parametrize(
    "level,strategy",
    [
        (0, zlib.Z_DEFAULT_STRATEGY),
        (6, zlib.Z_FIXED),
        (9, zlib.Z_DEFAULT_STRATEGY),
        (1, zlib.Z_HUFFMAN_ONLY),
    ],
)
def test_round_trip_block_types(level, strategy):
    assert inflate(_raw_deflate(SAMPLE, level, strategy)) == SAMPLE


def test_round_trip_with_ring_dictionary():
    compressed = _raw_deflate(SAMPLE, 9)
    assert Decompressor(compressed, 32768).read_all() == SAMPLE


def test_chunked_decompress_matches_whole():
    decomp = Decompressor(_raw_deflate(SAMPLE, 9))
    chunks = []
    while not decomp.finished:
        chunk = decomp.decompress(7)
        assert len(chunk) <= 7
        chunks.append(chunk)
    assert b"".join(chunks) == SAMPLE
    assert decomp.decompress(10) == b""


def test_decompress_returns_exact_size_before_end():
    decomp = Decompressor(_raw_deflate(SAMPLE))
    assert decomp.decompress(100) == SAMPLE[:100]
    assert decomp.finished is False


def test_read_byte_and_sticky_eof():
    decomp = Decompressor(b"\x01\x02")
    assert [decomp.read_byte() for _ in range(4)] == [1, 2, 0, 0]
    assert decomp.eof is True


def test_stored_length_mismatch():
    with pytest.raises(InflateError):
        inflate(b"\x01\x05\x00\x00\x00hello")


def test_invalid_block_type():
    with pytest.raises(InflateError):
        inflate(b"\x07")


def test_empty_input_is_error():
    with pytest.raises(InflateError):
        inflate(b"")


def test_truncated_stream():
    compressed = _raw_deflate(SAMPLE, 6, zlib.Z_FIXED)
    with pytest.raises(InflateError):
        inflate(compressed[: len(compressed) // 2])


def test_distance_before_start_of_output():
    # final fixed block, length code 257 (7 zero-padded bits), distance code 0
    bits = [1, 1, 0] + [0, 0, 0, 0, 0, 0, 1] + [0, 0, 0, 0, 0]
    with pytest.raises(InflateError):
        inflate(_pack_bits(bits))


def test_distance_beyond_ring_dictionary():
    data = bytes(range(64)) * 8
    compressed = _raw_deflate(data, 9)
    with pytest.raises(DictionaryError):
        Decompressor(compressed, 16).read_all()


def test_error_is_repeated_on_next_call():
    decomp = Decompressor(b"\x07")
    with pytest.raises(InflateError):
        decomp.decompress(10)
    with pytest.raises(InflateError):
        decomp.decompress(10)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Decompressor(b"\x03\x00").decompress(-1)