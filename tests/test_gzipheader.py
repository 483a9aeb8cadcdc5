import gzip
import io
import struct
import zlib

import pytest

from gasnode.gzipheader import GzipHeaderError, gunzip, parse_gzip_header
from gasnode.inflate import Decompressor, InflateError

PAYLOAD = b"temperature and humidity readings " * 20


def _raw_deflate(data):
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


def _trailer(data):
    return struct.pack("<II", zlib.crc32(data), len(data) & 0xFFFFFFFF)


def _member(flags, extra_fields=b"", data=PAYLOAD):
    header = bytes([0x1F, 0x8B, 0x08, flags]) + b"\x00\x00\x00\x00\x00\x03"
    return header + extra_fields + _raw_deflate(data) + _trailer(data)


def test_gunzip_round_trip_with_stdlib():
    assert gunzip(gzip.compress(PAYLOAD)) == PAYLOAD


def test_gunzip_empty_payload():
    assert gunzip(gzip.compress(b"")) == b""


def test_gunzip_with_file_name_field():
    buffer = io.BytesIO()
    with gzip.GzipFile(filename="config.json", mode="wb", fileobj=buffer) as handle:
        handle.write(PAYLOAD)
    assert gunzip(buffer.getvalue()) == PAYLOAD


def test_gunzip_with_extra_field():
    extra = struct.pack("<H", 5) + b"abcde"
    assert gunzip(_member(4, extra)) == PAYLOAD


def test_gunzip_with_comment_and_name():
    fields = b"name.txt\x00" + b"a comment\x00"
    assert gunzip(_member(8 | 16, fields)) == PAYLOAD


def test_gunzip_with_header_crc():
    assert gunzip(_member(2, b"\x12\x34")) == PAYLOAD


def test_parse_header_sets_crc_checksum():
    decompressor = Decompressor(gzip.compress(PAYLOAD))
    parse_gzip_header(decompressor)
    assert decompressor.checksum_type == "crc"
    assert decompressor.checksum == 0xFFFFFFFF
    assert decompressor.read_all() == PAYLOAD


def test_bad_magic_raises():
    data = bytearray(gzip.compress(PAYLOAD))
    data[1] = 0x8C
    with pytest.raises(GzipHeaderError):
        gunzip(bytes(data))


def test_wrong_method_raises():
    data = bytearray(gzip.compress(PAYLOAD))
    data[2] = 7
    with pytest.raises(GzipHeaderError):
        gunzip(bytes(data))


def test_reserved_flags_raise():
    with pytest.raises(GzipHeaderError):
        gunzip(_member(0x20))


def test_empty_input_raises():
    with pytest.raises(GzipHeaderError):
        gunzip(b"")


def test_header_error_is_inflate_error():
    with pytest.raises(InflateError):
        gunzip(b"PK\x03\x04")


def test_truncated_body_raises():
    data = gzip.compress(PAYLOAD)
    with pytest.raises(InflateError):
        gunzip(data[:20])