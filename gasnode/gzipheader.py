"""Parsing of the gzip (RFC 1952) member header in front of a DEFLATE stream."""

from __future__ import annotations

from enum import IntFlag

from gasnode.inflate import Decompressor, InflateError

__all__ = ["GzipHeaderError", "parse_gzip_header", "gunzip"]

_MAGIC = (0x1F, 0x8B)
_METHOD_DEFLATE = 8
_RESERVED_FLAGS = 0xE0
_BASE_HEADER_REST = 6  # mtime (4), extra flags (1), operating system (1)


class GzipHeaderError(InflateError):
    """The data does not start with a valid gzip header."""


class _Flag(IntFlag):
    TEXT = 1
    HCRC = 2
    EXTRA = 4
    NAME = 8
    COMMENT = 16


def _skip(decompressor: Decompressor, count: int) -> None:
    for _ in range(count):
        decompressor.read_byte()


def _read_uint16(decompressor: Decompressor) -> int:
    low = decompressor.read_byte()
    return (decompressor.read_byte() << 8) | low


def _skip_zero_terminated(decompressor: Decompressor) -> None:
    while decompressor.read_byte():
        pass


def parse_gzip_header(decompressor) -> None:
    """Consume a gzip header from ``decompressor``'s source.

    On success the decompressor is positioned at the start of the DEFLATE
    data and set up for a CRC-32 checksum. The header CRC, when present,
    is skipped but not verified.
    """
    if decompressor.read_byte() != _MAGIC[0] or decompressor.read_byte() != _MAGIC[1]:
        raise GzipHeaderError("not gzip data: bad magic bytes")
    if decompressor.read_byte() != _METHOD_DEFLATE:
        raise GzipHeaderError("unsupported compression method")

    flags = decompressor.read_byte()
    if flags & _RESERVED_FLAGS:
        raise GzipHeaderError("reserved header flags are set")
    flags = _Flag(flags)

    _skip(decompressor, _BASE_HEADER_REST)

    if flags & _Flag.EXTRA:
        _skip(decompressor, _read_uint16(decompressor))
    if flags & _Flag.NAME:
        _skip_zero_terminated(decompressor)
    if flags & _Flag.COMMENT:
        _skip_zero_terminated(decompressor)
    if flags & _Flag.HCRC:
        _read_uint16(decompressor)

    decompressor.checksum_type = "crc"
    decompressor.checksum = 0xFFFFFFFF


def gunzip(data) -> bytes:
    """Decompress the first member of a gzip file held in ``data``."""
    decompressor = Decompressor(data)
    parse_gzip_header(decompressor)
    return decompressor.read_all()