"""Raw snappy block-format compression and decompression."""

from __future__ import annotations

_BLOCK_SIZE = 1 << 16
_MIN_MATCH = 4


def max_compressed_length(source_length: int) -> int:
    """Return the largest size ``compress`` can produce for that many bytes."""
    if source_length < 0:
        raise ValueError("source length must not be negative")
    return 32 + source_length + source_length // 6


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _decode_varint(data: bytes) -> tuple[int, int]:
    value = 0
    for pos, byte in enumerate(data[:5]):
        value |= (byte & 0x7F) << (7 * pos)
        if not byte & 0x80:
            if value >= 1 << 32:
                raise ValueError("snappy length header is out of range")
            return value, pos + 1
    raise ValueError("snappy length header is truncated or too long")


def _emit_literal(out: bytearray, literal: bytes) -> None:
    n = len(literal) - 1
    if n < 60:
        out.append(n << 2)
    else:
        size = (n.bit_length() + 7) // 8
        out.append((59 + size) << 2)
        out += n.to_bytes(size, "little")
    out += literal


def _emit_copy_chunk(out: bytearray, offset: int, length: int) -> None:
    if 4 <= length <= 11 and offset < 2048:
        out.append(1 | ((length - 4) << 2) | ((offset >> 8) << 5))
        out.append(offset & 0xFF)
    else:
        out.append(2 | ((length - 1) << 2))
        out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy_chunk(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy_chunk(out, offset, 60)
        length -= 60
    _emit_copy_chunk(out, offset, length)


def _compress_block(out: bytearray, block: bytes) -> None:
    size = len(block)
    table: dict[bytes, int] = {}
    literal_start = 0
    pos = 0
    while pos + _MIN_MATCH <= size:
        key = block[pos:pos + _MIN_MATCH]
        candidate = table.get(key)
        table[key] = pos
        if candidate is None:
            pos += 1
            continue
        length = _MIN_MATCH
        while pos + length < size and block[candidate + length] == block[pos + length]:
            length += 1
        if literal_start < pos:
            _emit_literal(out, block[literal_start:pos])
        _emit_copy(out, pos - candidate, length)
        pos += length
        literal_start = pos
    if literal_start < size:
        _emit_literal(out, block[literal_start:])


def compress(data: bytes) -> bytes:
    """Compress ``data`` into a raw snappy stream."""
    data = bytes(data)
    out = bytearray(_encode_varint(len(data)))
    for start in range(0, len(data), _BLOCK_SIZE):
        _compress_block(out, data[start:start + _BLOCK_SIZE])
    return bytes(out)


def decompress(data: bytes) -> bytes:
    """Expand a raw snappy stream; raise ValueError if it is malformed."""
    data = bytes(data)
    expected, pos = _decode_varint(data)
    end = len(data)
    out = bytearray()
    while pos < end:
        tag = data[pos]
        pos += 1
        kind = tag & 3
        if kind == 0:
            length = tag >> 2
            if length >= 60:
                size = length - 59
                if pos + size > end:
                    raise ValueError("snappy literal length is truncated")
                length = int.from_bytes(data[pos:pos + size], "little")
                pos += size
            length += 1
            if pos + length > end:
                raise ValueError("snappy literal runs past the end of input")
            out += data[pos:pos + length]
            pos += length
        else:
            if kind == 1:
                width = 1
                length = ((tag >> 2) & 7) + 4
            elif kind == 2:
                width = 2
                length = (tag >> 2) + 1
            else:
                width = 4
                length = (tag >> 2) + 1
            if pos + width > end:
                raise ValueError("snappy copy offset is truncated")
            offset = int.from_bytes(data[pos:pos + width], "little")
            pos += width
            if kind == 1:
                offset |= (tag >> 5) << 8
            if offset == 0 or offset > len(out):
                raise ValueError("snappy copy offset is out of range")
            start = len(out) - offset
            pattern = out[start:start + length]
            if len(pattern) < length:
                pattern = (pattern * (length // len(pattern) + 1))[:length]
            out += pattern
        if len(out) > expected:
            raise ValueError("snappy data is longer than its header says")
    if len(out) != expected:
        raise ValueError("snappy data is shorter than its header says")
    return bytes(out)