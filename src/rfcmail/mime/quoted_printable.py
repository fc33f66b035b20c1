"""
Quoted-printable encoding (RFC 2045 section 6.7) and the header variant
used inside RFC 2047 encoded words.

Decoding never fails: malformed escapes and stray bytes are replaced with
the UTF-8 encoding of U+FFFD.
"""
from __future__ import annotations

from typing import Union

REPLACEMENT = b"\xef\xbf\xbd"

# soft breaks are inserted before a line can exceed 76 columns
MAX_LINE = 72

_HEX = b"0123456789ABCDEF"

BytesLike = Union[bytes, bytearray, memoryview]


def _is_literal(c: int) -> bool:
    return 33 <= c <= 60 or 62 <= c <= 126


def _from_hex(c: int) -> int:
    if 48 <= c <= 57:
        return c - 48
    if 65 <= c <= 70:
        return c - 55
    if 97 <= c <= 102:
        return c - 87
    return -1


def encode_quoted_printable(data: BytesLike) -> bytes:
    data = bytes(data)
    out = bytearray()
    line_length = 0
    idx = 0
    n = len(data)
    while idx < n:
        if line_length >= MAX_LINE:
            out += b"=\r\n"
            line_length = 0
        c = data[idx]
        if _is_literal(c):
            out.append(c)
            line_length += 1
            idx += 1
        elif (c == 9 or c == 32) and idx + 1 < n and data[idx + 1] != 13:
            out.append(c)
            line_length += 1
            idx += 1
        elif c == 13 and idx + 1 < n and data[idx + 1] == 10:
            out += b"\r\n"
            line_length = 0
            idx += 2
        else:
            out += b"=" + bytes((_HEX[c >> 4], _HEX[c & 15]))
            line_length += 3
            idx += 1
    return bytes(out)


def _decode(data: bytes, header: bool) -> bytes:
    out = bytearray()
    idx = 0
    n = len(data)
    while idx < n:
        c = data[idx]
        if c == 61:  # '='
            if data[idx + 1:idx + 3] == b"\r\n":
                idx += 3
            elif n > idx + 2:
                hi, lo = _from_hex(data[idx + 1]), _from_hex(data[idx + 2])
                if hi < 0 or lo < 0:
                    out += REPLACEMENT
                else:
                    out.append(hi * 16 + lo)
                idx += 3
            else:
                out.append(c)
                idx += 1
        elif header:
            if c == 95:  # '_'
                out.append(32)
            elif 0x20 <= c <= 0x7E:
                out.append(c)
            else:
                out += REPLACEMENT
            idx += 1
        elif _is_literal(c) or c == 32 or c == 9:
            out.append(c)
            idx += 1
        elif c == 13 and idx + 1 < n and data[idx + 1] == 10:
            out += b"\r\n"
            idx += 2
        else:
            out += REPLACEMENT
            idx += 1
    return bytes(out)


def decode_quoted_printable(data: BytesLike) -> bytes:
    return _decode(bytes(data), header=False)


def decode_header_quoted_printable(data: BytesLike) -> bytes:
    """The RFC 2047 "Q" encoding: like quoted-printable, with ``_`` as space."""
    return _decode(bytes(data), header=True)
