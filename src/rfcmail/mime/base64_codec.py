"""Base64 content transfer encoding (RFC 2045 section 6.8)."""
from __future__ import annotations

import base64
import binascii
import re
from typing import Union

from rfcmail.errors import ExplicitError

LINE_LENGTH = 76

_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_NOT_ALPHABET = bytes(sorted(set(range(256)) - set(_ALPHABET) - {ord("=")}))
_PADDING_RE = re.compile(rb"(=+)")


def encode_base64(data: Union[bytes, bytearray, memoryview]) -> bytes:
    encoded = base64.b64encode(bytes(data))
    if len(encoded) <= LINE_LENGTH:
        return encoded
    lines = [encoded[i:i + LINE_LENGTH] for i in range(0, len(encoded), LINE_LENGTH)]
    return b"\r\n".join(lines)


def decode_base64(data: Union[bytes, bytearray, memoryview]) -> bytes:
    """
    Decode base64, skipping every byte outside the alphabet.

    A run of ``=`` closes the current quantum; decoding resumes with the
    next symbol, so concatenated encodings decode as a whole. A final
    quantum that is neither complete nor padded is an error.
    """
    cleaned = bytes(data).translate(None, _NOT_ALPHABET)
    # chunk, padding, chunk, padding, ..., chunk
    pieces = _PADDING_RE.split(cleaned)
    out = bytearray()
    for i in range(0, len(pieces), 2):
        chunk = pieces[i]
        if not chunk:
            continue
        padded = i + 1 < len(pieces)
        remainder = len(chunk) % 4
        if remainder == 1 or (remainder and not padded):
            raise ExplicitError("Invalid base64: a quantum is missing symbols")
        if remainder:
            chunk += b"=" * (4 - remainder)
        try:
            out += base64.b64decode(chunk, validate=True)
        except binascii.Error as e:
            raise ExplicitError(f"Invalid base64: {e}") from e
    return bytes(out)
