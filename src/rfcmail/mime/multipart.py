"""
Boundary scanning for multipart bodies (RFC 2046 section 5.1).

A body looks like::

    preamble CRLF --boundary CRLF part CRLF --boundary CRLF part
    CRLF --boundary-- CRLF epilogue

The preamble and the epilogue are dropped. The first delimiter may also
sit at the very start of the body without a leading CRLF. Whitespace
after a boundary is transport padding and is ignored, and the closing
delimiter may end the input without a final CRLF.
"""
from __future__ import annotations

from typing import List, Optional, Tuple, Union

from rfcmail.errors import ExplicitError
from rfcmail.parsing.charsets import is_wsp
from rfcmail.text import View

Buffer = Union[bytes, bytearray]


def _skip_padding(buffer: Buffer, pos: int, end: int) -> int:
    while pos < end and is_wsp(buffer[pos]):
        pos += 1
    return pos


def _delimiter_tail(buffer: Buffer, pos: int, end: int) -> Optional[Tuple[int, bool]]:
    """
    Read what follows ``--boundary`` at ``pos``.

    Returns the offset where the next part starts and whether the delimiter
    was the closing one, or None if ``--boundary`` was only a prefix of a
    longer line.
    """
    closing = buffer.startswith(b"--", pos, end)
    if closing:
        pos += 2
    pos = _skip_padding(buffer, pos, end)
    if buffer.startswith(b"\r\n", pos, end):
        return pos + 2, closing
    if closing and pos == end:
        return pos, closing
    return None


def find_delimiter(
    buffer: Buffer, boundary: bytes, start: int, end: int, at_start: bool = False
) -> Optional[Tuple[int, int, bool]]:
    """
    Locate the next delimiter line in ``buffer[start:end]``.

    Returns ``(delimiter_start, next_part_start, closing)``. With
    ``at_start`` a delimiter without the leading CRLF is accepted at
    ``start`` itself.
    """
    dash_boundary = b"--" + boundary
    if at_start and buffer.startswith(dash_boundary, start, end):
        tail = _delimiter_tail(buffer, start + len(dash_boundary), end)
        if tail is not None:
            return (start,) + tail
    needle = b"\r\n" + dash_boundary
    pos = start
    while True:
        idx = buffer.find(needle, pos, end)
        if idx == -1:
            return None
        tail = _delimiter_tail(buffer, idx + len(needle), end)
        if tail is not None:
            return (idx,) + tail
        pos = idx + 1


def _check_boundary(boundary: Union[bytes, str]) -> bytes:
    if isinstance(boundary, str):
        boundary = boundary.encode("utf-8")
    if not boundary:
        raise ExplicitError("A multipart boundary must not be empty")
    return boundary


def parse_multipart(data: Union[View, bytes], boundary: Union[bytes, str]) -> List[View]:
    """Split a borrowed body into views over its parts; nothing is copied."""
    boundary = _check_boundary(boundary)
    view = View.of(data)
    buffer, pos, end = view.buffer, view.start, view.end

    found = find_delimiter(buffer, boundary, pos, end, at_start=True)
    if found is None:
        raise ExplicitError("boundary not found")
    _, pos, closing = found

    parts: List[View] = []
    while not closing:
        found = find_delimiter(buffer, boundary, pos, end)
        if found is None:
            raise ExplicitError("closing boundary not found")
        idx, next_pos, closing = found
        parts.append(View(buffer, pos, idx))
        pos = next_pos
    return parts


def parse_multipart_owned(buffer: bytearray, boundary: Union[bytes, str]) -> List[bytes]:
    """
    Split a body the caller owns, draining it as parts are found.

    The preamble, each part and each delimiter are removed from the front
    of ``buffer``; the epilogue is what remains once this returns. On
    failure the buffer holds the unread remainder.
    """
    boundary = _check_boundary(boundary)

    found = find_delimiter(buffer, boundary, 0, len(buffer), at_start=True)
    if found is None:
        raise ExplicitError("boundary not found")
    _, pos, closing = found
    del buffer[:pos]

    parts: List[bytes] = []
    while not closing:
        found = find_delimiter(buffer, boundary, 0, len(buffer))
        if found is None:
            raise ExplicitError("closing boundary not found")
        idx, pos, closing = found
        parts.append(bytes(buffer[:idx]))
        del buffer[:pos]
    return parts
