"""Split a message into its header fields and its body."""
from __future__ import annotations

from typing import List, Optional, Tuple, Union

from rfcmail.config import DEFAULT_OPTIONS, ParserOptions
from rfcmail.errors import ExplicitError
from rfcmail.models.fields import Field
from rfcmail.parsing.charsets import is_text
from rfcmail.parsing.combinators import newline
from rfcmail.parsing.fields import fields
from rfcmail.text import BytesLike, Text, View

MAX_LINE_LENGTH = 998


def line(input: View) -> Tuple[View, Text]:
    """At most 998 characters of text, without the line terminator."""
    n = input.count_while(is_text)
    if n > MAX_LINE_LENGTH:
        raise ExplicitError(f"A line must not exceed {MAX_LINE_LENGTH} characters")
    return input.split(n)


def check_line(input: View) -> View:
    input, _ = line(input)
    return input


def body_lines(input: View) -> List[Text]:
    """
    Split a body into its lines.

    Every line but the last must end with CRLF. A bare CR or LF, or a line
    longer than 998 characters, raises ExplicitError.
    """
    lines: List[Text] = []
    if not input:
        return lines
    while True:
        input, value = line(input)
        lines.append(value)
        if not input:
            return lines
        input = newline(input, reason="Body lines must be separated by CRLF")
        if not input:
            return lines


def check_body(input: View) -> None:
    while input:
        input = check_line(input)
        if input:
            input = newline(input, reason="Body lines must be separated by CRLF")


def parse_message(
    data: Union[View, BytesLike], options: ParserOptions = DEFAULT_OPTIONS
) -> Tuple[List[Field], Optional[View]]:
    """
    Parse the header section and locate the body.

    Returns the fields in input order and a view of the body, or None when
    the input ends right after the header section. The body is borrowed
    from ``data`` and is not decoded.
    """
    input = View.of(data)
    input, found = fields(input, options)
    if not input:
        return found, None
    input = newline(input, options.lenient_newlines, "Expected the blank line separating headers and body")
    if options.check_line_length:
        check_body(input)
    return found, input
