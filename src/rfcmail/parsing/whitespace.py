"""Folding whitespace and comments (RFC 5322 section 3.2.2)."""
from __future__ import annotations

from typing import Tuple

from rfcmail.errors import ExplicitError, ParseError
from rfcmail.parsing.charsets import is_ctext, is_vchar, is_wsp
from rfcmail.parsing.combinators import match_first, optional, tag, take_while, take_while1
from rfcmail.text import Text, View


def fws(input: View) -> Tuple[View, Text]:
    """
    Folding whitespace. The CRLF of a fold is dropped, so the result is
    the whitespace before the fold followed by the whitespace after it.
    A lenient input also folds on a bare LF.
    """
    before = None
    rest, leading = take_while(input, is_wsp)
    if rest.startswith(b"\r\n"):
        before = leading
        input = rest.advance(2)
    elif rest.lenient and rest.startswith(b"\n"):
        before = leading
        input = rest.advance(1)
    rest, after = take_while1(input, is_wsp, "Expected folding whitespace")
    if before is None:
        return rest, after
    out = before.copy()
    out.append(after)
    return rest, out


def quoted_pair(input: View) -> Tuple[View, Text]:
    rest, _ = tag(input, b"\\")
    c = rest.get(0)
    if c is None:
        raise ExplicitError("The quoted-pair has no second character.")
    if not (is_vchar(c) or is_wsp(c)):
        raise ExplicitError("The quoted-pair character is no a vchar or a wsp.")
    return rest.split(1)


def ccontent(input: View) -> Tuple[View, Text]:
    return match_first(
        input,
        (lambda i: take_while1(i, is_ctext), quoted_pair, comment),
    )


def comment(input: View) -> Tuple[View, Text]:
    """A parenthesized, possibly nested comment. Its content is discarded."""
    input, _ = tag(input, b"(")
    while True:
        rest, _ = optional(input, fws)
        try:
            rest, _ = ccontent(rest)
        except ParseError:
            break
        input = rest
    input, _ = optional(input, fws)
    input, _ = tag(input, b")", "Expected the end of a comment")
    return input, Text.empty()


def _real_cfws(input: View) -> Tuple[View, Text]:
    out = Text.empty()
    matched = False
    while True:
        rest, folding = optional(input, fws)
        try:
            rest, _ = comment(rest)
        except ParseError:
            break
        matched = True
        input = rest
        if folding is not None:
            out.append(folding)
    if not matched:
        raise ExplicitError("Expected at least one comment")
    input, folding = optional(input, fws)
    if folding is not None:
        out.append(folding)
    return input, out


def cfws(input: View) -> Tuple[View, Text]:
    """Comments and folding whitespace; only the whitespace is returned."""
    return match_first(input, (_real_cfws, fws))


def skip_cfws(input: View) -> View:
    return optional(input, cfws)[0]


def skip_inline_cfws(input: View) -> View:
    """Skip whitespace and at most one comment without crossing a line end."""
    input, _ = take_while(input, is_wsp)
    input, _ = optional(input, comment)
    input, _ = take_while(input, is_wsp)
    return input
