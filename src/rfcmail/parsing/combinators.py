"""
Parser combinators over :class:`rfcmail.text.View`.

A parser is a callable taking a View and returning ``(remaining, value)``.
Failure is signalled by raising :class:`rfcmail.errors.ParseError`.
Alternatives are tried in order and the first success wins; nothing that
an alternative consumed is revisited once it has succeeded.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from rfcmail.errors import ExplicitError, ParseError, UnknownError
from rfcmail.text import Text, View

T = TypeVar("T")
U = TypeVar("U")

Parser = Callable[[View], Tuple[View, T]]
Predicate = Callable[[int], bool]


def tag(input: View, literal: bytes, reason: Optional[str] = None) -> Tuple[View, Text]:
    if input.startswith(literal):
        return input.split(len(literal))
    raise ExplicitError(reason or f"Expected {literal.decode('ascii', 'replace')!r}")


def tag_case_insensitive(
    input: View, upper: bytes, lower: bytes, reason: Optional[str] = None
) -> Tuple[View, Text]:
    n = len(upper)
    if len(input) >= n:
        for i in range(n):
            b = input[i]
            if b != upper[i] and b != lower[i]:
                break
        else:
            return input.split(n)
    raise ExplicitError(reason or f"Expected {lower.decode('ascii', 'replace')!r}")


def tag_no_case(input: View, literal: bytes, reason: Optional[str] = None) -> Tuple[View, Text]:
    return tag_case_insensitive(input, literal.upper(), literal.lower(), reason)


def newline(input: View, lenient: bool = False, reason: str = "Expected CRLF") -> View:
    if input.startswith(b"\r\n"):
        return input.advance(2)
    if (lenient or input.lenient) and input.startswith(b"\n"):
        return input.advance(1)
    raise ExplicitError(reason)


def optional(input: View, parser: Parser[T]) -> Tuple[View, Optional[T]]:
    try:
        return parser(input)
    except ParseError:
        return input, None


def match_first(input: View, parsers: Sequence[Parser[T]]) -> Tuple[View, T]:
    for parser in parsers:
        try:
            return parser(input)
        except ParseError:
            continue
    raise UnknownError("No match arm is matching the data")


def take_while(input: View, predicate: Predicate) -> Tuple[View, Text]:
    return input.split(input.count_while(predicate))


def take_while1(
    input: View, predicate: Predicate, reason: str = "Expected at least one matching character"
) -> Tuple[View, Text]:
    n = input.count_while(predicate)
    if n == 0:
        raise ExplicitError(reason)
    return input.split(n)


def many(input: View, parser: Parser[T]) -> Tuple[View, List[T]]:
    out: List[T] = []
    while True:
        try:
            rest, value = parser(input)
        except ParseError:
            return input, out
        out.append(value)
        if len(rest) == len(input):
            return rest, out
        input = rest


def many1(input: View, parser: Parser[T]) -> Tuple[View, List[T]]:
    rest, first = parser(input)
    rest, others = many(rest, parser)
    return rest, [first] + others


def pair(input: View, first: Parser[T], second: Parser[U]) -> Tuple[View, Tuple[T, U]]:
    rest, a = first(input)
    rest, b = second(rest)
    return rest, (a, b)


def prefixed(input: View, parser: Parser[T], literal: bytes) -> Tuple[View, T]:
    rest, _ = tag(input, literal)
    return parser(rest)


def digits(input: View, min_len: int, max_len: int) -> Tuple[View, int]:
    """Consume between ``min_len`` and ``max_len`` ASCII digits."""
    n = input.count_while(lambda c: 48 <= c <= 57)
    if n < min_len:
        raise ExplicitError("Expected digits")
    n = min(n, max_len)
    rest, text = input.split(n)
    return rest, int(text.to_str())
