"""Byte-class predicates from RFC 5322, RFC 2045 and RFC 2047."""
from __future__ import annotations

_ATEXT_SPECIALS = frozenset(b"!#$%&'*+-/=?^_`{|}~")
_TSPECIALS = frozenset(b'()<>@,;:\\"/[]?=')
_ESPECIALS = frozenset(b'()<>@,;:"/[]?.=\\')


def is_wsp(c: int) -> bool:
    return c == 9 or c == 32


def is_digit(c: int) -> bool:
    return 48 <= c <= 57


def is_alpha(c: int) -> bool:
    return 65 <= c <= 90 or 97 <= c <= 122


def is_vchar(c: int) -> bool:
    return 0x21 <= c <= 0x7E


def is_ctext(c: int) -> bool:
    return 33 <= c <= 39 or 42 <= c <= 91 or 93 <= c <= 126


def is_dtext(c: int) -> bool:
    return 33 <= c <= 90 or 94 <= c <= 126


def is_atext(c: int) -> bool:
    return is_alpha(c) or is_digit(c) or c in _ATEXT_SPECIALS


def is_qtext(c: int) -> bool:
    return c == 33 or (35 <= c <= 126 and c != 92)


def is_ftext(c: int) -> bool:
    return 33 <= c <= 57 or 59 <= c <= 126


def is_text(c: int) -> bool:
    return 1 <= c <= 127 and c != 10 and c != 13


def is_token_char(c: int) -> bool:
    """MIME token: printable ASCII except space and tspecials."""
    return 0x20 < c < 0x7F and c not in _TSPECIALS


def is_encoded_word_token(c: int) -> bool:
    return 0x20 < c < 0x7F and c not in _ESPECIALS


def is_encoded_text(c: int) -> bool:
    return 0x21 <= c <= 0x7E and c != 63  # '?'
