"""Atoms, quoted strings, phrases and unstructured text (RFC 5322 section 3.2)."""
from __future__ import annotations

from typing import List, Tuple

from rfcmail.errors import ExplicitError, ParseError
from rfcmail.mime.encoded_words import decode_word, encoded_word
from rfcmail.parsing.charsets import is_atext, is_qtext, is_vchar, is_wsp
from rfcmail.parsing.combinators import optional, take_while, take_while1
from rfcmail.parsing.whitespace import fws, quoted_pair, skip_cfws
from rfcmail.text import Text, View


def quoted_string(input: View) -> Tuple[View, Text]:
    input = skip_cfws(input)
    if not input.startswith(b'"'):
        raise ExplicitError("Quoted string must begin with a dquote")
    input = input.advance(1)
    out = Text.empty()

    while True:
        rest, folding = optional(input, fws)
        try:
            rest, chunk = take_while1(rest, is_qtext)
        except ParseError:
            try:
                rest, chunk = quoted_pair(rest)
            except ParseError:
                break
        if folding is not None:
            out.append(folding)
        out.append(chunk)
        input = rest

    input, folding = optional(input, fws)
    if folding is not None:
        out.append(folding)
    if not input.startswith(b'"'):
        raise ExplicitError("Quoted string must end with a dquote")
    return skip_cfws(input.advance(1)), out


def atom(input: View) -> Tuple[View, Text]:
    input = skip_cfws(input)
    input, value = take_while1(input, is_atext, "Atom required")
    return skip_cfws(input), value


def dot_atom_text(input: View) -> Tuple[View, Text]:
    input, out = take_while1(input, is_atext, "Expected atext")
    while input.startswith(b"."):
        rest, dot = input.split(1)
        try:
            rest, part = take_while1(rest, is_atext)
        except ParseError:
            break
        out.append(dot)
        out.append(part)
        input = rest
    return input, out


def dot_atom(input: View) -> Tuple[View, Text]:
    input = skip_cfws(input)
    input, value = dot_atom_text(input)
    return skip_cfws(input), value


def word(input: View) -> Tuple[View, Text]:
    try:
        return atom(input)
    except ParseError:
        pass
    try:
        return quoted_string(input)
    except ParseError:
        raise ExplicitError("Word is not an atom and is not a quoted_string.") from None


def phrase(input: View, decode: bool = True) -> Tuple[View, List[Text]]:
    """
    One or more words; encoded words are decoded when ``decode`` is set.

    As in the obsolete syntax, a ``.`` may follow any word. It stays with
    that word, and so does a word written right after it: ``John Q. Public``
    gives ``John``, ``Q.``, ``Public`` and ``J.R.R. Tolkien`` gives
    ``J.R.R.``, ``Tolkien``.
    """
    input, first = word(input)
    words = [first]
    glued = False
    while True:
        try:
            input, value = word(input)
        except ParseError:
            if not input.startswith(b"."):
                break
            rest, dot = input.split(1)
            words[-1] = words[-1] + dot
            glued = is_atext(rest.get(0) or 0)
            input = skip_cfws(rest)
            continue
        if glued:
            words[-1] = words[-1] + value
        else:
            words.append(value)
        glued = False
    if decode:
        words = [decode_word(w) for w in words]
    return input, words


def unstructured(input: View, decode: bool = False) -> Tuple[View, Text]:
    """
    Unstructured text with folds unfolded and trailing whitespace skipped.

    With ``decode`` set, encoded words are decoded, and the whitespace
    between two consecutive encoded words is dropped.
    """
    out = Text.empty()
    previous_encoded = False
    while True:
        rest, folding = optional(input, fws)
        if decode and rest.startswith(b"=?"):
            try:
                rest, decoded = encoded_word(rest)
            except ParseError:
                pass
            else:
                if folding is not None and not previous_encoded:
                    out.append(folding)
                out.append(decoded)
                previous_encoded = True
                input = rest
                continue
        try:
            rest, chunk = take_while1(rest, is_vchar)
        except ParseError:
            break
        if folding is not None:
            out.append(folding)
        out.append(chunk)
        previous_encoded = False
        input = rest

    input, _ = take_while(input, is_wsp)
    return input, out
