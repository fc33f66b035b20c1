"""Addresses, mailboxes, groups and message identifiers (RFC 5322 sections 3.4, 3.6.4)."""
from __future__ import annotations

from typing import List, Tuple

from rfcmail.errors import ParseError, UnknownError
from rfcmail.models.address import Address, EmailAddress, Group, Mailbox, MessageId
from rfcmail.parsing.charsets import is_dtext, is_wsp
from rfcmail.parsing.combinators import match_first, optional, prefixed, tag, take_while, take_while1
from rfcmail.parsing.lexical import dot_atom, dot_atom_text, phrase, quoted_string
from rfcmail.parsing.whitespace import cfws, fws, skip_cfws
from rfcmail.text import Text, View


def _no_fold_literal(input: View) -> Tuple[View, Text]:
    input, _ = tag(input, b"[", "A no-fold literal must be preceded by a `[`.")
    input, value = take_while(input, is_dtext)
    input, _ = tag(input, b"]", "A no-fold literal must be closed by a `]`.")
    return input, value


def message_id(input: View) -> Tuple[View, MessageId]:
    input = skip_cfws(input)
    input, _ = tag(input, b"<", "A message ID must start with a `<`.")
    input, left = dot_atom_text(input)
    input, _ = tag(input, b"@", "A message ID left part must be followed by a `@`.")
    input, right = match_first(input, (dot_atom_text, _no_fold_literal))
    input, _ = tag(input, b">", "A message ID must end with a `>`.")
    return skip_cfws(input), MessageId(left, right)


def domain_literal(input: View) -> Tuple[View, Text]:
    """
    A bracketed domain literal. Folding whitespace inside the brackets is
    dropped, so ``[example\\r\\n .com]`` yields ``example.com``.
    """
    input = skip_cfws(input)
    input, _ = tag(input, b"[", "A domain literal must be preceded by a `[`.")
    out = Text.empty()
    while True:
        rest, _ = optional(input, fws)
        try:
            rest, chunk = take_while1(rest, is_dtext)
        except ParseError:
            break
        out.append(chunk)
        input = rest
    input, _ = optional(input, fws)
    input, _ = tag(input, b"]", "A domain literal must be followed by a `]`.")
    return skip_cfws(input), out


def local_part(input: View) -> Tuple[View, Text]:
    return match_first(input, (dot_atom, quoted_string))


def domain(input: View) -> Tuple[View, Text]:
    return match_first(input, (dot_atom, domain_literal))


def addr_spec(input: View) -> Tuple[View, EmailAddress]:
    input, local = local_part(input)
    input, _ = tag(input, b"@", "An address local part must be followed by a `@`.")
    input, dom = domain(input)
    return input, EmailAddress(local, dom)


def angle_addr(input: View) -> Tuple[View, EmailAddress]:
    input = skip_cfws(input)
    input, _ = tag(input, b"<", "An angle address must start with a `<`.")
    input, address = addr_spec(input)
    input, _ = tag(input, b">", "An angle address must end with a `>`.")
    return skip_cfws(input), address


def name_addr(input: View, decode: bool = True) -> Tuple[View, Mailbox]:
    input, name = optional(input, lambda i: phrase(i, decode))
    input, address = angle_addr(input)
    return input, Mailbox(address=address, name=name)


def mailbox(input: View, decode: bool = True) -> Tuple[View, Mailbox]:
    try:
        return name_addr(input, decode)
    except ParseError:
        pass
    try:
        input, address = addr_spec(input)
    except ParseError:
        raise UnknownError("No match arm is matching the data") from None
    return input, Mailbox(address=address)


def _comma_separated(input: View, item, decode: bool) -> Tuple[View, list]:
    input, first = item(input, decode)
    out = [first]
    while True:
        try:
            rest, value = prefixed(input, lambda i: item(i, decode), b",")
        except ParseError:
            break
        out.append(value)
        input = rest
    return input, out


def mailbox_list(input: View, decode: bool = True) -> Tuple[View, List[Mailbox]]:
    input, mailboxes = _comma_separated(input, mailbox, decode)
    input, _ = take_while(input, is_wsp)
    return input, mailboxes


def group(input: View, decode: bool = True) -> Tuple[View, Group]:
    input, name = phrase(input, decode)
    input, _ = tag(input, b":", "A group display name must be followed by a `:`.")
    members: List[Mailbox] = []
    try:
        input, members = mailbox_list(input, decode)
    except ParseError:
        input, _ = optional(input, cfws)
    input, _ = tag(input, b";", "A group mailbox list must be closed by a `;`.")
    return skip_cfws(input), Group(name=name, mailboxes=members)


def address(input: View, decode: bool = True) -> Tuple[View, Address]:
    try:
        return mailbox(input, decode)
    except ParseError:
        pass
    try:
        return group(input, decode)
    except ParseError:
        raise UnknownError("Invalid address: not a mailbox nor a group") from None


def address_list(input: View, decode: bool = True) -> Tuple[View, List[Address]]:
    return _comma_separated(input, address, decode)
