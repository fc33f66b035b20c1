"""
Header field parsers and the dispatcher that reads a whole header section.

Every field parser matches its case-insensitive name and colon, parses the
value and consumes the line terminator. The dispatcher tries them in a
fixed order and keeps every field, duplicates included, in input order.
A line no parser accepts is kept as an UnknownField.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Sequence, Tuple

from rfcmail.config import DEFAULT_OPTIONS, ParserOptions
from rfcmail.errors import ParseError, UnknownError
from rfcmail.mime import fields as mime_fields
from rfcmail.models.address import Address, Mailbox, MessageId
from rfcmail.models.fields import (
    BccField,
    CcField,
    CommentsField,
    ContentDescriptionField,
    ContentDispositionField,
    ContentIdField,
    ContentTransferEncodingField,
    ContentTypeField,
    DateField,
    Field,
    FromField,
    InReplyToField,
    KeywordsField,
    MessageIdField,
    MimeVersionField,
    Received,
    ReceivedAddress,
    ReceivedDomain,
    ReceivedToken,
    ReceivedWord,
    ReferencesField,
    ReplyToField,
    ReturnPath,
    SenderField,
    SubjectField,
    ToField,
    TraceField,
    UnknownField,
)
from rfcmail.models.time import DateTime
from rfcmail.parsing import address as addr
from rfcmail.parsing.charsets import is_ftext
from rfcmail.parsing.combinators import many, many1, newline, optional, prefixed, tag, tag_no_case, take_while1
from rfcmail.parsing.lexical import phrase, unstructured, word
from rfcmail.parsing.time import date_time
from rfcmail.parsing.whitespace import cfws, skip_cfws
from rfcmail.text import Text, View

logger = logging.getLogger(__name__)


def _end(input: View, options: ParserOptions) -> View:
    return newline(input, options.lenient_newlines)


# --- origination date and originators ---


def date(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, DateTime]:
    input, _ = tag_no_case(input, b"Date:")
    input, value = date_time(input)
    return _end(input, options), value


def from_(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[Mailbox]]:
    input, _ = tag_no_case(input, b"From:")
    input, value = addr.mailbox_list(input, options.decode_encoded_words)
    return _end(input, options), value


def sender(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Mailbox]:
    input, _ = tag_no_case(input, b"Sender:")
    input, value = addr.mailbox(input, options.decode_encoded_words)
    return _end(input, options), value


def reply_to(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[Address]]:
    input, _ = tag_no_case(input, b"Reply-To:")
    input, value = addr.address_list(input, options.decode_encoded_words)
    return _end(input, options), value


# --- destination ---


def to(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[Address]]:
    input, _ = tag_no_case(input, b"To:")
    input, value = addr.address_list(input, options.decode_encoded_words)
    return _end(input, options), value


def cc(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[Address]]:
    input, _ = tag_no_case(input, b"Cc:")
    input, value = addr.address_list(input, options.decode_encoded_words)
    return _end(input, options), value


def bcc(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[Address]]:
    """Bcc may be empty or hold only whitespace and comments."""
    input, _ = tag_no_case(input, b"Bcc:")
    try:
        input, value = addr.address_list(input, options.decode_encoded_words)
    except ParseError:
        input, _ = optional(input, cfws)
        value = []
    return _end(input, options), value


# --- identification ---


def message_id(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, MessageId]:
    input, _ = tag_no_case(input, b"Message-ID:")
    input, value = addr.message_id(input)
    return _end(input, options), value


def in_reply_to(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[MessageId]]:
    input, _ = tag_no_case(input, b"In-Reply-To:")
    input, value = many1(input, addr.message_id)
    return _end(input, options), value


def references(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[MessageId]]:
    input, _ = tag_no_case(input, b"References:")
    input, value = many1(input, addr.message_id)
    return _end(input, options), value


# --- informational ---


def subject(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Text]:
    input, _ = tag_no_case(input, b"Subject:")
    input, value = unstructured(input, options.decode_encoded_words)
    return _end(input, options), value


def comments(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Text]:
    input, _ = tag_no_case(input, b"Comments:")
    input, value = unstructured(input, options.decode_encoded_words)
    return _end(input, options), value


def keywords(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[List[Text]]]:
    input, _ = tag_no_case(input, b"Keywords:")
    input, first = phrase(input, options.decode_encoded_words)
    out = [first]
    while True:
        try:
            rest, value = prefixed(input, lambda i: phrase(i, options.decode_encoded_words), b",")
        except ParseError:
            break
        out.append(value)
        input = rest
    return _end(input, options), out


# --- trace ---


def _resent(parser):
    def parse(input: View, options: ParserOptions = DEFAULT_OPTIONS):
        input, _ = tag_no_case(input, b"Resent-")
        return parser(input, options)

    parse.__name__ = f"resent_{parser.__name__.rstrip('_')}"
    return parse


resent_date = _resent(date)
resent_from = _resent(from_)
resent_sender = _resent(sender)
resent_to = _resent(to)
resent_cc = _resent(cc)
resent_bcc = _resent(bcc)
resent_message_id = _resent(message_id)


def _empty_path(input: View) -> Tuple[View, None]:
    input = skip_cfws(input)
    input, _ = tag(input, b"<")
    input = skip_cfws(input)
    input, _ = tag(input, b">")
    return skip_cfws(input), None


def return_path(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, ReturnPath]:
    input, _ = tag_no_case(input, b"Return-Path:")
    try:
        input, value = addr.angle_addr(input)
    except ParseError:
        input, value = _empty_path(input)
    return _end(input, options), ReturnPath(value)


def received_token(input: View) -> Tuple[View, ReceivedToken]:
    """A word, unless a domain read from the same place is longer."""
    try:
        word_rest, value = word(input)
    except ParseError:
        pass
    else:
        try:
            domain_rest, domain = addr.domain(input)
        except ParseError:
            pass
        else:
            if len(domain) > len(value):
                return domain_rest, ReceivedDomain(domain)
        return word_rest, ReceivedWord(value)
    for parser in (addr.angle_addr, addr.addr_spec):
        try:
            rest, address = parser(input)
        except ParseError:
            continue
        return rest, ReceivedAddress(address)
    try:
        rest, domain = addr.domain(input)
    except ParseError:
        raise UnknownError("Not a received token") from None
    return rest, ReceivedDomain(domain)


def received(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Received]:
    input, _ = tag_no_case(input, b"Received:")
    input, tokens = many(input, received_token)
    input, _ = tag(input, b";", "Received tokens must be followed by a `;`")
    input, value = date_time(input)
    return _end(input, options), Received(tokens, value)


_RESENT_PARSERS: Sequence[Tuple[Callable, Callable]] = (
    (resent_date, DateField),
    (resent_from, FromField),
    (resent_sender, SenderField),
    (resent_to, ToField),
    (resent_cc, CcField),
    (resent_bcc, BccField),
    (resent_message_id, MessageIdField),
)


def trace(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, TraceField]:
    input, path = optional(input, lambda i: return_path(i, options))
    input, hops = many1(input, lambda i: received(i, options))
    resent: List[Field] = []
    while True:
        for parser, build in _RESENT_PARSERS:
            try:
                input, value = parser(input, options)
            except ParseError:
                continue
            resent.append(build(value))
            break
        else:
            break
    return input, TraceField(received=hops, return_path=path, resent=resent)


# --- everything else ---


def unknown(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Tuple[Text, Text]]:
    input, name = take_while1(input, is_ftext, "Expected a field name")
    input, _ = tag(input, b":")
    input, value = unstructured(input, options.decode_encoded_words)
    return _end(input, options), (name, value)


_FIELD_PARSERS: Sequence[Tuple[Callable, Callable]] = (
    (date, DateField),
    (from_, FromField),
    (sender, SenderField),
    (reply_to, ReplyToField),
    (to, ToField),
    (cc, CcField),
    (bcc, BccField),
    (message_id, MessageIdField),
    (in_reply_to, InReplyToField),
    (references, ReferencesField),
    (subject, SubjectField),
    (comments, CommentsField),
    (mime_fields.mime_version, lambda v: MimeVersionField(*v)),
    (mime_fields.content_type, lambda v: ContentTypeField(*v)),
    (mime_fields.content_transfer_encoding, ContentTransferEncodingField),
    (mime_fields.content_id, ContentIdField),
    (mime_fields.content_description, ContentDescriptionField),
    (mime_fields.content_disposition, ContentDispositionField),
    (keywords, KeywordsField),
)

KNOWN_FIELDS = frozenset(
    name.lower()
    for name in (
        "Date", "From", "Sender", "Reply-To", "To", "Cc", "Bcc", "Message-ID",
        "In-Reply-To", "References", "Subject", "Comments", "Keywords",
        "MIME-Version", "Content-Type", "Content-Transfer-Encoding", "Content-ID",
        "Content-Description", "Content-Disposition", "Return-Path", "Received",
    )
)


def field(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Field]:
    """Parse one header field, falling back to UnknownField."""
    if options.lenient_newlines:
        input = input.with_lenient(True)
    try:
        return trace(input, options)
    except ParseError:
        pass
    for parser, build in _FIELD_PARSERS:
        try:
            rest, value = parser(input, options)
        except ParseError:
            continue
        return rest, build(value)
    rest, (name, value) = unknown(input, options)
    if name.to_str().lower() in KNOWN_FIELDS:
        logger.debug("Could not parse the %s header, keeping it as an unknown field", name)
    return rest, UnknownField(name, value)


def fields(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, List[Field]]:
    """Read fields until one fails to parse; the failing line is left in the input."""
    if options.lenient_newlines:
        input = input.with_lenient(True)
    out: List[Field] = []
    while True:
        try:
            rest, value = field(input, options)
        except ParseError:
            return input, out
        out.append(value)
        input = rest
