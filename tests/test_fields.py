from __future__ import annotations

import logging

import pytest

from rfcmail.config import ParserOptions
from rfcmail.errors import ParseError
from rfcmail.models.fields import (
    DateField,
    FromField,
    ReceivedAddress,
    ReceivedDomain,
    ReceivedWord,
    SubjectField,
    ToField,
    TraceField,
    UnknownField,
)
from rfcmail.models.time import Month, Zone
from rfcmail.parsing.fields import (
    bcc,
    cc,
    comments,
    date,
    field,
    fields,
    from_,
    in_reply_to,
    keywords,
    message_id,
    received,
    references,
    reply_to,
    resent_bcc,
    resent_cc,
    resent_date,
    resent_from,
    resent_sender,
    resent_to,
    return_path,
    sender,
    subject,
    to,
    trace,
    unknown,
)
from rfcmail.text import View


def v(data: bytes) -> View:
    return View(data)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

def test_fields_consumes_every_header():
    rest, found = fields(
        v(b"To: Mubelotix <mubelotix@gmail.com>\r\nFrOm: Mubelotix <mubelotix@gmail.com>\r\n")
    )
    assert len(rest) == 0
    assert [type(f) for f in found] == [ToField, FromField]


def test_fields_stop_at_the_blank_line():
    rest, found = fields(v(b"Subject: hi\r\n\r\nbody"))
    assert len(found) == 1
    assert rest == b"\r\nbody"


def test_fields_keep_duplicates_in_order():
    _, found = fields(v(b"To: a@example.com\r\nSubject: x\r\nTo: b@example.com\r\n"))
    assert [type(f) for f in found] == [ToField, SubjectField, ToField]
    assert found[2].addresses[0].address.local_part == "b"


def test_fields_do_not_require_date_or_from():
    _, found = fields(v(b"Subject: only a subject\r\n"))
    assert len(found) == 1
    assert isinstance(found[0], SubjectField)
    assert found[0].value == " only a subject"


def test_unparseable_known_header_is_kept_as_unknown(caplog):
    caplog.set_level(logging.DEBUG, logger="rfcmail.parsing.fields")
    _, value = field(v(b"Date: not a date\r\n"))
    assert isinstance(value, UnknownField)
    assert value.field_name == "Date"
    assert value.value == " not a date"
    assert "Date header" in caplog.text


def test_lenient_newlines():
    options = ParserOptions(lenient_newlines=True)
    rest, found = fields(v(b"Subject: hi\nTo: a@b.c\n"), options)
    assert len(rest) == 0
    assert [type(f) for f in found] == [SubjectField, ToField]

    rest, found = fields(v(b"Subject: hi\nTo: a@b.c\n"))
    assert found == []


def test_field_to_dict():
    _, value = field(v(b"Subject: hello\r\n"))
    assert value.to_dict() == {"field": "Subject", "value": " hello"}


# ---------------------------------------------------------------------------
# Unknown fields
# ---------------------------------------------------------------------------

def test_unknown_field():
    _, (name, value) = unknown(v(b"hidden-field:hidden message\r\n"))
    assert name == "hidden-field"
    assert value == "hidden message"


def test_unknown_field_decodes_encoded_words():
    data = (
        b"X-SG-EID:\r\n"
        b" =?us-ascii?Q?t3vk5cTFE=2FYEGeQ8h3SwrnzIAGc=2F+ADymlys=2FfRFW4Zjpt=2F3MuaO9JNHS2enYQ?=\r\n"
        b" =?us-ascii?Q?Jsv0=2FpYrPem+YssHetKlrE5nJnOfr=2FYdJOyJFf8?=\r\n"
        b" =?us-ascii?Q?lz3oRXlMZbdFgRH+KAyLQ=3D=3D?=\r\n"
    )
    _, (_, value) = unknown(v(data))
    assert value == (
        " t3vk5cTFE/YEGeQ8h3SwrnzIAGc/+ADymlys/fRFW4Zjpt/3MuaO9JNHS2enYQ"
        "Jsv0/pYrPem+YssHetKlrE5nJnOfr/YdJOyJFf8"
        "lz3oRXlMZbdFgRH+KAyLQ=="
    )


# ---------------------------------------------------------------------------
# Trace
# ---------------------------------------------------------------------------

def test_return_path():
    assert return_path(v(b"Return-Path:<>\r\n"))[1].address is None
    assert return_path(v(b"Return-Path:<mubelotix@gmail.com>\r\n"))[1].address.local_part == "mubelotix"


def test_received_tokens():
    _, value = received(v(b"Received:test<mubelotix@gmail.com>;5 May 2003 18:59:03 +0000\r\n"))
    assert isinstance(value.tokens[0], ReceivedWord)
    assert value.tokens[0].word == "test"
    assert isinstance(value.tokens[1], ReceivedAddress)
    assert value.date_time.date.month == Month.MAY

    _, value = received(v(b"Received:mubelotix.dev;5 May 2003 18:59:03 +0000\r\n"))
    assert isinstance(value.tokens[0], ReceivedDomain)
    assert value.tokens[0].domain == "mubelotix.dev"
    assert value.to_dict()["tokens"] == [{"domain": "mubelotix.dev"}]


def test_trace():
    rest, value = trace(
        v(
            b"Return-Path:<>\r\n"
            b"Received:akala miam miam;5 May 2003 18:59:03 +0000\r\n"
            b"Received:mubelotix.dev;5 May 2003 18:59:03 +0000\r\n"
        )
    )
    assert len(rest) == 0
    assert value.return_path.address is None
    assert len(value.received) == 2
    assert len(value.received[0].tokens) == 3


def test_trace_collects_resent_fields():
    _, found = fields(
        v(
            b"Received:mx.example.com;5 May 2003 18:59:03 +0000\r\n"
            b"Resent-Date:5 May 2003 19:00:00 +0000\r\n"
            b"Resent-From: Mubelotix <mubelotix@gmail.com>\r\n"
            b"Subject: after the trace\r\n"
        )
    )
    assert isinstance(found[0], TraceField)
    assert [type(f) for f in found[0].resent] == [DateField, FromField]
    assert isinstance(found[1], SubjectField)


def test_resent():
    resent_date(v(b"Resent-Date:5 May 2003 18:59:03 +0000\r\n"))
    assert resent_from(v(b"Resent-FrOm: Mubelotix <mubelotix@gmail.com>\r\n"))[1][0].address.local_part == "mubelotix"
    assert resent_sender(v(b"Resent-sender: Mubelotix <mubelotix@gmail.com>\r\n"))[1].address.domain == "gmail.com"
    assert resent_to(v(b"Resent-To: Mubelotix <mubelotix@gmail.com>\r\n"))[1]
    assert resent_cc(v(b"Resent-Cc: Mubelotix <mubelotix@gmail.com>\r\n"))[1]
    assert resent_bcc(v(b"Resent-Bcc: Mubelotix <mubelotix@gmail.com>\r\n"))[1]


# ---------------------------------------------------------------------------
# Origination, destination and identification
# ---------------------------------------------------------------------------

def test_date():
    _, value = date(v(b"Date: 5 May 2003 18:58:34 +0000\r\n"))
    assert value.date.day == 5
    assert value.date.month == Month.MAY
    assert value.date.year == 2003
    assert (value.time.time.hour, value.time.time.minute, value.time.time.second) == (18, 58, 34)
    assert value.time.zone == Zone(True, 0, 0)


def test_date_with_two_digit_year():
    _, value = date(v(b"Date: Wed, 15 Sep 10 13:53:08 +0200\r\n"))
    assert value.date.year == 2010


def test_originators():
    _, boxes = from_(v(b"From: Mubelotix <mubelotix@mubelotix.dev>\r\n"))
    assert len(boxes) == 1
    assert boxes[0].name == ["Mubelotix"]
    assert boxes[0].address.local_part == "mubelotix"
    assert boxes[0].address.domain == "mubelotix.dev"

    assert from_(v(b"FrOm: Mubelotix <mubelotix@gmail.com>\r\n"))[1][0].address.local_part == "mubelotix"
    assert sender(v(b"sender: Mubelotix <mubelotix@gmail.com>\r\n"))[1].address.domain == "gmail.com"
    assert len(reply_to(v(b"Reply-to: Mubelotix <mubelotix@gmail.com>\r\n"))[1]) == 1


def test_from_decodes_display_name():
    _, boxes = from_(v(b"From: =?US-ASCII?Q?Keith_Moore?= <moore@cs.utk.edu>\r\n"))
    assert boxes[0].name[0] == "Keith Moore"

    _, boxes = from_(
        v(b"From: =?US-ASCII?Q?Keith_Moore?= <moore@cs.utk.edu>\r\n"),
        ParserOptions(decode_encoded_words=False),
    )
    assert boxes[0].name[0] == "=?US-ASCII?Q?Keith_Moore?="


def test_destination():
    assert to(v(b"To: Mubelotix <mubelotix@gmail.com>\r\n"))[1]
    assert cc(v(b"Cc: Mubelotix <mubelotix@gmail.com>\r\n"))[1]
    assert bcc(v(b"Bcc: Mubelotix <mubelotix@gmail.com>\r\n"))[1]


def test_empty_bcc():
    assert bcc(v(b"Bcc: \r\n \r\n"))[1] == []
    assert bcc(v(b"Bcc:\r\n"))[1] == []


def test_ids():
    _, mid = message_id(v(b"Message-ID:<556100154@gmail.com>\r\n"))
    assert mid.left == "556100154"
    assert mid.right == "gmail.com"

    assert len(references(v(b"References:<qzdzdq@qdz.com><dzdzjd@zdzdj.dz>\r\n"))[1]) == 2
    assert len(in_reply_to(v(b"In-Reply-To:<eefes@qzd.fr><52@s.dz><adzd@zd.d>\r\n"))[1]) == 3


def test_message_id_requires_brackets():
    with pytest.raises(ParseError):
        message_id(v(b"Message-ID: 556100154@gmail.com\r\n"))


# ---------------------------------------------------------------------------
# Informational
# ---------------------------------------------------------------------------

def test_informational():
    assert subject(v(b"Subject:French school is boring\r\n"))[1] == "French school is boring"
    assert subject(v(b"Subject:Folding\r\n is slow\r\n"))[1] == "Folding is slow"
    assert comments(v(b"Comments:Rust is great\r\n"))[1] == "Rust is great"
    assert len(keywords(v(b"Keywords:rust parser fast zero copy,email rfc5322\r\n"))[1]) == 2


def test_subject_decodes_encoded_words():
    data = (
        b"Subject: =?UTF-8?B?8J+OiEJpcnRoZGF5IEdpdmVhd2F58J+OiA==?= Win free stickers\r\n"
        b" from daily.dev =?UTF-8?B?8J+MiA==?=\r\n"
    )
    _, value = subject(v(data))
    assert value == " \U0001f388Birthday Giveaway\U0001f388 Win free stickers from daily.dev \U0001f308"


def test_comments_join_adjacent_encoded_words():
    data = (
        b"Comments: =?ISO-8859-1?B?SWYgeW91IGNhbiByZWFkIHRoaXMgeW8=?=\r\n"
        b" =?ISO-8859-2?B?dSB1bmRlcnN0YW5kIHRoZSBleGFtcGxlLg==?=\r\n"
    )
    assert comments(v(data))[1] == " If you can read this you understand the example."
