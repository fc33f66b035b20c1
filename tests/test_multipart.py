from __future__ import annotations

import logging

import pytest

from rfcmail.errors import ExplicitError, ParseError, UnknownError
from rfcmail.mime.entity import entity, raw_entity
from rfcmail.mime.multipart import parse_multipart, parse_multipart_owned
from rfcmail.models.mime import MediaType, MultipartEntity, TextEntity, TransferEncoding, UnknownEntity


# ---------------------------------------------------------------------------
# Boundary scanning
# ---------------------------------------------------------------------------

def test_parts_are_split_on_delimiters():
    parts = parse_multipart(b"\r\n--X\r\n\r\nA\r\n--X\r\n\r\nB\r\n--X--\r\n", "X")
    assert parts == [b"\r\nA", b"\r\nB"]


def test_parts_borrow_the_body():
    data = b"--X\r\nA\r\n--X--"
    parts = parse_multipart(data, b"X")
    assert parts == [b"A"]
    assert parts[0].buffer is data


def test_preamble_epilogue_and_padding_are_ignored():
    data = b"preamble\r\n--X  \r\nA\r\n--X-- \t\r\nepilogue"
    assert parse_multipart(data, "X") == [b"A"]


def test_longer_boundary_is_not_a_delimiter():
    data = b"--X\r\nA\r\n--XY\r\nB\r\n--X--\r\n"
    assert parse_multipart(data, "X") == [b"A\r\n--XY\r\nB"]


def test_closing_first_delimiter_gives_no_parts():
    assert parse_multipart(b"--X--\r\n", "X") == []


def test_boundary_errors():
    with pytest.raises(ExplicitError, match="boundary not found"):
        parse_multipart(b"no delimiter here", "X")
    with pytest.raises(ExplicitError, match="closing boundary not found"):
        parse_multipart(b"--X\r\nA\r\n", "X")
    with pytest.raises(ExplicitError):
        parse_multipart(b"--\r\n", "")


def test_owned_parse_drains_the_buffer():
    buffer = bytearray(b"preamble\r\n--X\r\nA\r\n--X\r\nB\r\n--X--\r\nepilogue")
    parts = parse_multipart_owned(buffer, "X")
    assert parts == [b"A", b"B"]
    assert buffer == bytearray(b"epilogue")


# ---------------------------------------------------------------------------
# Raw entities
# ---------------------------------------------------------------------------

def test_raw_entity_defaults():
    raw = raw_entity(b"\r\nText")
    assert raw.mime_type == MediaType.TEXT
    assert raw.subtype == "plain"
    assert raw.parameter("charset") == "us-ascii"
    assert raw.encoding == TransferEncoding.SEVEN_BIT
    assert raw.value == b"Text"
    assert raw.is_borrowed


def test_raw_entity_owned_input_copies_the_value():
    raw = raw_entity(bytearray(b"Content-Type: text/plain\r\n\r\nHello"))
    assert not raw.is_borrowed
    assert raw.value == b"Hello"


def test_raw_entity_decodes_base64():
    raw = raw_entity(b"Content-Transfer-Encoding: base64\r\n\r\nVGhhdCdzIGEgdGVzdCE=")
    assert raw.value == b"That's a test!"
    assert not raw.is_borrowed
    assert raw.decoded


def test_raw_entity_keeps_other_headers():
    raw = raw_entity(
        b"X-Custom: 1\r\nContent-Type: text/plain\r\n"
        b"Content-Description: greeting\r\nContent-ID: <part1@example.com>\r\n\r\nhi"
    )
    assert [str(name) for name, _ in raw.additional_headers] == ["X-Custom"]
    assert raw.description == " greeting"
    assert raw.id.left == "part1"


def test_unknown_transfer_encoding():
    raw = raw_entity(b"Content-Type: text/plain\r\nContent-Transfer-Encoding: x-uuencode\r\n\r\nbegin")
    assert not raw.decoded
    assert raw.value == b"begin"
    with pytest.raises(UnknownError):
        entity(raw)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

def test_text_entity():
    value = entity(raw_entity(b"\r\nText"))
    assert isinstance(value, TextEntity)
    assert value.subtype == "plain"
    assert value.value == "Text"


def test_quoted_printable_html_entity():
    raw = raw_entity(
        b"Content-Type: text/html; charset=utf-8\r\n"
        b"Content-Transfer-Encoding: quoted-printable\r\n\r\n"
        b"<p>Test=C3=A9</p>"
    )
    value = entity(raw)
    assert isinstance(value, TextEntity)
    assert value.subtype == "html"
    assert value.value == "<p>Testé</p>"


RFC2046_EXAMPLE = (
    b'Content-type: multipart/mixed; boundary="simple boundary"\r\n'
    b"\r\n"
    b"This is the preamble.  It is to be ignored, though it\r\n"
    b"is a handy place for composition agents to include an\r\n"
    b"explanatory note to non-MIME conformant readers.\r\n"
    b"\r\n"
    b"--simple boundary\r\n"
    b"\r\n"
    b"This is implicitly typed plain US-ASCII text.\r\n"
    b"It does NOT end with a linebreak.\r\n"
    b"--simple boundary\r\n"
    b"Content-type: text/plain; charset=us-ascii\r\n"
    b"\r\n"
    b"This is explicitly typed plain US-ASCII text.\r\n"
    b"It DOES end with a linebreak.\r\n"
    b"\r\n"
    b"--simple boundary--\r\n"
    b"\r\n"
    b"This is the epilogue.  It is also to be ignored.\r\n"
)


def test_rfc2046_multipart():
    value = entity(raw_entity(RFC2046_EXAMPLE))
    assert isinstance(value, MultipartEntity)
    assert value.subtype == "mixed"
    assert [e.value for e in value.entities] == [
        "This is implicitly typed plain US-ASCII text.\r\nIt does NOT end with a linebreak.",
        "This is explicitly typed plain US-ASCII text.\r\nIt DOES end with a linebreak.\r\n",
    ]


NESTED = (
    b"Content-Type: multipart/mixed; boundary=outer\r\n"
    b"\r\n"
    b"--outer\r\n"
    b"Content-Type: multipart/alternative; boundary=inner\r\n"
    b"\r\n"
    b"--inner\r\n"
    b"Content-Type: text/plain\r\n"
    b"\r\n"
    b"plain\r\n"
    b"--inner\r\n"
    b"Content-Type: text/html\r\n"
    b"\r\n"
    b"<b>html</b>\r\n"
    b"--inner--\r\n"
    b"--outer\r\n"
    b"Content-Type: image/png\r\n"
    b"Content-Transfer-Encoding: base64\r\n"
    b"\r\n"
    b"iVBORw0KGgo=\r\n"
    b"--outer--\r\n"
)


def test_nested_multipart():
    value = entity(raw_entity(NESTED))
    assert isinstance(value, MultipartEntity)
    alternative, image = value.entities

    assert isinstance(alternative, MultipartEntity)
    assert alternative.subtype == "alternative"
    assert [(str(e.subtype), e.value) for e in alternative.entities] == [
        ("plain", "plain"),
        ("html", "<b>html</b>"),
    ]

    assert isinstance(image, UnknownEntity)
    assert image.raw.mime_type == MediaType.IMAGE
    assert image.raw.data == b"\x89PNG\r\n\x1a\n"


def test_nested_multipart_from_an_owned_buffer():
    value = entity(raw_entity(bytearray(NESTED)))
    assert len(value.entities) == 2
    assert value.entities[0].entities[1].value == "<b>html</b>"


def test_failing_part_is_skipped(caplog):
    caplog.set_level(logging.WARNING, logger="rfcmail.mime.entity")
    data = (
        b"Content-Type: multipart/mixed; boundary=b\r\n"
        b"\r\n"
        b"--b\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Transfer-Encoding: x-foo\r\n"
        b"\r\n"
        b"bad\r\n"
        b"--b\r\n"
        b"\r\n"
        b"good\r\n"
        b"--b--"
    )
    value = entity(raw_entity(data))
    assert [e.value for e in value.entities] == ["good"]
    assert "Skipping part 0 of multipart/mixed" in caplog.text


def test_multipart_without_boundary():
    with pytest.raises(ParseError):
        entity(raw_entity(b"Content-Type: multipart/mixed\r\n\r\n--x--"))


def test_unsupported_charset(caplog):
    caplog.set_level(logging.WARNING, logger="rfcmail.mime.entity")
    raw = raw_entity(b"Content-Type: text/plain; charset=koi8-r\r\n\r\nabc")
    value = entity(raw)
    assert isinstance(value, UnknownEntity)
    assert value.raw is raw
    assert "Unsupported charset koi8-r" in caplog.text


def test_custom_decoders():
    raw = raw_entity(b"Content-Type: text/plain; charset=koi8-r\r\n\r\n\xf0\xd2\xc9")
    value = entity(raw, decoders={"koi8-r": lambda data: data.decode("koi8_r")})
    assert value.value == "При"


def test_entity_to_dict():
    value = entity(raw_entity(b"Content-Type: image/gif\r\n\r\nGIF89a"))
    assert value.to_dict() == {
        "kind": "unknown",
        "raw": {
            "content_type": "image/gif",
            "parameters": {},
            "encoding": "7bit",
            "id": None,
            "description": None,
            "disposition": None,
            "size": 6,
        },
    }
