"""
MIME entities: parse the headers of a body part, undo its transfer
encoding, then interpret it as text, a nested multipart or opaque data.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

from rfcmail.config import DEFAULT_OPTIONS, ParserOptions
from rfcmail.errors import ExplicitError, ParseError, UnknownError
from rfcmail.mime import fields as mime_fields
from rfcmail.mime.base64_codec import decode_base64
from rfcmail.mime.charsets import Decoder, decode_text, is_supported
from rfcmail.mime.multipart import parse_multipart, parse_multipart_owned
from rfcmail.mime.quoted_printable import decode_quoted_printable
from rfcmail.models.address import MessageId
from rfcmail.models.mime import (
    Disposition,
    Entity,
    MediaType,
    MultipartEntity,
    RawEntity,
    TextEntity,
    TransferEncoding,
    UnknownEntity,
)
from rfcmail.parsing.combinators import newline
from rfcmail.parsing.fields import unknown
from rfcmail.text import BytesLike, Text, View

logger = logging.getLogger(__name__)

_PASS_THROUGH = (TransferEncoding.SEVEN_BIT, TransferEncoding.EIGHT_BIT, TransferEncoding.BINARY)


def default_parameters() -> Dict[Text, Text]:
    return {Text.owned("charset"): Text.owned("us-ascii")}


@dataclass
class EntityHeaders:
    """The MIME headers of one entity, with RFC 2045 defaults filled in."""

    mime_type: Union[MediaType, str] = MediaType.TEXT
    subtype: Text = field(default_factory=lambda: Text.owned("plain"))
    parameters: Dict[Text, Text] = field(default_factory=default_parameters)
    encoding: Union[TransferEncoding, str] = TransferEncoding.SEVEN_BIT
    id: Optional[MessageId] = None
    description: Optional[Text] = None
    disposition: Optional[Disposition] = None
    additional_headers: List[Tuple[Text, Text]] = field(default_factory=list)


def header_part(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, EntityHeaders]:
    """
    Read the header lines of an entity.

    A repeated MIME header overrides the earlier one. Lines that are not
    MIME headers are kept in ``additional_headers``. Parsing stops at the
    first line that is not a header, usually the blank separator line.
    """
    if options.lenient_newlines:
        input = input.with_lenient(True)
    headers = EntityHeaders()
    while True:
        try:
            input, headers.encoding = mime_fields.content_transfer_encoding(input, options)
            continue
        except ParseError:
            pass
        try:
            input, (headers.mime_type, headers.subtype, headers.parameters) = mime_fields.content_type(
                input, options
            )
            continue
        except ParseError:
            pass
        try:
            input, headers.id = mime_fields.content_id(input, options)
            continue
        except ParseError:
            pass
        try:
            input, headers.description = mime_fields.content_description(input, options)
            continue
        except ParseError:
            pass
        try:
            input, headers.disposition = mime_fields.content_disposition(input, options)
            continue
        except ParseError:
            pass
        try:
            input, header = unknown(input, options)
        except ParseError:
            return input, headers
        headers.additional_headers.append(header)


def decode_value(value: View, encoding: Union[TransferEncoding, str]) -> Tuple[Union[View, bytes], bool]:
    """
    Undo a Content-Transfer-Encoding.

    Returns the value and whether it was decoded. Identity encodings hand
    the view back untouched; an unknown encoding returns it undecoded.
    """
    if encoding == TransferEncoding.BASE64:
        return decode_base64(value.memory()), True
    if encoding == TransferEncoding.QUOTED_PRINTABLE:
        return decode_quoted_printable(value.memory()), True
    if encoding in _PASS_THROUGH:
        return value, True
    logger.debug("Leaving body undecoded, unknown transfer encoding %s", encoding)
    return value, False


def raw_entity(data: Union[View, BytesLike], options: ParserOptions = DEFAULT_OPTIONS) -> RawEntity:
    """
    Parse an entity's headers and decode its transfer encoding.

    A ``bytes`` or View input is borrowed: when no decoding is needed the
    entity's value is a view into it. A ``bytearray`` is treated as a buffer
    the caller owns and the value is always an owned copy.
    """
    owned = isinstance(data, bytearray)
    input = View.of(data)
    input, headers = header_part(input, options)
    if input:
        input = newline(input, options.lenient_newlines, "Expected the blank line after the entity headers")

    value, decoded = decode_value(input, headers.encoding)
    if owned and isinstance(value, View):
        value = value.tobytes()

    return RawEntity(
        mime_type=headers.mime_type,
        subtype=headers.subtype,
        value=value,
        parameters=headers.parameters,
        encoding=headers.encoding,
        id=headers.id,
        description=headers.description,
        disposition=headers.disposition,
        additional_headers=headers.additional_headers,
        decoded=decoded,
    )


def _parts(raw: RawEntity) -> List[Union[View, bytes]]:
    boundary = raw.parameter("boundary")
    if boundary is None:
        raise ExplicitError("A multipart entity needs a boundary parameter")
    boundary_bytes = bytes(boundary.as_bytes())
    if isinstance(raw.value, View):
        return parse_multipart(raw.value, boundary_bytes)
    return parse_multipart_owned(bytearray(raw.value), boundary_bytes)


def entity(
    raw: RawEntity,
    options: ParserOptions = DEFAULT_OPTIONS,
    decoders: Optional[Mapping[str, Decoder]] = None,
) -> Entity:
    """
    Interpret a RawEntity.

    Text is decoded with its charset (``us-ascii`` when none is given) and
    multipart bodies are split and decoded recursively. A part that fails to
    parse is logged and skipped; the siblings already decoded are kept.
    Unsupported charsets and other media types give an UnknownEntity.
    """
    if raw.mime_type in (MediaType.TEXT, MediaType.MULTIPART) and not raw.decoded:
        raise UnknownError("Unknown format")

    if raw.mime_type == MediaType.MULTIPART:
        entities: List[Entity] = []
        for index, part in enumerate(_parts(raw)):
            try:
                entities.append(entity(raw_entity(part, options), options, decoders))
            except ParseError as e:
                logger.warning("Skipping part %d of %s: %s", index, raw.content_type, e.reason)
        return MultipartEntity(subtype=raw.subtype, entities=entities)

    if raw.mime_type == MediaType.TEXT:
        charset = raw.parameter("charset")
        charset_name = "us-ascii" if charset is None else charset.to_str()
        if not is_supported(charset_name, decoders):
            logger.warning("Unsupported charset %s, keeping %s undecoded", charset_name, raw.content_type)
            return UnknownEntity(raw)
        return TextEntity(subtype=raw.subtype, value=decode_text(charset_name, raw.data, decoders))

    return UnknownEntity(raw)
