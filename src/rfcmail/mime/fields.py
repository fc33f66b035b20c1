"""MIME header fields (RFC 2045, RFC 2183)."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

from rfcmail.config import DEFAULT_OPTIONS, ParserOptions
from rfcmail.errors import ExplicitError, ParseError
from rfcmail.mime.parameters import Parameter, collect_parameters, parameter, token
from rfcmail.models.address import MessageId
from rfcmail.models.mime import Disposition, DispositionType, MediaType, TransferEncoding
from rfcmail.models.time import DateTime
from rfcmail.parsing import address
from rfcmail.parsing.combinators import digits, match_first, newline, prefixed, tag, tag_no_case
from rfcmail.parsing.lexical import quoted_string, unstructured
from rfcmail.parsing.time import date_time
from rfcmail.parsing.whitespace import skip_cfws, skip_inline_cfws
from rfcmail.text import Text, View


def _end_of_field(input: View, options: ParserOptions) -> View:
    input = skip_inline_cfws(input)
    return newline(input, options.lenient_newlines)


def _parameters(input: View) -> Tuple[View, List[Parameter]]:
    params: List[Parameter] = []
    while True:
        try:
            input, param = parameter(input)
        except ParseError:
            break
        params.append(param)
    # tolerate a dangling ";" after the last parameter
    rest = skip_cfws(input)
    if rest.startswith(b";"):
        input = rest.advance(1)
    return input, params


def mime_version(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Tuple[int, int]]:
    input, _ = tag_no_case(input, b"MIME-Version:")
    input = skip_cfws(input)
    input, major = digits(input, 1, 3)
    input, minor = prefixed(input, lambda i: digits(i, 1, 3), b".")
    if major > 255 or minor > 255:
        raise ExplicitError("Overflow while reading the MIME version")
    return _end_of_field(input, options), (major, minor)


def content_type(
    input: View, options: ParserOptions = DEFAULT_OPTIONS
) -> Tuple[View, Tuple[Union[MediaType, str], Text, Dict[Text, Text]]]:
    input, _ = tag_no_case(input, b"Content-Type:")
    input = skip_cfws(input)
    input, type_name = token(input)
    input, _ = tag(input, b"/", "A content type must be followed by `/`")
    input, subtype = token(input)
    input, params = _parameters(input)
    parameters = collect_parameters(params, options.strict_parameter_charsets)
    input = _end_of_field(input, options)
    return input, (MediaType.parse(type_name.to_str()), subtype.lower(), parameters)


def _disposition_parameter(input: View, name: bytes) -> View:
    input = skip_cfws(input)
    input, _ = tag(input, b";")
    input = skip_cfws(input)
    input, _ = tag_no_case(input, name)
    return input


def _filename_parameter(input: View) -> Tuple[View, Text]:
    input = _disposition_parameter(input, b"filename")
    input, _ = tag(input, b"=")
    return match_first(input, (token, quoted_string))


def _date_parameter(input: View, name: bytes) -> Tuple[View, DateTime]:
    input = _disposition_parameter(input, name)
    input, _ = tag(input, b'="')
    input, value = date_time(input)
    input, _ = tag(input, b'"')
    return input, value


def content_disposition(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Disposition]:
    input, _ = tag_no_case(input, b"Content-Disposition:")
    input = skip_cfws(input)
    input, kind = token(input)

    filename: Optional[Text] = None
    dates: Dict[str, DateTime] = {}
    params: List[Parameter] = []
    while True:
        try:
            input, filename = _filename_parameter(input)
            continue
        except ParseError:
            pass
        for name in (b"creation-date", b"modification-date", b"read-date"):
            try:
                input, dates[name.decode("ascii")] = _date_parameter(input, name)
                break
            except ParseError:
                continue
        else:
            try:
                input, param = parameter(input)
            except ParseError:
                break
            params.append(param)

    rest = skip_cfws(input)
    if rest.startswith(b";"):
        input = rest.advance(1)
    parameters = collect_parameters(params, options.strict_parameter_charsets)
    if filename is None and "filename" in parameters:
        # filename*=utf-8''... or filename*0=...
        filename = parameters.pop("filename")

    input = _end_of_field(input, options)
    return input, Disposition(
        disposition_type=DispositionType.parse(kind.to_str()),
        filename=filename,
        creation_date=dates.get("creation-date"),
        modification_date=dates.get("modification-date"),
        read_date=dates.get("read-date"),
        parameters=parameters,
    )


def content_transfer_encoding(
    input: View, options: ParserOptions = DEFAULT_OPTIONS
) -> Tuple[View, Union[TransferEncoding, str]]:
    input, _ = tag_no_case(input, b"Content-Transfer-Encoding:")
    input = skip_cfws(input)
    input, name = token(input)
    return _end_of_field(input, options), TransferEncoding.parse(name.to_str())


def content_id(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, MessageId]:
    input, _ = tag_no_case(input, b"Content-ID:")
    input, value = address.message_id(input)
    return newline(input, options.lenient_newlines), value


def content_description(input: View, options: ParserOptions = DEFAULT_OPTIONS) -> Tuple[View, Text]:
    input, _ = tag_no_case(input, b"Content-Description:")
    input, value = unstructured(input, options.decode_encoded_words)
    return newline(input, options.lenient_newlines), value
