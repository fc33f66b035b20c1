"""
MIME header parameters and RFC 2231 continuation reassembly.

``title*0*=us-ascii'en'This%20is%20;`` ``title*1*=%2A%2Afun%2A%2A`` and
``title*2="!"`` collect into a single ``title`` parameter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote_to_bytes

from rfcmail.errors import ExplicitError
from rfcmail.mime.charsets import decode_text, is_supported, normalize_charset
from rfcmail.parsing.charsets import is_digit, is_token_char
from rfcmail.parsing.combinators import match_first, prefixed, take_while1
from rfcmail.parsing.lexical import quoted_string
from rfcmail.parsing.whitespace import skip_cfws
from rfcmail.text import Text, View

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Parameter:
    name: Text
    value: Text
    index: Optional[int] = None
    extended: bool = False


def token(input: View) -> Tuple[View, Text]:
    return take_while1(input, is_token_char, "Expected a token")


def _is_name_char(c: int) -> bool:
    return is_token_char(c) and c != 42  # '*'


def _rfc2231_name(input: View) -> Tuple[View, Tuple[Text, Optional[int], bool]]:
    input, name = take_while1(input, _is_name_char, "Expected a parameter name")
    index = None
    if input.startswith(b"*") and is_digit(input.get(1) or 0):
        input, digits = take_while1(input.advance(1), is_digit)
        index = int(digits.to_str())
    extended = input.startswith(b"*")
    if extended:
        input = input.advance(1)
    if not input.startswith(b"="):
        raise ExplicitError("A parameter name must be followed by `=`")
    return input, (name, index, extended)


def _plain_name(input: View) -> Tuple[View, Tuple[Text, Optional[int], bool]]:
    input, name = token(input)
    return input, (name, None, False)


def _parameter_name(input: View) -> Tuple[View, Tuple[Text, Optional[int], bool]]:
    return match_first(skip_cfws(input), (_rfc2231_name, _plain_name))


def _parameter_value(input: View) -> Tuple[View, Text]:
    return match_first(input, (token, quoted_string))


def parameter(input: View) -> Tuple[View, Parameter]:
    input = skip_cfws(input)
    input, (name, index, extended) = prefixed(input, _parameter_name, b";")
    input, value = prefixed(input, _parameter_value, b"=")
    return input, Parameter(name.lower(), value, index, extended)


def decode_parameter(value: Text, charset: str, strict: bool = False) -> Text:
    """
    Percent-decode ``value`` and decode it with ``charset``.

    A charset outside the supported set leaves the value untouched, or
    raises ExplicitError when ``strict`` is set.
    """
    if not is_supported(charset):
        if strict:
            raise ExplicitError(f"Unknown charset {charset}")
        logger.debug("Leaving parameter undecoded, unsupported charset %s", charset)
        return value
    raw = unquote_to_bytes(bytes(value.as_bytes()))
    return Text.owned(decode_text(charset, raw))


def _split_extended(value: Text) -> Optional[Tuple[str, str, Text]]:
    """Split ``charset'language'text``; None if the quotes are missing."""
    raw = value.to_str()
    first = raw.find("'")
    if first == -1:
        return None
    second = raw.find("'", first + 1)
    if second == -1:
        return None
    return normalize_charset(raw[:first]), raw[first + 1:second], Text.owned(raw[second + 1:])


def _decode_initial(value: Text, strict: bool) -> Tuple[Text, Optional[str]]:
    parts = _split_extended(value)
    if parts is None:
        logger.debug("Extended parameter without charset and language: %r", value)
        return value, None
    charset, _language, text = parts
    return decode_parameter(text, charset, strict), charset


def collect_parameters(parameters: List[Parameter], strict: bool = False) -> Dict[Text, Text]:
    """
    Fold parsed parameters into an ordered name -> value mapping.

    Indexed segments are concatenated from index 0 upwards and stop at the
    first missing index. A group without segment 0 is dropped.
    """
    out: Dict[Text, Optional[Text]] = {}
    groups: Dict[Text, Dict[int, Parameter]] = {}

    for param in parameters:
        if param.index is None:
            if param.extended:
                out[param.name] = _decode_initial(param.value, strict)[0]
            else:
                out[param.name] = param.value
            continue
        if param.name not in groups:
            groups[param.name] = {}
            out.setdefault(param.name, None)
        groups[param.name][param.index] = param

    for name, segments in groups.items():
        first = segments.get(0)
        if first is None:
            if out.get(name) is None:
                del out[name]
            continue
        charset = None
        if first.extended:
            value, charset = _decode_initial(first.value, strict)
        else:
            value = first.value
        value = value.copy()
        idx = 1
        while idx in segments:
            segment = segments[idx]
            if segment.extended and charset is not None:
                value.append(decode_parameter(segment.value, charset, strict))
            else:
                value.append(segment.value)
            idx += 1
        if idx < len(segments):
            logger.debug("Parameter %s has a gap after segment %d", name, idx - 1)
        out[name] = value

    return {k: v for k, v in out.items() if v is not None}
