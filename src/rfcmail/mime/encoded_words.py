"""RFC 2047 encoded words: ``=?charset?encoding?encoded-text?=``."""
from __future__ import annotations

from typing import Tuple

from rfcmail.errors import ExplicitError, ParseError
from rfcmail.mime.base64_codec import decode_base64
from rfcmail.mime.charsets import decode_text
from rfcmail.mime.quoted_printable import decode_header_quoted_printable
from rfcmail.parsing.charsets import is_encoded_text, is_encoded_word_token
from rfcmail.parsing.combinators import tag, take_while1
from rfcmail.text import Text, View


def encoded_word(input: View) -> Tuple[View, Text]:
    input, _ = tag(input, b"=?")
    input, charset = take_while1(input, is_encoded_word_token, "Expected a charset")
    input, _ = tag(input, b"?")
    input, encoding = take_while1(input, is_encoded_word_token, "Expected an encoding")
    input, _ = tag(input, b"?")
    input, data = take_while1(input, is_encoded_text, "Expected encoded text")
    input, _ = tag(input, b"?=")

    method = encoding.to_str().upper()
    if method == "B":
        raw = decode_base64(data.as_bytes())
    elif method == "Q":
        raw = decode_header_quoted_printable(data.as_bytes())
    else:
        raise ExplicitError("Unknown encoding")

    return input, Text.owned(decode_text(charset.to_str().lower(), raw))


def decode_word(word: Text) -> Text:
    """Decode ``word`` if it is exactly one encoded word, else return it as is."""
    if len(word) < 8 or not word.view().startswith(b"=?"):
        return word
    try:
        rest, decoded = encoded_word(word.view())
    except ParseError:
        return word
    if rest:
        return word
    return decoded
