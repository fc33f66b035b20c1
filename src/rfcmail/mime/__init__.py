from rfcmail.mime.base64_codec import decode_base64, encode_base64
from rfcmail.mime.quoted_printable import (
    decode_header_quoted_printable,
    decode_quoted_printable,
    encode_quoted_printable,
)

__all__ = [
    "encode_base64",
    "decode_base64",
    "encode_quoted_printable",
    "decode_quoted_printable",
    "decode_header_quoted_printable",
]
