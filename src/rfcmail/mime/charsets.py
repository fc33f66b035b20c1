"""
Charset decoders for MIME text, keyed by lower-cased charset name.

Only a fixed set of charsets is supported. Decoders are plain functions from
bytes to str; undecodable bytes become U+FFFD.
"""
from __future__ import annotations

import logging
import unicodedata
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Union

from rfcmail.errors import ExplicitError

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], str]

# ISO/IEC 6937 upper half. The 0xC1-0xCF range holds non-spacing diacritics
# that prefix the letter they modify.
_ISO6937_DIACRITICS = {
    0xC1: "\u0300",
    0xC2: "\u0301",
    0xC3: "\u0302",
    0xC4: "\u0303",
    0xC5: "\u0304",
    0xC6: "\u0306",
    0xC7: "\u0307",
    0xC8: "\u0308",
    0xCA: "\u030a",
    0xCB: "\u0327",
    0xCD: "\u030b",
    0xCE: "\u0328",
    0xCF: "\u030c",
}

_ISO6937_TABLE = {
    0xA0: "\u00a0", 0xA1: "¡", 0xA2: "¢", 0xA3: "£", 0xA4: "$", 0xA5: "¥",
    0xA6: "#", 0xA7: "§", 0xA8: "¤", 0xA9: "‘", 0xAA: "“", 0xAB: "«",
    0xAC: "←", 0xAD: "↑", 0xAE: "→", 0xAF: "↓",
    0xB0: "°", 0xB1: "±", 0xB2: "²", 0xB3: "³", 0xB4: "×", 0xB5: "µ",
    0xB6: "¶", 0xB7: "·", 0xB8: "÷", 0xB9: "’", 0xBA: "”", 0xBB: "»",
    0xBC: "¼", 0xBD: "½", 0xBE: "¾", 0xBF: "¿",
    0xD0: "―", 0xD1: "¹", 0xD2: "®", 0xD3: "©", 0xD4: "™", 0xD5: "♪",
    0xD6: "¬", 0xD7: "¦", 0xDC: "⅛", 0xDD: "⅜", 0xDE: "⅝", 0xDF: "⅞",
    0xE0: "Ω", 0xE1: "Æ", 0xE2: "Đ", 0xE3: "ª", 0xE4: "Ħ", 0xE6: "Ĳ",
    0xE7: "Ŀ", 0xE8: "Ł", 0xE9: "Ø", 0xEA: "Œ", 0xEB: "º", 0xEC: "Þ",
    0xED: "Ŧ", 0xEE: "Ŋ", 0xEF: "ŉ",
    0xF0: "ĸ", 0xF1: "æ", 0xF2: "đ", 0xF3: "ð", 0xF4: "ħ", 0xF5: "ı",
    0xF6: "ĳ", 0xF7: "ŀ", 0xF8: "ł", 0xF9: "ø", 0xFA: "œ", 0xFB: "ß",
    0xFC: "þ", 0xFD: "ŧ", 0xFE: "ŋ", 0xFF: "\u00ad",
}


def decode_iso6937(data: bytes) -> str:
    out = []
    idx = 0
    n = len(data)
    while idx < n:
        c = data[idx]
        idx += 1
        if c < 0xA0:
            out.append(chr(c))
        elif c in _ISO6937_DIACRITICS:
            if idx < n and data[idx] < 0x80:
                base = chr(data[idx])
                idx += 1
                out.append(unicodedata.normalize("NFC", base + _ISO6937_DIACRITICS[c]))
            else:
                out.append("\ufffd")
        else:
            out.append(_ISO6937_TABLE.get(c, "\ufffd"))
    return "".join(out)


def _codec(name: str) -> Decoder:
    def decode(data: bytes) -> str:
        return data.decode(name, errors="replace")

    decode.__name__ = f"decode_{name}"
    return decode


def _build_decoders() -> Dict[str, Decoder]:
    decoders: Dict[str, Decoder] = {
        "utf-8": _codec("utf-8"),
        "us-ascii": _codec("ascii"),
        "gb2312": _codec("gb2312"),
        "iso-6937": decode_iso6937,
    }
    for part in range(1, 17):
        if part == 12:
            continue
        decoders[f"iso-8859-{part}"] = _codec(f"iso8859_{part}")
    return decoders


DECODERS: Mapping[str, Decoder] = MappingProxyType(_build_decoders())

_ALIASES = MappingProxyType({
    "utf8": "utf-8",
    "ascii": "us-ascii",
    "latin1": "iso-8859-1",
    "latin-1": "iso-8859-1",
    "iso6937": "iso-6937",
    **{f"iso8859-{n}": f"iso-8859-{n}" for n in range(1, 17)},
    **{f"iso_8859-{n}": f"iso-8859-{n}" for n in range(1, 17)},
})


def normalize_charset(charset: Union[str, object]) -> str:
    name = str(charset).strip().lower()
    # RFC 2231 allows a language suffix: "utf-8*en"
    name = name.split("*", 1)[0]
    return _ALIASES.get(name, name)


def find_decoder(charset: str, decoders: Optional[Mapping[str, Decoder]] = None) -> Optional[Decoder]:
    table = DECODERS if decoders is None else decoders
    return table.get(normalize_charset(charset))


def is_supported(charset: str, decoders: Optional[Mapping[str, Decoder]] = None) -> bool:
    return find_decoder(charset, decoders) is not None


def decode_text(
    charset: str,
    data: Union[bytes, bytearray, memoryview],
    decoders: Optional[Mapping[str, Decoder]] = None,
) -> str:
    """Decode ``data`` with ``charset``; raise ExplicitError if it is unsupported."""
    decoder = find_decoder(charset, decoders)
    if decoder is None:
        raise ExplicitError(f"Unknown charset {charset}")
    text = decoder(bytes(data))
    if "\ufffd" in text:
        logger.debug("Replaced undecodable bytes while decoding %s text", charset)
    return text
