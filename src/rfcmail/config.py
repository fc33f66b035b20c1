from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rfcmail.errors import ConfigError


class ParserOptions(BaseModel):
    """
    Switches for the tolerant parts of the grammar.

    The options are immutable; build a new instance with ``model_copy`` or
    ``from_mapping`` to change them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    decode_encoded_words: bool = Field(
        default=True,
        description="Decode RFC 2047 encoded words in display names and unstructured fields.",
    )
    lenient_newlines: bool = Field(
        default=False,
        description="Accept a bare LF where CRLF is required.",
    )
    strict_parameter_charsets: bool = Field(
        default=False,
        description="Fail RFC 2231 parameters whose charset is not supported.",
    )
    check_line_length: bool = Field(
        default=False,
        description="Require the body to be 998-character lines joined by CRLF.",
    )
    permissive: bool = Field(
        default=False,
        description="Merge duplicate headers instead of rejecting the message.",
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ParserOptions":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(f"Invalid parser options: {e}") from e


DEFAULT_OPTIONS = ParserOptions()
