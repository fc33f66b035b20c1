import logging

from rfcmail.config import DEFAULT_OPTIONS, ParserOptions
from rfcmail.errors import (
    ConfigError,
    DuplicateHeaderError,
    ExplicitError,
    MissingHeaderError,
    ParseError,
    RfcMailError,
    UnknownError,
)
from rfcmail.mail import Email
from rfcmail.mime.entity import entity, raw_entity
from rfcmail.parsing.message import parse_message
from rfcmail.text import Text, View

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Email",
    "parse_message",
    "raw_entity",
    "entity",
    "ParserOptions",
    "DEFAULT_OPTIONS",
    "Text",
    "View",
    "RfcMailError",
    "ParseError",
    "ExplicitError",
    "UnknownError",
    "DuplicateHeaderError",
    "MissingHeaderError",
    "ConfigError",
]
