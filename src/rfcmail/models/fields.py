from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from rfcmail.models.address import Address, EmailAddress, Mailbox, MessageId
from rfcmail.models.mime import Disposition, MediaType, TransferEncoding
from rfcmail.models.time import DateTime
from rfcmail.text import Text


def _plain(value: Any) -> Any:
    if isinstance(value, Text):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class Field:
    """Base class of every parsed header field. ``name`` is the canonical header name."""

    name: ClassVar[str] = ""

    def to_dict(self) -> dict:
        out: Dict[str, Any] = {"field": self.name}
        for f in fields(self):  # type: ignore[arg-type]
            out[f.name] = _plain(getattr(self, f.name))
        return out


@dataclass(frozen=True)
class DateField(Field):
    name: ClassVar[str] = "Date"
    value: DateTime


@dataclass(frozen=True)
class FromField(Field):
    name: ClassVar[str] = "From"
    mailboxes: List[Mailbox]


@dataclass(frozen=True)
class SenderField(Field):
    name: ClassVar[str] = "Sender"
    mailbox: Mailbox


@dataclass(frozen=True)
class ReplyToField(Field):
    name: ClassVar[str] = "Reply-To"
    addresses: List[Address]


@dataclass(frozen=True)
class ToField(Field):
    name: ClassVar[str] = "To"
    addresses: List[Address]


@dataclass(frozen=True)
class CcField(Field):
    name: ClassVar[str] = "Cc"
    addresses: List[Address]


@dataclass(frozen=True)
class BccField(Field):
    name: ClassVar[str] = "Bcc"
    addresses: List[Address]


@dataclass(frozen=True)
class MessageIdField(Field):
    name: ClassVar[str] = "Message-ID"
    id: MessageId


@dataclass(frozen=True)
class InReplyToField(Field):
    name: ClassVar[str] = "In-Reply-To"
    ids: List[MessageId]


@dataclass(frozen=True)
class ReferencesField(Field):
    name: ClassVar[str] = "References"
    ids: List[MessageId]


@dataclass(frozen=True)
class SubjectField(Field):
    name: ClassVar[str] = "Subject"
    value: Text


@dataclass(frozen=True)
class CommentsField(Field):
    name: ClassVar[str] = "Comments"
    value: Text


@dataclass(frozen=True)
class KeywordsField(Field):
    name: ClassVar[str] = "Keywords"
    keywords: List[List[Text]]


@dataclass(frozen=True)
class MimeVersionField(Field):
    name: ClassVar[str] = "MIME-Version"
    major: int
    minor: int


@dataclass(frozen=True)
class ContentTypeField(Field):
    name: ClassVar[str] = "Content-Type"
    mime_type: Union[MediaType, str]
    subtype: Text
    parameters: Dict[Text, Text] = field(default_factory=dict)


@dataclass(frozen=True)
class ContentTransferEncodingField(Field):
    name: ClassVar[str] = "Content-Transfer-Encoding"
    encoding: Union[TransferEncoding, str]


@dataclass(frozen=True)
class ContentIdField(Field):
    name: ClassVar[str] = "Content-ID"
    id: MessageId


@dataclass(frozen=True)
class ContentDescriptionField(Field):
    name: ClassVar[str] = "Content-Description"
    value: Text


@dataclass(frozen=True)
class ContentDispositionField(Field):
    name: ClassVar[str] = "Content-Disposition"
    disposition: Disposition


# --- trace block ---


@dataclass(frozen=True)
class ReceivedWord:
    word: Text

    def to_dict(self) -> dict:
        return {"word": str(self.word)}


@dataclass(frozen=True)
class ReceivedDomain:
    domain: Text

    def to_dict(self) -> dict:
        return {"domain": str(self.domain)}


@dataclass(frozen=True)
class ReceivedAddress:
    address: EmailAddress

    def to_dict(self) -> dict:
        return {"address": self.address.to_dict()}


ReceivedToken = Union[ReceivedWord, ReceivedDomain, ReceivedAddress]


@dataclass(frozen=True)
class Received:
    tokens: List[ReceivedToken]
    date_time: DateTime

    def to_dict(self) -> dict:
        return {
            "tokens": [t.to_dict() for t in self.tokens],
            "date_time": self.date_time.to_dict(),
        }


@dataclass(frozen=True)
class ReturnPath:
    """``address`` is None for the null path ``<>``."""

    address: Optional[EmailAddress]

    def to_dict(self) -> dict:
        return {"address": self.address.to_dict() if self.address else None}


@dataclass(frozen=True)
class TraceField(Field):
    """
    A trace block: an optional Return-Path, one or more Received fields and
    the Resent-* fields that follow them. Resent fields are stored with the
    same field classes as their originals (``Resent-From`` is a FromField).
    """

    name: ClassVar[str] = "Trace"
    received: List[Received]
    return_path: Optional[ReturnPath] = None
    resent: List[Field] = field(default_factory=list)


@dataclass(frozen=True)
class UnknownField(Field):
    name: ClassVar[str] = "Unknown"
    field_name: Text
    value: Text

    def to_dict(self) -> dict:
        return {"field": str(self.field_name), "value": str(self.value)}
