from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from rfcmail.config import DEFAULT_OPTIONS, ParserOptions
from rfcmail.errors import DuplicateHeaderError, MissingHeaderError, ParseError
from rfcmail.mime.charsets import Decoder
from rfcmail.mime.entity import EntityHeaders, decode_value, entity
from rfcmail.models.address import Address, Mailbox, MessageId
from rfcmail.models.fields import (
    BccField,
    CcField,
    CommentsField,
    ContentDescriptionField,
    ContentDispositionField,
    ContentIdField,
    ContentTransferEncodingField,
    ContentTypeField,
    DateField,
    Field,
    FromField,
    InReplyToField,
    KeywordsField,
    MessageIdField,
    MimeVersionField,
    ReferencesField,
    ReplyToField,
    SenderField,
    SubjectField,
    ToField,
    TraceField,
    UnknownField,
)
from rfcmail.models.mime import Entity, RawEntity
from rfcmail.models.time import DateTime
from rfcmail.parsing.message import parse_message
from rfcmail.text import BytesLike, Text, View

logger = logging.getLogger(__name__)


class _Collector:
    """Applies the header cardinality rules while fields are folded in."""

    def __init__(self, permissive: bool):
        self.permissive = permissive
        self.values: Dict[str, Any] = {}

    def assign(self, name: str, value: Any) -> None:
        if name in self.values:
            if not self.permissive:
                raise DuplicateHeaderError(name)
            return
        self.values[name] = value

    def merge(self, name: str, value: List[Any]) -> None:
        if name in self.values:
            if not self.permissive:
                raise DuplicateHeaderError(name)
            self.values[name] = self.values[name] + list(value)
            return
        self.values[name] = list(value)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)


@dataclass(frozen=True)
class Email:
    """
    A parsed RFC 5322 message.

    ``Email.parse`` accepts the raw bytes of a message. ``Date`` and
    ``From`` are required; every other header is optional. The body is kept
    as ``mime_entity``, a RawEntity built from the message's MIME headers,
    and ``entity()`` interprets it.
    """

    date: DateTime
    from_: List[Mailbox]
    sender: Mailbox
    mime_entity: RawEntity
    subject: Optional[Text] = None
    to: Optional[List[Address]] = None
    cc: Optional[List[Address]] = None
    bcc: Optional[List[Address]] = None
    reply_to: Optional[List[Address]] = None
    message_id: Optional[MessageId] = None
    in_reply_to: Optional[List[MessageId]] = None
    references: Optional[List[MessageId]] = None
    comments: List[Text] = field(default_factory=list)
    keywords: List[List[Text]] = field(default_factory=list)
    trace: List[TraceField] = field(default_factory=list)
    mime_version: Optional[Tuple[int, int]] = None
    unknown_fields: List[Tuple[Text, Text]] = field(default_factory=list)

    @classmethod
    def parse(cls, data: Union[View, BytesLike], options: ParserOptions = DEFAULT_OPTIONS) -> "Email":
        fields, body = parse_message(data, options)
        return cls.from_fields(fields, body, options)

    @classmethod
    def from_fields(
        cls,
        fields: List[Field],
        body: Optional[View] = None,
        options: ParserOptions = DEFAULT_OPTIONS,
    ) -> "Email":
        """Fold a field list, as returned by ``parse_message``, into an Email."""
        headers = _Collector(options.permissive)
        comments: List[Text] = []
        keywords: List[List[Text]] = []
        trace: List[TraceField] = []
        unknown_fields: List[Tuple[Text, Text]] = []

        for f in fields:
            if isinstance(f, DateField):
                headers.assign("Date", f.value)
            elif isinstance(f, FromField):
                headers.merge("From", f.mailboxes)
            elif isinstance(f, SenderField):
                headers.assign("Sender", f.mailbox)
            elif isinstance(f, SubjectField):
                headers.assign("Subject", f.value)
            elif isinstance(f, ReplyToField):
                headers.merge("Reply-To", f.addresses)
            elif isinstance(f, ToField):
                headers.merge("To", f.addresses)
            elif isinstance(f, CcField):
                headers.merge("Cc", f.addresses)
            elif isinstance(f, BccField):
                headers.merge("Bcc", f.addresses)
            elif isinstance(f, MessageIdField):
                headers.assign("Message-ID", f.id)
            elif isinstance(f, InReplyToField):
                headers.merge("In-Reply-To", f.ids)
            elif isinstance(f, ReferencesField):
                headers.merge("References", f.ids)
            elif isinstance(f, CommentsField):
                comments.append(f.value)
            elif isinstance(f, KeywordsField):
                keywords.extend(f.keywords)
            elif isinstance(f, TraceField):
                trace.append(f)
            elif isinstance(f, MimeVersionField):
                headers.assign("MIME-Version", (f.major, f.minor))
            elif isinstance(f, ContentTypeField):
                headers.assign("Content-Type", (f.mime_type, f.subtype, f.parameters))
            elif isinstance(f, ContentTransferEncodingField):
                headers.assign("Content-Transfer-Encoding", f.encoding)
            elif isinstance(f, ContentIdField):
                headers.assign("Content-ID", f.id)
            elif isinstance(f, ContentDescriptionField):
                headers.assign("Content-Description", f.value)
            elif isinstance(f, ContentDispositionField):
                headers.assign("Content-Disposition", f.disposition)
            elif isinstance(f, UnknownField):
                unknown_fields.append((f.field_name, f.value))

        from_ = headers.get("From")
        if from_ is None:
            raise MissingHeaderError("From")
        date = headers.get("Date")
        if date is None:
            raise MissingHeaderError("Date")
        sender = headers.get("Sender")
        if sender is None:
            if not from_:
                raise MissingHeaderError("Sender")
            sender = from_[0]

        return cls(
            date=date,
            from_=from_,
            sender=sender,
            mime_entity=_mime_entity(headers, body),
            subject=headers.get("Subject"),
            to=headers.get("To"),
            cc=headers.get("Cc"),
            bcc=headers.get("Bcc"),
            reply_to=headers.get("Reply-To"),
            message_id=headers.get("Message-ID"),
            in_reply_to=headers.get("In-Reply-To"),
            references=headers.get("References"),
            comments=comments,
            keywords=keywords,
            trace=trace,
            mime_version=headers.get("MIME-Version"),
            unknown_fields=unknown_fields,
        )

    def entity(
        self, options: ParserOptions = DEFAULT_OPTIONS, decoders: Optional[Mapping[str, Decoder]] = None
    ) -> Entity:
        return entity(self.mime_entity, options, decoders)

    def to_dict(self) -> dict:
        def addresses(values: Optional[List[Address]]) -> Optional[List[dict]]:
            return None if values is None else [a.to_dict() for a in values]

        def ids(values: Optional[List[MessageId]]) -> Optional[List[dict]]:
            return None if values is None else [i.to_dict() for i in values]

        return {
            "date": self.date.to_dict(),
            "from": [m.to_dict() for m in self.from_],
            "sender": self.sender.to_dict(),
            "subject": str(self.subject) if self.subject is not None else None,
            "to": addresses(self.to),
            "cc": addresses(self.cc),
            "bcc": addresses(self.bcc),
            "reply_to": addresses(self.reply_to),
            "message_id": self.message_id.to_dict() if self.message_id else None,
            "in_reply_to": ids(self.in_reply_to),
            "references": ids(self.references),
            "comments": [str(c) for c in self.comments],
            "keywords": [[str(w) for w in k] for k in self.keywords],
            "trace": [t.to_dict() for t in self.trace],
            "mime_version": list(self.mime_version) if self.mime_version else None,
            "mime_entity": self.mime_entity.to_dict(),
            "unknown_fields": [{"name": str(n), "value": str(v)} for n, v in self.unknown_fields],
        }


def _mime_entity(headers: _Collector, body: Optional[View]) -> RawEntity:
    defaults = EntityHeaders()
    content_type = headers.get("Content-Type")
    if content_type is not None:
        defaults.mime_type, defaults.subtype, defaults.parameters = content_type
    encoding = headers.get("Content-Transfer-Encoding", defaults.encoding)

    if body is None:
        body = View(b"")
    try:
        value, decoded = decode_value(body, encoding)
    except ParseError as e:
        logger.warning("Could not decode the %s message body: %s", encoding, e.reason)
        value, decoded = body, False

    return RawEntity(
        mime_type=defaults.mime_type,
        subtype=defaults.subtype,
        value=value,
        parameters=defaults.parameters,
        encoding=encoding,
        id=headers.get("Content-ID"),
        description=headers.get("Content-Description"),
        disposition=headers.get("Content-Disposition"),
        decoded=decoded,
    )
