from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from rfcmail.models.address import MessageId
from rfcmail.models.time import DateTime
from rfcmail.text import Text, View


class MediaType(str, Enum):
    TEXT = "text"
    MULTIPART = "multipart"
    APPLICATION = "application"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    MESSAGE = "message"

    @classmethod
    def parse(cls, name: str) -> Union["MediaType", str]:
        """Known types map onto the enum; anything else stays a lower-cased str."""
        name = name.lower()
        try:
            return cls(name)
        except ValueError:
            return name


class TransferEncoding(str, Enum):
    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BINARY = "binary"
    QUOTED_PRINTABLE = "quoted-printable"
    BASE64 = "base64"

    @classmethod
    def parse(cls, name: str) -> Union["TransferEncoding", str]:
        name = name.lower()
        try:
            return cls(name)
        except ValueError:
            return name


class DispositionType(str, Enum):
    INLINE = "inline"
    ATTACHMENT = "attachment"

    @classmethod
    def parse(cls, name: str) -> Union["DispositionType", str]:
        name = name.lower()
        try:
            return cls(name)
        except ValueError:
            return name


def _name(value: Union[Enum, str]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass(frozen=True)
class Disposition:
    disposition_type: Union[DispositionType, str]
    filename: Optional[Text] = None
    creation_date: Optional[DateTime] = None
    modification_date: Optional[DateTime] = None
    read_date: Optional[DateTime] = None
    parameters: Dict[Text, Text] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "type": _name(self.disposition_type),
            "filename": str(self.filename) if self.filename is not None else None,
            "creation_date": self.creation_date.to_dict() if self.creation_date else None,
            "modification_date": self.modification_date.to_dict() if self.modification_date else None,
            "read_date": self.read_date.to_dict() if self.read_date else None,
            "parameters": {str(k): str(v) for k, v in self.parameters.items()},
        }


@dataclass(frozen=True)
class RawEntity:
    """
    A MIME entity whose headers are parsed but whose body is not interpreted.

    ``value`` is a View into the parsed buffer when no decoding was needed,
    and owned ``bytes`` otherwise. ``decoded`` is False only when the transfer
    encoding is unknown and ``value`` still holds the encoded bytes.
    """

    mime_type: Union[MediaType, str]
    subtype: Text
    value: Union[View, bytes]
    parameters: Dict[Text, Text] = field(default_factory=dict)
    encoding: Union[TransferEncoding, str] = TransferEncoding.SEVEN_BIT
    id: Optional[MessageId] = None
    description: Optional[Text] = None
    disposition: Optional[Disposition] = None
    additional_headers: List[Tuple[Text, Text]] = field(default_factory=list)
    decoded: bool = True

    @property
    def content_type(self) -> str:
        return f"{_name(self.mime_type)}/{self.subtype}"

    @property
    def is_borrowed(self) -> bool:
        return isinstance(self.value, View)

    @property
    def data(self) -> bytes:
        return self.value.tobytes() if isinstance(self.value, View) else self.value

    def parameter(self, name: str) -> Optional[Text]:
        return self.parameters.get(name.lower())

    def __repr__(self) -> str:
        params = {str(k): str(v) for k, v in self.parameters.items()}
        return f"RawEntity(content_type={self.content_type!r}, parameters={params!r}, size={len(self.value)})"

    def to_dict(self) -> dict:
        return {
            "content_type": self.content_type,
            "parameters": {str(k): str(v) for k, v in self.parameters.items()},
            "encoding": _name(self.encoding),
            "id": self.id.to_dict() if self.id else None,
            "description": str(self.description) if self.description is not None else None,
            "disposition": self.disposition.to_dict() if self.disposition else None,
            "size": len(self.value),
        }


@dataclass(frozen=True)
class TextEntity:
    subtype: Text
    value: str

    def to_dict(self) -> dict:
        return {"kind": "text", "subtype": str(self.subtype), "value": self.value}


@dataclass(frozen=True)
class MultipartEntity:
    subtype: Text
    entities: List["Entity"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "kind": "multipart",
            "subtype": str(self.subtype),
            "entities": [e.to_dict() for e in self.entities],
        }


@dataclass(frozen=True)
class UnknownEntity:
    raw: RawEntity

    def to_dict(self) -> dict:
        return {"kind": "unknown", "raw": self.raw.to_dict()}


Entity = Union[TextEntity, MultipartEntity, UnknownEntity]
