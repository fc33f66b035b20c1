from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from rfcmail.text import Text


@dataclass(frozen=True)
class EmailAddress:
    local_part: Text
    domain: Text

    @property
    def email(self) -> str:
        return f"{self.local_part}@{self.domain}"

    def __str__(self) -> str:
        return self.email

    def __repr__(self) -> str:
        return f"EmailAddress(local_part={str(self.local_part)!r}, domain={str(self.domain)!r})"

    def to_dict(self) -> dict:
        return {
            "local_part": str(self.local_part),
            "domain": str(self.domain),
        }


@dataclass(frozen=True)
class Mailbox:
    address: EmailAddress
    name: Optional[List[Text]] = None

    @property
    def display_name(self) -> Optional[str]:
        if not self.name:
            return None
        return " ".join(str(w) for w in self.name)

    @property
    def display(self) -> str:
        if self.display_name:
            return f"{self.display_name} <{self.address.email}>"
        return self.address.email

    def __str__(self) -> str:
        return self.display

    def __repr__(self) -> str:
        return f"Mailbox(name={self.display_name!r}, address={self.address.email!r})"

    def to_dict(self) -> dict:
        return {
            "name": self.display_name,
            "address": self.address.to_dict(),
        }


@dataclass(frozen=True)
class Group:
    name: List[Text]
    mailboxes: List[Mailbox] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return " ".join(str(w) for w in self.name)

    def __repr__(self) -> str:
        return f"Group(name={self.display_name!r}, mailboxes={self.mailboxes!r})"

    def to_dict(self) -> dict:
        return {
            "name": self.display_name,
            "mailboxes": [m.to_dict() for m in self.mailboxes],
        }


Address = Union[Mailbox, Group]


@dataclass(frozen=True)
class MessageId:
    left: Text
    right: Text

    def __str__(self) -> str:
        return f"<{self.left}@{self.right}>"

    def __repr__(self) -> str:
        return f"MessageId({str(self)!r})"

    def to_dict(self) -> dict:
        return {"left": str(self.left), "right": str(self.right)}
