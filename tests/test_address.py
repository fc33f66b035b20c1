from __future__ import annotations

import pytest

from rfcmail.errors import ParseError
from rfcmail.models.address import Group, Mailbox
from rfcmail.parsing.address import (
    addr_spec,
    address_list,
    domain,
    domain_literal,
    group,
    local_part,
    mailbox,
    mailbox_list,
    message_id,
    name_addr,
)
from rfcmail.text import View


def v(data: bytes) -> View:
    return View(data)


def test_local_part():
    assert local_part(v(b"mubelotix"))[1] == "mubelotix"
    assert local_part(v(b'"mubelotix\\ the\\ admin"'))[1] == "mubelotix the admin"


def test_message_id():
    _, mid = message_id(v(b"<idleft@idright>"))
    assert mid.left == "idleft"
    assert mid.right == "idright"
    assert str(mid) == "<idleft@idright>"

    assert message_id(v(b"<idleft@[idright]>"))[1].right == "idright"

    with pytest.raises(ParseError):
        message_id(v(b"idleft@idright"))


def test_domain_literal_drops_folding():
    assert domain_literal(v(b"[mubelotix.dev]"))[1] == "mubelotix.dev"
    assert domain_literal(v(b"[mubelotix\r\n .dev]"))[1] == "mubelotix.dev"
    assert domain(v(b"[mubelotix\r\n .dev]"))[1] == "mubelotix.dev"
    assert domain(v(b"mubelotix.dev"))[1] == "mubelotix.dev"


def test_addr_spec():
    _, address = addr_spec(v(b"mubelotix@mubelotix.dev"))
    assert address.local_part == "mubelotix"
    assert address.domain == "mubelotix.dev"
    assert address.email == "mubelotix@mubelotix.dev"

    _, address = addr_spec(v(b'"special\\ person"@gmail.com'))
    assert address.local_part == "special person"
    assert address.domain == "gmail.com"


def test_addr_spec_is_borrowed():
    data = b"mubelotix@mubelotix.dev"
    _, address = addr_spec(v(data))
    assert address.local_part.span == (data, 0, 9)
    assert address.domain.span == (data, 10, len(data))


def test_name_addr():
    _, box = name_addr(v(b"<mubelotix@gmail.com>"))
    assert box.name is None
    assert box.address.local_part == "mubelotix"

    _, box = name_addr(v(b"Random Guy <someone@gmail.com>"))
    assert len(box.name) == 2
    assert box.display_name == "Random Guy"
    assert box.address.domain == "gmail.com"


def test_mailbox_alternatives():
    _, box = mailbox(v(b"mubelotix@mubelotix.dev"))
    assert box.name is None
    assert box.address.domain == "mubelotix.dev"

    _, box = mailbox(v(b"Random Guy <someone@gmail.com>"))
    assert box.display == "Random Guy <someone@gmail.com>"


def test_mailbox_list():
    _, boxes = mailbox_list(v(b"test@gmail.com,Michel<michel@gmail.com>,<postmaster@mubelotix.dev>"))
    assert len(boxes) == 3
    assert boxes[1].display_name == "Michel"


def test_group():
    _, grp = group(v(b"Developers: Mubelotix <mubelotix@mubelotix.dev>, Someone <guy@gmail.com>;"))
    assert grp.name[0] == "Developers"
    assert grp.mailboxes[0].name[0] == "Mubelotix"
    assert grp.mailboxes[0].address.local_part == "mubelotix"
    assert grp.mailboxes[0].address.domain == "mubelotix.dev"


def test_empty_group():
    _, grp = group(v(b"Undisclosed recipients:;"))
    assert grp.display_name == "Undisclosed recipients"
    assert grp.mailboxes == []


def test_address_list_mixes_mailboxes_and_groups():
    _, addresses = address_list(
        v(b"mubelotix@gmail.com,guy@gmail.com,Developers:mubelotix@gmail.com,guy@gmail.com;")
    )
    assert len(addresses) == 3
    assert isinstance(addresses[0], Mailbox)
    assert isinstance(addresses[2], Group)
    assert len(addresses[2].mailboxes) == 2


def test_to_dict():
    _, box = mailbox(v(b"Random Guy <someone@gmail.com>"))
    assert box.to_dict() == {
        "name": "Random Guy",
        "address": {"local_part": "someone", "domain": "gmail.com"},
    }
