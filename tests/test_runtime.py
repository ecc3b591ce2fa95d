import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar
from xml.etree import ElementTree

import pytest

from xsd_codegen.runtime import (
    ANY_ELEMENT,
    HexBinary,
    decode_value,
    encode_value,
    format_text,
    local_name,
    parse_text,
    split_tag,
    tag_matches,
)


@dataclass
class Money:
    currency: str | None = field(default=None, metadata={"xml": "currency,attr"})
    amount: Decimal | None = field(default=None, metadata={"xml": "amount"})


@dataclass
class Invoice:
    version: ClassVar[str] = "2"
    __xml_constants__: ClassVar[dict] = {"version,attr": "version"}

    number: int | None = field(default=None, metadata={"xml": "number,attr"})
    issued: datetime.date | None = field(default=None, metadata={"xml": "urn:inv issued"})
    total: Money | None = field(default=None, metadata={"xml": "total"})
    notes: list[str] = field(default_factory=list, metadata={"xml": "note"})
    codes: list[int] | None = field(default=None, metadata={"xml": "codes"})
    untagged: str = "kept"


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("", ("", ANY_ELEMENT, [])),
        (",any", ("", ANY_ELEMENT, ["any"])),
        ("local", ("", "local", [])),
        ("urn:x local,attr", ("urn:x", "local", ["attr"])),
    ],
)
def test_split_tag(tag, expected):
    assert split_tag(tag) == expected


def test_split_tag_rejects_three_tokens():
    with pytest.raises(ValueError):
        split_tag("a b c")


def test_tag_matching():
    assert local_name("{urn:x}item") == "item"
    assert tag_matches("{urn:x}anything", "", ANY_ELEMENT)
    assert tag_matches("{urn:x}item", "", "item")
    assert not tag_matches("{urn:x}item", "urn:y", "item")
    assert tag_matches("{urn:x}item", "urn:x", "item")


def test_scalar_text_conversion():
    assert parse_text(bool, " true ") is True
    assert parse_text(bool, "0") is False
    assert parse_text(Decimal, "1.50") == Decimal("1.50")
    assert parse_text(bytes, "aGk=") == b"hi"
    assert parse_text(list[int], "1 2  3") == [1, 2, 3]
    assert parse_text(datetime.date, "2024-03-01") == datetime.date(2024, 3, 1)
    assert parse_text(str, " keep ") == " keep "

    assert format_text(False) == "false"
    assert format_text(b"hi") == "aGk="
    assert format_text(datetime.date(2024, 3, 1)) == "2024-03-01"
    assert format_text([1, 2]) == "1 2"


def test_invalid_boolean():
    with pytest.raises(ValueError):
        parse_text(bool, "maybe")


def test_decode_dataclass():
    element = ElementTree.fromstring(
        "<invoice xmlns:i='urn:inv' number='7' version='2'>"
        "<i:issued>2024-03-01</i:issued>"
        "<issued>1999-01-01</issued>"
        "<total currency='EUR'><amount>12.50</amount></total>"
        "<note>a</note><note>b</note>"
        "<codes>4 5</codes>"
        "</invoice>"
    )

    invoice = decode_value(Invoice, element)

    assert invoice.number == 7
    assert invoice.issued == datetime.date(2024, 3, 1)
    assert invoice.total == Money("EUR", Decimal("12.50"))
    assert invoice.notes == ["a", "b"]
    assert invoice.codes == [4, 5]
    assert invoice.untagged == "kept"


def test_encode_dataclass():
    invoice = Invoice(number=7, total=Money(amount=Decimal("3")), notes=["x"], codes=[1, 2])

    element = encode_value(invoice, "invoice")

    assert element.attrib == {"version": "2", "number": "7"}
    assert [child.tag for child in element] == ["total", "note", "codes"]
    assert element.find("total/amount").text == "3"
    assert element.find("codes").text == "1 2"


def test_encode_scalar():
    element = encode_value(True, "flag")
    assert (element.tag, element.text) == ("flag", "true")


@dataclass
class Bag:
    label: str | None = field(default=None, metadata={"xml": "label"})
    items: list[int] = field(default_factory=list, metadata={"xml": ANY_ELEMENT})


def test_wildcard_skips_children_of_named_fields():
    element = ElementTree.fromstring("<bag><x>1</x><label>L</label><y>2</y></bag>")

    assert decode_value(Bag, element) == Bag("L", [1, 2])

    bag = Bag(label="L", items=[3, 4])
    assert decode_value(Bag, encode_value(bag, "bag")) == bag


def test_time_and_hex_binary_text():
    assert parse_text(datetime.time, "10:30:00") == datetime.time(10, 30)
    assert format_text(datetime.time(10, 30)) == "10:30:00"

    value = parse_text(HexBinary, "0fA0")
    assert value == b"\x0f\xa0"
    assert isinstance(value, HexBinary)
    assert format_text(value) == "0FA0"
    assert format_text(b"\x0f\xa0") == "D6A="
