"""
Flattening of single-list structures into list subclasses.

A SOAP array, once its wildcard element has been retyped, translates into a
structure whose only field is a list of items::

    @dataclass
    class IntArray:
        items: list[int] = field(default_factory=list, metadata={"xml": ",any"})

That wrapper adds nothing, so the declaration becomes ``class
IntArray(list[int])`` instead, with synthesized ``from_xml`` and ``to_xml``
methods that read and write the legacy ``<item>`` encoding.
"""

import ast
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List

from ..runtime import ANY_ELEMENT, ITEM_TAG, clark, split_tag
from . import syntax as s
from .spec import SequenceType, Spec, StructType

if TYPE_CHECKING:
    from .config import Config


class TagMatch(Enum):
    """How decoded child elements are matched against the expected tag."""

    ANY = "any"
    LOCAL = "local"
    EXACT = "exact"


@dataclass(frozen=True)
class ItemTag:
    """The expected tag of sequence items."""

    space: str
    local: str

    @property
    def match(self) -> TagMatch:
        if self.local == ANY_ELEMENT:
            return TagMatch.ANY
        if not self.space:
            return TagMatch.LOCAL
        return TagMatch.EXACT


def parse_item_tag(tag: str) -> ItemTag:
    """
    Parse a field's ``xml`` tag into the expected item tag.

    Raises:
        ValueError: If the tag is malformed
    """
    if not tag:
        tag = ANY_ELEMENT
    space, local, _ = split_tag(tag)
    return ItemTag(space, local)


def build_to_xml() -> ast.FunctionDef:
    """
    Synthesize::

        def to_xml(self, tag):
            element = ElementTree.Element(tag)
            for item in self:
                element.append(encode_value(item, 'item'))
            return element
    """
    body = [
        s.assign("element", s.call(s.attr(s.name("ElementTree"), "Element"), s.name("tag"))),
        s.for_(
            "item",
            s.name("self"),
            [
                s.expr_stmt(
                    s.method_call(
                        "element",
                        "append",
                        s.call(s.name("encode_value"), s.name("item"), s.const(ITEM_TAG)),
                    )
                )
            ],
        ),
        s.ret(s.name("element")),
    ]
    return s.check(s.function_def("to_xml", ["self", "tag"], body))


def _mismatch(tag: ItemTag) -> ast.expr:
    child_tag = s.attr(s.name("child"), "tag")
    if tag.match is TagMatch.LOCAL:
        return s.not_equal(s.call(s.name("local_name"), child_tag), s.const(tag.local))
    return s.not_equal(child_tag, s.const(clark(tag.space, tag.local)))


def build_from_xml(item: ast.expr, tag: ItemTag) -> ast.FunctionDef:
    """
    Synthesize a classmethod decoding every matching child element::

        @classmethod
        def from_xml(cls, element):
            items = cls()
            for child in element:
                if child.tag != '{ns}local':
                    continue
                items.append(decode_value(Item, child))
            return items

    The tag check is omitted when any child is accepted.
    """
    loop: List[ast.stmt] = []
    if tag.match is not TagMatch.ANY:
        loop.append(s.if_(_mismatch(tag), [ast.Continue()]))
    loop.append(
        s.expr_stmt(
            s.method_call(
                "items", "append", s.call(s.name("decode_value"), item, s.name("child"))
            )
        )
    )
    body = [
        s.assign("items", s.call(s.name("cls"))),
        s.for_("child", s.name("element"), loop),
        s.ret(s.name("items")),
    ]
    return s.check(
        s.function_def("from_xml", ["cls", "element"], body, decorators=["classmethod"])
    )


def soap_array_to_sequence(cfg: "Config", spec: Spec) -> Spec:
    """
    Post-processing step replacing a single-list structure with the list.

    Specs that are not a structure with exactly one list field are returned
    untouched. If the field's tag cannot be parsed or a method cannot be
    built, the error is reported and the Spec is returned unchanged.
    """
    struct = spec.expr
    if not isinstance(struct, StructType) or len(struct.fields) != 1:
        return spec
    only = struct.fields[0]
    if not isinstance(only.type, SequenceType):
        return spec
    seq = only.type

    cfg.debugf("flattening single-element struct %s to a sequence", spec.name)
    try:
        tag = parse_item_tag(only.tag("xml"))
        to_xml = build_to_xml()
        from_xml = build_from_xml(seq.item.to_ast(), tag)
    except (ValueError, TypeError, SyntaxError) as e:
        cfg.errorf("could not flatten %s to a sequence: %s", spec.name, e)
        return spec

    spec.expr = seq
    spec.methods.extend([to_xml, from_xml])
    return spec
