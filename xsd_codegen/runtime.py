"""XML decoding and encoding support for generated modules.

Generated classes describe their XML shape through ``xml`` field metadata
(``"[namespace ]local[,flag...]"``). The functions here read and write
:mod:`xml.etree.ElementTree` elements according to that metadata, and
delegate to ``from_xml``/``to_xml`` methods where a class defines them.
"""

import base64
import dataclasses
import datetime
import types
import typing
from decimal import Decimal
from typing import Any, List, Tuple
from xml.etree import ElementTree

import dateparser

ANY_ELEMENT = ",any"
ITEM_TAG = "item"


class HexBinary(bytes):
    """Binary content written as hexadecimal text (``xs:hexBinary``)."""


def split_tag(tag: str) -> Tuple[str, str, List[str]]:
    """Split an ``xml`` tag into (namespace, local name, flags).

    A tag without a name part (such as ``",any"``) yields the
    :data:`ANY_ELEMENT` sentinel as its local name.

    Raises:
        ValueError: If the name part has more than a namespace and a local name.
    """
    parts = tag.split(",")
    tokens = parts[0].split()
    flags = [p.strip() for p in parts[1:] if p.strip()]
    if len(tokens) > 2:
        raise ValueError(f"malformed xml tag {tag!r}: expected '[namespace ]local'")
    if not tokens:
        return "", ANY_ELEMENT, flags
    if len(tokens) == 1:
        return "", tokens[0], flags
    return tokens[0], tokens[1], flags


def clark(space: str, local: str) -> str:
    """ElementTree's ``{namespace}local`` form of a qualified name."""
    return f"{{{space}}}{local}" if space else local


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an ElementTree tag."""
    return tag.rpartition("}")[2]


def tag_matches(tag: str, space: str, local: str) -> bool:
    """Match an element tag against an expected name.

    The :data:`ANY_ELEMENT` sentinel matches everything; an empty namespace
    compares local names only.
    """
    if local == ANY_ELEMENT:
        return True
    if not space:
        return local_name(tag) == local
    return tag == clark(space, local)


def parse_text(tp: Any, text: str) -> Any:
    """Convert element or attribute text to ``tp``."""
    if tp is str or tp is Any:
        return text
    text = text.strip()
    if tp is bool:
        if text in ("true", "1"):
            return True
        if text in ("false", "0"):
            return False
        raise ValueError(f"invalid boolean {text!r}")
    if tp in (datetime.datetime, datetime.date, datetime.time):
        parsed = dateparser.parse(text)
        if parsed is None:
            raise ValueError(f"invalid {tp.__name__} {text!r}")
        if tp is datetime.date:
            return parsed.date()
        if tp is datetime.time:
            return parsed.timetz()
        return parsed
    if tp is HexBinary:
        return HexBinary(bytes.fromhex(text))
    if tp is bytes:
        return base64.b64decode(text)
    if typing.get_origin(tp) is list:
        item = _list_item(tp)
        return [parse_text(item, part) for part in text.split()]
    return tp(text)


def format_text(value: Any) -> str:
    """Convert a scalar to its XML text form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, HexBinary):
        return value.hex().upper()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, list):
        return " ".join(format_text(v) for v in value)
    return str(value)


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _list_item(hint: Any) -> Any:
    (item,) = typing.get_args(hint) or (str,)
    return item


def _xml_fields(tp: Any):
    hints = typing.get_type_hints(tp)
    for f in dataclasses.fields(tp):
        tag = f.metadata.get("xml")
        if tag is None:
            continue
        space, local, flags = split_tag(tag)
        yield f, _unwrap_optional(hints[f.name]), space, local, flags


def _is_plural(f: dataclasses.Field) -> bool:
    # Repeated elements are the fields defaulting to an empty list.
    return f.default_factory is list


def _decode_struct(tp: Any, element: ElementTree.Element) -> Any:
    fields = list(_xml_fields(tp))
    named = [
        (space, local)
        for _, _, space, local, flags in fields
        if "attr" not in flags and local != ANY_ELEMENT
    ]
    # Wildcards only receive children no named element field claims.
    unclaimed = [
        c for c in element if not any(tag_matches(c.tag, *name) for name in named)
    ]

    values = {}
    for f, hint, space, local, flags in fields:
        if "attr" in flags:
            raw = element.get(clark(space, local))
            if raw is not None:
                values[f.name] = parse_text(hint, raw)
            continue
        if local == ANY_ELEMENT:
            children = unclaimed
        else:
            children = [c for c in element if tag_matches(c.tag, space, local)]
        if _is_plural(f):
            item_type = _list_item(hint)
            values[f.name] = [decode_value(item_type, c) for c in children]
        elif children:
            values[f.name] = decode_value(hint, children[0])
    return tp(**values)


def _encode_struct(value: Any, tag: str) -> ElementTree.Element:
    element = ElementTree.Element(tag)
    for attr_tag, constant in getattr(type(value), "__xml_constants__", {}).items():
        space, local, _ = split_tag(attr_tag)
        element.set(clark(space, local), getattr(value, constant))
    for f, hint, space, local, flags in _xml_fields(type(value)):
        v = getattr(value, f.name)
        if v is None:
            continue
        if "attr" in flags:
            element.set(clark(space, local), format_text(v))
            continue
        child_tag = f.name if local == ANY_ELEMENT else clark(space, local)
        for item in v if _is_plural(f) else [v]:
            element.append(encode_value(item, child_tag))
    return element


def decode_value(tp: Any, element: ElementTree.Element) -> Any:
    """Decode ``element`` into a value of type ``tp``."""
    from_xml = getattr(tp, "from_xml", None)
    if from_xml is not None:
        return from_xml(element)
    if dataclasses.is_dataclass(tp):
        return _decode_struct(tp, element)
    return parse_text(tp, element.text or "")


def encode_value(value: Any, tag: str) -> ElementTree.Element:
    """Encode ``value`` as an element named ``tag``."""
    to_xml = getattr(value, "to_xml", None)
    if to_xml is not None:
        return to_xml(tag)
    if dataclasses.is_dataclass(value):
        return _encode_struct(value, tag)
    element = ElementTree.Element(tag)
    element.text = format_text(value)
    return element
