"""
Resolution of SOAP-encoded array types.

SOAP arrays are declared as follows (unimportant fields elided)::

    <xs:complexType name="Array">
      <xs:attribute name="arrayType" type="xs:string" />
      <xs:any namespace="##any" minOccurs="0" maxOccurs="unbounded" />
    </xs:complexType>

Schemas that want a fixed-type SOAP array then restrict it::

    <xs:complexType name="IntArray">
      <xs:complexContent>
        <xs:restriction base="soapenc:Array">
          <xs:attribute ref="soapenc:arrayType" wsdl:arrayType="xs:int[]" />
        </xs:restriction>
      </xs:complexContent>
    </xs:complexType>

The item type only appears in the wsdl:arrayType annotation, so the wildcard
element inherited from soapenc:Array has to be retyped by hand.
"""

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .schema import ComplexType, Element, QName, Schema, Type, ancestors, xml_name

if TYPE_CHECKING:
    from .config import Config

SOAP_ENCODING_NAMESPACE = "http://schemas.xmlsoap.org/soap/encoding/"
WSDL_NAMESPACE = "http://schemas.xmlsoap.org/wsdl/"
WSDL_ARRAY_TYPE = QName(WSDL_NAMESPACE, "arrayType")


@dataclass
class WildcardFound:
    """The nearest ancestor holding a wildcard element, and that element."""

    owner: ComplexType
    element: Element


@dataclass
class WildcardMissing:
    """No type in the hierarchy declares a wildcard element."""

    pass


@dataclass
class ChainBroken:
    """A non-complex type was met before any wildcard element."""

    ancestor: Type


WildcardSearch = Union[WildcardFound, WildcardMissing, ChainBroken]


def find_array_item_type(t: ComplexType) -> Optional[QName]:
    """
    Read the declared item type from a SOAP array's arrayType attribute.

    The literal annotation is recorded as the attribute's fixed value so it
    serializes as a constant.

    Returns:
        The item type reference as written (brackets included), or None
    """
    for attr in t.attributes:
        if attr.name.local != "arrayType":
            continue
        for raw in attr.attrs:
            if QName(*raw.name) != WSDL_ARRAY_TYPE:
                continue
            attr.fixed = raw.value
            return attr.resolve(raw.value)
        break
    return None


def normalize_item_type(name: QName) -> QName:
    """Trim whitespace and one trailing ``[]`` from an item type reference."""
    local = name.local.strip()
    if local.endswith("[]"):
        local = local[: -len("[]")]
    return QName(name.space, local)


def find_wildcard(t: ComplexType) -> WildcardSearch:
    """Search ``t`` and its ancestors, nearest first, for a wildcard element."""
    for x in ancestors(t):
        if not isinstance(x, ComplexType):
            return ChainBroken(x)
        for el in x.elements:
            if el.wildcard:
                return WildcardFound(x, el)
    return WildcardMissing()


def override_wildcard_type(cfg: "Config", t: ComplexType, item: Type) -> ComplexType:
    """
    Retype the wildcard element of ``t`` (or its nearest ancestor) to ``item``.

    Wildcards in ``t``'s own elements are replaced in place; when the
    wildcard was inherited, the retyped element is appended instead. The
    ancestor's own element is left as it was.
    """
    found = find_wildcard(t)

    if isinstance(found, ChainBroken):
        cfg.logf(
            "warning: soap-encoded array %s extends %s %s",
            t.name.local,
            type(found.ancestor).__name__,
            xml_name(found.ancestor).local,
        )
        return t

    if isinstance(found, WildcardMissing):
        cfg.logf(
            "could not override wildcard type for %s; not found in type hierarchy",
            t.name.local,
        )
        return t

    previous_type = xml_name(found.element.type).local if found.element.type else ""
    cfg.debugf(
        "overriding wildcard element of %s type from %s to %s",
        t.name.local,
        previous_type,
        xml_name(item).local,
    )
    elem = dataclasses.replace(found.element, type=item)

    replaced = False
    for i, el in enumerate(t.elements):
        if el.wildcard:
            t.elements[i] = elem
            replaced = True
    if not replaced:
        t.elements.append(elem)
    return t


def parse_soap_array_type(cfg: "Config", schema: Schema, t: Type) -> Type:
    """
    Pre-processing step for SOAP arrays.

    Types that are not complex, or that carry no wsdl:arrayType annotation,
    are returned untouched. An item type missing from ``schema`` is
    reported and the type is left unchanged.
    """
    if not isinstance(t, ComplexType):
        return t

    item_type = find_array_item_type(t)
    if item_type is None or not item_type.local:
        return t

    item_type = normalize_item_type(item_type)
    found = schema.find_type(item_type)
    if found is None:
        cfg.logf(
            "could not lookup item type %r in namespace %r",
            item_type.local,
            item_type.space,
        )
        return t

    return override_wildcard_type(cfg, t, found)
