"""
XML Schema model consumed by the code generator.

These are the records an XSD parser produces: qualified names, attribute and
element declarations, complex/simple types and the builtin types, grouped in
a Schema that can look types up by qualified name.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Union

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"


class QName(NamedTuple):
    """A namespace-qualified XML name."""

    space: str
    local: str

    def __str__(self) -> str:
        if self.space:
            return f"{{{self.space}}}{self.local}"
        return self.local


class RawAttr(NamedTuple):
    """An XML attribute as written on a schema declaration."""

    name: QName
    value: str


class Builtin(Enum):
    """XML Schema builtin types, keyed by local name."""

    ANY_TYPE = "anyType"
    ANY_SIMPLE_TYPE = "anySimpleType"
    STRING = "string"
    NORMALIZED_STRING = "normalizedString"
    TOKEN = "token"
    LANGUAGE = "language"
    NAME = "Name"
    NCNAME = "NCName"
    ID = "ID"
    IDREF = "IDREF"
    NMTOKEN = "NMTOKEN"
    ANY_URI = "anyURI"
    QNAME = "QName"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"
    INTEGER = "integer"
    LONG = "long"
    INT = "int"
    SHORT = "short"
    BYTE = "byte"
    NON_NEGATIVE_INTEGER = "nonNegativeInteger"
    POSITIVE_INTEGER = "positiveInteger"
    NON_POSITIVE_INTEGER = "nonPositiveInteger"
    NEGATIVE_INTEGER = "negativeInteger"
    UNSIGNED_LONG = "unsignedLong"
    UNSIGNED_INT = "unsignedInt"
    UNSIGNED_SHORT = "unsignedShort"
    UNSIGNED_BYTE = "unsignedByte"
    DATE_TIME = "dateTime"
    DATE = "date"
    TIME = "time"
    DURATION = "duration"
    BASE64_BINARY = "base64Binary"
    HEX_BINARY = "hexBinary"

    @property
    def qname(self) -> QName:
        return QName(XSD_NAMESPACE, self.value)

    @classmethod
    def lookup(cls, local: str) -> Optional["Builtin"]:
        """Find the builtin type with the given local name, if any."""
        try:
            return cls(local)
        except ValueError:
            return None


@dataclass
class Attribute:
    """An attribute declaration inside a complex type."""

    name: QName
    type: Optional["Type"] = None
    fixed: str = ""
    default: str = ""
    optional: bool = True
    # Attributes written on the declaration itself, e.g. wsdl:arrayType.
    attrs: List[RawAttr] = field(default_factory=list)
    # Namespace prefixes in scope at the declaration.
    namespaces: Dict[str, str] = field(default_factory=dict)

    def resolve(self, qname: str) -> QName:
        """Resolve a ``prefix:local`` reference against the declaration scope."""
        prefix, sep, local = qname.strip().partition(":")
        if not sep:
            return QName(self.namespaces.get("", ""), prefix)
        return QName(self.namespaces.get(prefix, ""), local)


@dataclass
class Element:
    """An element declaration (or wildcard) inside a complex type."""

    name: QName
    type: Optional["Type"] = None
    wildcard: bool = False
    plural: bool = False
    optional: bool = False
    nillable: bool = False


@dataclass
class ComplexType:
    """A structured type with attributes and child elements."""

    name: QName
    base: Optional["Type"] = None
    attributes: List[Attribute] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    abstract: bool = False
    mixed: bool = False
    description: Optional[str] = None


@dataclass
class SimpleType:
    """A restriction or list derived from another simple type."""

    name: QName
    base: Optional["Type"] = None
    enumeration: List[str] = field(default_factory=list)
    list_of: Optional["Type"] = None
    description: Optional[str] = None


Type = Union[ComplexType, SimpleType, Builtin]
TYPE_CLASSES = (ComplexType, SimpleType, Builtin)


def xml_name(t: Type) -> QName:
    """Return the qualified name of any type."""
    if isinstance(t, Builtin):
        return t.qname
    return t.name


def base_of(t: Type) -> Optional[Type]:
    """Return the base type of ``t``, or None for the root of a hierarchy."""
    if isinstance(t, Builtin):
        if t is Builtin.ANY_TYPE:
            return None
        if t is Builtin.ANY_SIMPLE_TYPE:
            return Builtin.ANY_TYPE
        return Builtin.ANY_SIMPLE_TYPE
    return t.base


def ancestors(t: Type) -> Iterator[Type]:
    """Iterate ``t`` and then each of its bases, nearest first.

    The ur-type ``anyType`` terminates the chain and is not yielded.
    """
    current: Optional[Type] = t
    while current is not None and current is not Builtin.ANY_TYPE:
        yield current
        current = base_of(current)


@dataclass
class Schema:
    """The types declared by one schema document."""

    target_namespace: str = ""
    types: Dict[QName, Type] = field(default_factory=dict)

    def add_type(self, t: Type) -> None:
        """Register a declared type under its qualified name."""
        self.types[xml_name(t)] = t

    def find_type(self, name: QName) -> Optional[Type]:
        """Look up a type by qualified name, falling back to XSD builtins."""
        found = self.types.get(QName(*name))
        if found is not None:
            return found
        if name.space == XSD_NAMESPACE:
            return Builtin.lookup(name.local)
        return None
