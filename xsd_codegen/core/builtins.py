"""
Mapping of XML Schema builtin types to Python types.
"""

from typing import Dict, Optional

from .schema import Builtin
from .spec import NamedType

_STR = NamedType("str")
_INT = NamedType("int")
_FLOAT = NamedType("float")
_BYTES = NamedType("bytes")

BUILTIN_TYPE_MAP: Dict[Builtin, NamedType] = {
    Builtin.ANY_TYPE: NamedType("Any", frozenset({"from typing import Any"})),
    Builtin.ANY_SIMPLE_TYPE: _STR,
    Builtin.STRING: _STR,
    Builtin.NORMALIZED_STRING: _STR,
    Builtin.TOKEN: _STR,
    Builtin.LANGUAGE: _STR,
    Builtin.NAME: _STR,
    Builtin.NCNAME: _STR,
    Builtin.ID: _STR,
    Builtin.IDREF: _STR,
    Builtin.NMTOKEN: _STR,
    Builtin.ANY_URI: _STR,
    Builtin.QNAME: _STR,
    Builtin.BOOLEAN: NamedType("bool"),
    Builtin.DECIMAL: NamedType("Decimal", frozenset({"from decimal import Decimal"})),
    Builtin.FLOAT: _FLOAT,
    Builtin.DOUBLE: _FLOAT,
    Builtin.INTEGER: _INT,
    Builtin.LONG: _INT,
    Builtin.INT: _INT,
    Builtin.SHORT: _INT,
    Builtin.BYTE: _INT,
    Builtin.NON_NEGATIVE_INTEGER: _INT,
    Builtin.POSITIVE_INTEGER: _INT,
    Builtin.NON_POSITIVE_INTEGER: _INT,
    Builtin.NEGATIVE_INTEGER: _INT,
    Builtin.UNSIGNED_LONG: _INT,
    Builtin.UNSIGNED_INT: _INT,
    Builtin.UNSIGNED_SHORT: _INT,
    Builtin.UNSIGNED_BYTE: _INT,
    Builtin.DATE_TIME: NamedType("datetime.datetime", frozenset({"import datetime"})),
    Builtin.DATE: NamedType("datetime.date", frozenset({"import datetime"})),
    Builtin.TIME: NamedType("datetime.time", frozenset({"import datetime"})),
    Builtin.DURATION: _STR,
    Builtin.BASE64_BINARY: _BYTES,
    Builtin.HEX_BINARY: NamedType(
        "HexBinary", frozenset({"from xsd_codegen.runtime import HexBinary"})
    ),
}


def builtin_expr(b: Builtin) -> Optional[NamedType]:
    """Return the Python type for a builtin, or None if it has no mapping."""
    return BUILTIN_TYPE_MAP.get(b)


class UnknownBuiltinError(ValueError):
    """Raised when a builtin type has no Python counterpart."""

    pass
