import logging
import sys
import types

import pytest

from xsd_codegen.core.config import Config, error_log
from xsd_codegen.core.schema import (
    XSD_NAMESPACE,
    Attribute,
    Builtin,
    ComplexType,
    Element,
    QName,
    RawAttr,
    Schema,
)
from xsd_codegen.core.soap_array import SOAP_ENCODING_NAMESPACE, WSDL_ARRAY_TYPE

TNS = "urn:example:orders"


class RecordingLogger:
    """Diagnostic sink collecting (level, message) pairs."""

    def __init__(self):
        self.records = []

    def log(self, level, msg, *args):
        self.records.append((level, msg % args if args else msg))

    def messages(self, level=None):
        return [m for lvl, m in self.records if level is None or lvl == level]


def array_type_attribute(item_ref: str) -> Attribute:
    return Attribute(
        name=QName(SOAP_ENCODING_NAMESPACE, "arrayType"),
        type=Builtin.STRING,
        attrs=[RawAttr(WSDL_ARRAY_TYPE, item_ref)],
        namespaces={"xs": XSD_NAMESPACE, "tns": TNS},
    )


def wildcard(plural: bool = True) -> Element:
    return Element(name=QName("", ""), wildcard=True, plural=plural, optional=True)


@pytest.fixture()
def recorder():
    return RecordingLogger()


@pytest.fixture()
def cfg(recorder):
    config = Config()
    config.option(error_log(recorder, 5))
    return config


@pytest.fixture()
def soap_array_schema():
    """A self-contained SOAP array: arrayType annotation plus its own wildcard."""
    schema = Schema(target_namespace=TNS)
    schema.add_type(
        ComplexType(
            name=QName(TNS, "Array"),
            base=Builtin.ANY_TYPE,
            attributes=[array_type_attribute("xs:int[]")],
            elements=[wildcard()],
        )
    )
    return schema


@pytest.fixture()
def soapenc_schema():
    """soapenc:Array plus a restriction that only carries the annotation."""
    schema = Schema(target_namespace=TNS)
    base = ComplexType(
        name=QName(SOAP_ENCODING_NAMESPACE, "Array"),
        base=Builtin.ANY_TYPE,
        attributes=[
            Attribute(name=QName(SOAP_ENCODING_NAMESPACE, "arrayType"), type=Builtin.STRING)
        ],
        elements=[wildcard()],
    )
    line = ComplexType(
        name=QName(TNS, "OrderLine"),
        base=Builtin.ANY_TYPE,
        elements=[
            Element(name=QName("", "sku"), type=Builtin.STRING),
            Element(name=QName("", "quantity"), type=Builtin.INT),
        ],
    )
    lines = ComplexType(
        name=QName(TNS, "ArrayOfOrderLine"),
        base=base,
        attributes=[array_type_attribute("tns:OrderLine[]")],
    )
    schema.add_type(base)
    schema.add_type(line)
    schema.add_type(lines)
    return schema


@pytest.fixture()
def load_module(monkeypatch):
    """Execute generated source as an importable module."""

    def load(code: str, name: str = "generated_xsd_module"):
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(code, f"<{name}>", "exec"), module.__dict__)
        return module

    return load


@pytest.fixture(autouse=True)
def _propagate_package_logs():
    # caplog listens on the root logger.
    logging.getLogger("xsd_codegen").propagate = True
    yield
