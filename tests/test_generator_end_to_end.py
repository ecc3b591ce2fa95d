import logging
from decimal import Decimal
from xml.etree import ElementTree

from conftest import TNS, RecordingLogger, array_type_attribute, wildcard
from xsd_codegen import generate_from_schema
from xsd_codegen.core.builtins import BUILTIN_TYPE_MAP
from xsd_codegen.core.config import (
    Config,
    error_log,
    handle_soap_array_type,
    load_config,
    soap_array_as_sequence,
)
from xsd_codegen.core.generator import SchemaGenerator, generate_code
from xsd_codegen.core.schema import (
    Attribute,
    Builtin,
    ComplexType,
    Element,
    QName,
    Schema,
    SimpleType,
)
from xsd_codegen.core.spec import NamedType, SequenceType, StructType
from xsd_codegen.runtime import decode_value, encode_value


def test_soap_array_becomes_int_sequence(soap_array_schema, load_module):
    result = generate_code(load_config(), soap_array_schema)

    assert result.success, result.error_message
    assert result.metadata["sequences"] == ["Array"]
    assert "class Array(list[int]):" in result.code

    module = load_module(result.code)
    element = ElementTree.fromstring(
        "<Array><item>1</item><x:v xmlns:x='urn:x'>2</x:v><other>3</other></Array>"
    )
    decoded = module.Array.from_xml(element)
    assert decoded == [1, 2, 3]
    assert isinstance(decoded, module.Array)

    encoded = module.Array([7, 8]).to_xml("Array")
    assert [(child.tag, child.text) for child in encoded] == [("item", "7"), ("item", "8")]


def test_translation_before_flattening(soap_array_schema):
    cfg = Config()
    cfg.option(handle_soap_array_type())
    generator = SchemaGenerator(cfg)

    (spec,) = generator.generate(soap_array_schema)

    assert isinstance(spec.expr, StructType)
    assert [c.name for c in spec.expr.constants] == ["arrayType"]
    assert spec.expr.constants[0].value == "xs:int[]"
    (items,) = spec.expr.fields
    assert items.tag("xml") == ",any"
    assert items.type == SequenceType(NamedType("int"))


def test_inherited_soap_array_of_structs(soapenc_schema, load_module):
    result = generate_code(load_config(), soapenc_schema)
    assert result.success, result.error_message
    assert result.metadata["sequences"] == ["ArrayOfOrderLine"]

    code = result.code
    assert code.index("class OrderLine:") < code.index("class ArrayOfOrderLine(")

    module = load_module(code)
    element = ElementTree.fromstring(
        "<lines>"
        "<item><sku>A-1</sku><quantity>2</quantity></item>"
        "<item><sku>B-2</sku></item>"
        "</lines>"
    )
    lines = module.ArrayOfOrderLine.from_xml(element)

    assert lines == [module.OrderLine("A-1", 2), module.OrderLine("B-2", None)]

    encoded = lines.to_xml("lines")
    assert [child.tag for child in encoded] == ["item", "item"]
    assert encoded[0].find("quantity").text == "2"


def test_generic_soapenc_array_is_not_flattened(soapenc_schema):
    specs = SchemaGenerator(load_config()).generate(soapenc_schema)
    base = next(s for s in specs if s.xsd_type.name.local == "Array")

    assert isinstance(base.expr, StructType)
    assert [f.name for f in base.expr.fields] == ["arrayType", "items"]


def test_struct_module_round_trip(load_module):
    schema = Schema(TNS)
    status = SimpleType(QName(TNS, "StatusCode"), base=Builtin.STRING, enumeration=["open", "paid"])
    order = ComplexType(
        QName(TNS, "PurchaseOrder"),
        base=Builtin.ANY_TYPE,
        description="A customer order.",
        attributes=[
            Attribute(QName("", "id"), type=Builtin.STRING),
            Attribute(QName("", "currency"), type=Builtin.STRING, default="EUR"),
            Attribute(QName("", "version"), type=Builtin.STRING, fixed="1.0"),
        ],
        elements=[
            Element(QName(TNS, "status"), type=status),
            Element(QName(TNS, "class"), type=Builtin.INT),
            Element(QName(TNS, "tag"), type=Builtin.STRING, plural=True),
            Element(QName(TNS, "placed"), type=Builtin.DATE_TIME),
        ],
    )
    schema.add_type(status)
    schema.add_type(order)

    result = generate_code(load_config(), schema)
    assert result.success, result.error_message

    module = load_module(result.code)
    assert module.PACKAGE == "ws"
    assert module.StatusCode is str
    assert module.PurchaseOrder.__doc__ == "A customer order."
    assert not hasattr(module.PurchaseOrder(), "id")

    order_obj = module.PurchaseOrder(status="open", class_=3, tag=["a", "b"])
    assert order_obj.currency == "EUR"
    encoded = encode_value(order_obj, "order")
    assert encoded.get("version") == "1.0"
    assert encoded.get("currency") == "EUR"
    assert [child.tag for child in encoded] == [
        f"{{{TNS}}}status",
        f"{{{TNS}}}class",
        f"{{{TNS}}}tag",
        f"{{{TNS}}}tag",
    ]

    decoded = decode_value(module.PurchaseOrder, encoded)
    assert decoded == order_obj


def test_failed_type_is_skipped_and_reported(monkeypatch):
    monkeypatch.delitem(BUILTIN_TYPE_MAP, Builtin.TIME)
    schema = Schema(TNS)
    schema.add_type(
        ComplexType(QName(TNS, "Clock"), elements=[Element(QName("", "at"), type=Builtin.TIME)])
    )
    schema.add_type(ComplexType(QName(TNS, "Ok")))
    rec = RecordingLogger()
    cfg = Config()
    cfg.option(error_log(rec, 0))

    result = generate_code(cfg, schema)

    assert result.success
    assert result.metadata["declarations"] == ["Ok"]
    assert rec.messages(logging.ERROR) == [
        "could not generate type Clock: Unknown built-in type 'time'"
    ]
    assert "Declaration Ok has no fields" in result.warnings


def test_duplicate_names_keep_the_first(cfg, recorder):
    schema = Schema(TNS)
    schema.add_type(ComplexType(QName(TNS, "order")))
    schema.add_type(ComplexType(QName("urn:other", "Order")))

    specs = SchemaGenerator(cfg).generate(schema)

    assert [s.xsd_type.name.space for s in specs] == [TNS]
    assert len(recorder.messages(logging.ERROR)) == 1


def test_list_simple_type_is_an_alias(load_module):
    schema = Schema(TNS)
    schema.add_type(SimpleType(QName(TNS, "Codes"), list_of=Builtin.INT))
    cfg = Config()
    cfg.option(soap_array_as_sequence())

    result = generate_code(cfg, schema)
    module = load_module(result.code)

    assert "Codes = list[int]" in result.code
    assert module.Codes == list[int]


def test_generate_from_schema_uses_defaults(soap_array_schema):
    result = generate_from_schema(soap_array_schema)
    assert result.success
    assert result.code.startswith("# Code generated by xsd_codegen. DO NOT EDIT.\n")
    assert "\n\n\n\n" not in result.code


def test_generate_code_reports_unexpected_failures():
    class Broken(Config):
        def type_name(self, name):
            raise RuntimeError("boom")

    schema = Schema(TNS)
    schema.add_type(ComplexType(QName(TNS, "Order")))

    result = generate_code(Broken(), schema)

    assert not result.success
    assert "boom" in result.error_message
    assert isinstance(result.exception, RuntimeError)


def test_wildcard_beside_named_elements_round_trips(load_module):
    schema = Schema(TNS)
    schema.add_type(
        ComplexType(
            QName(TNS, "Bag"),
            base=Builtin.ANY_TYPE,
            elements=[
                Element(QName("", "label"), type=Builtin.STRING),
                Element(QName("", ""), wildcard=True, plural=True, type=Builtin.INT),
            ],
        )
    )

    result = generate_code(load_config(), schema)
    assert result.metadata["sequences"] == []

    module = load_module(result.code)
    bag = module.Bag(label="L", items=[1, 2])
    encoded = encode_value(bag, "bag")

    assert [child.tag for child in encoded] == ["label", "items", "items"]
    assert decode_value(module.Bag, encoded) == bag


def test_type_names_do_not_shadow_module_imports(load_module):
    schema = Schema(TNS)
    schema.add_type(
        ComplexType(
            QName(TNS, "ElementTree"),
            base=Builtin.ANY_TYPE,
            elements=[Element(QName("", "amount"), type=Builtin.DECIMAL)],
        )
    )
    schema.add_type(
        ComplexType(
            QName(TNS, "Trees"),
            base=Builtin.ANY_TYPE,
            attributes=[array_type_attribute("tns:ElementTree[]")],
            elements=[wildcard()],
        )
    )

    result = generate_code(load_config(), schema)
    assert result.success, result.error_message
    assert "class ElementTree_:" in result.code

    module = load_module(result.code)
    trees = module.Trees([module.ElementTree_(Decimal("1.5"))])
    encoded = trees.to_xml("trees")

    assert encoded[0].find("amount").text == "1.5"
    assert module.Trees.from_xml(encoded) == trees


def test_time_and_binary_builtins_are_declared(load_module):
    schema = Schema(TNS)
    schema.add_type(
        ComplexType(
            QName(TNS, "Slot"),
            base=Builtin.ANY_TYPE,
            elements=[
                Element(QName("", "start"), type=Builtin.TIME),
                Element(QName("", "length"), type=Builtin.DURATION),
                Element(QName("", "digest"), type=Builtin.HEX_BINARY),
            ],
        )
    )

    result = generate_code(load_config(), schema)
    module = load_module(result.code)
    element = ElementTree.fromstring(
        "<slot><start>09:15:00</start><length>PT1H</length><digest>CAFE</digest></slot>"
    )

    slot = decode_value(module.Slot, element)

    assert result.metadata["declarations"] == ["Slot"]
    assert slot.start.hour == 9 and slot.start.minute == 15
    assert slot.length == "PT1H"
    assert slot.digest == b"\xca\xfe"
    assert encode_value(slot, "slot").find("digest").text == "CAFE"
