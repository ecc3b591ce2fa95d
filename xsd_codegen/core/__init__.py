"""
Core code generation components.

Provides the schema model, the reversible option system and the
transformations run between schema types and generated declarations.
"""

from .builtins import UnknownBuiltinError, builtin_expr
from .config import (
    DEFAULT_OPTIONS,
    Config,
    ConfigError,
    Option,
    Snapshot,
    error_log,
    handle_soap_array_type,
    ignore_attributes,
    ignore_elements,
    load_config,
    load_options,
    only_types,
    options_from_dict,
    package_name,
    process_specs,
    process_types,
    replace_all_names,
    replace_attribute_names,
    replace_element_names,
    replace_type_names,
    soap_array_as_sequence,
)
from .filters import FilterKindError, NameFilter, PatternFilter, PropertyFilter
from .generator import GenerationResult, GeneratorError, SchemaGenerator, generate_code
from .naming import NameSanitizer
from .schema import (
    XSD_NAMESPACE,
    Attribute,
    Builtin,
    ComplexType,
    Element,
    QName,
    RawAttr,
    Schema,
    SimpleType,
)
from .spec import NamedType, SequenceType, Spec, StructConstant, StructField, StructType
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Schema model
    "XSD_NAMESPACE",
    "Attribute",
    "Builtin",
    "ComplexType",
    "Element",
    "QName",
    "RawAttr",
    "Schema",
    "SimpleType",
    # Draft declarations
    "NamedType",
    "SequenceType",
    "Spec",
    "StructConstant",
    "StructField",
    "StructType",
    "UnknownBuiltinError",
    "builtin_expr",
    # Configuration system
    "DEFAULT_OPTIONS",
    "Config",
    "ConfigError",
    "Option",
    "Snapshot",
    "error_log",
    "handle_soap_array_type",
    "ignore_attributes",
    "ignore_elements",
    "load_config",
    "load_options",
    "only_types",
    "options_from_dict",
    "package_name",
    "process_specs",
    "process_types",
    "replace_all_names",
    "replace_attribute_names",
    "replace_element_names",
    "replace_type_names",
    "soap_array_as_sequence",
    # Filters and naming
    "FilterKindError",
    "NameFilter",
    "PatternFilter",
    "PropertyFilter",
    "NameSanitizer",
    # Generation
    "GenerationResult",
    "GeneratorError",
    "SchemaGenerator",
    "generate_code",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
