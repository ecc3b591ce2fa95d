"""
Schema-to-Python generator.

SchemaGenerator runs the configured pipeline over every type of a schema
(type filter, pre-processing, structural translation, spec post-processing)
and renders the resulting declarations into a single Python module.
"""

import ast
from typing import Any, Dict, List, Optional

from ..logging_config import get_logger
from ..runtime import ANY_ELEMENT
from .config import Config
from .naming import NameSanitizer
from .schema import (
    Builtin,
    ComplexType,
    Element,
    QName,
    Schema,
    SimpleType,
    Type,
    xml_name,
)
from .spec import (
    Expr,
    SequenceType,
    Spec,
    StructConstant,
    StructField,
    StructType,
    TypeExpr,
)
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)

HEADER = "Code generated by xsd_codegen. DO NOT EDIT."


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


def xml_tag(name: QName) -> str:
    """Serialization tag for ``name``: ``"[namespace ]local"``."""
    if name.space:
        return f"{name.space} {name.local}"
    return name.local


class SchemaGenerator:
    """Generates Python dataclasses and list types from schema types."""

    def __init__(self, config: Config):
        """Initialize generator with a configured Config."""
        self.config = config
        self._template_engine: Optional[TemplateEngine] = None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine()
        return self._template_engine

    # Translation

    def translate(self, t: Type) -> Optional[Spec]:
        """
        Translate one schema type into a draft declaration.

        Returns:
            The Spec, or None for builtin types, which are never declared

        Raises:
            GeneratorError: If ``t`` is not a schema type
            UnknownBuiltinError: If ``t`` refers to an unmapped builtin
        """
        if isinstance(t, Builtin):
            return None

        expr: Expr
        if isinstance(t, ComplexType):
            expr = self._translate_complex(t)
        elif isinstance(t, SimpleType):
            expr = self._translate_simple(t)
        else:
            raise GeneratorError(f"Cannot translate {type(t).__name__}: {t!r}")

        return Spec(
            name=self.config.type_name(t.name),
            expr=expr,
            doc=self._doc(t),
            xsd_type=t,
        )

    def _translate_complex(self, t: ComplexType) -> StructType:
        cfg = self.config
        sanitizer = NameSanitizer()
        attributes, elements = cfg.filter_fields(t)
        struct = StructType()

        for attr in attributes:
            name = cfg.attribute_name(attr.name, sanitizer)
            tags = {"xml": f"{xml_tag(attr.name)},attr"}
            if attr.fixed:
                struct.constants.append(StructConstant(name, attr.fixed, tags))
                continue
            field_type = cfg.expr(attr.type)
            default = None
            if attr.default and field_type.name == "str":
                default = repr(attr.default)
            struct.fields.append(StructField(name, field_type, tags, default))

        for el in elements:
            struct.fields.append(self._element_field(el, sanitizer))

        return struct

    def _element_field(self, el: Element, sanitizer: NameSanitizer) -> StructField:
        cfg = self.config
        if el.wildcard:
            name = el.name
            if not name.local:
                name = QName(name.space, "items" if el.plural else "any")
            tag = ANY_ELEMENT
        else:
            name = el.name
            tag = xml_tag(el.name)

        field_type: TypeExpr = cfg.expr(el.type)
        if el.plural:
            field_type = SequenceType(field_type)
        return StructField(cfg.element_name(name, sanitizer), field_type, {"xml": tag})

    def _translate_simple(self, t: SimpleType) -> TypeExpr:
        if t.list_of is not None:
            return SequenceType(self.config.expr(t.list_of))
        return self.config.expr(t.base)

    def _doc(self, t: Type) -> Optional[str]:
        lines = []
        if getattr(t, "description", None):
            lines.append(t.description.strip())
        if isinstance(t, SimpleType) and t.enumeration:
            lines.append("Allowed values: " + ", ".join(t.enumeration))
        return "\n\n".join(lines) or None

    # Pipeline

    def generate(self, schema: Schema) -> List[Spec]:
        """
        Run the pipeline over every type in ``schema``.

        A type that fails to translate is reported through the Config and
        skipped; the remaining types are still generated.

        Returns:
            Draft declarations in schema order
        """
        cfg = self.config
        specs: List[Spec] = []
        seen: Dict[str, QName] = {}

        for t in list(schema.types.values()):
            qname = xml_name(t)
            if cfg.filter_types is not None and cfg.filter_types(t):
                cfg.debugf("type %s excluded by type filter", qname.local)
                continue

            try:
                t = cfg.preprocess(schema, t)
                spec = self.translate(t)
                if spec is None:
                    continue
                spec = cfg.postprocess(spec)
            except (GeneratorError, ValueError) as e:
                cfg.errorf("could not generate type %s: %s", qname.local, e)
                continue

            if spec.name in seen:
                cfg.errorf(
                    "types %s and %s both map to name %s; skipping %s",
                    seen[spec.name].local,
                    qname.local,
                    spec.name,
                    qname.local,
                )
                continue
            seen[spec.name] = qname
            specs.append(spec)

        logger.debug("Translated %d of %d types", len(specs), len(schema.types))
        return specs

    def validate_specs(self, specs: List[Spec]) -> List[str]:
        """
        Check declarations for suspicious shapes.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        for spec in specs:
            if isinstance(spec.expr, StructType):
                if not spec.expr.fields and not spec.expr.constants:
                    warnings.append(f"Declaration {spec.name} has no fields")
                for f in spec.expr.fields:
                    if f.tag("xml") == ANY_ELEMENT and f.type.expr_string() in (
                        "Any",
                        "list[Any]",
                    ):
                        warnings.append(
                            f"Wildcard field {spec.name}.{f.name} has no item type"
                        )
        return warnings

    # Rendering

    def render(self, specs: List[Spec]) -> str:
        """Render declarations into the source of one Python module."""
        imports = set()
        declarations = []
        for spec in self._get_generation_order(specs):
            imports.update(spec.expr.imports_needed())
            declarations.append(self._render_spec(spec).strip())

        code = self.template_engine.render_template(
            "module",
            {
                "header": HEADER,
                "imports": sorted(imports, key=lambda x: (x.startswith("from"), x)),
                "package": self.config.package,
                "declarations": declarations,
            },
        )
        return self.format_code(code)

    def _render_spec(self, spec: Spec) -> str:
        methods = [ast.unparse(m) for m in spec.methods]
        expr = spec.expr

        if isinstance(expr, StructType):
            return self.template_engine.render_template(
                "struct",
                {
                    "name": spec.name,
                    "doc": spec.doc,
                    "constants": expr.constants,
                    "constant_tags": {c.tags["xml"]: c.name for c in expr.constants},
                    "fields": [self._field_data(f) for f in expr.fields],
                    "methods": methods,
                },
            )

        if methods:
            return self.template_engine.render_template(
                "class",
                {
                    "name": spec.name,
                    "base": expr.expr_string(),
                    "doc": spec.doc,
                    "methods": methods,
                },
            )

        return self.template_engine.render_template(
            "alias",
            {"name": spec.name, "target": expr.expr_string(), "doc": spec.doc},
        )

    def _field_data(self, f: StructField) -> Dict[str, Any]:
        """Generate field data for template."""
        if isinstance(f.type, SequenceType):
            type_str = f.type.expr_string()
            default = "default_factory=list"
        else:
            type_str = f"{f.type.expr_string()} | None"
            default = f"default={f.default or 'None'}"
        return {"name": f.name, "type": type_str, "default": default, "tag": f.tag("xml")}

    def _get_generation_order(self, specs: List[Spec]) -> List[Spec]:
        """Determine order for declarations so dependencies come first."""
        by_name = {spec.name: spec for spec in specs}
        visited = set()
        visiting = set()
        ordered = []

        def visit_spec(name: str):
            if name in visited or name not in by_name:
                return

            if name in visiting:
                return  # Circular dependency - skip

            visiting.add(name)
            for dep in by_name[name].referenced_names():
                visit_spec(dep)

            visiting.remove(name)
            visited.add(name)
            ordered.append(by_name[name])

        for spec in specs:
            visit_spec(spec.name)

        return ordered

    def format_code(self, code: str) -> str:
        """
        Normalize whitespace in generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(config: Config, schema: Schema) -> GenerationResult:
    """
    Generate a Python module for ``schema`` with error handling.

    Args:
        config: Configured generation options
        schema: Schema whose types are declared

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        generator = SchemaGenerator(config)
        specs = generator.generate(schema)
        warnings = generator.validate_specs(specs)
        code = generator.render(specs)

        metadata = {
            "language": "python",
            "file_extension": ".py",
            "package": config.package,
            "type_count": len(schema.types),
            "declarations": [spec.name for spec in specs],
            "sequences": [
                spec.name for spec in specs if isinstance(spec.expr, SequenceType)
            ],
        }

        return GenerationResult(code, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
