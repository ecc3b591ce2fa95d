"""
Draft declarations produced from schema types.

A Spec is the in-flight form of one generated declaration: its name, a
structural expression (struct, sequence or alias) and the methods that
post-processing attached to it. Type expressions build :mod:`ast` nodes so
rendering never has to re-parse source text.
"""

import ast
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Union

from .schema import Type


@dataclass(frozen=True)
class NamedType:
    """A reference to a named type, possibly dotted (``datetime.date``)."""

    name: str
    imports: FrozenSet[str] = field(default_factory=frozenset)

    def to_ast(self) -> ast.expr:
        parts = self.name.split(".")
        node: ast.expr = ast.Name(id=parts[0], ctx=ast.Load())
        for attr in parts[1:]:
            node = ast.Attribute(value=node, attr=attr, ctx=ast.Load())
        return node

    def expr_string(self) -> str:
        return self.name

    def imports_needed(self) -> FrozenSet[str]:
        return self.imports


@dataclass(frozen=True)
class SequenceType:
    """A homogeneous list of ``item``."""

    item: "TypeExpr"

    def to_ast(self) -> ast.expr:
        return ast.Subscript(
            value=ast.Name(id="list", ctx=ast.Load()),
            slice=self.item.to_ast(),
            ctx=ast.Load(),
        )

    def expr_string(self) -> str:
        return ast.unparse(self.to_ast())

    def imports_needed(self) -> FrozenSet[str]:
        return self.item.imports_needed()


TypeExpr = Union[NamedType, SequenceType]


@dataclass
class StructField:
    """One field of a generated structure."""

    name: str
    type: TypeExpr
    tags: Dict[str, str] = field(default_factory=dict)
    default: Optional[str] = None

    def tag(self, key: str) -> str:
        """Return the value of tag ``key``, or an empty string."""
        return self.tags.get(key, "")


@dataclass
class StructConstant:
    """A fixed attribute value carried by a structure."""

    name: str
    value: str
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class StructType:
    """A structure made of named, tagged fields."""

    fields: List[StructField] = field(default_factory=list)
    constants: List[StructConstant] = field(default_factory=list)

    def imports_needed(self) -> FrozenSet[str]:
        imports = set()
        for f in self.fields:
            imports.update(f.type.imports_needed())
        return frozenset(imports)


Expr = Union[StructType, SequenceType, NamedType]


@dataclass
class Spec:
    """Draft declaration for one schema type."""

    name: str
    expr: Expr
    methods: List[ast.FunctionDef] = field(default_factory=list)
    doc: Optional[str] = None
    xsd_type: Optional[Type] = None

    def method_names(self) -> List[str]:
        return [m.name for m in self.methods]

    def referenced_names(self) -> List[str]:
        """Names of other declarations this spec's expression refers to."""
        names: List[str] = []
        exprs: List[TypeExpr] = []
        if isinstance(self.expr, StructType):
            exprs = [f.type for f in self.expr.fields]
        else:
            exprs = [self.expr]
        for expr in exprs:
            while isinstance(expr, SequenceType):
                expr = expr.item
            names.append(expr.name)
        return names
