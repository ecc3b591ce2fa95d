"""
Helpers for building Python syntax trees.

Generated methods are assembled from :mod:`ast` nodes rather than text, and
rendered with :func:`ast.unparse`. Every optional node field is passed
explicitly so the trees unparse and compile on all supported interpreters.
"""

import ast
from typing import Any, Iterable, Optional, Sequence


def name(id: str) -> ast.Name:
    return ast.Name(id=id, ctx=ast.Load())


def store(id: str) -> ast.Name:
    return ast.Name(id=id, ctx=ast.Store())


def const(value: Any) -> ast.Constant:
    return ast.Constant(value=value, kind=None)


def attr(value: ast.expr, attribute: str) -> ast.Attribute:
    return ast.Attribute(value=value, attr=attribute, ctx=ast.Load())


def call(func: ast.expr, *args: ast.expr) -> ast.Call:
    return ast.Call(func=func, args=list(args), keywords=[])


def method_call(obj: str, method: str, *args: ast.expr) -> ast.Call:
    return call(attr(name(obj), method), *args)


def assign(target: str, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[store(target)], value=value, type_comment=None)


def expr_stmt(value: ast.expr) -> ast.Expr:
    return ast.Expr(value=value)


def ret(value: Optional[ast.expr]) -> ast.Return:
    return ast.Return(value=value)


def not_equal(left: ast.expr, right: ast.expr) -> ast.Compare:
    return ast.Compare(left=left, ops=[ast.NotEq()], comparators=[right])


def if_(test: ast.expr, body: Sequence[ast.stmt]) -> ast.If:
    return ast.If(test=test, body=list(body), orelse=[])


def for_(target: str, iterable: ast.expr, body: Sequence[ast.stmt]) -> ast.For:
    return ast.For(
        target=store(target),
        iter=iterable,
        body=list(body),
        orelse=[],
        type_comment=None,
    )


def arguments(*names: str) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=[ast.arg(arg=n, annotation=None, type_comment=None) for n in names],
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def function_def(
    func_name: str,
    args: Iterable[str],
    body: Sequence[ast.stmt],
    decorators: Iterable[str] = (),
) -> ast.FunctionDef:
    node = ast.FunctionDef(
        name=func_name,
        args=arguments(*args),
        body=list(body),
        decorator_list=[name(d) for d in decorators],
        returns=None,
        type_comment=None,
    )
    if "type_params" in ast.FunctionDef._fields:
        node.type_params = []
    return node


def check(func: ast.FunctionDef) -> ast.FunctionDef:
    """Compile ``func`` on its own, raising SyntaxError or ValueError if malformed."""
    module = ast.Module(body=[func], type_ignores=[])
    compile(ast.fix_missing_locations(module), f"<generated {func.name}>", "exec")
    return func