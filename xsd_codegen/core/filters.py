"""
Property filters deciding which schema entities are left out of generated code.

A filter is specialized to one entity kind. Calling it with an entity of any
other kind is a programming error and raises FilterKindError.
"""

import re
from typing import Generic, Iterable, Optional, Protocol, Tuple, TypeVar, Union

from .schema import TYPE_CLASSES, Attribute, Element, xml_name

E = TypeVar("E")

KindSpec = Union[type, Tuple[type, ...]]


class FilterKindError(TypeError):
    """Raised when a filter is given an entity of the wrong kind."""

    pass


class Diagnostics(Protocol):
    def logf(self, fmt: str, *args) -> None: ...


def _local_name(entity) -> str:
    if isinstance(entity, (Attribute, Element)):
        return entity.name.local
    return xml_name(entity).local


def _kind_name(kind: KindSpec) -> str:
    if isinstance(kind, tuple):
        return " | ".join(k.__name__ for k in kind)
    return kind.__name__


class PropertyFilter(Generic[E]):
    """Base class for filters; ``filter(entity)`` is True to exclude."""

    def __init__(self, kind: KindSpec):
        self.kind = kind

    def __call__(self, entity: E) -> bool:
        if not isinstance(entity, self.kind):
            raise FilterKindError(
                f"{type(entity).__name__} {entity!r} passed to a "
                f"{_kind_name(self.kind)} filter"
            )
        return self.excludes(entity)

    def excludes(self, entity: E) -> bool:
        raise NotImplementedError


class NameFilter(PropertyFilter[E]):
    """Excludes entities whose local name is in a fixed set."""

    def __init__(self, kind: KindSpec, names: Iterable[str]):
        super().__init__(kind)
        self.names = frozenset(names)

    def excludes(self, entity: E) -> bool:
        return _local_name(entity) in self.names

    def __repr__(self) -> str:
        return f"NameFilter({_kind_name(self.kind)}, {sorted(self.names)!r})"


class PatternFilter(PropertyFilter[E]):
    """Excludes entities whose local name does not match ``pattern``.

    An invalid pattern excludes nothing; each invocation then reports the
    error through ``diagnostics``.
    """

    def __init__(
        self,
        kind: KindSpec,
        pattern: str,
        diagnostics: Optional[Diagnostics] = None,
    ):
        super().__init__(kind)
        self.pattern = pattern
        self.diagnostics = diagnostics
        self.error: Optional[re.error] = None
        try:
            self._regex: Optional[re.Pattern] = re.compile(pattern)
        except re.error as e:
            self._regex = None
            self.error = e

    def excludes(self, entity: E) -> bool:
        if self._regex is None:
            if self.diagnostics is not None:
                self.diagnostics.logf(
                    "invalid regex %r passed to only_types: %s", self.pattern, self.error
                )
            return False
        return self._regex.search(_local_name(entity)) is None

    def __repr__(self) -> str:
        return f"PatternFilter({_kind_name(self.kind)}, {self.pattern!r})"


def attribute_filter(names: Iterable[str]) -> NameFilter[Attribute]:
    return NameFilter(Attribute, names)


def element_filter(names: Iterable[str]) -> NameFilter[Element]:
    return NameFilter(Element, names)


def type_pattern_filter(
    patterns: Iterable[str], diagnostics: Optional[Diagnostics] = None
) -> PatternFilter:
    return PatternFilter(TYPE_CLASSES, "|".join(patterns), diagnostics)
