"""
Configuration for code generation.

A Config holds user-defined overrides and filters used when generating
Python source from a schema. It is changed only by applying Options; every
Option returns a Snapshot which, applied in turn, reverts the change.
Options can also be loaded from JSON configuration files.
"""

import json
import logging
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Protocol,
    Tuple,
    Union,
)

from . import flatten, soap_array
from .builtins import UnknownBuiltinError, builtin_expr
from .filters import PropertyFilter, attribute_filter, element_filter, type_pattern_filter
from .naming import (
    MODULE_LEVEL_NAMES,
    PYTHON_RESERVED_WORDS,
    NameSanitizer,
    escape_reserved,
)
from .schema import Attribute, Builtin, ComplexType, Element, QName, Schema, Type, xml_name
from .spec import NamedType, Spec

NameTransform = Callable[[QName], str]
TypeTransform = Callable[[Schema, Type], Type]
SpecTransform = Callable[[Spec], Spec]


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class DiagnosticSink(Protocol):
    """Receives diagnostics; implemented by :class:`logging.Logger`."""

    def log(self, level: int, msg: str, *args: Any) -> None: ...


@dataclass(frozen=True)
class Snapshot:
    """Prior values of Config fields, captured before an Option changed them.

    A Snapshot is itself an Option: applying it restores the captured values
    and returns the Snapshot that would redo the change.
    """

    values: Tuple[Tuple[str, Any], ...] = ()

    def __call__(self, cfg: "Config") -> "Snapshot":
        return cfg.restore(self)


Option = Callable[["Config"], Snapshot]


@dataclass
class Config:
    """User-defined overrides and filters for one generation run."""

    logger: Optional[DiagnosticSink] = None
    log_level: int = 0
    package: str = ""
    preprocess_type: Optional[TypeTransform] = None
    postprocess_spec: Optional[SpecTransform] = None
    # Attributes for which this returns True are left out of complex types.
    filter_attributes: Optional[PropertyFilter[Attribute]] = None
    # Elements for which this returns True are left out of complex types.
    filter_elements: Optional[PropertyFilter[Element]] = None
    # Types for which this returns True are not declared.
    filter_types: Optional[PropertyFilter[Type]] = None
    type_name_transform: Optional[NameTransform] = None
    element_name_transform: Optional[NameTransform] = None
    attribute_name_transform: Optional[NameTransform] = None
    all_name_transform: Optional[NameTransform] = None

    # Mutation and reversal

    def replace(self, **changes: Any) -> Snapshot:
        """Set fields and return a Snapshot of their previous values."""
        known = {f.name for f in fields(self)}
        for name in changes:
            if name not in known:
                raise AttributeError(f"Config has no field {name!r}")
        previous = Snapshot(tuple((name, getattr(self, name)) for name in changes))
        for name, value in changes.items():
            setattr(self, name, value)
        return previous

    def restore(self, snapshot: Snapshot) -> Snapshot:
        """Write back a Snapshot; returns the Snapshot that undoes the restore."""
        return self.replace(**dict(snapshot.values))

    def option(self, *opts: Option) -> Snapshot:
        """
        Apply options in order.

        Returns:
            A Snapshot that restores every field touched by ``opts`` to its
            value from before the first option was applied.
        """
        earliest: Dict[str, Any] = {}
        for opt in opts:
            previous = opt(self)
            for name, value in previous.values:
                earliest.setdefault(name, value)
        return Snapshot(tuple(earliest.items()))

    # Diagnostics

    def errorf(self, fmt: str, *args: Any) -> None:
        if self.logger is not None:
            self.logger.log(logging.ERROR, fmt, *args)

    def logf(self, fmt: str, *args: Any) -> None:
        if self.logger is not None and self.log_level > 0:
            self.logger.log(logging.INFO, fmt, *args)

    def debugf(self, fmt: str, *args: Any) -> None:
        if self.logger is not None and self.log_level > 3:
            self.logger.log(logging.DEBUG, fmt, *args)

    # Names

    def private(self, name: QName, transform: Optional[NameTransform] = None) -> str:
        """Transformed name with a lower-case first character."""
        s = name.local
        if self.all_name_transform is not None:
            s = self.all_name_transform(name)
        if transform is not None:
            s = transform(QName(name.space, s))
        if not s:
            if name.local:
                self.logf("Name %s transformed to the empty string", name.local)
            return "_"
        return s[0].lower() + s[1:]

    def public(self, name: QName, transform: Optional[NameTransform] = None) -> str:
        """Transformed name with an upper-case first character."""
        s = self.private(name, transform)
        return s[0].upper() + s[1:]

    def type_name(self, name: QName) -> str:
        s = self.public(name, self.type_name_transform)
        return escape_reserved(s, PYTHON_RESERVED_WORDS | MODULE_LEVEL_NAMES)

    def element_name(self, name: QName, sanitizer: Optional[NameSanitizer] = None) -> str:
        s = self.private(name, self.element_name_transform)
        return (sanitizer or NameSanitizer()).sanitize_name(s)

    def attribute_name(
        self, name: QName, sanitizer: Optional[NameSanitizer] = None
    ) -> str:
        s = self.private(name, self.attribute_name_transform)
        return (sanitizer or NameSanitizer()).sanitize_name(s)

    # Types

    def filter_fields(self, t: ComplexType) -> Tuple[List[Attribute], List[Element]]:
        """Return the attributes and elements of ``t`` that pass the filters."""
        attributes = [
            attr
            for attr in t.attributes
            if self.filter_attributes is None or not self.filter_attributes(attr)
        ]
        elements = [
            el
            for el in t.elements
            if self.filter_elements is None or not self.filter_elements(el)
        ]
        return attributes, elements

    def expr(self, t: Optional[Type]) -> NamedType:
        """Return the Python type referring to ``t``."""
        if t is None:
            t = Builtin.ANY_TYPE
        if isinstance(t, Builtin):
            ex = builtin_expr(t)
            if ex is None:
                raise UnknownBuiltinError(f"Unknown built-in type {t.value!r}")
            return ex
        return NamedType(self.type_name(xml_name(t)))

    def preprocess(self, schema: Schema, t: Type) -> Type:
        if self.preprocess_type is None:
            return t
        return self.preprocess_type(schema, t)

    def postprocess(self, s: Spec) -> Spec:
        if self.postprocess_spec is None:
            return s
        return self.postprocess_spec(s)


# Options


def error_log(logger: Optional[DiagnosticSink], level: int) -> Option:
    """
    Send diagnostics to ``logger``.

    Args:
        logger: Sink for diagnostics, usually a :class:`logging.Logger`
        level: Verbosity from 1 to 5; 0 keeps only errors
    """

    def apply(cfg: Config) -> Snapshot:
        return cfg.replace(logger=logger, log_level=level)

    return apply


def package_name(name: str) -> Option:
    """Set the package label written into generated modules."""

    def apply(cfg: Config) -> Snapshot:
        return cfg.replace(package=name)

    return apply


def ignore_attributes(*names: str) -> Option:
    """Leave attributes with these local names out of generated classes."""

    def apply(cfg: Config) -> Snapshot:
        return cfg.replace(filter_attributes=attribute_filter(names))

    return apply


def ignore_elements(*names: str) -> Option:
    """Leave elements with these local names out of generated classes."""

    def apply(cfg: Config) -> Snapshot:
        return cfg.replace(filter_elements=element_filter(names))

    return apply


def only_types(*patterns: str) -> Option:
    """
    Declare only types whose local name matches one of ``patterns``.

    An invalid pattern disables the filter and is reported each time the
    filter runs.
    """

    def apply(cfg: Config) -> Snapshot:
        return cfg.replace(filter_types=type_pattern_filter(patterns, cfg))

    return apply


def _name_rule(slot: str, option_name: str, pattern: str, repl: str) -> Option:
    try:
        reg: Optional[re.Pattern] = re.compile(pattern)
        error: Optional[re.error] = None
    except re.error as e:
        reg, error = None, e

    def apply(cfg: Config) -> Snapshot:
        prev: Optional[NameTransform] = getattr(cfg, slot)

        def transform(name: QName) -> str:
            s = name.local
            if prev is not None:
                s = prev(name)
            if reg is None:
                cfg.logf("Invalid regex %r passed to %s: %s", pattern, option_name, error)
                return s
            return reg.sub(repl, s)

        return cfg.replace(**{slot: transform})

    return apply


def replace_all_names(pattern: str, repl: str) -> Option:
    """
    Add a substitution applied to every identifier.

    Substitutions accumulate and run in the order they were added. An
    invalid regular expression leaves names untouched.
    """
    return _name_rule("all_name_transform", "replace_all_names", pattern, repl)


def replace_type_names(pattern: str, repl: str) -> Option:
    """Add a substitution applied to type names after the general ones."""
    return _name_rule("type_name_transform", "replace_type_names", pattern, repl)


def replace_element_names(pattern: str, repl: str) -> Option:
    """Add a substitution applied to element field names after the general ones."""
    return _name_rule("element_name_transform", "replace_element_names", pattern, repl)


def replace_attribute_names(pattern: str, repl: str) -> Option:
    """Add a substitution applied to attribute field names after the general ones."""
    return _name_rule(
        "attribute_name_transform", "replace_attribute_names", pattern, repl
    )


def process_types(fn: TypeTransform) -> Option:
    """Run ``fn`` on every schema type before it is translated."""

    def apply(cfg: Config) -> Snapshot:
        prev = cfg.preprocess_type

        def transform(schema: Schema, t: Type) -> Type:
            if prev is not None:
                t = prev(schema, t)
            return fn(schema, t)

        return cfg.replace(preprocess_type=transform)

    return apply


def process_specs(fn: SpecTransform) -> Option:
    """Run ``fn`` on every draft declaration after translation."""

    def apply(cfg: Config) -> Snapshot:
        prev = cfg.postprocess_spec

        def transform(s: Spec) -> Spec:
            if prev is not None:
                s = prev(s)
            return fn(s)

        return cfg.replace(postprocess_spec=transform)

    return apply


def handle_soap_array_type() -> Option:
    """
    Resolve the wsdl:arrayType attribute of SOAP-encoded arrays and retype
    the array's wildcard element to the declared item type.
    """

    def apply(cfg: Config) -> Snapshot:
        return process_types(
            lambda schema, t: soap_array.parse_soap_array_type(cfg, schema, t)
        )(cfg)

    return apply


def soap_array_as_sequence() -> Option:
    """
    Turn structures with a single list field into list subclasses with
    ``from_xml`` and ``to_xml`` methods.
    """

    def apply(cfg: Config) -> Snapshot:
        return process_specs(lambda s: flatten.soap_array_to_sequence(cfg, s))(cfg)

    return apply


# Options applied by load_config unless use_defaults is False.
DEFAULT_OPTIONS: List[Option] = [
    ignore_attributes("id", "href", "ref", "offset"),
    replace_all_names(r"[._ \s-]", ""),
    package_name("ws"),
    handle_soap_array_type(),
    soap_array_as_sequence(),
]


# Configuration files

_LIST_OPTIONS: Dict[str, Callable[..., Option]] = {
    "ignore_attributes": ignore_attributes,
    "ignore_elements": ignore_elements,
    "only_types": only_types,
}

_RULE_OPTIONS: Dict[str, Callable[[str, str], Option]] = {
    "replace_all_names": replace_all_names,
    "replace_type_names": replace_type_names,
    "replace_element_names": replace_element_names,
    "replace_attribute_names": replace_attribute_names,
}

_FLAG_OPTIONS: Dict[str, Callable[[], Option]] = {
    "handle_soap_array_type": handle_soap_array_type,
    "soap_array_as_sequence": soap_array_as_sequence,
}


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def options_from_dict(config_dict: Dict[str, Any]) -> List[Option]:
    """
    Convert a configuration mapping into Options.

    Args:
        config_dict: Mapping of option names to values

    Returns:
        Options in the mapping's order

    Raises:
        ConfigError: On unknown keys or values of the wrong shape
    """
    options: List[Option] = []

    for key, value in config_dict.items():
        if key == "package_name":
            if not isinstance(value, str):
                raise ConfigError(f"package_name must be a string, got {value!r}")
            options.append(package_name(value))

        elif key in _LIST_OPTIONS:
            if not _is_str_list(value):
                raise ConfigError(f"{key} must be a list of strings, got {value!r}")
            options.append(_LIST_OPTIONS[key](*value))

        elif key in _RULE_OPTIONS:
            if not isinstance(value, list) or not all(
                _is_str_list(rule) and len(rule) == 2 for rule in value
            ):
                raise ConfigError(
                    f"{key} must be a list of [pattern, replacement] pairs, got {value!r}"
                )
            options.extend(_RULE_OPTIONS[key](pat, repl) for pat, repl in value)

        elif key in _FLAG_OPTIONS:
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be true or false, got {value!r}")
            if value:
                options.append(_FLAG_OPTIONS[key]())

        else:
            raise ConfigError(f"Unknown configuration option: {key}")

    return options


def _load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    if not path.suffix.lower() == ".json":
        raise ConfigError(f"Configuration file must be JSON: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")

    return config


def load_options(config_path: Union[str, Path]) -> List[Option]:
    """
    Load Options from a JSON configuration file.

    Args:
        config_path: Path to JSON configuration file

    Returns:
        Options to apply, in file order
    """
    return options_from_dict(_load_config_file(config_path))


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    options: Iterable[Option] = (),
    use_defaults: bool = True,
) -> Config:
    """
    Convenience function to build a ready-to-use Config.

    Args:
        config_file: Optional JSON configuration file
        options: Extra options applied last
        use_defaults: Start from DEFAULT_OPTIONS

    Returns:
        Configured Config
    """
    cfg = Config()
    if use_defaults:
        cfg.option(*DEFAULT_OPTIONS)
    if config_file:
        cfg.option(*load_options(config_file))
    cfg.option(*options)
    return cfg


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "package_name": "orders",
    "ignore_attributes": ["id", "href"],
    "only_types": ["^Order"],
    "replace_all_names": [["[._ \\s-]", ""]],
    "handle_soap_array_type": True,
    "soap_array_as_sequence": True,
}
