"""
XSD Code Generation

Generates Python dataclasses and list types, with XML decode/encode
support, from XML Schema type definitions.
"""

from .core import (
    DEFAULT_OPTIONS,
    Config,
    ConfigError,
    GenerationResult,
    Schema,
    SchemaGenerator,
    generate_code,
    load_config,
)
from .logging_config import get_logger, setup_logging

# Version info
__version__ = "0.1.0"


# Convenience functions
def generate_from_schema(schema, config_file=None, options=(), use_defaults=True):
    """
    Generate a Python module from a parsed schema.

    Args:
        schema: Schema produced by an XSD parser
        config_file: Optional JSON configuration file
        options: Extra options applied after the configuration file
        use_defaults: Start from DEFAULT_OPTIONS

    Returns:
        GenerationResult with generated code
    """
    config = load_config(config_file, options, use_defaults)
    return generate_code(config, schema)


__all__ = [
    "DEFAULT_OPTIONS",
    "Config",
    "ConfigError",
    "GenerationResult",
    "Schema",
    "SchemaGenerator",
    "generate_code",
    "generate_from_schema",
    "get_logger",
    "load_config",
    "setup_logging",
]
