"""
Identifier sanitization for generated Python code.

Handles invalid characters, keyword conflicts and duplicate field names
within one generated class.
"""

import keyword
import re
from typing import Optional, Set

# Python reserved keywords
PYTHON_RESERVED_WORDS = set(keyword.kwlist)

# Names evaluated inside generated class bodies
GENERATED_MODULE_NAMES = {
    "field",
    "dataclass",
    "ClassVar",
    "Any",
    "Decimal",
    "datetime",
    "str",
    "int",
    "float",
    "bool",
    "bytes",
    "list",
}

# Top-level names of every generated module
MODULE_LEVEL_NAMES = {
    "annotations",
    "dataclass",
    "field",
    "ClassVar",
    "ElementTree",
    "decode_value",
    "encode_value",
    "local_name",
    "PACKAGE",
    "Any",
    "Decimal",
    "HexBinary",
    "datetime",
}


def escape_reserved(name: str, reserved: Set[str], suffix: str = "_") -> str:
    """Append ``suffix`` to ``name`` if it is one of ``reserved``."""
    if name in reserved:
        return f"{name}{suffix}"
    return name


class NameSanitizer:
    """Makes names safe to use as identifiers in one scope."""

    def __init__(self, reserved_words: Optional[Set[str]] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Names that must not be used verbatim
        """
        if reserved_words is None:
            reserved_words = PYTHON_RESERVED_WORDS | GENERATED_MODULE_NAMES
        self.reserved_words = reserved_words
        self._used_names: Set[str] = set()

    def sanitize_name(self, name: str, suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for use in the current scope.

        Args:
            name: Identifier produced by the name transform pipeline
            suffix_on_conflict: Suffix to add for conflicts

        Returns:
            Sanitized name, unique within this sanitizer's scope
        """
        cleaned = self._clean_basic(name)
        final_name = self._resolve_conflicts(cleaned, suffix_on_conflict)

        self._used_names.add(final_name)

        return final_name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - replace characters invalid in identifiers."""
        cleaned = re.sub(r"\W", "_", name)

        # Ensure doesn't start with number
        if cleaned and cleaned[0].isdigit():
            cleaned = f"_{cleaned}"

        if not cleaned:
            cleaned = "_"

        return cleaned

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Resolve naming conflicts with reserved words and existing names."""
        name = escape_reserved(name, self.reserved_words, suffix)
        original_name = name

        # Check for duplicates
        counter = 1
        while name in self._used_names:
            name = f"{original_name}{suffix}{counter}"
            counter += 1

        return name
