"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with the filters needed to emit Python modules.
"""

from typing import Any, Dict

from jinja2 import DictLoader, Environment


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self):
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        self._env = Environment(
            loader=DictLoader({}),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

        self._env.filters["indent"] = self._indent_filter
        self._env.filters["comment"] = self._comment_filter
        self._env.filters["pyrepr"] = repr

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {str(e)}")

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        self._env.loader.mapping[name] = content

    # Template filters for code generation

    def _indent_filter(self, value: str, spaces: int = 4) -> str:
        """Indent all lines in a string."""
        indent = " " * spaces
        lines = str(value).split("\n")
        return "\n".join(indent + line if line.strip() else line for line in lines)

    def _comment_filter(self, value: str, style: str = "#") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)


# Built-in templates for generated declarations
MODULE_TEMPLATE = """\
{{ header | comment }}
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar
from xml.etree import ElementTree
{% for imp in imports %}
{{ imp }}
{% endfor %}

from xsd_codegen.runtime import decode_value, encode_value, local_name

PACKAGE = {{ package | pyrepr }}
{% for declaration in declarations %}


{{ declaration }}
{% endfor %}
"""

STRUCT_TEMPLATE = """\
@dataclass
class {{ name }}:
{% if doc %}
    {{ doc | pyrepr }}

{% endif %}
{% for c in constants %}
    {{ c.name }}: ClassVar[str] = {{ c.value | pyrepr }}
{% endfor %}
{% if constants %}
    __xml_constants__: ClassVar[dict] = {{ constant_tags | pyrepr }}
{% endif %}
{% for f in fields %}
    {{ f.name }}: {{ f.type }} = field({{ f.default }}, metadata={"xml": {{ f.tag | pyrepr }}})
{% endfor %}
{% if not (doc or constants or fields or methods) %}
    pass
{% endif %}
{% for method in methods %}

{{ method | indent }}
{% endfor %}
"""

CLASS_TEMPLATE = """\
class {{ name }}({{ base }}):
{% if doc %}
    {{ doc | pyrepr }}
{% endif %}
{% if not (doc or methods) %}
    pass
{% endif %}
{% for method in methods %}

{{ method | indent }}
{% endfor %}
"""

ALIAS_TEMPLATE = """\
{% if doc %}
{{ doc | comment }}
{% endif %}
{{ name }} = {{ target }}
"""


def create_template_engine() -> TemplateEngine:
    """Create a template engine holding the built-in templates."""
    engine = TemplateEngine()
    engine.add_template("module", MODULE_TEMPLATE)
    engine.add_template("struct", STRUCT_TEMPLATE)
    engine.add_template("class", CLASS_TEMPLATE)
    engine.add_template("alias", ALIAS_TEMPLATE)
    return engine
