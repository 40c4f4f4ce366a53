"""
HTML email rendering.

Bodies are Jinja2 templates stored in formrelay/templates. Autoescaping is
always on: every submitted value is HTML-escaped before it reaches a body.
"""

import os
from functools import lru_cache
from typing import Any, Dict

import jinja2

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
NOT_PROVIDED = "Not provided"


@lru_cache
def get_environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(TEMPLATES_DIR),
        autoescape=True,
        undefined=jinja2.StrictUndefined,
    )


def render_template(template_name: str, context: Dict[str, Any]) -> str:
    """
    Render an email body.

    Args:
        template_name (str): File name under formrelay/templates
        context (dict): Template variables; string values are escaped on output

    Returns:
        str: The rendered HTML
    """
    template = get_environment().get_template(template_name)
    return template.render(**context)


def with_placeholders(fields: Dict[str, str]) -> Dict[str, str]:
    """Replace empty field values with the "Not provided" placeholder."""
    return {key: (value if value else NOT_PROVIDED) for key, value in fields.items()}
