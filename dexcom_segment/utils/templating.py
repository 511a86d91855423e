"""Minimal ``{{ name }}`` placeholder expansion for segment templates."""

import re
from typing import Any, Mapping

# Accepts "{{value}}", "{{ value }}" and the dotted "{{ .Sgv }}" style.
PLACEHOLDER = re.compile(r"{{\s*\.?([A-Za-z_][A-Za-z0-9_]*)\s*}}")


def render_template(template: str, fields: Mapping[str, Any]) -> str:
    """
    Expand placeholders in *template* from *fields*.

    Unknown names expand to an empty string.
    """
    def _substitute(match: re.Match) -> str:
        value = fields.get(match.group(1))
        return "" if value is None else str(value)

    return PLACEHOLDER.sub(_substitute, template)
