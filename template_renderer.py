"""
template_renderer.py — Fills {total_companies} and {current_jobs} placeholders in board text.
"""

import re
from typing import Optional

TEMPLATE_VARIABLES = ("total_companies", "current_jobs")

_VARIABLE_RE = re.compile(r"\{(" + "|".join(TEMPLATE_VARIABLES) + r")\}")


def render_template(template: Optional[str], values: dict) -> Optional[str]:
    """
    Replace known placeholders that have a value; unknown or missing ones are left as-is.

        render_template("{total_companies}+ companies", {"total_companies": 80})
        -> "80+ companies"
    """
    if not template or not isinstance(template, str):
        return template

    def _replace(match):
        name = match.group(1)
        return str(values[name]) if values.get(name) is not None else match.group(0)

    return _VARIABLE_RE.sub(_replace, template)


def render_config_templates(board: dict, values: dict) -> dict:
    """Return a copy of the board config with both description lines rendered."""
    rendered = dict(board)
    for key in ("description_line1", "description_line2"):
        if rendered.get(key):
            rendered[key] = render_template(rendered[key], values)
    return rendered


def has_template_variables(text: Optional[str]) -> bool:
    if not text or not isinstance(text, str):
        return False
    return bool(_VARIABLE_RE.search(text))


def extract_template_variables(text: Optional[str]) -> list[str]:
    """Distinct placeholder names in order of first appearance."""
    if not text or not isinstance(text, str):
        return []
    found = []
    for name in _VARIABLE_RE.findall(text):
        if name not in found:
            found.append(name)
    return found
