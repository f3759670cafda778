"""
Variable substitution for message and webhook templates.

Templates reference entity fields with ``{{name}}`` placeholders. Only the
known variables below are substituted; unknown placeholders are left as-is.
"""

from __future__ import annotations

import re
from typing import Any

from .types import EntitySnapshot

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def template_variables(snapshot: EntitySnapshot) -> dict[str, str]:
    """Build the variable table for a snapshot."""
    return {
        "name": _text(snapshot.get("full_name")),
        "email": _text(snapshot.get("email")),
        "phone": _text(snapshot.get("phone")),
        "amount": _amount(snapshot.get("total_spend")),
        "client_id": snapshot.entity_id,
    }


def render_template(template: str, snapshot: EntitySnapshot) -> str:
    """Substitute known ``{{variable}}`` placeholders from the snapshot."""
    if not template:
        return ""

    variables = template_variables(snapshot)

    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return variables[key]
        return match.group(0)

    return _PLACEHOLDER.sub(replace, template)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _amount(value: Any) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
