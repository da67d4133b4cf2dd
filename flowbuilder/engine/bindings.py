"""
bindings.py - Identifier sanitization and dynamic-binding scanning.

Dynamic bindings are `${data.X}` (screen-scoped runtime data) and
`${form.X}` (a field value on the current form) expressions embedded in
element properties.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

# External identifiers (screen ids, field names) only allow letters and underscores
_INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z_]")

DATA_REFERENCE_PATTERN = re.compile(r"\$\{data\.([a-zA-Z0-9_]+)\}")

FORM_REFERENCE_PREFIX = "${form."


def sanitize_identifier(value: Any) -> str:
    """Strip every character that is not a letter or underscore.

    >>> sanitize_identifier("phone number!")
    'phonenumber'
    """
    if not isinstance(value, str):
        return ""
    return _INVALID_IDENTIFIER_CHARS.sub("", value)


def find_data_references(value: Any) -> List[str]:
    """Collect `${data.X}` variable names from a nested value.

    Walks dicts (keys and values), lists and strings. Names are returned
    once each, in first-seen order.
    """
    found: List[str] = []

    def walk(node: Any) -> None:
        if isinstance(node, str):
            for name in DATA_REFERENCE_PATTERN.findall(node):
                if name not in found:
                    found.append(name)
        elif isinstance(node, dict):
            for key, item in node.items():
                walk(key)
                walk(item)
        elif isinstance(node, (list, tuple)):
            for item in node:
                walk(item)

    walk(value)
    return found


def form_field_reference(value: Any) -> Optional[str]:
    """Return FIELD for a `${form.FIELD}` string, else None."""
    if not isinstance(value, str) or not value.startswith(FORM_REFERENCE_PREFIX):
        return None
    return value[len(FORM_REFERENCE_PREFIX):].replace("}", "")
