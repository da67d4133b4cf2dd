"""
document.py - Pre-apply validation of a hand-edited external document.

Checks, in reporting order:
1. MissingVersion         - `version` absent
2. InvalidScreens         - `screens` is not a list
3. MissingScreenFields    - a screen lacks id, title or layout
4. InvalidLayoutChildren  - `layout.children` is not a list
5. MissingDataBinding     - a `${data.X}` reference anywhere in the layout
                            (including Form children) is undeclared

The binding scan covers every screen before anything is reported.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from flowbuilder.engine.bindings import find_data_references

from .errors import (
    InvalidLayoutChildrenError,
    InvalidScreensError,
    MissingDataBindingError,
    MissingScreenFieldsError,
    MissingVersionError,
    ValidationResult,
)

logger = logging.getLogger(__name__)

DOCUMENT_CATEGORY_ORDER: Tuple[str, ...] = (
    MissingVersionError.code,
    InvalidScreensError.code,
    MissingScreenFieldsError.code,
    InvalidLayoutChildrenError.code,
    MissingDataBindingError.code,
)


def _layout_references(children: List[Any]) -> List[str]:
    refs: List[str] = []
    for child in children:
        for name in find_data_references(child):
            if name not in refs:
                refs.append(name)
    return refs


def _check_screen(index: int, screen: Any, result: ValidationResult) -> None:
    if not isinstance(screen, dict) or not screen.get("id") or not screen.get("title") or screen.get("layout") is None:
        result.add_error(
            MissingScreenFieldsError.code,
            f"screens[{index}]:",
            f"Screen index {index} is missing required fields (id, title, layout)",
            "give every screen an id, a title and a layout",
        )
        return

    screen_id = screen["id"]
    title = screen["title"]
    layout = screen["layout"]
    children = layout.get("children") if isinstance(layout, dict) else None
    if not isinstance(children, list):
        result.add_error(
            InvalidLayoutChildrenError.code,
            f"screens[{index}].layout:",
            f'Screen "{title}" layout children must be an array',
            "set layout.children to a list of components",
            screen_id=screen_id,
        )
        return

    data = screen.get("data")
    declared: Dict[str, Any] = data if isinstance(data, dict) else {}
    undeclared = [name for name in _layout_references(children) if name not in declared]
    if undeclared:
        result.add_error(
            MissingDataBindingError.code,
            f"screens[{index}]:",
            f'Screen "{title}": Missing data declarations for: {", ".join(undeclared)}',
            f"declare {', '.join(undeclared)} under the screen's data",
            screen_id=screen_id,
            variables=undeclared,
        )


def check_document(document: Any) -> ValidationResult:
    """Collect every document finding without raising."""
    result = ValidationResult()
    doc = document if isinstance(document, dict) else {}

    if not doc.get("version"):
        result.add_error(
            MissingVersionError.code,
            "document:",
            'Missing "version" field (e.g. "7.3")',
            'add a top-level "version"',
        )

    screens = doc.get("screens")
    if not isinstance(screens, list):
        result.add_error(
            InvalidScreensError.code,
            "document:",
            "screens must be an array",
            'set "screens" to a list of screen objects',
        )
        return result

    for index, screen in enumerate(screens):
        _check_screen(index, screen, result)

    logger.debug("Document check found %d error(s)", len(result.errors))
    return result


def validate_document(document: Any) -> None:
    """Validate a raw document before applying it to the editor.

    Raises:
        FlowValidationError: The first failing category, carrying all of
            its findings.
    """
    check_document(document).raise_first(DOCUMENT_CATEGORY_ORDER)
