"""
decompiler.py - Rebuild the internal screen list from an external document.

Used when loading flows that predate builder-state persistence and when the
user applies a hand-edited document. Reconstruction is heuristic:

- a Form child becomes a Form marker element followed by its children
- `Button` becomes the internal CTA button and recovers action-type/target
- `visible` splits into static visibility (bool) or a conditional
  expression (string)
- screens, elements and static options without ids get fresh ones

Unexpected shapes are skipped rather than raised on.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from flowbuilder.config.engine_config import EngineConfig, get_engine_config

from ._ids import generate_element_id, generate_option_id, generate_screen_id
from .types import (
    EXTERNAL_BUTTON_TYPE,
    Element,
    ElementKind,
    Screen,
    backfill_option_ids,
    is_static_options,
)

logger = logging.getLogger(__name__)

# Fields lifted out of the property bag
_LIFTED_KEYS = ("type", "name", "label", "required", "visible", "id")

# The Form node carries label and required as plain properties
_FORM_SKIPPED_KEYS = ("type", "name", "visible", "id", "children")


def _split_visible(visible: Any) -> Tuple[bool, Optional[str]]:
    if isinstance(visible, bool):
        return visible, None
    if isinstance(visible, str) and visible:
        return True, visible
    return True, None


def _navigation_options(options: Any) -> Any:
    if not is_static_options(options):
        return options
    rebuilt: List[Dict[str, Any]] = []
    for opt in options:
        if not isinstance(opt, dict):
            continue
        action = opt.get("on-select-action")
        action = action if isinstance(action, dict) else {}
        next_target = action.get("next")
        next_target = next_target if isinstance(next_target, dict) else {}
        rebuilt.append({
            "id": opt.get("id") or generate_option_id(),
            "title": opt.get("title"),
            "onSelectAction": action.get("name"),
            "target": next_target.get("name"),
        })
    return rebuilt


def decompile_element(api_element: Dict[str, Any]) -> Element:
    """Rebuild one internal Element from an external element object."""
    api_type = api_element.get("type")
    internal_type = ElementKind.CTA_BUTTON.value if api_type == EXTERNAL_BUTTON_TYPE else str(api_type or "")

    properties: Dict[str, Any] = {}
    for key in ("name", "label", "required"):
        if api_element.get(key) is not None:
            properties[key] = api_element[key]
    for key, value in api_element.items():
        if key not in _LIFTED_KEYS:
            properties[key] = copy.deepcopy(value)

    if api_type == EXTERNAL_BUTTON_TYPE:
        action = api_element.get("on-click-action")
        if isinstance(action, dict):
            properties["action-type"] = action.get("name")
            if isinstance(action.get("next"), dict):
                properties["target"] = action["next"].get("name")

    if internal_type == ElementKind.NAVIGATION_LIST.value and "data-source" in properties:
        properties["data-source"] = _navigation_options(properties["data-source"])
    else:
        properties = backfill_option_ids(properties)

    visibility, conditional = _split_visible(api_element.get("visible"))
    name = api_element.get("name")

    return Element(
        id=api_element.get("id") or generate_element_id(),
        type=internal_type,
        name=name if isinstance(name, str) else "",
        properties=properties,
        visibility=visibility,
        conditional_visibility=conditional,
    )


def _form_marker(api_form: Dict[str, Any], config: EngineConfig) -> Element:
    name = api_form.get("name") or config.default_form_name
    properties: Dict[str, Any] = {"name": name}
    for key, value in api_form.items():
        if key not in _FORM_SKIPPED_KEYS:
            properties[key] = copy.deepcopy(value)
    visibility, conditional = _split_visible(api_form.get("visible"))
    return Element(
        id=api_form.get("id") or generate_element_id(),
        type=ElementKind.FORM.value,
        name=name,
        properties=properties,
        visibility=visibility,
        conditional_visibility=conditional,
    )


def decompile_screen(api_screen: Dict[str, Any], config: Optional[EngineConfig] = None) -> Screen:
    """Rebuild one internal Screen from an external screen object."""
    config = config or get_engine_config()
    elements: List[Element] = []

    layout = api_screen.get("layout")
    children = layout.get("children") if isinstance(layout, dict) else None
    for child in children if isinstance(children, list) else []:
        if not isinstance(child, dict):
            logger.debug("Skipping non-object layout child in screen %r", api_screen.get("id"))
            continue
        if child.get("type") == ElementKind.FORM.value:
            elements.append(_form_marker(child, config))
            form_children = child.get("children")
            for form_child in form_children if isinstance(form_children, list) else []:
                if isinstance(form_child, dict):
                    elements.append(decompile_element(form_child))
        else:
            elements.append(decompile_element(child))

    screen_id = api_screen.get("id")
    terminal = api_screen.get("terminal")
    data = api_screen.get("data")
    return Screen(
        id=screen_id if isinstance(screen_id, str) and screen_id else generate_screen_id(),
        title=str(api_screen.get("title") or ""),
        elements=tuple(elements),
        terminal=terminal if isinstance(terminal, bool) else None,
        data=copy.deepcopy(data) if isinstance(data, dict) else {},
    )


def decompile_document(document: Any, config: Optional[EngineConfig] = None) -> Tuple[Screen, ...]:
    """Map an external document back to internal screens.

    Returns an empty tuple for anything that is not a `{screens: [...]}`
    object.
    """
    if not isinstance(document, dict):
        return ()
    screens = document.get("screens")
    if not isinstance(screens, list):
        logger.debug("Document has no screens list; nothing to decompile")
        return ()
    config = config or get_engine_config()
    return tuple(
        decompile_screen(api_screen, config)
        for api_screen in screens
        if isinstance(api_screen, dict)
    )
