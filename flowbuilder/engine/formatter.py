"""
formatter.py - Map one internal Element to its external field object.

The formatter runs a generic pass (type, visible, name, label, required),
then a per-kind override keyed by ElementKind, then copies the remaining
properties through unless they are internal bookkeeping or the external
schema rejects them for that kind.

It is total: malformed properties degrade to omission, never an exception.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional

from flowbuilder.config.engine_config import EngineConfig, get_engine_config

from .bindings import form_field_reference, sanitize_identifier
from .types import (
    EXTERNAL_BUTTON_TYPE,
    Element,
    ElementKind,
    is_static_options,
    parse_kind,
)

logger = logging.getLogger(__name__)

# Editor bookkeeping that never reaches the external document
INTERNAL_KEYS: FrozenSet[str] = frozenset({"id", "visibility", "conditionalVisibility"})

# Keys owned by the generic pass
_GENERIC_KEYS: FrozenSet[str] = frozenset({"type", "visible", "name", "label", "required"})

# Keys owned by a kind's override (consumed even when the override omits them)
CONSUMED_KEYS: Dict[ElementKind, FrozenSet[str]] = {
    ElementKind.TEXT_INPUT: frozenset({"input-type"}),
    ElementKind.RADIO_BUTTONS_GROUP: frozenset({"data-source"}),
    ElementKind.CHECKBOX_GROUP: frozenset({"data-source"}),
    ElementKind.DROPDOWN: frozenset({"data-source"}),
    ElementKind.NAVIGATION_LIST: frozenset({"data-source"}),
    ElementKind.CTA_BUTTON: frozenset({"action-type", "target", "on-click-action"}),
    ElementKind.FOOTER: frozenset({"on-click-action", "on_click_action"}),
    ElementKind.IMAGE: frozenset({"url", "alt_text", "altText"}),
}

# Properties the external schema does not support for a kind
UNSUPPORTED_KEYS: Dict[ElementKind, FrozenSet[str]] = {
    ElementKind.TEXT_INPUT: frozenset({"error-message", "init-value"}),
    ElementKind.DATE_PICKER: frozenset({"error-message", "init-value"}),
    ElementKind.TEXT_AREA: frozenset({"init-value"}),
}


# =============================================================================
# Option Lists
# =============================================================================


def _project_option(opt: Dict[str, Any], index: int) -> Dict[str, Any]:
    # Positional fallback keeps the output stable when an option lost its id
    projected: Dict[str, Any] = {"id": opt.get("id") or f"option_{index + 1}"}
    if opt.get("title") is not None:
        projected["title"] = opt["title"]
    return projected


def format_options(options: Any) -> Any:
    """Re-project a static option list to {id, title}; pass bindings through."""
    if not is_static_options(options):
        return options
    return [
        _project_option(opt, i)
        for i, opt in enumerate(options)
        if isinstance(opt, dict)
    ]


def format_navigation_options(options: Any, config: EngineConfig) -> Any:
    """Re-project navigation options with their on-select-action."""
    if not is_static_options(options):
        return options
    formatted: List[Dict[str, Any]] = []
    for i, opt in enumerate(options):
        if not isinstance(opt, dict):
            continue
        item = _project_option(opt, i)
        item["on-select-action"] = {
            "name": opt.get("onSelectAction") or config.default_navigation_action,
            "next": {"type": "screen", "name": opt.get("target") or ""},
        }
        formatted.append(item)
    return formatted


# =============================================================================
# Per-Kind Overrides
# =============================================================================

_Override = Callable[[Dict[str, Any], Dict[str, Any], Iterable[Element], EngineConfig], None]


def _no_override(result, props, screen_elements, config) -> None:
    return None


def _text_input(result, props, screen_elements, config) -> None:
    result["input-type"] = props.get("input-type") or config.default_input_type


def _selection(result, props, screen_elements, config) -> None:
    if props.get("data-source") is not None:
        result["data-source"] = format_options(props["data-source"])


def _navigation_list(result, props, screen_elements, config) -> None:
    if props.get("data-source") is not None:
        result["data-source"] = format_navigation_options(props["data-source"], config)


def _cta_button(result, props, screen_elements, config) -> None:
    action_type = props.get("action-type") or config.default_navigation_action
    result["type"] = EXTERNAL_BUTTON_TYPE
    result["on-click-action"] = {
        "name": action_type,
        "next": {
            "type": "url" if action_type == "externalLink" else "screen",
            "name": props.get("target") or "",
        },
    }


def _is_visible_field(field_name: str, screen_elements: Iterable[Element]) -> bool:
    # Field names reach the document sanitized, so match on that form
    wanted = sanitize_identifier(field_name)
    if not wanted:
        return False
    for el in screen_elements:
        if sanitize_identifier(el.properties.get("name")) == wanted:
            return el.visibility is not False
    return False


def _footer(result, props, screen_elements, config) -> None:
    action = props.get("on-click-action") or props.get("on_click_action")
    if not isinstance(action, dict):
        action = {"name": config.default_footer_action, "payload": {}}

    raw_payload = action.get("payload")
    payload: Dict[str, Any] = {}
    if isinstance(raw_payload, dict):
        elements = list(screen_elements)
        for key, value in raw_payload.items():
            field_name = form_field_reference(value)
            if field_name is not None and not _is_visible_field(field_name, elements):
                logger.debug("Dropping footer payload %r: field %r is hidden or missing", key, field_name)
                continue
            if field_name is not None:
                payload[key] = f"${{form.{sanitize_identifier(field_name)}}}"
                continue
            payload[key] = copy.deepcopy(value)

    formatted: Dict[str, Any] = {"name": action.get("name") or config.default_footer_action}
    if isinstance(action.get("next"), dict):
        formatted["next"] = copy.deepcopy(action["next"])
    formatted["payload"] = payload
    result["on-click-action"] = formatted


def _image(result, props, screen_elements, config) -> None:
    if props.get("url") is not None:
        result["url"] = props["url"]
    alt_text = props.get("alt_text") or props.get("altText")
    if alt_text is not None:
        result["alt_text"] = alt_text


KIND_OVERRIDES: Dict[ElementKind, _Override] = {
    ElementKind.TEXT_HEADING: _no_override,
    ElementKind.TEXT_SUBHEADING: _no_override,
    ElementKind.TEXT_BODY: _no_override,
    ElementKind.TEXT_CAPTION: _no_override,
    ElementKind.IMAGE: _image,
    ElementKind.EMBEDDED_LINK: _no_override,
    ElementKind.TEXT_INPUT: _text_input,
    ElementKind.TEXT_AREA: _no_override,
    ElementKind.RADIO_BUTTONS_GROUP: _selection,
    ElementKind.DROPDOWN: _selection,
    ElementKind.CHECKBOX_GROUP: _selection,
    ElementKind.DATE_PICKER: _no_override,
    ElementKind.PHOTO_PICKER: _no_override,
    ElementKind.DOCUMENT_PICKER: _no_override,
    ElementKind.IF_ELSE: _no_override,
    ElementKind.NAVIGATION_LIST: _navigation_list,
    ElementKind.FORM: _no_override,
    ElementKind.FOOTER: _footer,
    ElementKind.CTA_BUTTON: _cta_button,
}


# =============================================================================
# Pass-Through Filtering
# =============================================================================


def _is_passed_through(
    key: str,
    kind: Optional[ElementKind],
    props: Dict[str, Any],
    config: EngineConfig,
) -> bool:
    if key in INTERNAL_KEYS or key in _GENERIC_KEYS:
        return False
    if kind is None:
        return True
    if key in CONSUMED_KEYS.get(kind, frozenset()):
        return False
    if key in UNSUPPORTED_KEYS.get(kind, frozenset()):
        return False
    if kind is ElementKind.TEXT_INPUT and key == "pattern":
        input_type = props.get("input-type") or config.default_input_type
        return input_type in config.pattern_input_types
    return True


# =============================================================================
# Entry Point
# =============================================================================


def format_element(
    element: Element,
    screen_elements: Iterable[Element] = (),
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """Produce the external field object for one element.

    Args:
        element: The element to format.
        screen_elements: Every element of the owning screen (visible or not);
            the footer uses them to prune `${form.X}` payload references.
        config: Engine config; defaults to the cached engine config.

    Returns:
        A new dict; the element is not modified.
    """
    config = config or get_engine_config()
    props = element.properties if isinstance(element.properties, dict) else {}
    kind = parse_kind(element.type)

    result: Dict[str, Any] = {"type": element.type}
    if element.conditional_visibility:
        result["visible"] = element.conditional_visibility

    name = sanitize_identifier(props.get("name"))
    if name:
        result["name"] = name
    if props.get("label"):
        result["label"] = props["label"]
    if props.get("required") is not None:
        result["required"] = props["required"]

    if kind is None:
        logger.debug("Unsupported element kind %r passed through", element.type)
    else:
        KIND_OVERRIDES[kind](result, props, screen_elements, config)

    for key, value in props.items():
        if key in result:
            continue
        if _is_passed_through(key, kind, props, config):
            result[key] = copy.deepcopy(value)

    return result
