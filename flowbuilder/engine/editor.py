"""
editor.py - Copy-on-write edits of the internal flow graph.

Every operation takes the current screens and returns a new tuple; the
input is never modified, so a rejected edit (a raised ConstraintError)
leaves the caller's state exactly as it was.

Usage:
    from flowbuilder.engine import editor

    screens = editor.initial_screens()
    screens = editor.add_element(screens, screens[0].id, "TextInput")
    screens = editor.add_element(screens, screens[0].id, "Footer")
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from flowbuilder.validator.errors import (
    ConstraintError,
    DuplicateElementNameError,
    FormLimitError,
    LastScreenRemovalError,
    PickerLimitError,
    ValidationFinding,
)

from ._ids import generate_element_id, generate_id, generate_option_id, generate_screen_id
from .bindings import sanitize_identifier
from .types import (
    PICKER_KINDS,
    SELECTION_KINDS,
    Element,
    ElementKind,
    Screen,
    is_static_options,
    parse_kind,
)

logger = logging.getLogger(__name__)

Screens = Tuple[Screen, ...]

UP = "up"
DOWN = "down"


def _reject(cls, screen: Screen, message: str, fix_action: str, element_id: Optional[str] = None) -> ConstraintError:
    finding = ValidationFinding(
        cls.code,
        f"screen '{screen.id}':",
        message,
        fix_action,
        screen_id=screen.id,
        element_id=element_id,
    )
    return cls(message, [finding])


def _replace_screen(screens: Sequence[Screen], screen_id: str, fn: Callable[[Screen], Screen]) -> Screens:
    return tuple(fn(s) if s.id == screen_id else s for s in screens)


# =============================================================================
# Defaults
# =============================================================================


def default_properties(element_type: str) -> Dict[str, Any]:
    """Type-specific starting properties for a newly added element."""
    kind = parse_kind(element_type)

    if kind is ElementKind.TEXT_INPUT:
        return {"input-type": "text", "label": "New Input", "required": True}
    if kind is ElementKind.TEXT_AREA:
        return {"label": "Message", "required": True}
    if kind is ElementKind.FOOTER:
        return {"label": "Continue", "on-click-action": {"name": "complete", "payload": {}}}
    if element_type in SELECTION_KINDS:
        return {"label": "Select Option", "data-source": [{"id": "opt_1", "title": "Option 1"}]}
    if kind is ElementKind.DATE_PICKER:
        return {"label": "Select Date"}
    if kind is ElementKind.PHOTO_PICKER:
        return {
            "label": "Upload Photo",
            "description": "Please capture or select an image",
            "photo-source": "camera_gallery",
            "max-file-size-kb": 25600,
            "min-uploaded-photos": 0,
            "max-uploaded-photos": 30,
        }
    if kind is ElementKind.DOCUMENT_PICKER:
        return {
            "label": "Upload Document",
            "description": "Please upload the required files",
            "max-file-size-kb": 25600,
            "min-uploaded-documents": 0,
            "max-uploaded-documents": 30,
            "allowed-mime-types": ["application/pdf", "image/jpeg", "image/png"],
        }
    if kind is ElementKind.IF_ELSE:
        return {"condition": "data.field == true", "trueDestination": "", "falseDestination": ""}
    if kind is ElementKind.NAVIGATION_LIST:
        return {
            "label": "Menu",
            "data-source": [{"id": "nav_1", "title": "Item 1", "onSelectAction": "navigate"}],
        }
    if kind is ElementKind.IMAGE:
        return {"url": "", "altText": "Image"}
    if kind in (
        ElementKind.TEXT_HEADING,
        ElementKind.TEXT_SUBHEADING,
        ElementKind.TEXT_BODY,
        ElementKind.TEXT_CAPTION,
    ):
        return {"text": f"New {element_type.replace('Text', '')}"}
    if kind is ElementKind.EMBEDDED_LINK:
        return {"text": "Click here", "url": "https://"}
    if kind is ElementKind.CTA_BUTTON:
        return {"label": "Click Me", "action-type": "navigate", "target": ""}
    return {"label": "New Element"}


def new_element(element_type: str) -> Element:
    """Create an element with a generated id and default properties."""
    return Element(
        id=generate_element_id(),
        type=element_type,
        name=f"{element_type.lower()}_{generate_id()}",
        properties=default_properties(element_type),
        visibility=True,
    )


# =============================================================================
# Screens
# =============================================================================


def initial_screens() -> Screens:
    """The single empty screen a new flow starts with."""
    return (Screen(id="screen_one", title="Welcome"),)


def add_screen(screens: Sequence[Screen], title: Optional[str] = None) -> Screens:
    """Append a new empty screen."""
    screen = Screen(id=generate_screen_id(), title=title or f"Screen {len(screens) + 1}")
    return tuple(screens) + (screen,)


def remove_screen(screens: Sequence[Screen], screen_id: str) -> Screens:
    """Remove a screen and all of its elements.

    Raises:
        LastScreenRemovalError: If it is the only screen left.
    """
    if len(screens) <= 1:
        target = screens[0] if screens else Screen(id=screen_id, title="")
        raise _reject(
            LastScreenRemovalError,
            target,
            "Cannot remove the only screen",
            "add another screen before removing this one",
        )
    return tuple(s for s in screens if s.id != screen_id)


def update_screen(screens: Sequence[Screen], updated: Screen) -> Screens:
    """Replace the screen with the same id."""
    return _replace_screen(screens, updated.id, lambda _: updated)


# =============================================================================
# Elements
# =============================================================================


def _check_addition(screen: Screen, element_type: str) -> None:
    if element_type == ElementKind.FORM.value:
        if any(el.type == ElementKind.FORM.value for el in screen.elements):
            raise _reject(
                FormLimitError,
                screen,
                "Only one Form allowed per screen",
                "reuse the existing Form",
            )
    if element_type in PICKER_KINDS:
        if any(el.type in PICKER_KINDS for el in screen.elements):
            label = "Photo" if element_type == ElementKind.PHOTO_PICKER.value else "Document"
            raise _reject(
                PickerLimitError,
                screen,
                f"You can only have one {label} Picker per screen.",
                "keep a single photo or document picker on the screen",
            )


def add_element(screens: Sequence[Screen], screen_id: str, element_type: str) -> Screens:
    """Append a new element of `element_type` to a screen.

    Raises:
        FormLimitError: The screen already has a Form.
        PickerLimitError: The screen already has a photo or document picker.
    """
    for screen in screens:
        if screen.id == screen_id:
            _check_addition(screen, element_type)

    element = new_element(element_type)
    logger.debug("Adding %s element %s to screen %s", element_type, element.id, screen_id)
    return _replace_screen(
        screens,
        screen_id,
        lambda s: dataclasses.replace(s, elements=s.elements + (element,)),
    )


def remove_element(screens: Sequence[Screen], screen_id: str, element_id: str) -> Screens:
    """Remove one element from a screen."""
    return _replace_screen(
        screens,
        screen_id,
        lambda s: dataclasses.replace(s, elements=tuple(el for el in s.elements if el.id != element_id)),
    )


def move_element(screens: Sequence[Screen], screen_id: str, element_id: str, direction: str) -> Screens:
    """Swap an element with its neighbour ("up" or "down").

    Moving past either end is a no-op.
    """

    def move(screen: Screen) -> Screen:
        elements = list(screen.elements)
        index = next((i for i, el in enumerate(elements) if el.id == element_id), -1)
        if index == -1:
            return screen
        if direction == UP and index > 0:
            elements[index - 1], elements[index] = elements[index], elements[index - 1]
        elif direction == DOWN and index < len(elements) - 1:
            elements[index], elements[index + 1] = elements[index + 1], elements[index]
        else:
            return screen
        return dataclasses.replace(screen, elements=tuple(elements))

    return _replace_screen(screens, screen_id, move)


def update_element(screens: Sequence[Screen], updated: Element) -> Screens:
    """Replace the element with the same id, wherever it lives.

    Raises:
        DuplicateElementNameError: Another element on the same screen
            already uses the updated element's field name.
    """
    name = sanitize_identifier(updated.field_name)
    for screen in screens:
        if screen.find_element(updated.id) is None:
            continue
        if name and any(
            el.id != updated.id and sanitize_identifier(el.properties.get("name")) == name
            for el in screen.elements
        ):
            raise _reject(
                DuplicateElementNameError,
                screen,
                f'The name "{name}" is already used in this screen.',
                "choose a distinct field name",
                element_id=updated.id,
            )

    return tuple(
        dataclasses.replace(
            s,
            elements=tuple(updated if el.id == updated.id else el for el in s.elements),
        )
        for s in screens
    )


def update_properties(element: Element, **changes: Any) -> Element:
    """Return a copy of `element` with property keys replaced."""
    return dataclasses.replace(element, properties={**element.properties, **changes})


# =============================================================================
# Options
# =============================================================================


def _options(element: Element) -> List[Dict[str, Any]]:
    source = element.properties.get("data-source")
    return [dict(opt) for opt in source if isinstance(opt, dict)] if is_static_options(source) else []


def add_option(element: Element, title: Optional[str] = None) -> Element:
    """Append a static option; a dynamic binding is replaced by a list."""
    options = _options(element)
    option: Dict[str, Any] = {"id": generate_option_id(), "title": title or f"Option {len(options) + 1}"}
    if element.type == ElementKind.NAVIGATION_LIST.value:
        option["onSelectAction"] = "navigate"
    return update_properties(element, **{"data-source": options + [option]})


def update_option(element: Element, option_id: str, **changes: Any) -> Element:
    """Return a copy of `element` with one static option updated."""
    options = [{**opt, **changes} if opt.get("id") == option_id else opt for opt in _options(element)]
    return update_properties(element, **{"data-source": options})


def remove_option(element: Element, option_id: str) -> Element:
    """Return a copy of `element` without the given static option."""
    options = [opt for opt in _options(element) if opt.get("id") != option_id]
    return update_properties(element, **{"data-source": options})


def set_dynamic_source(element: Element, binding: str) -> Element:
    """Switch the data-source to a runtime binding such as `${data.options}`."""
    return update_properties(element, **{"data-source": binding})
