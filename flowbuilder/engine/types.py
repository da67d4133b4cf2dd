"""
types.py - Dataclasses for the internal flow graph.

These types are the editor-side representation of a flow: an ordered
sequence of Screens, each holding an ordered sequence of Elements. The
compiler turns them into the external document; the decompiler rebuilds
them from one. Values are frozen; edits produce new instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from ._ids import generate_element_id, generate_option_id, generate_screen_id


class ElementKind(str, Enum):
    """Closed set of element kinds, valued by their internal type tag."""
    # Display
    TEXT_HEADING = "TextHeading"
    TEXT_SUBHEADING = "TextSubheading"
    TEXT_BODY = "TextBody"
    TEXT_CAPTION = "TextCaption"
    IMAGE = "Image"
    EMBEDDED_LINK = "EmbeddedLink"
    # Inputs
    TEXT_INPUT = "TextInput"
    TEXT_AREA = "TextArea"
    RADIO_BUTTONS_GROUP = "RadioButtonsGroup"
    DROPDOWN = "Dropdown"
    CHECKBOX_GROUP = "CheckboxGroup"
    DATE_PICKER = "DatePicker"
    PHOTO_PICKER = "PhotoPicker"
    DOCUMENT_PICKER = "DocumentPicker"
    # Logic
    IF_ELSE = "IfElse"
    NAVIGATION_LIST = "NavigationList"
    # Structure & actions
    FORM = "Form"
    FOOTER = "Footer"
    CTA_BUTTON = "CTABtn"


# External type tag for the internal CTA button
EXTERNAL_BUTTON_TYPE = "Button"


def _values(*kinds: ElementKind) -> FrozenSet[str]:
    return frozenset(k.value for k in kinds)


DISPLAY_KINDS = _values(
    ElementKind.TEXT_HEADING,
    ElementKind.TEXT_SUBHEADING,
    ElementKind.TEXT_BODY,
    ElementKind.TEXT_CAPTION,
    ElementKind.IMAGE,
    ElementKind.EMBEDDED_LINK,
)

INPUT_KINDS = _values(
    ElementKind.TEXT_INPUT,
    ElementKind.TEXT_AREA,
    ElementKind.RADIO_BUTTONS_GROUP,
    ElementKind.DROPDOWN,
    ElementKind.CHECKBOX_GROUP,
    ElementKind.DATE_PICKER,
    ElementKind.PHOTO_PICKER,
    ElementKind.DOCUMENT_PICKER,
)

LOGIC_KINDS = _values(
    ElementKind.NAVIGATION_LIST,
    ElementKind.CTA_BUTTON,
    ElementKind.IF_ELSE,
)

PICKER_KINDS = _values(ElementKind.PHOTO_PICKER, ElementKind.DOCUMENT_PICKER)

# Kinds whose `data-source` is a list of {id, title} options
SELECTION_KINDS = _values(
    ElementKind.RADIO_BUTTONS_GROUP,
    ElementKind.CHECKBOX_GROUP,
    ElementKind.DROPDOWN,
)


def parse_kind(type_tag: Any) -> Optional[ElementKind]:
    """Resolve a type tag to an ElementKind, or None for unsupported tags."""
    try:
        return ElementKind(type_tag)
    except ValueError:
        return None


def is_static_options(value: Any) -> bool:
    """True when a data-source is a static option list (not a binding string)."""
    return isinstance(value, list)


# =============================================================================
# Graph Types
# =============================================================================


@dataclass(frozen=True)
class Element:
    """One component placed on a Screen.

    `name` is the editor's internal handle; the field name that reaches the
    external document lives in `properties["name"]`.
    """
    id: str
    type: str
    name: str = ""
    properties: Dict[str, Any] = field(default_factory=dict)
    visibility: bool = True
    conditional_visibility: Optional[str] = None

    @property
    def kind(self) -> Optional[ElementKind]:
        return parse_kind(self.type)

    @property
    def field_name(self) -> Optional[str]:
        """The input's form field name, if any."""
        value = self.properties.get("name")
        return value if isinstance(value, str) and value else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted builder-state shape."""
        result: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "properties": dict(self.properties),
            "visibility": self.visibility,
        }
        if self.conditional_visibility:
            result["conditionalVisibility"] = self.conditional_visibility
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Element":
        """Create an Element from builder state, backfilling a missing id."""
        properties = data.get("properties")
        visibility = data.get("visibility")
        conditional = data.get("conditionalVisibility")
        return cls(
            id=data.get("id") or generate_element_id(),
            type=str(data.get("type", "")),
            name=data.get("name") or "",
            properties=backfill_option_ids(dict(properties) if isinstance(properties, dict) else {}),
            visibility=visibility if isinstance(visibility, bool) else True,
            conditional_visibility=conditional if isinstance(conditional, str) and conditional else None,
        )


@dataclass(frozen=True)
class Screen:
    """One page of a multi-step flow."""
    id: str
    title: str
    elements: Tuple[Element, ...] = ()
    terminal: Optional[bool] = None
    data: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def visible_elements(self) -> Tuple[Element, ...]:
        """Elements that reach the external document."""
        return tuple(el for el in self.elements if el.visibility is not False)

    def has_footer(self) -> bool:
        return any(el.type == ElementKind.FOOTER.value for el in self.visible_elements())

    def is_terminal_eligible(self) -> bool:
        """A screen can end the flow if flagged terminal or it has a footer."""
        return bool(self.terminal) or self.has_footer()

    def find_element(self, element_id: str) -> Optional[Element]:
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted builder-state shape."""
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "elements": [el.to_dict() for el in self.elements],
        }
        if self.terminal is not None:
            result["terminal"] = self.terminal
        if self.data:
            result["data"] = dict(self.data)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Screen":
        """Create a Screen from builder state, backfilling missing ids."""
        raw_elements = data.get("elements")
        elements = tuple(
            Element.from_dict(el)
            for el in (raw_elements if isinstance(raw_elements, list) else [])
            if isinstance(el, dict)
        )
        terminal = data.get("terminal")
        screen_data = data.get("data")
        return cls(
            id=data.get("id") or generate_screen_id(),
            title=str(data.get("title") or ""),
            elements=elements,
            terminal=terminal if isinstance(terminal, bool) else None,
            data=dict(screen_data) if isinstance(screen_data, dict) else {},
        )


# =============================================================================
# Helpers
# =============================================================================


def backfill_option_ids(properties: Dict[str, Any]) -> Dict[str, Any]:
    """Return properties whose static `data-source` options all carry an id.

    Dynamic binding strings are returned unchanged.
    """
    options = properties.get("data-source")
    if not is_static_options(options):
        return properties
    if all(isinstance(opt, dict) and opt.get("id") for opt in options):
        return properties

    filled: List[Any] = []
    for opt in options:
        if isinstance(opt, dict) and not opt.get("id"):
            opt = {**opt, "id": generate_option_id()}
        filled.append(opt)
    return {**properties, "data-source": filled}


def screens_from_builder_state(state: Any) -> Tuple[Screen, ...]:
    """Parse persisted builder state (a list of screen dicts)."""
    if not isinstance(state, list):
        return ()
    return tuple(Screen.from_dict(s) for s in state if isinstance(s, dict))


def screens_to_builder_state(screens: Tuple[Screen, ...]) -> List[Dict[str, Any]]:
    """Serialize screens to the persisted builder-state shape."""
    return [screen.to_dict() for screen in screens]
