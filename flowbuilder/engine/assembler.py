"""
assembler.py - Order a screen's elements into the external layout tree.

The external format nests every input under a single Form node and wants
the footer as the form's terminal action when a form exists. Assembly is a
fixed sequence:

1. display elements before the pivot
2. the synthesized Form (inputs, then the footer as last child)
3. logic/navigation elements
4. display elements after the pivot
5. a standalone footer when no Form is emitted

The pivot is the explicit Form element, else the first input element.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flowbuilder.config.engine_config import EngineConfig, get_engine_config

from .bindings import sanitize_identifier
from .formatter import format_element
from .types import (
    INPUT_KINDS,
    LOGIC_KINDS,
    Element,
    ElementKind,
    Screen,
)

logger = logging.getLogger(__name__)

SINGLE_COLUMN_LAYOUT = "SingleColumnLayout"
DEFAULT_SCREEN_ID = "screen"

# Form properties the assembler writes itself
_FORM_OWN_KEYS = frozenset({"type", "name", "visible", "children", "id", "visibility", "conditionalVisibility"})


@dataclass(frozen=True)
class ScreenPartition:
    """Visible elements of a screen split into layout buckets."""
    before: Tuple[Element, ...] = ()
    inputs: Tuple[Element, ...] = ()
    logic: Tuple[Element, ...] = ()
    after: Tuple[Element, ...] = ()
    form: Optional[Element] = None
    footer: Optional[Element] = None

    @property
    def has_form(self) -> bool:
        """A Form node is emitted for an explicit form or any input."""
        return self.form is not None or bool(self.inputs)


def _pivot_index(elements: Sequence[Element]) -> Optional[int]:
    first_input: Optional[int] = None
    for i, el in enumerate(elements):
        if el.type == ElementKind.FORM.value:
            return i
        if first_input is None and el.type in INPUT_KINDS:
            first_input = i
    return first_input


def partition_elements(elements: Sequence[Element]) -> ScreenPartition:
    """Split already-visible elements into before/form-body/logic/after.

    Only the first Form and the first Footer are kept; later duplicates are
    ignored. Unsupported kinds are placed positionally like display elements.
    """
    pivot = _pivot_index(elements)

    before: List[Element] = []
    inputs: List[Element] = []
    logic: List[Element] = []
    after: List[Element] = []
    form: Optional[Element] = None
    footer: Optional[Element] = None

    for i, el in enumerate(elements):
        if el.type == ElementKind.FORM.value:
            if form is None:
                form = el
            else:
                logger.debug("Ignoring extra Form element %s", el.id)
        elif el.type == ElementKind.FOOTER.value:
            if footer is None:
                footer = el
            else:
                logger.debug("Ignoring extra Footer element %s", el.id)
        elif el.type in INPUT_KINDS:
            inputs.append(el)
        elif el.type in LOGIC_KINDS:
            logic.append(el)
        elif pivot is None or i < pivot:
            before.append(el)
        else:
            after.append(el)

    return ScreenPartition(
        before=tuple(before),
        inputs=tuple(inputs),
        logic=tuple(logic),
        after=tuple(after),
        form=form,
        footer=footer,
    )


def _build_form_node(
    partition: ScreenPartition,
    children: List[Dict[str, Any]],
    config: EngineConfig,
) -> Dict[str, Any]:
    form = partition.form
    raw_name = form.properties.get("name") if form is not None else None
    node: Dict[str, Any] = {
        "type": ElementKind.FORM.value,
        "name": sanitize_identifier(raw_name) or sanitize_identifier(config.default_form_name),
    }
    if form is not None and form.conditional_visibility:
        node["visible"] = form.conditional_visibility
    if form is not None:
        for key, value in form.properties.items():
            if key not in _FORM_OWN_KEYS:
                node[key] = copy.deepcopy(value)
    node["children"] = children
    return node


def assemble_children(screen: Screen, config: Optional[EngineConfig] = None) -> List[Dict[str, Any]]:
    """Produce the ordered external `layout.children` for a screen."""
    config = config or get_engine_config()
    partition = partition_elements(screen.visible_elements())

    def fmt(el: Element) -> Dict[str, Any]:
        return format_element(el, screen.elements, config)

    children: List[Dict[str, Any]] = [fmt(el) for el in partition.before]

    if partition.has_form:
        form_children = [fmt(el) for el in partition.inputs]
        if partition.footer is not None:
            form_children.append(fmt(partition.footer))
        children.append(_build_form_node(partition, form_children, config))

    children.extend(fmt(el) for el in partition.logic)
    children.extend(fmt(el) for el in partition.after)

    if partition.footer is not None and not partition.has_form:
        children.append(fmt(partition.footer))

    return children


def external_screen_id(screen: Screen) -> str:
    """Sanitized screen id, falling back to the sanitized title, then "screen".

    >>> external_screen_id(Screen(id="123", title="Step 2"))
    'Step'
    """
    screen_id = sanitize_identifier(screen.id)
    if not screen_id:
        screen_id = sanitize_identifier(screen.title) or DEFAULT_SCREEN_ID
        logger.debug("Screen id %r has no letters, emitting %r", screen.id, screen_id)
    return screen_id


def assemble_screen(screen: Screen, config: Optional[EngineConfig] = None) -> Dict[str, Any]:
    """Produce the external screen object for one internal Screen."""
    config = config or get_engine_config()
    terminal = screen.terminal if screen.terminal is not None else screen.has_footer()

    result: Dict[str, Any] = {
        "id": external_screen_id(screen),
        "title": screen.title,
        "terminal": terminal,
    }
    if screen.data:
        result["data"] = copy.deepcopy(screen.data)
    result["layout"] = {
        "type": SINGLE_COLUMN_LAYOUT,
        "children": assemble_children(screen, config),
    }
    return result
