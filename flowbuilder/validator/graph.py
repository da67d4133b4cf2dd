"""
graph.py - Pre-submit validation of the internal flow graph.

Checks, in reporting order:
1. EmptyFlow            - the flow has no screens
2. EmptyScreen          - a screen has no elements
3. NoTerminalScreen     - no screen is terminal-eligible
4. MissingDataBinding   - a `${data.X}` reference has no declared key
5. DuplicateElementName, FormLimitExceeded, PickerLimitExceeded
                        - per-screen editor invariants

`check_graph` collects every finding; `validate_graph` raises the first
category that has any.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from flowbuilder.engine.bindings import find_data_references, sanitize_identifier
from flowbuilder.engine.types import PICKER_KINDS, Element, ElementKind, Screen

from .errors import (
    DuplicateElementNameError,
    EmptyFlowError,
    EmptyScreenError,
    FormLimitError,
    MissingDataBindingError,
    NoTerminalScreenError,
    PickerLimitError,
    ValidationResult,
)

logger = logging.getLogger(__name__)

GRAPH_CATEGORY_ORDER: Tuple[str, ...] = (
    EmptyFlowError.code,
    EmptyScreenError.code,
    NoTerminalScreenError.code,
    MissingDataBindingError.code,
    DuplicateElementNameError.code,
    FormLimitError.code,
    PickerLimitError.code,
)


def _element_label(el: Element) -> str:
    label = el.properties.get("label")
    return label if isinstance(label, str) and label else el.type


def missing_data_bindings(screen: Screen) -> List[Tuple[Element, List[str]]]:
    """Elements referencing `${data.X}` names the screen does not declare."""
    declared = screen.data or {}
    missing: List[Tuple[Element, List[str]]] = []
    for el in screen.elements:
        refs = find_data_references(el.properties)
        if el.conditional_visibility:
            refs.extend(v for v in find_data_references(el.conditional_visibility) if v not in refs)
        undeclared = [v for v in refs if v not in declared]
        if undeclared:
            missing.append((el, undeclared))
    return missing


def _check_data_bindings(screen: Screen, result: ValidationResult) -> None:
    for el, undeclared in missing_data_bindings(screen):
        result.add_error(
            MissingDataBindingError.code,
            f"screen '{screen.id}' element '{el.id}':",
            f'Screen "{screen.title}": Element "{_element_label(el)}" is missing data '
            f"declarations for: {', '.join(undeclared)}",
            f"declare {', '.join(undeclared)} in the screen's data map",
            screen_id=screen.id,
            element_id=el.id,
            variables=undeclared,
        )


def check_screen_constraints(screen: Screen, result: ValidationResult) -> None:
    """Check the per-screen invariants (unique names, one form, one picker).

    Names are compared as they reach the document, after sanitizing, so
    `phone1` and `phone2` collide.
    """
    seen_names = set()
    for el in screen.elements:
        name = sanitize_identifier(el.field_name)
        if not name:
            continue
        if name in seen_names:
            result.add_error(
                DuplicateElementNameError.code,
                f"screen '{screen.id}' element '{el.id}':",
                f'The name "{name}" is already used in this screen.',
                "give every field on the screen a distinct name",
                screen_id=screen.id,
                element_id=el.id,
            )
        seen_names.add(name)

    forms = [el for el in screen.elements if el.type == ElementKind.FORM.value]
    if len(forms) > 1:
        result.add_error(
            FormLimitError.code,
            f"screen '{screen.id}':",
            "Only one Form allowed per screen",
            "remove the extra Form elements",
            screen_id=screen.id,
            element_id=forms[1].id,
        )

    pickers = [el for el in screen.elements if el.type in PICKER_KINDS]
    if len(pickers) > 1:
        result.add_error(
            PickerLimitError.code,
            f"screen '{screen.id}':",
            "Only one PhotoPicker or DocumentPicker allowed per screen",
            "keep a single photo or document picker on the screen",
            screen_id=screen.id,
            element_id=pickers[1].id,
        )


def check_graph(screens: Sequence[Screen]) -> ValidationResult:
    """Collect every graph finding without raising."""
    result = ValidationResult()

    if not screens:
        result.add_error(
            EmptyFlowError.code,
            "flow:",
            "Flow cannot be empty",
            "add at least one screen",
        )
        return result

    for screen in screens:
        if not screen.elements:
            result.add_error(
                EmptyScreenError.code,
                f"screen '{screen.id}':",
                f'Screen "{screen.title}" is empty. Please add elements.',
                "add elements to the screen or remove it",
                screen_id=screen.id,
            )

    if not any(screen.is_terminal_eligible() for screen in screens):
        result.add_error(
            NoTerminalScreenError.code,
            "flow:",
            "Flow has no terminal screen",
            "mark a screen as terminal or add a Footer to it",
        )

    for screen in screens:
        _check_data_bindings(screen, result)

    for screen in screens:
        check_screen_constraints(screen, result)

    logger.debug("Graph check found %d error(s) across %d screen(s)", len(result.errors), len(screens))
    return result


def validate_graph(screens: Sequence[Screen]) -> None:
    """Validate the internal graph before save or submit.

    Raises:
        FlowValidationError: The first failing category, carrying all of
            its findings.
    """
    check_graph(screens).raise_first(GRAPH_CATEGORY_ORDER)

