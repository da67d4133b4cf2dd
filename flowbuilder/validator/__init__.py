"""
flowbuilder/validator - Validation of flow graphs and external documents.

Validators are the only raise points of the engine and run at explicit
checkpoints: before save/submit (graph) and before applying a hand-edited
document (document).

Usage:
    from flowbuilder.validator import validate_graph, validate_document

    validate_graph(screens)        # raises e.g. NoTerminalScreenError
    validate_document(document)    # raises e.g. MissingVersionError
"""

from .errors import (
    ConstraintError,
    DuplicateElementNameError,
    EmptyFlowError,
    EmptyScreenError,
    FlowValidationError,
    FormLimitError,
    InvalidJsonError,
    InvalidLayoutChildrenError,
    InvalidScreensError,
    LastScreenRemovalError,
    MissingDataBindingError,
    MissingScreenFieldsError,
    MissingVersionError,
    NoTerminalScreenError,
    PickerLimitError,
    ReferentialError,
    StructuralError,
    ValidationFinding,
    ValidationResult,
)
from .graph import (
    GRAPH_CATEGORY_ORDER,
    check_graph,
    check_screen_constraints,
    validate_graph,
)
from .document import (
    DOCUMENT_CATEGORY_ORDER,
    check_document,
    validate_document,
)
from .schema_check import check_document_schema

__all__ = [
    # Results
    "ValidationFinding",
    "ValidationResult",
    # Taxonomy
    "FlowValidationError",
    "StructuralError",
    "ReferentialError",
    "ConstraintError",
    "InvalidJsonError",
    "MissingVersionError",
    "InvalidScreensError",
    "MissingScreenFieldsError",
    "InvalidLayoutChildrenError",
    "MissingDataBindingError",
    "EmptyFlowError",
    "EmptyScreenError",
    "NoTerminalScreenError",
    "DuplicateElementNameError",
    "FormLimitError",
    "PickerLimitError",
    "LastScreenRemovalError",
    # Graph
    "GRAPH_CATEGORY_ORDER",
    "check_graph",
    "check_screen_constraints",
    "validate_graph",
    # Document
    "DOCUMENT_CATEGORY_ORDER",
    "check_document",
    "validate_document",
    "check_document_schema",
]
