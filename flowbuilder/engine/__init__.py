"""
flowbuilder/engine - Bidirectional transformation between the editor's
screen graph and the external flow document.

- Types: Screen, Element, ElementKind and the kind category sets
- Compiler: internal screens -> external document (never raises)
- Decompiler: external document -> internal screens (never raises)
- Loader: picks builder state or document from a persisted record
- Editor: copy-on-write edits that enforce per-screen constraints

Usage:
    from flowbuilder.engine import (
        compile_flow,
        decompile_document,
        load_flow_record,
        editor,
    )

    document = compile_flow(screens)
    screens = decompile_document(document)
    screens = load_flow_record({"data": document, "builder_state": None})
"""

from . import editor
from .types import (
    DISPLAY_KINDS,
    INPUT_KINDS,
    LOGIC_KINDS,
    PICKER_KINDS,
    Element,
    ElementKind,
    Screen,
    screens_from_builder_state,
    screens_to_builder_state,
)

from .bindings import (
    find_data_references,
    sanitize_identifier,
)

from .formatter import format_element

from .assembler import (
    ScreenPartition,
    assemble_screen,
    external_screen_id,
    partition_elements,
)

from .compiler import compile_flow

from .decompiler import (
    decompile_document,
    decompile_screen,
)

from .loader import (
    FromBuilderState,
    FromDocument,
    LoadSource,
    classify_flow_record,
    load_flow_record,
    parse_document_text,
)

__all__ = [
    # Types
    "Element",
    "ElementKind",
    "Screen",
    "DISPLAY_KINDS",
    "INPUT_KINDS",
    "LOGIC_KINDS",
    "PICKER_KINDS",
    "screens_from_builder_state",
    "screens_to_builder_state",
    # Bindings
    "find_data_references",
    "sanitize_identifier",
    # Forward
    "format_element",
    "ScreenPartition",
    "partition_elements",
    "assemble_screen",
    "external_screen_id",
    "compile_flow",
    # Reverse
    "decompile_document",
    "decompile_screen",
    # Loader
    "FromBuilderState",
    "FromDocument",
    "LoadSource",
    "classify_flow_record",
    "load_flow_record",
    "parse_document_text",
    # Editor
    "editor",
]
