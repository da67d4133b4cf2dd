"""
loader.py - Load a persisted flow record into internal screens.

A flow record carries two representations: the external document
(`data`) and, for flows saved by the editor, the internal `builder_state`.
The builder state wins whenever it is present; the document is the fallback
for flows that predate builder-state persistence.

Usage:
    from flowbuilder.engine.loader import classify_flow_record, load_flow_record

    source = classify_flow_record(record)   # FromBuilderState | FromDocument
    screens = load_flow_record(record)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

import yaml

from flowbuilder.validator.errors import InvalidJsonError

from .decompiler import decompile_document
from .types import Screen, screens_from_builder_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FromBuilderState:
    """Record had a saved internal representation."""
    screens: Tuple[Dict[str, Any], ...]


@dataclass(frozen=True)
class FromDocument:
    """Record only had the external document."""
    document: Dict[str, Any] = field(default_factory=dict)


LoadSource = Union[FromBuilderState, FromDocument]


def classify_flow_record(record: Any) -> LoadSource:
    """Decide which representation of a flow record to load from.

    Accepts a plain dict or any object with `builder_state` and `data`
    attributes (e.g. a FlowRecord model).
    """
    if isinstance(record, dict):
        builder_state = record.get("builder_state")
        document = record.get("data")
    else:
        builder_state = getattr(record, "builder_state", None)
        document = getattr(record, "data", None)

    if isinstance(builder_state, list) and builder_state:
        return FromBuilderState(screens=tuple(builder_state))
    return FromDocument(document=document if isinstance(document, dict) else {})


def load_source(source: LoadSource) -> Tuple[Screen, ...]:
    """Materialize internal screens from a classified source."""
    if isinstance(source, FromBuilderState):
        # Missing screen/element/option ids are backfilled while parsing
        return screens_from_builder_state(list(source.screens))
    return decompile_document(source.document)


def load_flow_record(record: Any) -> Tuple[Screen, ...]:
    """Load internal screens from a persisted flow record."""
    source = classify_flow_record(record)
    logger.debug("Loading flow record from %s", type(source).__name__)
    return load_source(source)


def parse_document_text(text: str) -> Dict[str, Any]:
    """Decode raw editor text into a document object.

    JSON is tried first; YAML (a JSON superset) is accepted as a fallback
    so hand-written documents can be pasted in either form.

    Raises:
        InvalidJsonError: If the text does not decode to an object.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as json_error:
        try:
            parsed = yaml.safe_load(text)
        except yaml.YAMLError:
            raise InvalidJsonError(f"Document is not valid JSON: {json_error}") from json_error

    if not isinstance(parsed, dict):
        raise InvalidJsonError("Document must be a JSON object")
    return parsed
