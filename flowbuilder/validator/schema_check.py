"""
schema_check.py - JSON Schema check of an external document.

Complements the document validator with the finer points of the external
format (identifier patterns, layout type, action shapes). Findings are
reported as warnings; the command-line tool promotes them with --strict.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft7Validator

from .errors import ValidationResult

logger = logging.getLogger(__name__)

SCHEMA_VIOLATION = "SchemaViolation"

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "flow_document.schema.json"


@lru_cache(maxsize=1)
def load_document_schema() -> Dict[str, Any]:
    """Load the bundled flow document schema."""
    with open(_SCHEMA_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def check_document_schema(document: Any) -> ValidationResult:
    """Validate a document against the bundled Draft 7 schema.

    Returns:
        ValidationResult whose warnings hold one finding per schema error,
        ordered by document path.
    """
    result = ValidationResult()
    validator = Draft7Validator(load_document_schema())

    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
    for error in errors:
        path = ".".join(str(p) for p in error.absolute_path) or "root"
        result.add_warning(
            SCHEMA_VIOLATION,
            f"{path}:",
            error.message,
            "match the flow document schema",
        )

    if errors:
        logger.debug("Schema check found %d violation(s)", len(errors))
    return result
