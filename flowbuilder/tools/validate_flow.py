#!/usr/bin/env python3
"""
validate_flow.py - Flow document and flow graph validator

Validates a flow file from disk in one of two modes:

**Document mode (default)**
- `version` present, `screens` is a list
- every screen has id, title and layout with a children list
- every `${data.X}` reference is declared in the screen's data
- bundled JSON schema (identifier patterns, layout type, action shape),
  reported as warnings unless --strict

**Graph mode (--graph)**
- the file is a flow record (`builder_state` and/or `data`) or a bare
  builder-state list; it is loaded the way the editor loads it
- flow has screens, no screen is empty, some screen can end the flow
- dynamic bindings are declared, per-screen editor invariants hold

Exit Codes:
  0 - Validation passed
  1 - Validation failed
  2 - Fatal error (unreadable file, undecodable content)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from flowbuilder.engine.loader import load_flow_record, parse_document_text
from flowbuilder.validator import (
    FlowValidationError,
    ValidationFinding,
    ValidationResult,
    check_document,
    check_document_schema,
    check_graph,
)

logger = logging.getLogger(__name__)

# Exit codes per contract
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_FATAL_ERROR = 2


# ============================================================================
# Loading
# ============================================================================


def _read_record(text: str) -> Dict[str, Any]:
    """Decode graph-mode input into a flow record dict."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = yaml.safe_load(text)

    if isinstance(parsed, list):
        return {"builder_state": parsed}
    if isinstance(parsed, dict):
        if "builder_state" in parsed or "data" in parsed:
            return parsed
        # A bare document: load it through the reverse transform
        return {"data": parsed}
    raise ValueError("Flow file must contain an object or a list of screens")


def run_validation(path: Path, graph: bool = False, strict: bool = False) -> ValidationResult:
    """Validate one file and return the collected result.

    Raises:
        OSError: The file cannot be read.
        FlowValidationError, ValueError, yaml.YAMLError: The content cannot
            be decoded.
    """
    text = path.read_text(encoding="utf-8")

    if graph:
        screens = load_flow_record(_read_record(text))
        logger.debug("Loaded %d screen(s) from %s", len(screens), path)
        return check_graph(screens)

    document = parse_document_text(text)
    result = check_document(document)
    schema_result = check_document_schema(document)
    if strict:
        result.errors.extend(schema_result.warnings)
    else:
        result.extend(schema_result)
    return result


# ============================================================================
# Output
# ============================================================================


def _group(findings: List[ValidationFinding]) -> Dict[str, List[ValidationFinding]]:
    by_type: Dict[str, List[ValidationFinding]] = defaultdict(list)
    for finding in findings:
        by_type[finding.error_type].append(finding)
    return by_type


def print_warnings(result: ValidationResult) -> None:
    """Print warnings to stderr grouped by type."""
    if not result.has_warnings():
        return
    warnings_by_type = _group(result.warnings)

    print("\n", file=sys.stderr)
    print("=" * 70, file=sys.stderr)
    print("WARNINGS (schema guidelines, not errors):", file=sys.stderr)
    print("=" * 70, file=sys.stderr)

    for warn_type in sorted(warnings_by_type.keys()):
        warnings = warnings_by_type[warn_type]
        print(f"\n{warn_type} Warnings ({len(warnings)}):", file=sys.stderr)
        for warning in warnings:
            print(warning.format().replace("[FAIL]", "[WARN]"), file=sys.stderr)

    print("\nNote: Use --strict flag to treat warnings as errors.", file=sys.stderr)


def print_success(result: ValidationResult) -> None:
    """Print success message to stdout, including warnings if any."""
    print("Flow validation PASSED.")
    print_warnings(result)


def print_errors(result: ValidationResult) -> None:
    """Print errors and warnings to stderr grouped by type."""
    by_type = _group(result.errors)
    for error_type in sorted(by_type.keys()):
        errors = by_type[error_type]
        print(f"\n{error_type} Errors ({len(errors)}):", file=sys.stderr)
        print("=" * 70, file=sys.stderr)
        for error in errors:
            print(error.format(), file=sys.stderr)

    print_warnings(result)
    print(f"\nFlow validation FAILED ({len(result.errors)} errors).", file=sys.stderr)


def _fatal(message: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"status": "ERROR", "message": message}, indent=2))
    else:
        print(f"ERROR: {message}", file=sys.stderr)
    sys.exit(EXIT_FATAL_ERROR)


# ============================================================================
# CLI and Main
# ============================================================================


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Flow validator - check a flow document or flow graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0 - All validation checks passed
  1 - Validation failed
  2 - Fatal error (unreadable file, undecodable content)

Examples:
  flowbuilder-validate flow.json
  flowbuilder-validate --strict flow.json
  flowbuilder-validate --graph record.json --json
        """
    )

    parser.add_argument("path", type=Path, help="Flow document or flow record file")

    parser.add_argument(
        "--graph",
        action="store_true",
        help="Validate the internal graph (flow record or builder state) instead of the document"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat schema warnings as errors"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output machine-readable JSON"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = run_validation(args.path, graph=args.graph, strict=args.strict)
    except OSError as e:
        _fatal(f"Cannot read {args.path}: {e}", args.json)
    except (FlowValidationError, ValueError, yaml.YAMLError) as e:
        _fatal(f"Cannot decode {args.path}: {e}", args.json)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        sys.exit(EXIT_SUCCESS if not result.has_errors() else EXIT_VALIDATION_FAILED)
    elif result.has_errors():
        print_errors(result)
        sys.exit(EXIT_VALIDATION_FAILED)
    else:
        print_success(result)
        sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
