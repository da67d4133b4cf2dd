# flowbuilder/validator/errors.py
"""Validation findings, result collection and the error taxonomy."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

# [FAIL] TYPE: location problem, then the fix on its own line
ERROR_TEMPLATE = "[FAIL] {error_type}: {location} {problem}\n  Fix: {fix_action}"


class ValidationFinding:
    """Structured validation finding."""

    def __init__(
        self,
        error_type: str,
        location: str,
        problem: str,
        fix_action: str,
        screen_id: Optional[str] = None,
        element_id: Optional[str] = None,
        variables: Sequence[str] = (),
    ):
        self.error_type = error_type
        self.location = location
        self.problem = problem
        self.fix_action = fix_action
        self.screen_id = screen_id
        self.element_id = element_id
        self.variables: Tuple[str, ...] = tuple(variables)

    def format(self) -> str:
        """Format finding message."""
        return ERROR_TEMPLATE.format(
            error_type=self.error_type,
            location=self.location,
            problem=self.problem,
            fix_action=self.fix_action,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "type": self.error_type,
            "location": self.location,
            "problem": self.problem,
            "fix_action": self.fix_action,
        }
        if self.screen_id is not None:
            result["screen_id"] = self.screen_id
        if self.element_id is not None:
            result["element_id"] = self.element_id
        if self.variables:
            result["variables"] = list(self.variables)
        return result

    def __repr__(self) -> str:
        return f"ValidationFinding({self.error_type!r}, {self.location!r}, {self.problem!r})"


class ValidationResult:
    """Collects validation errors and warnings in discovery order."""

    def __init__(self):
        self.errors: List[ValidationFinding] = []
        self.warnings: List[ValidationFinding] = []

    def add_error(self, error_type: str, location: str, problem: str, fix_action: str, **context: Any):
        """Record an error finding."""
        self.errors.append(ValidationFinding(error_type, location, problem, fix_action, **context))

    def add_warning(self, error_type: str, location: str, problem: str, fix_action: str, **context: Any):
        """Record a warning finding (reported, never raised)."""
        self.warnings.append(ValidationFinding(error_type, location, problem, fix_action, **context))

    def extend(self, other: "ValidationResult"):
        """Append the findings of another result."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def has_errors(self) -> bool:
        """True when at least one error was recorded."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """True when at least one warning was recorded."""
        return len(self.warnings) > 0

    def errors_of(self, error_type: str) -> List[ValidationFinding]:
        """Errors of one category, in discovery order."""
        return [e for e in self.errors if e.error_type == error_type]

    def first_failure(self, category_order: Sequence[str]) -> Optional["FlowValidationError"]:
        """Build the exception for the first category (in order) with errors."""
        for code in category_order:
            findings = self.errors_of(code)
            if findings:
                return error_for_findings(code, findings)
        return None

    def raise_first(self, category_order: Sequence[str]) -> None:
        """Raise the first failing category, if any."""
        error = self.first_failure(category_order)
        if error is not None:
            raise error

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready summary with counts and PASS/FAIL status."""
        return {
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "status": "FAIL" if self.has_errors() else "PASS",
        }


# =============================================================================
# Error Taxonomy
# =============================================================================


class FlowValidationError(Exception):
    """Base exception for flow graph and document violations."""

    code = "FlowValidation"

    def __init__(self, message: str, findings: Optional[List[ValidationFinding]] = None):
        self.findings: List[ValidationFinding] = list(findings or [])
        super().__init__(message)


class StructuralError(FlowValidationError):
    """Document or graph shape violation."""


class ReferentialError(FlowValidationError):
    """Dangling dynamic-binding reference."""


class ConstraintError(FlowValidationError):
    """Violated flow or screen constraint."""


class InvalidJsonError(StructuralError):
    code = "InvalidJson"


class MissingVersionError(StructuralError):
    code = "MissingVersion"


class InvalidScreensError(StructuralError):
    code = "InvalidScreens"


class MissingScreenFieldsError(StructuralError):
    code = "MissingScreenFields"


class InvalidLayoutChildrenError(StructuralError):
    code = "InvalidLayoutChildren"


class MissingDataBindingError(ReferentialError):
    code = "MissingDataBinding"

    @property
    def missing(self) -> List[Tuple[Optional[str], Optional[str], str]]:
        """Every (screen_id, element_id, variable) left undeclared."""
        return [
            (f.screen_id, f.element_id, var)
            for f in self.findings
            for var in f.variables
        ]


class EmptyFlowError(ConstraintError):
    code = "EmptyFlow"


class EmptyScreenError(ConstraintError):
    code = "EmptyScreen"


class NoTerminalScreenError(ConstraintError):
    code = "NoTerminalScreen"


class DuplicateElementNameError(ConstraintError):
    code = "DuplicateElementName"


class FormLimitError(ConstraintError):
    code = "FormLimitExceeded"


class PickerLimitError(ConstraintError):
    code = "PickerLimitExceeded"


class LastScreenRemovalError(ConstraintError):
    code = "LastScreenRemoval"


ERROR_CLASSES: Dict[str, Type[FlowValidationError]] = {
    cls.code: cls
    for cls in (
        InvalidJsonError,
        MissingVersionError,
        InvalidScreensError,
        MissingScreenFieldsError,
        InvalidLayoutChildrenError,
        MissingDataBindingError,
        EmptyFlowError,
        EmptyScreenError,
        NoTerminalScreenError,
        DuplicateElementNameError,
        FormLimitError,
        PickerLimitError,
        LastScreenRemovalError,
    )
}


def error_for_findings(code: str, findings: List[ValidationFinding]) -> FlowValidationError:
    """Wrap the findings of one category in its exception type."""
    cls = ERROR_CLASSES.get(code, FlowValidationError)
    message = "; ".join(f.problem for f in findings) or code
    return cls(message, findings)
