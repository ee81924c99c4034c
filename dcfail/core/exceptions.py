"""
Exception Hierarchy for dcfail.

The classification core never raises: every wire code resolves to a cause.
The exceptions below belong to the layers around it (policy table checks,
configuration loading, command-line input parsing).

Each exception includes:
- error_code: Unique identifier for documentation lookup (e.g., "DCF-CFG-001")
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue

Exception Hierarchy
-------------------
    DcFailError (base)
    ├── FailCauseTableError
    └── ValidationError
        ├── ConfigValidationError
        └── WireCodeError
"""

from typing import Any, List, Optional


class DcFailError(Exception):
    """
    Base exception for all dcfail errors.

    Example
    -------
        try:
            config = load_config(path)
        except DcFailError as e:
            logger.error(f"Setup failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    # Default error info - subclasses should override
    error_code: str = "DCF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        """Initialize DcFailError with helpful information.

        Args:
            message: Human-readable error message
            error_code: Unique identifier (e.g., "DCF-CFG-001")
            why_it_happened: Explanation of root cause
            how_to_fix: List of actionable fix suggestions
        """
        super().__init__(message)

        # Override class defaults if provided
        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)


class FailCauseTableError(DcFailError):
    """
    Raised when the fail cause policy table does not cover every cause.

    Detected while ``dcfail.core.fail_cause`` is imported, so a cause added
    without a policy decision never reaches a caller.
    """

    error_code = "DCF-TBL-001"
    why_it_happened = (
        "A FailCause member was declared without a matching entry in "
        "FAIL_CAUSE_POLICIES"
    )
    how_to_fix = [
        "Add a FailPolicy entry for every new FailCause member",
        "Decide explicitly whether the cause is permanent and event-loggable",
    ]

    def __init__(self, missing: List[str]) -> None:
        self.missing = missing
        super().__init__(f"No policy declared for: {', '.join(missing)}")


class ValidationError(DcFailError):
    """Raised when input data or configuration fails validation."""

    error_code = "DCF-VAL-000"
    why_it_happened = "Validation failed for input data or configuration"
    how_to_fix = [
        "Check the error message for specific validation failures",
        "Review the expected format or value constraints",
    ]


class ConfigValidationError(ValidationError):
    """
    Raised when configuration validation fails.

    Attributes
    ----------
    field : str
        The configuration field that failed validation
    value : any
        The invalid value
    """

    error_code = "DCF-CFG-001"
    why_it_happened = (
        "A configuration value is invalid. "
        "The dcfail.yaml file may have incorrect settings"
    )
    how_to_fix = [
        "Check dcfail.yaml for syntax errors",
        "Verify the value type matches what's expected",
        "Unset DCFAIL_* environment variables to fall back to defaults",
    ]

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class WireCodeError(ValidationError):
    """Raised when text supplied as a wire code is not an integer literal."""

    error_code = "DCF-VAL-002"
    why_it_happened = "The wire code could not be parsed as an integer"
    how_to_fix = [
        "Pass a decimal value such as 36 or -5",
        "Or a hex value such as 0x24",
    ]

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Not an integer wire code: {text!r}")
