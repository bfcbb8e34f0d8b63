"""Form state exceptions."""

from typing import Dict, Optional


class FormStateError(Exception):
    """Base class for pyqt-formstate errors."""


class ValidationError(FormStateError):
    """Raised when a candidate value is rejected by its schema.

    Carries the per-field error mapping (dotted path -> message).
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            fields = ", ".join(sorted(self.errors)) or "<form>"
            message = f"Validation failed for: {fields}"
        super().__init__(message)


class ValidatorFault(FormStateError):
    """Raised when the schema validator itself fails (bad schema, crash)."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")
