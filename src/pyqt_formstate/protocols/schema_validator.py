"""
Schema validator contract.

A schema validator is the pluggable capability the form controller delegates
correctness checks to. Any shape-description system (pydantic models, plain
callables, hand-written rule tables) can back a form by implementing this ABC.

Design Philosophy:
- The controller never inspects the schema, only the ValidationResult
- Validators are pure: same candidate in, same result out
- Errors are keyed by dotted field path ("address.city", "tags.0")
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

from pyqt_formstate.exceptions import ValidationError


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one candidate value.

    Attributes:
        value: Normalized value accepted by the schema (None when rejected)
        errors: Mapping of dotted field path to human-readable message
    """
    value: Any = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def accept(cls, value: Any) -> 'ValidationResult':
        return cls(value=value)

    @classmethod
    def reject(cls, errors: Dict[str, str]) -> 'ValidationResult':
        return cls(value=None, errors=dict(errors))

    def raise_for_errors(self) -> Any:
        """Return the normalized value, or raise ValidationError if rejected."""
        if self.errors:
            raise ValidationError(self.errors)
        return self.value


class SchemaValidator(ABC):
    """
    ABC for schema-backed validators.

    Implementations must not mutate the candidate. Raising from validate()
    is treated by the controller as a validator fault, never as a field error.
    """

    @abstractmethod
    def validate(self, candidate: Dict[str, Any]) -> ValidationResult:
        """
        Validate a candidate form value.

        Args:
            candidate: Current form values (nested dicts keyed by field name)

        Returns:
            ValidationResult with the normalized value or per-field errors
        """
        pass
