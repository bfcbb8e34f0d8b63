"""Form state snapshot and validation trigger policy."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Union


class ValidationTrigger(Enum):
    """UI event that causes a field to be (re)validated."""
    ON_BLUR = "onBlur"
    ON_CHANGE = "onChange"
    ON_SUBMIT = "onSubmit"

    @classmethod
    def coerce(cls, value: Union['ValidationTrigger', str]) -> 'ValidationTrigger':
        """Accept the enum itself or spellings like "onBlur", "on_blur", "blur"."""
        if isinstance(value, cls):
            return value
        normalized = str(value).replace('_', '').lower()
        if not normalized.startswith('on'):
            normalized = f"on{normalized}"
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(
            f"Unknown validation trigger {value!r}. "
            f"Valid triggers: {[member.value for member in cls]}"
        )


@dataclass(frozen=True)
class FormState:
    """
    Immutable snapshot of a form, handed to the rendering layer.

    is_valid is true iff errors is empty after the most recent validation
    pass. errors reflect that pass, not necessarily the live values.
    Before the first pass errors is empty, so a fresh form reports
    is_valid=True even when its defaults would be rejected; call
    FormStateController.trigger() to check defaults up front.
    """
    values: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    touched: FrozenSet[str] = frozenset()
    dirty_fields: FrozenSet[str] = frozenset()
    is_submitting: bool = False
    is_validating: bool = False
    is_submitted: bool = False
    is_submit_successful: bool = False
    submit_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_dirty(self) -> bool:
        return bool(self.dirty_fields)

    def error_for(self, path: str) -> Any:
        """Message for one field path, or None."""
        return self.errors.get(path)
