"""Base configuration for form state behavior.

Provides hooks for applications to customize controller defaults.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class FormStateConfig:
    """Process-wide defaults for form controllers.

    Applications can subclass this to provide custom configuration.

    Attributes:
        validation_trigger: When a field is validated for the first time
        revalidation_trigger: When an already-validated field is re-checked
        root_error_key: Error key used for form-level (non-field) errors
        validator_fault_message: Template for validator crashes, gets {error}
        background_cancel_wait_ms: Wait when superseding a background validation
    """

    validation_trigger: str = "onBlur"
    revalidation_trigger: str = "onChange"
    root_error_key: str = "root"
    validator_fault_message: str = "Validation could not be completed: {error}"
    background_cancel_wait_ms: int = 100


# Global config instance (set by application)
_form_config: Optional[FormStateConfig] = None


def set_form_config(config: Optional[FormStateConfig]) -> None:
    """Set the global form state configuration.

    Args:
        config: FormStateConfig instance, or None to restore defaults
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormStateConfig:
    """Get the current form state configuration.

    Returns:
        Current FormStateConfig or default if not set
    """
    if _form_config is None:
        return FormStateConfig()
    return _form_config
