"""
Form state management.

FormStateController and supporting infrastructure for schema-bound
validation of structured form values.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .form_controller import FormStateController, FormControllerConfig, create_form_controller
    from .form_state import FormState, ValidationTrigger
    from .validation_runner import ValidationRunner, InlineValidationRunner, BackgroundValidationRunner
    from .validators import PydanticSchemaValidator, FunctionSchemaValidator, resolve_validator

_EXPORTS = {
    "FormStateController": ("pyqt_formstate.forms.form_controller", "FormStateController"),
    "FormControllerConfig": ("pyqt_formstate.forms.form_controller", "FormControllerConfig"),
    "create_form_controller": ("pyqt_formstate.forms.form_controller", "create_form_controller"),
    "FormState": ("pyqt_formstate.forms.form_state", "FormState"),
    "ValidationTrigger": ("pyqt_formstate.forms.form_state", "ValidationTrigger"),
    "ValidationRunner": ("pyqt_formstate.forms.validation_runner", "ValidationRunner"),
    "InlineValidationRunner": ("pyqt_formstate.forms.validation_runner", "InlineValidationRunner"),
    "BackgroundValidationRunner": ("pyqt_formstate.forms.validation_runner", "BackgroundValidationRunner"),
    "PydanticSchemaValidator": ("pyqt_formstate.forms.validators", "PydanticSchemaValidator"),
    "FunctionSchemaValidator": ("pyqt_formstate.forms.validators", "FunctionSchemaValidator"),
    "resolve_validator": ("pyqt_formstate.forms.validators", "resolve_validator"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())
