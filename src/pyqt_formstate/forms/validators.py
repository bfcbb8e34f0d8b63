"""
Concrete schema validators.

PydanticSchemaValidator backs a form with a pydantic v2 model; errors are
flattened to dotted paths so nested models map onto nested form values.
FunctionSchemaValidator wraps a plain callable for small rule tables.
"""

import logging
from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pyqt_formstate.core.field_paths import join_path
from pyqt_formstate.protocols import SchemaValidator, ValidationResult, get_form_config

logger = logging.getLogger(__name__)


def _pydantic_message(error: Dict[str, Any]) -> str:
    """Human-readable message for one pydantic error entry.

    Custom validators raising ValueError("required") surface as
    "Value error, required"; the original message is kept instead.
    """
    if error.get('type') == 'value_error':
        ctx_error = (error.get('ctx') or {}).get('error')
        if ctx_error is not None:
            return str(ctx_error)
    return error.get('msg', 'Invalid value')


class PydanticSchemaValidator(SchemaValidator):
    """
    Validate form values against a pydantic model.

    Examples:
        validator = PydanticSchemaValidator(SignupForm)
        result = validator.validate({"email": "", "age": 20})
        result.errors  # {"email": "required"}

        # Hand the model instance to submit handlers instead of a dict:
        validator = PydanticSchemaValidator(SignupForm, as_model=True)
    """

    def __init__(self, model: Type[BaseModel], as_model: bool = False,
                 root_error_key: Optional[str] = None):
        self.model = model
        self.as_model = as_model
        self.root_error_key = root_error_key

    def validate(self, candidate: Dict[str, Any]) -> ValidationResult:
        try:
            instance = self.model.model_validate(candidate)
        except PydanticValidationError as e:
            errors: Dict[str, str] = {}
            for error in e.errors():
                path = join_path(error.get('loc', ())) or self._root_key()
                # First message per field wins
                errors.setdefault(path, _pydantic_message(error))
            logger.debug(f"{self.model.__name__} rejected candidate: {errors}")
            return ValidationResult.reject(errors)

        value = instance if self.as_model else instance.model_dump()
        return ValidationResult.accept(value)

    def _root_key(self) -> str:
        return self.root_error_key or get_form_config().root_error_key


class FunctionSchemaValidator(SchemaValidator):
    """
    Validate with a plain callable returning an error mapping.

    The callable receives the candidate and returns {path: message};
    an empty mapping (or None) accepts the candidate unchanged.

    Example:
        def rules(values):
            errors = {}
            if not values.get("email"):
                errors["email"] = "required"
            return errors

        validator = FunctionSchemaValidator(rules)
    """

    def __init__(self, rules: Callable[[Dict[str, Any]], Optional[Dict[str, str]]],
                 normalize: Optional[Callable[[Dict[str, Any]], Any]] = None):
        self.rules = rules
        self.normalize = normalize

    def validate(self, candidate: Dict[str, Any]) -> ValidationResult:
        errors = self.rules(candidate) or {}
        if errors:
            return ValidationResult.reject(errors)
        value = self.normalize(candidate) if self.normalize else candidate
        return ValidationResult.accept(value)


def resolve_validator(schema: Any) -> SchemaValidator:
    """Turn whatever the caller passed as a schema into a SchemaValidator.

    Accepts a SchemaValidator, a pydantic model class, or a rules callable.
    """
    if isinstance(schema, SchemaValidator):
        return schema
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return PydanticSchemaValidator(schema)
    if callable(schema):
        return FunctionSchemaValidator(schema)
    raise TypeError(
        f"Cannot build a validator from {type(schema).__name__}; expected a "
        f"SchemaValidator, a pydantic model class or a callable"
    )
