"""Tests for the validator contract, concrete validators and configuration."""

import pytest


def test_validation_result_accept_and_reject():
    from pyqt_formstate import ValidationResult, ValidationError

    accepted = ValidationResult.accept({"x": 1})
    assert accepted.ok
    assert accepted.raise_for_errors() == {"x": 1}

    rejected = ValidationResult.reject({"x": "required"})
    assert not rejected.ok
    with pytest.raises(ValidationError) as excinfo:
        rejected.raise_for_errors()
    assert excinfo.value.errors == {"x": "required"}


def test_schema_validator_is_abstract():
    from pyqt_formstate.protocols import SchemaValidator

    with pytest.raises(TypeError):
        SchemaValidator()


def test_pydantic_validator_maps_field_errors(signup_schema):
    from pyqt_formstate.forms import PydanticSchemaValidator

    validator = PydanticSchemaValidator(signup_schema)

    assert validator.validate({"email": "", "age": 20}).errors == {"email": "required"}
    assert validator.validate({"email": "a@b.com", "age": 15}).errors == {"age": "must be ≥ 18"}

    result = validator.validate({"email": "a@b.com", "age": 20})
    assert result.ok
    assert result.value == {"email": "a@b.com", "age": 20}


def test_pydantic_validator_nested_paths_and_builtin_messages():
    from pydantic import BaseModel
    from pyqt_formstate.forms import PydanticSchemaValidator

    class Address(BaseModel):
        city: str

    class Profile(BaseModel):
        address: Address
        age: int

    validator = PydanticSchemaValidator(Profile)
    result = validator.validate({"address": {}, "age": "not a number"})

    assert set(result.errors) == {"address.city", "age"}
    assert result.errors["address.city"] == "Field required"


def test_pydantic_validator_can_return_model(signup_schema):
    from pyqt_formstate.forms import PydanticSchemaValidator

    validator = PydanticSchemaValidator(signup_schema, as_model=True)
    result = validator.validate({"email": "a@b.com", "age": 20})
    assert isinstance(result.value, signup_schema)


def test_pydantic_model_level_error_uses_root_key():
    from pydantic import BaseModel, model_validator
    from pyqt_formstate.forms import PydanticSchemaValidator

    class Stay(BaseModel):
        check_in: int
        check_out: int

        @model_validator(mode="after")
        def ordered(self):
            if self.check_out <= self.check_in:
                raise ValueError("check-out must be after check-in")
            return self

    result = PydanticSchemaValidator(Stay).validate({"check_in": 5, "check_out": 2})
    assert result.errors == {"root": "check-out must be after check-in"}


def test_function_validator_and_normalize():
    from pyqt_formstate.forms import FunctionSchemaValidator

    validator = FunctionSchemaValidator(
        lambda values: {} if values.get("name") else {"name": "required"},
        normalize=lambda values: {"name": values["name"].strip()},
    )
    assert validator.validate({"name": ""}).errors == {"name": "required"}
    assert validator.validate({"name": " Ada "}).value == {"name": "Ada"}


def test_resolve_validator(signup_schema):
    from pyqt_formstate.forms import (
        resolve_validator, PydanticSchemaValidator, FunctionSchemaValidator)

    assert isinstance(resolve_validator(signup_schema), PydanticSchemaValidator)
    assert isinstance(resolve_validator(lambda values: {}), FunctionSchemaValidator)
    existing = FunctionSchemaValidator(lambda values: {})
    assert resolve_validator(existing) is existing
    with pytest.raises(TypeError):
        resolve_validator(42)


def test_validation_trigger_coerce():
    from pyqt_formstate.forms import ValidationTrigger

    assert ValidationTrigger.coerce("onBlur") is ValidationTrigger.ON_BLUR
    assert ValidationTrigger.coerce("on_change") is ValidationTrigger.ON_CHANGE
    assert ValidationTrigger.coerce("submit") is ValidationTrigger.ON_SUBMIT
    assert ValidationTrigger.coerce(ValidationTrigger.ON_BLUR) is ValidationTrigger.ON_BLUR
    with pytest.raises(ValueError):
        ValidationTrigger.coerce("onHover")


def test_global_config_sets_controller_defaults(signup_schema):
    from pyqt_formstate import FormStateConfig, set_form_config, get_form_config
    from pyqt_formstate.forms import create_form_controller, ValidationTrigger

    assert get_form_config().root_error_key == "root"

    set_form_config(FormStateConfig(validation_trigger="onChange", revalidation_trigger="onBlur"))
    controller = create_form_controller(signup_schema)
    assert controller.validation_trigger is ValidationTrigger.ON_CHANGE
    assert controller.revalidation_trigger is ValidationTrigger.ON_BLUR


def test_flag_context_manager_restores_on_error():
    from pyqt_formstate.services import FlagContextManager, ControllerFlag

    class Holder:
        _is_submitting = False
        _in_reset = False

    holder = Holder()
    with pytest.raises(RuntimeError):
        with FlagContextManager.submitting_context(holder):
            assert FlagContextManager.is_flag_set(holder, ControllerFlag.IS_SUBMITTING)
            raise RuntimeError("handler failed")
    assert holder._is_submitting is False

    with pytest.raises(ValueError):
        with FlagContextManager.manage_flags(holder, _not_a_flag=True):
            pass
